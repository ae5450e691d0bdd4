from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import plotly.graph_objects as go
from shapely.geometry import Polygon, box
from shapely.ops import unary_union

from surround.rules import RULES, RuleTables
from surround.takeoff import Configuration, pack_count

WALL_NAMES = ("Wall 1", "Back wall", "Wall 3")


@dataclass
class PanelPiece:
    wall: int
    idx: int
    u0: float
    u1: float
    width: float
    note: str = ""


def wall_faces(config: Configuration) -> List[Polygon]:
    """The three walls unfolded left to right, in inches."""
    faces: List[Polygon] = []
    x0 = 0.0
    for w in config.walls:
        w = max(0.0, w)
        faces.append(box(x0, 0.0, x0 + w, max(0.0, config.height)))
        x0 += w
    return faces


def panelize_walls(config: Configuration, rules: RuleTables = RULES) -> List[PanelPiece]:
    """Pack each wall with panel pieces from its left edge; the last piece is cut."""
    panel_w = rules.panel(config.panel).w
    pieces: List[PanelPiece] = []

    for n, face in enumerate(wall_faces(config), start=1):
        if face.is_empty or face.area <= 0:
            continue
        minx, miny, maxx, maxy = face.bounds
        count = pack_count(maxx - minx, panel_w)

        for i in range(count):
            u0 = minx + i * panel_w
            clipped = face.intersection(box(u0, miny, u0 + panel_w, maxy))
            if clipped.is_empty:
                continue
            c0, _, c1, _ = clipped.bounds
            width = c1 - c0
            note = f"Cut to {width:.1f} in" if width < panel_w else ""
            pieces.append(PanelPiece(n, i + 1, c0, c1, width, note))

    return pieces


def seam_positions(pieces: Sequence[PanelPiece]) -> List[float]:
    # A seam sits between neighbouring pieces on the same wall.
    return [a.u1 for a, b in zip(pieces, pieces[1:]) if a.wall == b.wall]


# ----------------------------
# Plotting
# ----------------------------
def plot_walls(config: Configuration, pieces: Sequence[PanelPiece]) -> go.Figure:
    fig = go.Figure()
    faces = wall_faces(config)
    height = max(0.0, config.height)

    for p in pieces:
        x, y = box(p.u0, 0.0, p.u1, height).exterior.xy
        fig.add_trace(
            go.Scatter(
                x=list(x),
                y=list(y),
                mode="lines",
                fill="toself",
                fillcolor="rgba(11, 42, 74, 0.15)",
                line=dict(color="rgba(11, 42, 74, 0.5)"),
                showlegend=False,
            )
        )
        fig.add_annotation(x=(p.u0 + p.u1) / 2.0, y=height / 2.0, text=f"{p.width:g}", showarrow=False)

    for name, face in zip(WALL_NAMES, faces):
        if face.area <= 0:
            continue
        x, y = face.exterior.xy
        fig.add_trace(go.Scatter(x=list(x), y=list(y), mode="lines", name=name))

    for sx in seam_positions(pieces):
        fig.add_trace(
            go.Scatter(
                x=[sx, sx],
                y=[0.0, height],
                mode="lines",
                line=dict(color="#c1121f", dash="dash"),
                showlegend=False,
            )
        )

    outline = unary_union([f for f in faces if f.area > 0])
    if not outline.is_empty:
        minx, _, maxx, _ = outline.bounds
        fig.update_xaxes(range=[minx - 4, maxx + 4])

    fig.update_layout(
        xaxis_title="Across walls, unfolded (in)",
        yaxis_title="Height (in)",
        height=420,
        margin=dict(l=10, r=10, t=40, b=10),
    )
    return fig
