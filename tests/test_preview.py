import plotly.graph_objects as go
import pytest

from surround.preview import panelize_walls, plot_walls, seam_positions, wall_faces
from surround.takeoff import Configuration, build_model


def test_wall_faces_unfold_left_to_right():
    faces = wall_faces(Configuration())
    assert [f.bounds for f in faces] == [
        (0.0, 0.0, 32.0, 96.0),
        (32.0, 0.0, 92.0, 96.0),
        (92.0, 0.0, 124.0, 96.0),
    ]


def test_pieces_match_seam_detail():
    config = Configuration()
    pieces = panelize_walls(config)
    model = build_model(config)

    per_wall = [sum(1 for p in pieces if p.wall == n) for n in (1, 2, 3)]
    assert per_wall == [w.pieces for w in model.seams.per_wall]
    assert len(seam_positions(pieces)) == model.seams.total_seam_count


def test_last_piece_is_cut_to_fit():
    pieces = panelize_walls(Configuration())
    back = [p for p in pieces if p.wall == 2]
    assert [p.width for p in back] == pytest.approx([48.0, 12.0])
    assert back[0].note == ""
    assert back[1].note == "Cut to 12.0 in"
    assert seam_positions(pieces) == pytest.approx([80.0])


def test_zero_width_wall_has_no_pieces():
    pieces = panelize_walls(Configuration(wall1=0, wall3=0))
    assert {p.wall for p in pieces} == {2}


def test_plot_walls():
    config = Configuration(panel="96x36")
    fig = plot_walls(config, panelize_walls(config))
    assert isinstance(fig, go.Figure)
    names = [t.name for t in fig.data if t.name]
    assert names == ["Wall 1", "Back wall", "Wall 3"]
