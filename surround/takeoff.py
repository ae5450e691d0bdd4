from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import List, Mapping, Sequence, Tuple

from surround.rules import (
    CORNER_RUNS,
    DEFAULT_PRICES,
    EDGE_RUNS,
    FABRIC_ROLLS,
    PREFORMED_CORNERS,
    RULES,
    SCREWS_PER_BOX,
    SCREWS_PER_SQFT,
    TAPE_LF_PER_ROLL,
    RuleTables,
)

logger = logging.getLogger(__name__)

SQIN_PER_SQFT = 144.0
IN_PER_FT = 12.0


# ----------------------------
# Geometry & packing
# ----------------------------
def area_sqft(width_in: float, height_in: float) -> float:
    return (width_in * height_in) / SQIN_PER_SQFT


def pack_count(total: float, capacity: float) -> int:
    """Whole units of ``capacity`` needed to cover ``total``.

    A zero or negative capacity yields 0 so a bad catalog entry cannot break
    the estimate.
    """
    if capacity <= 0:
        return 0
    return math.ceil(total / capacity)


def feet(inches: float) -> float:
    return inches / IN_PER_FT


def perimeter_length(w1: float, w2: float, w3: float, height: float) -> float:
    """Two vertical corner runs plus the top and bottom runs, in lin ft."""
    widths_ft = feet(w1 + w2 + w3)
    vertical_corners = 2 * feet(height)
    return max(0.0, vertical_corners + widths_ft + widths_ft)


@dataclass(frozen=True)
class WallSeams:
    wall_width: float
    pieces: int
    seams: int
    seam_length: float  # lin ft


@dataclass(frozen=True)
class SeamDetail:
    per_wall: Tuple[WallSeams, ...]
    total_seam_count: int
    total_seam_length: float


def vertical_seams(wall_widths: Sequence[float], panel_width_in: float, height_in: float) -> SeamDetail:
    # Panel pieces never wrap a corner, so every wall is packed on its own.
    height_ft = feet(height_in)
    per_wall: List[WallSeams] = []
    for width in wall_widths:
        pieces = pack_count(width, panel_width_in)
        seams = max(0, pieces - 1)
        per_wall.append(WallSeams(width, pieces, seams, seams * height_ft))

    return SeamDetail(
        per_wall=tuple(per_wall),
        total_seam_count=sum(w.seams for w in per_wall),
        total_seam_length=sum(w.seam_length for w in per_wall),
    )


def vertical_trim_pieces(run_count: int, height_in: float, stick_len_in: float) -> int:
    return pack_count(run_count * height_in, stick_len_in)


def horizontal_trim_pieces(total_run_in: float, stick_len_in: float) -> int:
    return pack_count(total_run_in, stick_len_in)


# ----------------------------
# Data models
# ----------------------------
@dataclass(frozen=True)
class Configuration:
    """One snapshot of everything the user has entered.

    Edits never mutate a snapshot; build a new one with ``dataclasses.replace``.
    """

    # Dimensions (inches)
    wall1: float = 32.0
    wall2: float = 60.0
    wall3: float = 32.0
    height: float = 96.0

    # Catalog selections
    material: str = "pvc"
    panel: str = "96x48"
    trim: str = "96"
    backer: str = "cement"
    sheet: str = "48x96"
    waterproofing: str = "none"

    # Include toggles
    include_adhesive: bool = True
    include_silicone: bool = True
    seams_use_trim: bool = True
    include_inside_corner_trim: bool = True
    include_edge_trim: bool = True
    include_top_trim: bool = True
    include_bottom_trim: bool = True
    include_backer: bool = True
    include_backer_screws: bool = True
    include_backer_tape: bool = True
    include_waterproofing: bool = True
    include_banding: bool = True
    include_panel_price: bool = False

    # Waterproofing parameters
    coats: float = 2
    coverage_per_gallon: float = 55.0  # sq ft per gallon per coat
    banding_waste: float = 0.10

    prices: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_PRICES))

    def __post_init__(self) -> None:
        object.__setattr__(self, "prices", MappingProxyType(dict(self.prices)))

    def __hash__(self) -> int:
        # The price table joins the key as sorted pairs so snapshots can key a cache.
        values = tuple(getattr(self, f.name) for f in fields(self) if f.name != "prices")
        return hash((values, tuple(sorted(self.prices.items()))))

    @property
    def walls(self) -> Tuple[float, float, float]:
        return (self.wall1, self.wall2, self.wall3)

    @property
    def horizontal_run(self) -> float:
        return self.wall1 + self.wall2 + self.wall3


@dataclass(frozen=True)
class TakeoffModel:
    base_area: float
    total_area: float
    panel_area: float
    panels: int

    seams: SeamDetail
    perimeter_length: float
    sealant_length: float

    adhesive_tubes: int
    silicone_tubes: int

    h_joint_pieces: int
    inside_corner_pieces: int
    edge_pieces: int
    top_trim_pieces: int
    bottom_trim_pieces: int
    horizontal_run: float  # inches

    backer_sheets: int
    screw_count: int
    screw_boxes: int
    tape_length: float
    tape_rolls: int

    wp_enabled: bool
    liquid_gallons: int
    fabric_rolls: int
    membrane_area: int
    banding_length: int
    preformed_corners: int


# ----------------------------
# Takeoff
# ----------------------------
def build_model(config: Configuration, rules: RuleTables = RULES) -> TakeoffModel:
    rule = rules.material(config.material)
    panel = rules.panel(config.panel)
    trim_len = rules.trim(config.trim).inches
    backer = rules.backer(config.backer)
    sheet = rules.sheet(config.sheet)
    system = rules.waterproofing(config.waterproofing).key

    height = config.height
    base_area = sum(area_sqft(w, height) for w in config.walls)
    total_area = base_area * (1 + rule.waste)

    panel_area = area_sqft(panel.w, panel.h)
    panels = pack_count(total_area, panel_area)

    seams = vertical_seams(config.walls, panel.w, height)

    # Seams take either H-joint trim or silicone, never both.
    perimeter = perimeter_length(config.wall1, config.wall2, config.wall3, height)
    sealant = perimeter + (0.0 if config.seams_use_trim else seams.total_seam_length)

    adhesive_tubes = pack_count(total_area, rule.adhesive_coverage) if config.include_adhesive else 0
    silicone_tubes = pack_count(sealant, rule.silicone_coverage) if config.include_silicone else 0

    run_in = config.horizontal_run
    h_joint = vertical_trim_pieces(seams.total_seam_count, height, trim_len) if config.seams_use_trim else 0
    inside_corner = vertical_trim_pieces(CORNER_RUNS, height, trim_len) if config.include_inside_corner_trim else 0
    edge = vertical_trim_pieces(EDGE_RUNS, height, trim_len) if config.include_edge_trim else 0
    top = horizontal_trim_pieces(run_in, trim_len) if config.include_top_trim else 0
    bottom = horizontal_trim_pieces(run_in, trim_len) if config.include_bottom_trim else 0

    # Sheet count gates the rest of the substrate chain.
    backer_sheets = pack_count(total_area, area_sqft(sheet.w, sheet.h)) if backer.requires_sheets else 0
    has_sheets = backer_sheets > 0

    screw_count = math.ceil(total_area * SCREWS_PER_SQFT) if has_sheets else 0
    screw_boxes = pack_count(screw_count, SCREWS_PER_BOX) if screw_count > 0 else 0

    tape_length = 2 * feet(height) + seams.total_seam_length if has_sheets else 0.0
    tape_rolls = pack_count(tape_length, TAPE_LF_PER_ROLL) if tape_length > 0 else 0

    wp_enabled = config.include_waterproofing and system != "none" and has_sheets
    liquid = wp_enabled and system == "liquid"
    sheet_wp = wp_enabled and system == "sheet"

    liquid_gallons = math.ceil((total_area * config.coats) / max(1, config.coverage_per_gallon)) if liquid else 0
    fabric_rolls = FABRIC_ROLLS if liquid else 0

    membrane_area = math.ceil(total_area) if sheet_wp else 0
    band_base = 2 * feet(height) + feet(run_in) + seams.total_seam_length
    banding_length = math.ceil(band_base * (1 + config.banding_waste)) if sheet_wp and config.include_banding else 0
    preformed_corners = PREFORMED_CORNERS if sheet_wp else 0

    model = TakeoffModel(
        base_area=base_area,
        total_area=total_area,
        panel_area=panel_area,
        panels=panels,
        seams=seams,
        perimeter_length=perimeter,
        sealant_length=sealant,
        adhesive_tubes=adhesive_tubes,
        silicone_tubes=silicone_tubes,
        h_joint_pieces=h_joint,
        inside_corner_pieces=inside_corner,
        edge_pieces=edge,
        top_trim_pieces=top,
        bottom_trim_pieces=bottom,
        horizontal_run=run_in,
        backer_sheets=backer_sheets,
        screw_count=screw_count,
        screw_boxes=screw_boxes,
        tape_length=tape_length,
        tape_rolls=tape_rolls,
        wp_enabled=wp_enabled,
        liquid_gallons=liquid_gallons,
        fabric_rolls=fabric_rolls,
        membrane_area=membrane_area,
        banding_length=banding_length,
        preformed_corners=preformed_corners,
    )
    logger.debug(
        "Takeoff: %.2f sq ft (%.2f with waste), %d panels, %d seams, %d backer sheets",
        base_area,
        total_area,
        panels,
        seams.total_seam_count,
        backer_sheets,
    )
    return model
