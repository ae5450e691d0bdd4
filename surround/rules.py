from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)


# ----------------------------
# Catalog entries
# ----------------------------
@dataclass(frozen=True)
class MaterialRule:
    key: str
    label: str
    waste: float  # extra area fraction
    adhesive_coverage: float  # sq ft per tube
    silicone_coverage: float  # lin ft per tube


@dataclass(frozen=True)
class PanelSize:
    key: str
    label: str
    w: float  # inches
    h: float  # inches


# Backer sheets are catalogued exactly like panels.
SheetSize = PanelSize


@dataclass(frozen=True)
class TrimLength:
    key: str
    label: str
    inches: float


@dataclass(frozen=True)
class BackerType:
    key: str
    label: str
    requires_sheets: bool


@dataclass(frozen=True)
class WaterproofingSystem:
    key: str  # "none" | "liquid" | "sheet"
    label: str


# ============================
# RULE TABLES (pure data)
# ============================
MATERIALS: Tuple[MaterialRule, ...] = (
    MaterialRule("pvc", "PVC Panels", 0.12, 30.0, 25.0),
    MaterialRule("acrylic", "Acrylic Panels", 0.10, 28.0, 25.0),
    MaterialRule("solid", "Solid Surface", 0.08, 35.0, 30.0),
)

PANEL_SIZES: Tuple[PanelSize, ...] = (
    PanelSize("96x36", "96 x 36 in", 36.0, 96.0),
    PanelSize("96x48", "96 x 48 in", 48.0, 96.0),
    PanelSize("84x36", "84 x 36 in", 36.0, 84.0),
    PanelSize("72x36", "72 x 36 in", 36.0, 72.0),
)

TRIM_LENGTHS: Tuple[TrimLength, ...] = (
    TrimLength("96", "96 in (8 ft)", 96.0),
    TrimLength("120", "120 in (10 ft)", 120.0),
)

BACKER_TYPES: Tuple[BackerType, ...] = (
    BackerType("existing_drywall", "Existing drywall (assumed acceptable)", False),
    BackerType("mr_drywall", "Moisture-resistant drywall (greenboard)", True),
    BackerType("cement", "Cement board", True),
    BackerType("foam", "Foam backer board", True),
)

SHEET_SIZES: Tuple[SheetSize, ...] = (
    SheetSize("36x60", "36 x 60 in (3 x 5 ft)", 36.0, 60.0),
    SheetSize("48x96", "48 x 96 in (4 x 8 ft)", 48.0, 96.0),
)

WATERPROOFING_SYSTEMS: Tuple[WaterproofingSystem, ...] = (
    WaterproofingSystem("none", "None / Not included"),
    WaterproofingSystem("liquid", "Liquid membrane (roll/brush)"),
    WaterproofingSystem("sheet", "Sheet membrane (roll + banding)"),
)

DEFAULT_PRICES: Mapping[str, float] = MappingProxyType(
    {
        # Panels
        "PANEL": 0.0,
        # Consumables
        "ADH_TUBE": 6.98,
        "SIL_TUBE": 9.48,
        # Trims (sticks)
        "TRIM_H": 22.0,
        "TRIM_IN": 22.0,
        "TRIM_EDGE": 22.0,
        "TRIM_TOP": 22.0,
        "TRIM_BOT": 22.0,
        # Backer
        "BACKER_SHEET": 16.98,
        "BACKER_SCREWS": 9.98,  # box
        "BACKER_TAPE": 7.98,  # roll
        # Waterproofing
        "WP_LIQ_GAL": 54.98,
        "WP_LIQ_FAB": 18.98,  # roll
        "WP_SHEET_SQFT": 2.25,
        "WP_BAND_LF": 1.35,
        "WP_CORNER": 7.50,  # each
    }
)

# Fixed takeoff constants, independent of material and backer.
SCREWS_PER_SQFT = 1.7
SCREWS_PER_BOX = 185
TAPE_LF_PER_ROLL = 150
FABRIC_ROLLS = 1
PREFORMED_CORNERS = 2
CORNER_RUNS = 2  # the two inside shower corners
EDGE_RUNS = 2  # the two front edges


# ----------------------------
# Lookups
# ----------------------------
T = TypeVar("T")


def find(catalog: Sequence[T], key: str, name: str = "catalog") -> T:
    """Entry with ``key``; unknown keys fall back to the first entry."""
    for entry in catalog:
        if entry.key == key:
            return entry
    fallback = catalog[0]
    logger.warning("Unknown %s key %r, using %r", name, key, fallback.key)
    return fallback


@dataclass(frozen=True)
class RuleTables:
    materials: Tuple[MaterialRule, ...] = MATERIALS
    panel_sizes: Tuple[PanelSize, ...] = PANEL_SIZES
    trim_lengths: Tuple[TrimLength, ...] = TRIM_LENGTHS
    backer_types: Tuple[BackerType, ...] = BACKER_TYPES
    sheet_sizes: Tuple[SheetSize, ...] = SHEET_SIZES
    waterproofing_systems: Tuple[WaterproofingSystem, ...] = WATERPROOFING_SYSTEMS

    def material(self, key: str) -> MaterialRule:
        return find(self.materials, key, "material")

    def panel(self, key: str) -> PanelSize:
        return find(self.panel_sizes, key, "panel size")

    def trim(self, key: str) -> TrimLength:
        return find(self.trim_lengths, key, "trim length")

    def backer(self, key: str) -> BackerType:
        return find(self.backer_types, key, "backer type")

    def sheet(self, key: str) -> SheetSize:
        return find(self.sheet_sizes, key, "sheet size")

    def waterproofing(self, key: str) -> WaterproofingSystem:
        return find(self.waterproofing_systems, key, "waterproofing system")


RULES = RuleTables()
