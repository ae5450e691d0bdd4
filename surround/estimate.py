from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Mapping, Optional, Sequence

from surround.rules import RULES, RuleTables
from surround.takeoff import Configuration, TakeoffModel

logger = logging.getLogger(__name__)

SUMMARY = "summary"
DETAILED = "detailed"
DETAIL_LEVELS = (SUMMARY, DETAILED)

# Headline rows shown in the customer-facing summary.
SUMMARY_KEYS: FrozenSet[str] = frozenset({"PANEL", "PANEL_QTY", "BACKER", "WP_LIQ", "WP_SHEET"})


# ----------------------------
# Data models
# ----------------------------
@dataclass(frozen=True)
class LineItem:
    key: str
    name: str
    unit: str
    qty: float
    price_key: str
    unit_price: Optional[float] = None  # None means quantity only
    ext: Optional[float] = None

    @property
    def qty_only(self) -> bool:
        return self.ext is None


@dataclass(frozen=True)
class Category:
    key: str
    name: str
    unit: str
    price_key: str
    quantity: Callable[[TakeoffModel], float]
    enabled: Callable[[Configuration], bool]


def unit_price(prices: Mapping[str, float], price_key: str) -> float:
    """Price for ``price_key``; missing or non-finite prices count as 0."""
    try:
        value = float(prices.get(price_key, 0.0))
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


# Fixed assembly order; panels are handled ahead of these.
CATEGORIES: Sequence[Category] = (
    Category(
        "ADH",
        "Panel adhesive",
        "tube",
        "ADH_TUBE",
        lambda m: m.adhesive_tubes,
        lambda c: c.include_adhesive,
    ),
    Category(
        "SIL",
        "100% silicone",
        "tube",
        "SIL_TUBE",
        lambda m: m.silicone_tubes,
        lambda c: c.include_silicone,
    ),
    Category(
        "TRIM_H",
        "H-joint seam trim",
        "stick",
        "TRIM_H",
        lambda m: m.h_joint_pieces,
        lambda c: c.seams_use_trim,
    ),
    Category(
        "TRIM_IN",
        "Inside corner trim",
        "stick",
        "TRIM_IN",
        lambda m: m.inside_corner_pieces,
        lambda c: c.include_inside_corner_trim,
    ),
    Category(
        "TRIM_EDGE",
        "Edge/J-trim",
        "stick",
        "TRIM_EDGE",
        lambda m: m.edge_pieces,
        lambda c: c.include_edge_trim,
    ),
    Category(
        "TRIM_TOP",
        "Top trim (horizontal)",
        "stick",
        "TRIM_TOP",
        lambda m: m.top_trim_pieces,
        lambda c: c.include_top_trim,
    ),
    Category(
        "TRIM_BOT",
        "Bottom trim (horizontal)",
        "stick",
        "TRIM_BOT",
        lambda m: m.bottom_trim_pieces,
        lambda c: c.include_bottom_trim,
    ),
    Category(
        "BACKER",
        "{backer} (sheets)",
        "sheet",
        "BACKER_SHEET",
        lambda m: m.backer_sheets,
        lambda c: c.include_backer,
    ),
    Category(
        "BACKER_SCREWS",
        "Backer screws (box)",
        "box",
        "BACKER_SCREWS",
        lambda m: m.screw_boxes,
        lambda c: c.include_backer_screws,
    ),
    Category(
        "BACKER_TAPE",
        "Alkali-resistant mesh tape (roll)",
        "roll",
        "BACKER_TAPE",
        lambda m: m.tape_rolls,
        lambda c: c.include_backer_tape,
    ),
    Category(
        "WP_LIQ",
        "Liquid waterproofing membrane",
        "gallon",
        "WP_LIQ_GAL",
        lambda m: m.liquid_gallons,
        lambda c: c.include_waterproofing,
    ),
    Category(
        "WP_LIQ_FAB",
        "Reinforcement fabric",
        "roll",
        "WP_LIQ_FAB",
        lambda m: m.fabric_rolls,
        lambda c: c.include_waterproofing,
    ),
    Category(
        "WP_SHEET",
        "Sheet membrane",
        "sqft",
        "WP_SHEET_SQFT",
        lambda m: m.membrane_area,
        lambda c: c.include_waterproofing,
    ),
    Category(
        "WP_BAND",
        "Seam banding",
        "lf",
        "WP_BAND_LF",
        lambda m: m.banding_length,
        lambda c: c.include_waterproofing and c.include_banding,
    ),
    Category(
        "WP_CORNER",
        "Preformed inside corners",
        "each",
        "WP_CORNER",
        lambda m: m.preformed_corners,
        lambda c: c.include_waterproofing,
    ),
)



# ----------------------------
# Assembly
# ----------------------------
def priced_item(
    key: str,
    name: str,
    unit: str,
    qty: float,
    price_key: str,
    prices: Mapping[str, float],
) -> LineItem:
    price = unit_price(prices, price_key)
    return LineItem(key, name, unit, qty, price_key, unit_price=price, ext=qty * price)


def assemble_line_items(
    model: TakeoffModel,
    config: Configuration,
    rules: RuleTables = RULES,
) -> List[LineItem]:
    """The master list: every included, non-zero row in fixed order."""
    items: List[LineItem] = []
    labels = {
        "panel": rules.panel(config.panel).label,
        "backer": rules.backer(config.backer).label,
    }

    if model.panels > 0:
        name = f"Wall panels ({labels['panel']})"
        if config.include_panel_price:
            items.append(priced_item("PANEL", name, "panel", model.panels, "PANEL", config.prices))
        else:
            items.append(LineItem("PANEL_QTY", name, "panel", model.panels, "PANEL"))

    for category in CATEGORIES:
        if not category.enabled(config):
            continue
        qty = category.quantity(model)
        if not qty or qty <= 0:
            continue
        name = category.name.format(**labels)
        items.append(priced_item(category.key, name, category.unit, qty, category.price_key, config.prices))

    logger.debug("Assembled %d line items", len(items))
    return items


def estimate_total(items: Sequence[LineItem]) -> float:
    """Sum of extended prices; quantity-only rows contribute nothing."""
    total = 0.0
    for item in items:
        if item.ext is None or not math.isfinite(item.ext):
            continue
        total += item.ext
    return total


def project_view(items: Sequence[LineItem], detail_level: str) -> List[LineItem]:
    # Any level other than "detailed" is the summary view.
    if detail_level == DETAILED:
        return list(items)
    return [item for item in items if item.key in SUMMARY_KEYS]
