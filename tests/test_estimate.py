import math
from dataclasses import replace

import pytest

from surround.estimate import (
    DETAILED,
    SUMMARY,
    SUMMARY_KEYS,
    assemble_line_items,
    estimate_total,
    project_view,
    unit_price,
)
from surround.rules import DEFAULT_PRICES
from surround.takeoff import Configuration, build_model


def _items(config):
    return assemble_line_items(build_model(config), config)


def test_default_line_items_in_fixed_order():
    items = _items(Configuration())
    assert [it.key for it in items] == [
        "PANEL_QTY",
        "ADH",
        "SIL",
        "TRIM_H",
        "TRIM_IN",
        "TRIM_EDGE",
        "TRIM_TOP",
        "TRIM_BOT",
        "BACKER",
        "BACKER_SCREWS",
        "BACKER_TAPE",
    ]
    by_key = {it.key: it for it in items}
    assert by_key["PANEL_QTY"].name == "Wall panels (96 x 48 in)"
    assert by_key["BACKER"].name == "Cement board (sheets)"
    assert by_key["ADH"].ext == pytest.approx(4 * 6.98)
    assert by_key["BACKER"].ext == pytest.approx(3 * 16.98)


def test_default_total():
    assert estimate_total(_items(Configuration())) == pytest.approx(313.78)


def test_quantity_only_panel_is_excluded_from_total():
    items = _items(Configuration(include_panel_price=False))
    panel = items[0]
    assert panel.key == "PANEL_QTY"
    assert panel.qty == 3
    assert panel.qty_only
    assert panel.unit_price is None and panel.ext is None
    assert estimate_total(items) == pytest.approx(estimate_total(items[1:]))


def test_priced_panel_counts_toward_total():
    prices = dict(DEFAULT_PRICES, PANEL=250.0)
    base = Configuration(prices=prices)
    priced = _items(replace(base, include_panel_price=True))
    assert priced[0].key == "PANEL"
    assert priced[0].ext == pytest.approx(750.0)
    assert estimate_total(priced) == pytest.approx(estimate_total(_items(base)) + 750.0)


def test_toggled_off_categories_are_skipped():
    config = Configuration(include_adhesive=False, include_backer=False, include_backer_tape=False)
    keys = {it.key for it in _items(config)}
    assert not keys & {"ADH", "BACKER", "BACKER_TAPE"}
    assert "BACKER_SCREWS" in keys


def test_zero_quantity_categories_are_skipped():
    keys = [it.key for it in _items(Configuration(backer="existing_drywall", waterproofing="liquid"))]
    assert "BACKER" not in keys
    assert "BACKER_SCREWS" not in keys
    assert not any(k.startswith("WP_") for k in keys)


def test_silicone_seams_drop_h_joint_row():
    keys = [it.key for it in _items(Configuration(seams_use_trim=False))]
    assert "TRIM_H" not in keys
    assert "SIL" in keys


def test_waterproofing_rows():
    liquid = [it.key for it in _items(Configuration(waterproofing="liquid"))]
    assert liquid[-2:] == ["WP_LIQ", "WP_LIQ_FAB"]

    sheet = _items(Configuration(waterproofing="sheet"))
    assert [it.key for it in sheet][-3:] == ["WP_SHEET", "WP_BAND", "WP_CORNER"]
    membrane = next(it for it in sheet if it.key == "WP_SHEET")
    assert membrane.unit == "sqft"
    assert membrane.ext == pytest.approx(93 * 2.25)

    no_band = [it.key for it in _items(Configuration(waterproofing="sheet", include_banding=False))]
    assert "WP_BAND" not in no_band


def test_keys_are_stable_across_recomputation():
    a = [it.key for it in _items(Configuration(wall2=60))]
    b = [it.key for it in _items(Configuration(wall2=72))]
    assert a == b


def test_bad_prices_count_as_zero():
    prices = dict(DEFAULT_PRICES, ADH_TUBE=float("nan"), SIL_TUBE="abc")
    prices.pop("TRIM_H")
    items = _items(Configuration(prices=prices))
    by_key = {it.key: it for it in items}
    assert by_key["ADH"].ext == 0.0
    assert by_key["SIL"].ext == 0.0
    assert by_key["TRIM_H"].unit_price == 0.0
    assert math.isfinite(estimate_total(items))


def test_unit_price_lookup():
    assert unit_price({"A": 2.5}, "A") == 2.5
    assert unit_price({"A": float("inf")}, "A") == 0.0
    assert unit_price({}, "A") == 0.0
    assert unit_price({"A": None}, "A") == 0.0


# ----------------------------
# Views
# ----------------------------
def test_detailed_view_is_master_list():
    items = _items(Configuration(waterproofing="sheet"))
    assert project_view(items, DETAILED) == items


def test_summary_view_shows_headline_rows():
    items = _items(Configuration(waterproofing="liquid"))
    rows = project_view(items, SUMMARY)
    assert [it.key for it in rows] == ["PANEL_QTY", "BACKER", "WP_LIQ"]
    assert all(it.key in SUMMARY_KEYS for it in rows)


def test_summary_view_with_priced_panel_and_sheet_membrane():
    items = _items(Configuration(include_panel_price=True, waterproofing="sheet"))
    rows = project_view(items, SUMMARY)
    assert [it.key for it in rows] == ["PANEL", "BACKER", "WP_SHEET"]

    hidden = {it.key for it in items} - {it.key for it in rows}
    assert {"WP_BAND", "WP_CORNER", "ADH", "TRIM_H", "BACKER_SCREWS"} <= hidden


def test_summary_view_hides_liquid_fabric():
    rows = project_view(_items(Configuration(waterproofing="liquid")), SUMMARY)
    assert "WP_LIQ_FAB" not in {it.key for it in rows}


@pytest.mark.parametrize("system", ["none", "liquid", "sheet"])
@pytest.mark.parametrize("panel_price", [True, False])
def test_total_is_the_same_in_both_views(system, panel_price):
    items = _items(Configuration(waterproofing=system, include_panel_price=panel_price))
    summary = project_view(items, SUMMARY)
    detailed = project_view(items, DETAILED)
    assert len(summary) < len(detailed)
    # The reported total always comes from the master list.
    assert estimate_total(items) == estimate_total(detailed)
    assert estimate_total(summary) <= estimate_total(items)


def test_assembly_logs_row_count_at_debug(caplog):
    with caplog.at_level("DEBUG", logger="surround.estimate"):
        items = _items(Configuration())
    assert f"Assembled {len(items)} line items" in caplog.text
