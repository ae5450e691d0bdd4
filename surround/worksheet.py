from __future__ import annotations

import math
from typing import Dict, Mapping, Sequence

import pandas as pd

from surround.estimate import LineItem

COLUMNS = ["Item", "Unit", "Qty", "Unit $", "Ext $", "Note"]
PRICE_COLUMN = "Unit $"


def worksheet_frame(items: Sequence[LineItem]) -> pd.DataFrame:
    """Line items as a table indexed by their stable key."""
    rows = [
        {
            "Item": it.name,
            "Unit": it.unit,
            "Qty": it.qty,
            "Unit $": it.unit_price,
            "Ext $": it.ext,
            "Note": "Qty only" if it.qty_only else "",
        }
        for it in items
    ]
    df = pd.DataFrame(rows, columns=COLUMNS, index=pd.Index([it.key for it in items], name="Key"))
    df[PRICE_COLUMN] = pd.to_numeric(df[PRICE_COLUMN], errors="coerce")
    df["Ext $"] = pd.to_numeric(df["Ext $"], errors="coerce")
    return df


def prices_from_worksheet(
    edited: pd.DataFrame,
    items: Sequence[LineItem],
    prices: Mapping[str, float],
) -> Dict[str, float]:
    """Fold edited unit prices back into a copy of the price table.

    Rows are matched by key; quantity-only rows and blank or non-numeric
    cells leave the price untouched.
    """
    out = dict(prices)
    for it in items:
        if it.qty_only or it.key not in edited.index:
            continue
        try:
            value = float(edited.at[it.key, PRICE_COLUMN])
        except (TypeError, ValueError):
            continue
        if math.isfinite(value):
            out[it.price_key] = value
    return out
