from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Any


def iso_date(d: date) -> str:
    return d.strftime("%Y-%m-%d")


def default_date_range(today: date | None = None, days: int = 30) -> tuple[str, str]:
    end = today or date.today()
    start = end - timedelta(days=days)
    return iso_date(start), iso_date(end)


def to_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        f = float(value)
        return default if math.isnan(f) else f
    s = str(value).strip()
    if s == "":
        return default
    try:
        f = float(s)
    except ValueError:
        return default
    if math.isnan(f) or math.isinf(f):
        return default
    return f


def safe_div(n: float, d: float) -> float | None:
    if d == 0:
        return None
    return n / d


def round_money(value: float) -> float:
    # Half-up on cents; applying it twice yields the same value.
    return math.floor(value * 100.0 + 0.5) / 100.0


def format_currency(amount: float, symbol: str = "₪") -> str:
    return f"{symbol}{amount:,.2f}"


def format_count(value: int) -> str:
    return f"{int(value):,}"


def stringify(value: Any) -> str:
    """String form used for search and export; integral floats drop the trailing .0."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
