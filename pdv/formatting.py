"""pt-BR display helpers for money, dates and weights."""

from __future__ import annotations

from datetime import datetime


def format_currency(value: float, symbol: str = "R$") -> str:
    """Format as Brazilian real, e.g. ``R$ 1.234,56``."""
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.2f}"
    # 1,234.56 -> 1.234,56
    grouped = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{symbol} {grouped}"


def format_date(value: datetime) -> str:
    return value.strftime("%d/%m/%Y %H:%M")


def format_weight(weight_in_grams: float) -> str:
    if weight_in_grams >= 1000:
        return f"{weight_in_grams / 1000:.1f}".replace(".", ",") + " kg"
    return f"{weight_in_grams:g} g"
