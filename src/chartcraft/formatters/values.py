"""Measure-type aware value formatting."""

import math

__all__ = ["format_value", "format_value_compact"]

_COMPACT_STEPS: tuple[tuple[float, str], ...] = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_value(value: float, measure_type: str | None) -> str:
    """Format a value for tooltips and tables.

    Args:
        value: Numeric value (NaN is rendered as "NaN").
        measure_type: currency, percentage, count, quantity or number.

    Returns:
        "$1,235" for currency, "12.5%" for percentage, "1,234.5" otherwise.
    """
    if math.isnan(value):
        return "NaN"

    if measure_type == "currency":
        sign = "-" if value < 0 else ""
        return f"{sign}${abs(value):,.0f}"
    if measure_type == "percentage":
        return f"{value:.1f}%"
    return _format_number(value)


def format_value_compact(value: float, measure_type: str | None) -> str:
    """Format a value with K/M/B abbreviations for axis ticks.

    >>> format_value_compact(2_500_000, "currency")
    '$2.5M'
    """
    if math.isnan(value):
        return "NaN"
    if measure_type == "percentage":
        return f"{value:.0f}%"

    prefix = "$" if measure_type == "currency" else ""
    sign = "-" if value < 0 else ""
    magnitude = abs(value)

    for threshold, suffix in _COMPACT_STEPS:
        if magnitude >= threshold:
            scaled = f"{magnitude / threshold:.1f}".rstrip("0").rstrip(".")
            return f"{sign}{prefix}{scaled}{suffix}"

    if measure_type == "currency":
        return f"{sign}${magnitude:,.0f}"
    return f"{sign}{_format_number(magnitude)}"
