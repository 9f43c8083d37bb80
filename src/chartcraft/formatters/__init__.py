"""Formatting helpers for chart labels and values.

Modules:
    dates: Date-bucket parsing, chart dates and frequency-aware labels
    values: Currency, percentage and number formatting
"""

from .dates import format_category_date, format_date_label, parse_date_index, to_chart_date
from .values import format_value, format_value_compact

__all__ = [
    "format_category_date",
    "format_date_label",
    "format_value",
    "format_value_compact",
    "parse_date_index",
    "to_chart_date",
]
