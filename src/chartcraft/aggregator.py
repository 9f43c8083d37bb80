"""Grouping and aggregation of measure records.

All functions are pure: they build per-call local maps and never mutate the
records passed in. Dict insertion order is preserved, so group order follows
first appearance in the input.
"""

import logging
import math
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
from typing import Any

from chartcraft.formatters.dates import parse_date_index
from chartcraft.models import MeasureRecord

logger = logging.getLogger(__name__)

__all__ = [
    "AGGREGATION_FUNCTIONS",
    "aggregate_across_dates",
    "apply_aggregation",
    "coerce_value",
    "descending_key",
    "extract_and_sort_dates",
    "filter_dates_with_data",
    "get_group_value",
    "group_by_field_and_date",
    "group_by_series_and_date",
    "sum_by_date",
]

AGGREGATION_FUNCTIONS = ("sum", "avg", "count", "min", "max")

GroupedDateValues = dict[str, dict[str, list[float]]]


def coerce_value(raw: Any) -> float:
    """Coerce a raw measure value to float.

    Numbers pass through, numeric strings are parsed, and anything else
    becomes NaN so malformed input stays visible in the output.
    """
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, int | float | Decimal):
        return float(raw)
    if isinstance(raw, str):
        try:
            return float(raw.strip().replace(",", ""))
        except ValueError:
            logger.debug("Unparseable measure value %r, using NaN", raw)
            return math.nan
    return math.nan


def unknown_label(field: str) -> str:
    """Build the placeholder label for a missing grouping value.

    >>> unknown_label("provider_name")
    'Unknown Provider Name'
    """
    return f"Unknown {field.replace('_', ' ').title()}"


def get_group_value(record: MeasureRecord, field: str) -> str:
    """Resolve the grouping key of a record for the given field."""
    value = record.get_field(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        return unknown_label(field)
    return str(value)


def _date_sort_key(date_index: str) -> float:
    return parse_date_index(date_index).timestamp()


def group_by_field_and_date(records: Iterable[MeasureRecord], field: str) -> GroupedDateValues:
    """Group values by a dimension field, then by date bucket.

    Args:
        records: Measure records to group.
        field: Field name to group by.

    Returns:
        Mapping of group key -> date key -> list of values.
    """
    grouped: GroupedDateValues = defaultdict(lambda: defaultdict(list))
    for record in records:
        if not record.date_index:
            logger.debug("Skipping record without date_index for field %s", field)
            continue
        group_key = get_group_value(record, field)
        grouped[group_key][record.date_index].append(coerce_value(record.measure_value))
    return {key: dict(dates) for key, dates in grouped.items()}


def series_label_of(record: MeasureRecord) -> str:
    """Return the label a tagged record contributes to."""
    return record.series_label or record.measure or "Unknown"


def group_by_series_and_date(records: Iterable[MeasureRecord]) -> GroupedDateValues:
    """Group values by series label, then by date bucket."""
    grouped: GroupedDateValues = defaultdict(lambda: defaultdict(list))
    for record in records:
        if not record.date_index:
            continue
        grouped[series_label_of(record)][record.date_index].append(
            coerce_value(record.measure_value)
        )
    return {key: dict(dates) for key, dates in grouped.items()}


def apply_aggregation(values: Sequence[float], fn: str = "sum") -> float:
    """Reduce a list of values with a named aggregation function.

    Args:
        values: Values to aggregate.
        fn: One of sum, avg, count, min, max. Unknown names fall back to sum.

    Returns:
        Aggregated value; 0.0 for an empty list.
    """
    if not values:
        return 0.0
    if fn == "count":
        return float(len(values))
    if fn == "avg":
        return math.fsum(values) / len(values) if not _has_nan(values) else math.nan
    if fn == "min":
        return math.nan if _has_nan(values) else min(values)
    if fn == "max":
        return math.nan if _has_nan(values) else max(values)
    if fn != "sum":
        logger.warning("Unknown aggregation %s, falling back to sum", fn)
    return sum(values, 0.0)


def _has_nan(values: Sequence[float]) -> bool:
    return any(math.isnan(v) for v in values)


def descending_key(value: float) -> tuple[bool, float]:
    """Sort key for largest-first ordering with NaN totals placed last.

    Use with a plain (non-reversed) sort so equal values keep their order.
    """
    if math.isnan(value):
        return (True, 0.0)
    return (False, -value)


def aggregate_across_dates(
    records: Iterable[MeasureRecord], field: str, fn: str = "sum"
) -> dict[str, float]:
    """Aggregate all values per group, ignoring the date dimension.

    Args:
        records: Measure records to aggregate.
        field: Field name to group by.
        fn: Aggregation function name.

    Returns:
        Mapping of group key -> aggregated value, in first-seen order.
    """
    values_by_group: dict[str, list[float]] = defaultdict(list)
    for record in records:
        values_by_group[get_group_value(record, field)].append(coerce_value(record.measure_value))
    return {key: apply_aggregation(values, fn) for key, values in values_by_group.items()}


def sum_by_date(records: Iterable[MeasureRecord]) -> dict[str, float]:
    """Sum values per date bucket into a single series."""
    totals: dict[str, float] = defaultdict(float)
    for record in records:
        if not record.date_index:
            continue
        totals[record.date_index] += coerce_value(record.measure_value)
    return dict(totals)


def extract_and_sort_dates(records: Iterable[MeasureRecord]) -> list[str]:
    """Return the distinct date buckets of the records in chronological order."""
    dates = {record.date_index for record in records if record.date_index}
    return sorted(dates, key=lambda d: (_date_sort_key(d), d))


def filter_dates_with_data(
    dates: Sequence[str], grouped: Mapping[str, Mapping[str, Sequence[float]]]
) -> list[str]:
    """Drop date buckets where every group's total is zero or absent.

    Args:
        dates: Ordered date buckets.
        grouped: Output of one of the group_by_*_and_date functions.

    Returns:
        Dates that carry at least one non-zero value, order preserved.
    """
    kept: list[str] = []
    for date_index in dates:
        for date_map in grouped.values():
            values = date_map.get(date_index)
            if values and sum(values, 0.0) != 0:
                kept.append(date_index)
                break
    return kept
