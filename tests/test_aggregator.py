"""Tests for record grouping and aggregation."""

import math
from decimal import Decimal

import pytest

from chartcraft.aggregator import (
    aggregate_across_dates,
    apply_aggregation,
    coerce_value,
    descending_key,
    extract_and_sort_dates,
    filter_dates_with_data,
    get_group_value,
    group_by_field_and_date,
    group_by_series_and_date,
    sum_by_date,
    unknown_label,
)
from chartcraft.models import MeasureRecord


def rec(date_index: str | None, value, **dims) -> MeasureRecord:
    return MeasureRecord.from_dict({"date": date_index, "value": value, **dims})


class TestCoerceValue:
    """Tests for coerce_value."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (5, 5.0),
            (2.5, 2.5),
            ("1234.5", 1234.5),
            (" 42 ", 42.0),
            ("1,234", 1234.0),
            (Decimal("3.25"), 3.25),
            (True, 1.0),
        ],
    )
    def test_numeric_inputs(self, raw, expected) -> None:
        """Test numbers and numeric strings are coerced to float."""
        assert coerce_value(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "", None, [1]])
    def test_unparseable_is_nan(self, raw) -> None:
        """Test malformed values become NaN instead of raising."""
        assert math.isnan(coerce_value(raw))


class TestGroupValue:
    """Tests for group key resolution."""

    def test_dimension_value(self) -> None:
        """Test dimension fields are read from the record."""
        assert get_group_value(rec("2024-01-01", 1, provider_name="Dr. A"), "provider_name") == (
            "Dr. A"
        )

    def test_missing_value_gets_unknown_label(self) -> None:
        """Test missing grouping values get a title-cased placeholder."""
        assert get_group_value(rec("2024-01-01", 1), "provider_name") == "Unknown Provider Name"

    def test_blank_value_gets_unknown_label(self) -> None:
        """Test blank strings are treated as missing."""
        record = rec("2024-01-01", 1, practice="  ")
        assert get_group_value(record, "practice") == "Unknown Practice"

    def test_non_string_value_stringified(self) -> None:
        """Test numeric dimension values become string keys."""
        assert get_group_value(rec("2024-01-01", 1, location_id=7), "location_id") == "7"

    def test_unknown_label(self) -> None:
        """Test placeholder label formatting."""
        assert unknown_label("measure") == "Unknown Measure"


class TestGroupByFieldAndDate:
    """Tests for group_by_field_and_date."""

    def test_groups_values_per_date(self) -> None:
        """Test values are collected per group and date."""
        records = [
            rec("2024-01-01", 10, p="A"),
            rec("2024-01-01", 5, p="A"),
            rec("2024-02-01", 7, p="B"),
        ]

        grouped = group_by_field_and_date(records, "p")

        assert grouped == {"A": {"2024-01-01": [10.0, 5.0]}, "B": {"2024-02-01": [7.0]}}

    def test_preserves_first_seen_order(self) -> None:
        """Test group order follows first appearance."""
        records = [rec("2024-01-01", 1, p="Z"), rec("2024-01-01", 1, p="A")]

        assert list(group_by_field_and_date(records, "p")) == ["Z", "A"]

    def test_skips_records_without_date(self) -> None:
        """Test records with no date bucket are ignored."""
        grouped = group_by_field_and_date([rec(None, 1, p="A")], "p")

        assert grouped == {}

    def test_does_not_mutate_input(self) -> None:
        """Test grouping leaves input records untouched."""
        records = [rec("2024-01-01", "10", p="A")]
        before = list(records)

        group_by_field_and_date(records, "p")

        assert records == before
        assert records[0].measure_value == "10"


class TestGroupBySeriesAndDate:
    """Tests for group_by_series_and_date."""

    def test_groups_by_series_label(self) -> None:
        """Test tagged records group by series label."""
        records = [
            rec("2024-01-01", 1, series_label="Visits"),
            rec("2024-01-01", 2, series_label="Charges"),
        ]

        assert list(group_by_series_and_date(records)) == ["Visits", "Charges"]

    def test_falls_back_to_measure(self) -> None:
        """Test records without series label fall back to measure name."""
        records = [rec("2024-01-01", 1, measure="Payments")]

        assert list(group_by_series_and_date(records)) == ["Payments"]


class TestApplyAggregation:
    """Tests for apply_aggregation."""

    @pytest.mark.parametrize(
        ("fn", "expected"),
        [("sum", 12.0), ("avg", 4.0), ("count", 3.0), ("min", 2.0), ("max", 6.0)],
    )
    def test_functions(self, fn, expected) -> None:
        """Test each aggregation function."""
        assert apply_aggregation([2.0, 4.0, 6.0], fn) == expected

    @pytest.mark.parametrize("fn", ["sum", "avg", "count", "min", "max"])
    def test_empty_is_zero(self, fn) -> None:
        """Test an empty list aggregates to 0."""
        assert apply_aggregation([], fn) == 0.0

    def test_unknown_function_falls_back_to_sum(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test unknown function names fall back to sum with a warning."""
        assert apply_aggregation([1.0, 2.0], "median") == 3.0
        assert "Unknown aggregation median" in caplog.text

    @pytest.mark.parametrize("fn", ["sum", "avg", "min", "max"])
    def test_nan_propagates(self, fn) -> None:
        """Test NaN inputs yield NaN rather than being dropped."""
        assert math.isnan(apply_aggregation([1.0, math.nan], fn))

    def test_count_counts_nan(self) -> None:
        """Test count includes malformed values."""
        assert apply_aggregation([1.0, math.nan], "count") == 2.0


class TestAggregateAcrossDates:
    """Tests for aggregate_across_dates."""

    def test_totals_per_group(self) -> None:
        """Test values are totaled per group regardless of date."""
        records = [
            rec("2024-01-01", 100, p="A"),
            rec("2024-02-01", 50, p="A"),
            rec("2024-01-01", 30, p="B"),
        ]

        assert aggregate_across_dates(records, "p") == {"A": 150.0, "B": 30.0}

    def test_avg(self) -> None:
        """Test a non-sum function across dates."""
        records = [rec("2024-01-01", 10, p="A"), rec("2024-02-01", 20, p="A")]

        assert aggregate_across_dates(records, "p", "avg") == {"A": 15.0}


class TestDescendingKey:
    """Tests for descending_key."""

    def test_largest_first(self) -> None:
        """Test values sort largest first with NaN last."""
        values = [10.0, math.nan, 30.0, -5.0, 0.0]

        ordered = sorted(values, key=descending_key)

        assert ordered[:4] == [30.0, 10.0, 0.0, -5.0]
        assert math.isnan(ordered[4])


class TestDates:
    """Tests for date extraction, summing and filtering."""

    def test_sum_by_date(self) -> None:
        """Test values are summed per bucket."""
        records = [rec("2024-01-01", 1), rec("2024-01-01", 2), rec("2024-02-01", 5)]

        assert sum_by_date(records) == {"2024-01-01": 3.0, "2024-02-01": 5.0}

    def test_extract_and_sort_dates_chronological(self) -> None:
        """Test dates are unique and chronologically ordered."""
        records = [
            rec("2024-03-01", 1),
            rec("2023-12-01", 1),
            rec("2024-01-01", 1),
            rec("2024-03-01", 1),
        ]

        assert extract_and_sort_dates(records) == ["2023-12-01", "2024-01-01", "2024-03-01"]

    def test_extract_and_sort_dates_ignores_missing(self) -> None:
        """Test records without dates do not contribute buckets."""
        assert extract_and_sort_dates([rec(None, 1), rec("2024-01-01", 1)]) == ["2024-01-01"]

    def test_extract_invalid_date_raises(self) -> None:
        """Test a malformed date bucket is rejected."""
        with pytest.raises(ValueError, match="Invalid date index"):
            extract_and_sort_dates([rec("2024-01-01", 1), rec("not-a-date", 1)])

    def test_filter_dates_with_data(self) -> None:
        """Test dates where every group totals zero are dropped."""
        grouped = {
            "A": {"2024-01-01": [0.0], "2024-02-01": [5.0]},
            "B": {"2024-01-01": [0.0]},
        }

        kept = filter_dates_with_data(["2024-01-01", "2024-02-01", "2024-03-01"], grouped)

        assert kept == ["2024-02-01"]

    def test_filter_dates_keeps_negative_totals(self) -> None:
        """Test non-zero negative totals count as data."""
        grouped = {"A": {"2024-01-01": [-3.0]}}

        assert filter_dates_with_data(["2024-01-01"], grouped) == ["2024-01-01"]
