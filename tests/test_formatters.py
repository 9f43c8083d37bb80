"""Tests for date and value formatters."""

import math
from datetime import date

import pytest

from chartcraft.formatters import (
    format_category_date,
    format_date_label,
    format_value,
    format_value_compact,
    parse_date_index,
    to_chart_date,
)


class TestParseDateIndex:
    """Tests for parse_date_index."""

    def test_noon_anchor(self) -> None:
        """Test buckets are anchored at mid-day."""
        parsed = parse_date_index("2024-01-01")

        assert parsed.date() == date(2024, 1, 1)
        assert parsed.hour == 12

    def test_datetime_string_truncated(self) -> None:
        """Test an ISO datetime keeps only its date part."""
        assert parse_date_index("2024-01-31T23:30:00Z").date() == date(2024, 1, 31)

    @pytest.mark.parametrize("value", ["", "2024-13-01", "January"])
    def test_invalid_raises(self, value: str) -> None:
        """Test malformed buckets raise ValueError."""
        with pytest.raises(ValueError, match="Invalid date index"):
            parse_date_index(value)


class TestChartDates:
    """Tests for to_chart_date and format_category_date."""

    def test_monthly_normalized_to_first(self) -> None:
        """Test monthly buckets plot on the first of the month."""
        assert to_chart_date("2024-01-15", "Monthly") == date(2024, 1, 1)

    def test_quarterly_normalized_to_first(self) -> None:
        """Test quarterly buckets plot on the first of the month."""
        assert to_chart_date("2024-04-20", "Quarterly") == date(2024, 4, 1)

    def test_weekly_keeps_actual_day(self) -> None:
        """Test weekly buckets keep their exact day."""
        assert to_chart_date("2024-01-08", "Weekly") == date(2024, 1, 8)

    def test_missing_frequency_keeps_day(self) -> None:
        """Test no frequency keeps the exact day."""
        assert to_chart_date("2024-01-08", None) == date(2024, 1, 8)

    def test_category_date(self) -> None:
        """Test bar category labels use MM-DD-YYYY."""
        assert format_category_date("2024-01-01") == "01-01-2024"


class TestFormatDateLabel:
    """Tests for format_date_label."""

    @pytest.mark.parametrize(
        ("frequency", "expected"),
        [
            ("Monthly", "Jan 2024"),
            ("monthly", "Jan 2024"),
            ("Quarterly", "Q1 2024"),
            ("Weekly", "Jan 5, 2024"),
            ("Daily", "01-05-2024"),
            (None, "01-05-2024"),
            ("Fortnightly", "01-05-2024"),
        ],
    )
    def test_frequencies(self, frequency: str | None, expected: str) -> None:
        """Test each frequency's label format."""
        assert format_date_label("2024-01-05", frequency) == expected

    @pytest.mark.parametrize(
        ("date_index", "quarter"),
        [("2024-03-31", "Q1"), ("2024-04-01", "Q2"), ("2024-09-30", "Q3"), ("2024-12-01", "Q4")],
    )
    def test_quarter_boundaries(self, date_index: str, quarter: str) -> None:
        """Test quarter numbers at boundaries."""
        assert format_date_label(date_index, "Quarterly") == f"{quarter} 2024"


class TestFormatValue:
    """Tests for format_value."""

    @pytest.mark.parametrize(
        ("value", "measure_type", "expected"),
        [
            (1234.56, "currency", "$1,235"),
            (-500, "currency", "-$500"),
            (12.345, "percentage", "12.3%"),
            (1234, "count", "1,234"),
            (1234.5, "number", "1,234.5"),
            (0.126, "quantity", "0.13"),
            (1000000, None, "1,000,000"),
        ],
    )
    def test_formats(self, value: float, measure_type: str | None, expected: str) -> None:
        """Test formatting per measure type."""
        assert format_value(value, measure_type) == expected

    def test_nan(self) -> None:
        """Test NaN is rendered visibly."""
        assert format_value(math.nan, "currency") == "NaN"


class TestFormatValueCompact:
    """Tests for format_value_compact."""

    @pytest.mark.parametrize(
        ("value", "measure_type", "expected"),
        [
            (2_500_000, "currency", "$2.5M"),
            (1_000, "number", "1K"),
            (1_500, "count", "1.5K"),
            (3_000_000_000, "currency", "$3B"),
            (-2_500, "currency", "-$2.5K"),
            (950, "currency", "$950"),
            (42.4, "percentage", "42%"),
        ],
    )
    def test_compact(self, value: float, measure_type: str, expected: str) -> None:
        """Test K/M/B abbreviations."""
        assert format_value_compact(value, measure_type) == expected

    def test_nan(self) -> None:
        """Test NaN is rendered visibly."""
        assert format_value_compact(math.nan, "number") == "NaN"
