"""Shared fixtures for chartcraft tests.

Provides fixtures for:
- Monthly and weekly measure records, grouped and ungrouped
- Period comparison and dual-axis record sets
- Column metadata
"""

from typing import Any

import pytest

from chartcraft.config import ColumnConfig, TransformConfig
from chartcraft.models import MeasureRecord


def make_record(
    date_index: str,
    value: Any,
    measure: str = "Charges",
    measure_type: str = "currency",
    frequency: str = "Monthly",
    **extra: Any,
) -> dict[str, Any]:
    """Build a raw record dict as a data source would return it."""
    return {
        "date": date_index,
        "value": value,
        "measure": measure,
        "measure_type": measure_type,
        "frequency": frequency,
        **extra,
    }


@pytest.fixture
def monthly_records() -> list[dict[str, Any]]:
    """Three monthly currency records, deliberately out of order."""
    return [
        make_record("2024-03-01", 300),
        make_record("2024-01-01", 100),
        make_record("2024-02-01", 200),
    ]


@pytest.fixture
def provider_records() -> list[dict[str, Any]]:
    """Monthly records grouped by provider.

    Totals: Dr. Smith 250, Dr. Jones 400, Dr. Lee 150.
    """
    return [
        make_record("2024-01-01", 100, provider_name="Dr. Smith"),
        make_record("2024-01-01", 200, provider_name="Dr. Jones"),
        make_record("2024-02-01", 150, provider_name="Dr. Smith"),
        make_record("2024-02-01", 200, provider_name="Dr. Jones"),
        make_record("2024-03-01", 150, provider_name="Dr. Lee"),
    ]


@pytest.fixture
def measure_records(provider_records: list[dict[str, Any]]) -> list[MeasureRecord]:
    """Provider records parsed into MeasureRecord instances."""
    return [MeasureRecord.from_dict(row) for row in provider_records]


@pytest.fixture
def comparison_records() -> list[dict[str, Any]]:
    """Current-period and previous-year records for two months."""
    return [
        make_record("2024-01-01", 100, series_id="current", series_label="Current Period"),
        make_record("2024-02-01", 150, series_id="current", series_label="Current Period"),
        make_record("2023-01-01", 80, series_id="comparison", series_label="Previous Year"),
        make_record("2023-02-01", 120, series_id="comparison", series_label="Previous Year"),
    ]


@pytest.fixture
def grouped_config() -> TransformConfig:
    """Config grouping by provider."""
    return TransformConfig(group_by="provider_name")


@pytest.fixture
def column_metadata() -> dict[str, ColumnConfig]:
    """Column metadata with one groupable and one non-groupable column."""
    return {
        "provider_name": ColumnConfig(
            column_name="provider_name", display_name="Provider", is_groupable=True
        ),
        "claim_id": ColumnConfig(column_name="claim_id", is_groupable=False),
    }


@pytest.fixture
def record_factory():
    """Factory for raw record dicts; see make_record."""
    return make_record
