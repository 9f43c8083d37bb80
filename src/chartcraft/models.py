"""Input records and renderer-neutral chart structures."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import date
from types import MappingProxyType
from typing import Any

ChartLabel = str | date
ColorValue = str | list[str]

# Record keys that map onto MeasureRecord attributes; everything else is a dimension.
_RECORD_KEY_ALIASES: dict[str, str] = {
    "date_index": "date_index",
    "date": "date_index",
    "measure_value": "measure_value",
    "value": "measure_value",
    "measure_type": "measure_type",
    "frequency": "frequency",
    "measure": "measure",
    "series_id": "series_id",
    "series_label": "series_label",
    "series_color": "series_color",
}


@dataclass(frozen=True)
class MeasureRecord:
    """One pre-aggregated observation.

    Attributes:
        date_index: Date bucket identifier (YYYY-MM-DD).
        measure_value: Raw value, possibly a numeric-looking string.
        measure_type: currency, count, quantity, percentage or number.
        frequency: Daily, Weekly, Monthly or Quarterly.
        measure: Name of the measure (e.g. "Charges").
        series_id: Optional series tag (current, comparison, primary, secondary).
        series_label: Optional human-readable series label.
        series_color: Optional explicit color for the series.
        dimensions: Free-form dimension fields (provider_name, practice, ...).
    """

    date_index: str | None = None
    measure_value: float | int | str | None = None
    measure_type: str = "number"
    frequency: str | None = None
    measure: str | None = None
    series_id: str | None = None
    series_label: str | None = None
    series_color: str | None = None
    dimensions: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "dimensions", MappingProxyType(dict(self.dimensions)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MeasureRecord":
        """Build a record from a flat mapping such as a database row.

        Args:
            data: Row with known record keys plus arbitrary dimension fields.

        Returns:
            MeasureRecord with unknown keys collected into ``dimensions``.
        """
        known: dict[str, Any] = {}
        dimensions: dict[str, Any] = {}
        for key, value in data.items():
            attr = _RECORD_KEY_ALIASES.get(key)
            if attr is None:
                dimensions[key] = value
            elif attr not in known or key == attr:
                known[attr] = value

        if known.get("measure_type") is None:
            known.pop("measure_type", None)
        return cls(dimensions=dimensions, **known)

    def get_field(self, name: str) -> Any:
        """Read a record attribute or dimension by field name."""
        attr = _RECORD_KEY_ALIASES.get(name)
        if attr is not None:
            return getattr(self, attr)
        return self.dimensions.get(name)


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a transform configuration.

    Attributes:
        is_valid: Whether the configuration can be transformed.
        errors: Human-readable problems, empty when valid.
    """

    is_valid: bool
    errors: tuple[str, ...] = ()

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def failed(cls, *errors: str) -> "ValidationResult":
        return cls(is_valid=False, errors=tuple(errors))


# Attribute name -> renderer key where the camelCase conversion is irregular
_DATASET_KEY_OVERRIDES = {"y_axis_id": "yAxisID"}


def _to_camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)


@dataclass(frozen=True)
class ChartDataset:
    """One value series, positionally aligned with ChartData.labels."""

    label: str
    data: list[float]
    border_color: ColorValue | None = None
    background_color: ColorValue | None = None
    hover_background_color: ColorValue | None = None
    fill: bool | None = None
    tension: float | None = None
    point_radius: int | None = None
    point_hover_radius: int | None = None
    point_background_color: str | None = None
    point_hover_background_color: str | None = None
    point_border_width: int | None = None
    point_hover_border_width: int | None = None
    border_width: int | None = None
    border_radius: int | None = None
    border_dash: list[int] | None = None
    bar_percentage: float | None = None
    category_percentage: float | None = None
    type: str | None = None
    y_axis_id: str | None = None
    order: int | None = None
    measure_type: str | None = None
    series_id: str | None = None
    percentages: list[float] | None = None
    target: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to renderer keys, omitting unset attributes."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            key = _DATASET_KEY_OVERRIDES.get(f.name, _to_camel(f.name))
            result[key] = list(value) if isinstance(value, list) else value
        return result


@dataclass(frozen=True)
class ChartData:
    """Renderer-neutral chart structure."""

    labels: list[ChartLabel] = field(default_factory=list)
    datasets: list[ChartDataset] = field(default_factory=list)
    measure_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible types."""
        result: dict[str, Any] = {
            "labels": [
                label.isoformat() if isinstance(label, date) else label for label in self.labels
            ],
            "datasets": [dataset.to_dict() for dataset in self.datasets],
        }
        if self.measure_type is not None:
            result["measureType"] = self.measure_type
        return result

    @property
    def is_empty(self) -> bool:
        return not self.labels and not self.datasets
