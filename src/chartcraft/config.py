"""Transform configuration loading and validation."""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

AggregationName = Literal["sum", "avg", "count", "min", "max"]

NO_GROUPING = "none"


class ColumnConfig(BaseModel):
    """Column metadata supplied by the data-source layer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    column_name: str
    display_name: str | None = None
    is_groupable: bool = False
    data_type: str | None = None


class TransformConfig(BaseModel):
    """Options bag shared by every chart strategy.

    Accepts both snake_case and camelCase keys so API payloads
    (``groupBy``, ``paletteId``) can be passed through unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    chart_type: str | None = None
    group_by: str = NO_GROUPING
    palette_id: str = "default"
    filled: bool = False
    aggregations: dict[str, AggregationName] = Field(default_factory=dict)
    target: float | None = None
    column_metadata: dict[str, ColumnConfig] | None = None

    # Dual-axis
    primary_label: str | None = None
    secondary_label: str | None = None
    secondary_chart_type: Literal["line", "bar"] = "line"

    # Period comparison
    base_chart_type: str | None = None
    comparison_scheme_id: str = "default"

    @field_validator("group_by", mode="before")
    @classmethod
    def normalize_group_by(cls, v: Any) -> Any:
        """Treat a missing or blank grouping field as no grouping."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return NO_GROUPING
        return v

    @field_validator("palette_id", mode="before")
    @classmethod
    def normalize_palette_id(cls, v: Any) -> Any:
        """Fall back to the default palette for a missing palette id."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return "default"
        return v

    @property
    def is_grouped(self) -> bool:
        """Whether a real grouping field was requested."""
        return self.group_by != NO_GROUPING

    def with_options(self, **changes: Any) -> "TransformConfig":
        """Return a copy with the given fields replaced."""
        return self.model_copy(update=changes)


def load_transform_config(path: Path) -> TransformConfig:
    """Load and validate a transform configuration from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Validated TransformConfig object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValidationError: If the config is invalid.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        raw_config: dict[str, Any] = yaml.safe_load(f) or {}

    return TransformConfig.model_validate(raw_config)
