"""Tests for transform configuration loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from chartcraft.config import NO_GROUPING, ColumnConfig, TransformConfig, load_transform_config

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestConfigLoading:
    """Tests for config loading."""

    def test_load_valid_config(self) -> None:
        """Test loading a valid configuration file."""
        config = load_transform_config(FIXTURES_DIR / "transform_config.yaml")

        assert config.chart_type == "stacked-bar"
        assert config.group_by == "provider_name"
        assert config.palette_id == "tableau20"
        assert config.aggregations == {"Charges": "sum", "Visits": "avg"}
        assert config.column_metadata is not None
        assert config.column_metadata["provider_name"].is_groupable is True
        assert config.column_metadata["provider_name"].display_name == "Provider"

    def test_load_missing_file(self) -> None:
        """Test that loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_transform_config(Path("/nonexistent/transform.yaml"))

    def test_load_invalid_aggregation(self) -> None:
        """Test that an unsupported aggregation raises ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            load_transform_config(FIXTURES_DIR / "invalid_transform_config.yaml")

        assert "aggregations" in str(exc_info.value)

    def test_load_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file yields the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_transform_config(path) == TransformConfig()


class TestTransformConfig:
    """Tests for TransformConfig validation rules."""

    def test_defaults(self) -> None:
        """Test default option values."""
        config = TransformConfig()

        assert config.group_by == NO_GROUPING
        assert config.is_grouped is False
        assert config.palette_id == "default"
        assert config.filled is False
        assert config.aggregations == {}
        assert config.secondary_chart_type == "line"
        assert config.comparison_scheme_id == "default"

    def test_camel_case_keys(self) -> None:
        """Test API payload keys are accepted as-is."""
        config = TransformConfig.model_validate(
            {"groupBy": "practice", "paletteId": "warm", "baseChartType": "line"}
        )

        assert config.group_by == "practice"
        assert config.palette_id == "warm"
        assert config.base_chart_type == "line"
        assert config.is_grouped is True

    @pytest.mark.parametrize("group_by", [None, "", "   "])
    def test_blank_group_by_means_none(self, group_by: str | None) -> None:
        """Test missing grouping field normalizes to no grouping."""
        assert TransformConfig.model_validate({"group_by": group_by}).is_grouped is False

    def test_blank_palette_defaults(self) -> None:
        """Test a blank palette id falls back to default."""
        assert TransformConfig(palette_id="").palette_id == "default"

    def test_invalid_secondary_chart_type(self) -> None:
        """Test the secondary series must be a line or bar."""
        with pytest.raises(ValidationError):
            TransformConfig.model_validate({"secondaryChartType": "pie"})

    def test_unknown_keys_ignored(self) -> None:
        """Test presentation keys from chart definitions are ignored."""
        config = TransformConfig.model_validate({"title": "Charges", "width": 800})

        assert not hasattr(config, "title")

    def test_frozen(self) -> None:
        """Test configs cannot be mutated after validation."""
        config = TransformConfig()

        with pytest.raises(ValidationError):
            config.group_by = "practice"

    def test_with_options(self) -> None:
        """Test with_options returns an updated copy."""
        config = TransformConfig(group_by="practice")

        updated = config.with_options(chart_type="bar")

        assert updated.chart_type == "bar"
        assert updated.group_by == "practice"
        assert config.chart_type is None


class TestColumnConfig:
    """Tests for ColumnConfig."""

    def test_defaults(self) -> None:
        """Test columns are not groupable unless marked."""
        column = ColumnConfig(column_name="claim_id")

        assert column.is_groupable is False
        assert column.display_name is None

    def test_camel_case(self) -> None:
        """Test camelCase metadata keys are accepted."""
        column = ColumnConfig.model_validate({"columnName": "practice", "isGroupable": True})

        assert column.column_name == "practice"
        assert column.is_groupable is True
