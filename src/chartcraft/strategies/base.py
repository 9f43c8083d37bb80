"""Base strategy interface for chart transformations."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from chartcraft.config import TransformConfig
from chartcraft.models import ChartData, MeasureRecord, ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_MEASURE_TYPE = "number"
DEFAULT_FREQUENCY = "Monthly"
DEFAULT_SERIES_LABEL = "Value"


class StrategyNotFoundError(LookupError):
    """No strategy is registered for a requested chart type."""

    def __init__(self, chart_type: str | None) -> None:
        self.chart_type = chart_type
        super().__init__(f"No transformation strategy found for chart type: {chart_type}")


class ChartConfigurationError(ValueError):
    """A transform configuration failed strategy validation."""

    def __init__(self, chart_type: str, errors: Sequence[str]) -> None:
        self.chart_type = chart_type
        self.errors = tuple(errors)
        super().__init__(f"Invalid configuration for {chart_type}: {', '.join(self.errors)}")


class ChartStrategy(ABC):
    """Abstract base class for chart transformation strategies.

    All strategies must implement:
    - transform(): Convert measure records into a ChartData structure

    and may override:
    - can_handle(): Claim additional chart type identifiers
    - validate(): Add configuration rules on top of the default check
    """

    type: str = "base"
    handles: frozenset[str] = frozenset()

    def can_handle(self, chart_type: str) -> bool:
        """Check whether this strategy renders the given chart type.

        Args:
            chart_type: Chart type identifier (e.g. "stacked-bar").

        Returns:
            True if the strategy can transform data for this chart type.
        """
        return chart_type == self.type or chart_type in self.handles

    def validate(self, config: TransformConfig | None) -> ValidationResult:
        """Validate a transform configuration.

        Args:
            config: Configuration to validate.

        Returns:
            ValidationResult listing every problem found.
        """
        if config is None:
            return ValidationResult.failed("Configuration is required")
        return ValidationResult.ok()

    @abstractmethod
    def transform(self, records: Sequence[MeasureRecord], config: TransformConfig) -> ChartData:
        """Transform measure records into chart data.

        Args:
            records: Pre-aggregated measure records.
            config: Validated transform configuration.

        Returns:
            ChartData whose datasets are aligned with its labels.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type={self.type!r})"

    # Shared helpers

    @staticmethod
    def extract_measure_type(records: Sequence[MeasureRecord]) -> str:
        """Read the measure type from the first record."""
        if not records:
            return DEFAULT_MEASURE_TYPE
        return records[0].measure_type or DEFAULT_MEASURE_TYPE

    @staticmethod
    def extract_frequency(records: Sequence[MeasureRecord]) -> str:
        """Read the frequency from the first record that has one."""
        for record in records:
            if record.frequency:
                return record.frequency
        return DEFAULT_FREQUENCY

    @staticmethod
    def series_label(records: Sequence[MeasureRecord]) -> str:
        """Label for a single, ungrouped series."""
        if records and records[0].measure:
            return records[0].measure
        return DEFAULT_SERIES_LABEL

    def empty(self, records: Sequence[MeasureRecord]) -> ChartData:
        return ChartData(labels=[], datasets=[], measure_type=self.extract_measure_type(records))

    def check_groupable(self, config: TransformConfig) -> None:
        """Warn when the grouping field is not marked groupable upstream.

        The transform continues either way; column metadata is optional.
        """
        if not config.is_grouped or config.column_metadata is None:
            return
        column = config.column_metadata.get(config.group_by)
        if column is None:
            logger.warning(
                "Grouping field %s not found in column metadata for %s chart",
                config.group_by,
                self.type,
            )
        elif not column.is_groupable:
            logger.warning(
                "Grouping field %s is not marked groupable for %s chart",
                config.group_by,
                self.type,
            )


class GroupedStrategy(ChartStrategy):
    """Strategy that cannot render without a grouping field."""

    def validate(self, config: TransformConfig | None) -> ValidationResult:
        result = super().validate(config)
        if not result.is_valid or config is None:
            return result
        if not config.is_grouped:
            return ValidationResult.failed(f"{self.type} charts require a groupBy field")
        return result
