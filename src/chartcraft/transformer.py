"""Chart transformer facade.

Resolves a strategy for the requested chart type, validates the
configuration, runs the transform and attaches the measure type of the input
to the result. Works with plain dict rows or MeasureRecord instances.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from chartcraft.config import ColumnConfig, TransformConfig
from chartcraft.models import ChartData, MeasureRecord
from chartcraft.strategies.base import (
    ChartConfigurationError,
    ChartStrategy,
    DEFAULT_MEASURE_TYPE,
)
from chartcraft.strategies.dual_axis import PRIMARY_SERIES, SECONDARY_SERIES
from chartcraft.strategies.period_comparison import COMPARISON_SERIES, CURRENT_SERIES
from chartcraft.strategies.registry import ChartTransformerFactory, chart_transformer_factory

logger = logging.getLogger(__name__)

__all__ = ["ChartTransformer", "ensure_records", "transform"]

TABLE_CHART_TYPE = "table"
PERIOD_COMPARISON_TYPE = "period-comparison"
MULTI_SERIES_TYPE = "multi-series"
DUAL_AXIS_TYPE = "dual-axis"

RecordInput = MeasureRecord | Mapping[str, Any]
ConfigInput = TransformConfig | Mapping[str, Any] | None


def ensure_records(records: Iterable[RecordInput]) -> list[MeasureRecord]:
    """Normalize dict rows and MeasureRecords into a list of MeasureRecords."""
    return [
        record if isinstance(record, MeasureRecord) else MeasureRecord.from_dict(record)
        for record in records
    ]


def _as_config(config: ConfigInput, **overrides: Any) -> TransformConfig:
    if config is None:
        base = TransformConfig()
    elif isinstance(config, TransformConfig):
        base = config
    else:
        base = TransformConfig.model_validate(dict(config))
    return base.with_options(**overrides) if overrides else base


def _attach_measure_type(chart: ChartData, measure_type: str) -> ChartData:
    return replace(
        chart,
        measure_type=measure_type,
        datasets=[replace(dataset, measure_type=measure_type) for dataset in chart.datasets],
    )


class ChartTransformer:
    """Entry point for turning measure records into chart data.

    Args:
        column_metadata: Optional column metadata used to warn about
            grouping by fields that are not marked groupable.
        factory: Strategy registry; defaults to the built-in registry.
    """

    def __init__(
        self,
        column_metadata: Mapping[str, ColumnConfig] | None = None,
        factory: ChartTransformerFactory | None = None,
    ) -> None:
        self.column_metadata = dict(column_metadata) if column_metadata is not None else None
        self.factory = factory or chart_transformer_factory

    def _prepare(self, chart_type: str, config: ConfigInput, **overrides: Any) -> TransformConfig:
        prepared = _as_config(config, chart_type=chart_type, **overrides)
        if prepared.column_metadata is None and self.column_metadata is not None:
            prepared = prepared.with_options(column_metadata=self.column_metadata)
        return prepared

    def _validate(self, strategy: ChartStrategy, chart_type: str, config: TransformConfig) -> None:
        validation = strategy.validate(config)
        if not validation.is_valid:
            raise ChartConfigurationError(chart_type, validation.errors)

    def _run(
        self,
        strategy: ChartStrategy,
        chart_type: str,
        records: Sequence[MeasureRecord],
        config: TransformConfig,
    ) -> ChartData:
        logger.debug(
            "Transforming %d records with %r for %s", len(records), strategy, chart_type
        )
        return strategy.transform(records, config)

    def transform_data(
        self,
        records: Iterable[RecordInput],
        chart_type: str,
        config: ConfigInput = None,
    ) -> ChartData:
        """Transform records for a chart type.

        Args:
            records: Measure records or dict rows.
            chart_type: Chart type identifier (line, bar, pie, ...).
            config: TransformConfig or a mapping of its options.

        Returns:
            ChartData with the input's measure type attached.

        Raises:
            StrategyNotFoundError: If no strategy handles the chart type.
            ChartConfigurationError: If the configuration fails validation.
        """
        measures = ensure_records(records)
        if chart_type == TABLE_CHART_TYPE:
            return ChartData(labels=[], datasets=[])

        strategy = self.factory.require_strategy(chart_type)
        prepared = self._prepare(
            chart_type, config, **({"filled": True} if chart_type == "area" else {})
        )
        self._validate(strategy, chart_type, prepared)
        if not measures:
            return ChartData(labels=[], datasets=[], measure_type=DEFAULT_MEASURE_TYPE)

        chart = self._run(strategy, chart_type, measures, prepared)
        if chart_type == DUAL_AXIS_TYPE:
            return chart
        return _attach_measure_type(chart, strategy.extract_measure_type(measures))

    def transform_with_period_comparison(
        self,
        records: Iterable[RecordInput],
        chart_type: str,
        config: ConfigInput = None,
    ) -> ChartData:
        """Transform records, overlaying comparison-period data when present.

        Records tagged with series_id "current"/"comparison" and a series
        label are routed to the period-comparison strategy with ``chart_type``
        as the base chart type; anything else is transformed normally.
        """
        measures = ensure_records(records)
        has_comparison = any(
            record.series_label and record.series_id in (CURRENT_SERIES, COMPARISON_SERIES)
            for record in measures
        )
        if not has_comparison:
            return self.transform_data(measures, chart_type, config)

        self.factory.require_strategy(chart_type)
        prepared = _as_config(config)
        return self.transform_data(
            measures,
            PERIOD_COMPARISON_TYPE,
            prepared.with_options(
                base_chart_type=chart_type,
                filled=prepared.filled or chart_type == "area",
            ),
        )

    def create_multi_series_chart(
        self,
        records: Iterable[RecordInput],
        group_by: str = "none",
        aggregations: Mapping[str, str] | None = None,
        palette_id: str = "default",
    ) -> ChartData:
        """Overlay several series, each with its own aggregation function."""
        config = TransformConfig.model_validate(
            {
                "group_by": group_by,
                "palette_id": palette_id,
                "aggregations": dict(aggregations or {}),
            }
        )
        return self.transform_data(records, MULTI_SERIES_TYPE, config)

    def transform_dual_axis_data(
        self,
        primary_records: Iterable[RecordInput],
        secondary_records: Iterable[RecordInput],
        primary_label: str | None = None,
        secondary_label: str | None = None,
        secondary_chart_type: str = "line",
        palette_id: str = "default",
    ) -> ChartData:
        """Build a bar + line/bar combo from two untagged record sets.

        Records are tagged as primary/secondary (copies; inputs are not
        modified) and passed to the dual-axis strategy.
        """
        primary = [replace(r, series_id=PRIMARY_SERIES) for r in ensure_records(primary_records)]
        secondary = [
            replace(r, series_id=SECONDARY_SERIES) for r in ensure_records(secondary_records)
        ]
        config = TransformConfig.model_validate(
            {
                "palette_id": palette_id,
                "primary_label": primary_label,
                "secondary_label": secondary_label,
                "secondary_chart_type": secondary_chart_type,
            }
        )
        return self.transform_data([*primary, *secondary], DUAL_AXIS_TYPE, config)


_default_transformer = ChartTransformer()


def transform(
    records: Iterable[RecordInput],
    chart_type: str,
    config: ConfigInput = None,
) -> ChartData:
    """Transform records for a chart type using the default registry.

    See ChartTransformer.transform_data.
    """
    return _default_transformer.transform_data(records, chart_type, config)
