"""Current-vs-comparison period overlay strategy."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from chartcraft.colors import (
    adjust_color_opacity,
    apply_period_comparison_colors,
    get_period_comparison_scheme,
)
from chartcraft.config import TransformConfig
from chartcraft.models import ChartData, ChartDataset, ChartLabel, MeasureRecord, ValidationResult

from .base import (
    DEFAULT_SERIES_LABEL,
    ChartConfigurationError,
    ChartStrategy,
    StrategyNotFoundError,
)

if TYPE_CHECKING:
    from .registry import ChartTransformerFactory

logger = logging.getLogger(__name__)

CURRENT_SERIES = "current"
COMPARISON_SERIES = "comparison"
CURRENT_PERIOD_LABEL = "Current Period"
DEFAULT_COMPARISON_LABEL = "Previous Period"

LINE_TYPES = frozenset({"line", "area"})
BAR_TYPES = frozenset({"bar", "stacked-bar", "horizontal-bar", "progress-bar"})
SLICE_TYPES = frozenset({"pie", "doughnut"})
# Charts whose labels are group names rather than date buckets
CATEGORICAL_TYPES = frozenset({"horizontal-bar", "progress-bar", "pie", "doughnut"})

# Per-item dataset attributes that must follow the labels when realigned
_PER_ITEM_ATTRIBUTES = ("background_color", "hover_background_color", "percentages")


def _map_colors(value: str | list[str] | None, opacity: float) -> str | list[str] | None:
    if value is None:
        return None
    if isinstance(value, list):
        return [adjust_color_opacity(color, opacity) for color in value]
    return adjust_color_opacity(value, opacity)


def style_comparison_dataset(dataset: ChartDataset, chart_type: str) -> ChartDataset:
    """Apply comparison-period styling for the given base chart type.

    Lines get dashed strokes and lighter colors, bars get reduced fill and
    hover opacity, and pie slices are lightened.
    """
    if chart_type in LINE_TYPES:
        return replace(
            dataset,
            border_dash=[5, 5],
            border_color=_map_colors(dataset.border_color, 0.6),
            background_color=_map_colors(dataset.background_color, 0.3),
        )
    if chart_type in BAR_TYPES:
        return replace(
            dataset,
            background_color=_map_colors(dataset.background_color, 0.6),
            hover_background_color=_map_colors(dataset.hover_background_color, 0.8),
        )
    if chart_type in SLICE_TYPES:
        if isinstance(dataset.background_color, list):
            return replace(dataset, background_color=_map_colors(dataset.background_color, 0.6))
        return dataset
    return replace(dataset, background_color=_map_colors(dataset.background_color, 0.6))


def _realign(
    values: list[Any],
    positions: Sequence[int | None],
    filler: Callable[[], Any],
) -> list[Any]:
    return [values[i] if i is not None and i < len(values) else filler() for i in positions]


def align_dataset(
    dataset: ChartDataset,
    source_labels: Sequence[ChartLabel],
    target_labels: Sequence[ChartLabel],
    by_label: bool,
) -> ChartDataset:
    """Realign a dataset onto another label sequence.

    Categorical charts are matched by label name; time-based charts are
    matched by position (bucket N of the comparison period lines up with
    bucket N of the current period). Missing values become 0.
    """
    if by_label:
        index_of = {label: i for i, label in enumerate(source_labels)}
        positions: list[int | None] = [index_of.get(label) for label in target_labels]
    else:
        positions = list(range(len(target_labels)))

    changes: dict[str, Any] = {"data": _realign(dataset.data, positions, lambda: 0.0)}
    for attribute in _PER_ITEM_ATTRIBUTES:
        value = getattr(dataset, attribute)
        if isinstance(value, list):
            pad = value[-1] if value and attribute != "percentages" else 0.0
            changes[attribute] = _realign(value, positions, lambda pad=pad: pad)
    return replace(dataset, **changes)


def current_label(label: str) -> str:
    return CURRENT_PERIOD_LABEL if label == DEFAULT_SERIES_LABEL else label


def comparison_label_for(label: str, comparison_label: str) -> str:
    if label == DEFAULT_SERIES_LABEL:
        return comparison_label
    return f"{label} ({comparison_label})"


class PeriodComparisonStrategy(ChartStrategy):
    """Overlay a comparison period on the current period.

    Records are split by ``series_id`` into "current" and "comparison"
    subsets. Each subset is transformed by the strategy registered for
    ``config.base_chart_type``; the comparison datasets are styled, aligned
    to the current labels and relabeled, and the merged list is recolored
    with the two-tone period scheme.
    """

    type = "period-comparison"

    def __init__(self, registry: "ChartTransformerFactory") -> None:
        self._registry = registry

    def _base_strategy(self, base_chart_type: str | None) -> ChartStrategy:
        strategy = self._registry.get_strategy(base_chart_type) if base_chart_type else None
        if strategy is None or isinstance(strategy, PeriodComparisonStrategy):
            raise StrategyNotFoundError(base_chart_type)
        return strategy

    @staticmethod
    def _base_config(config: TransformConfig) -> TransformConfig:
        base_type = config.base_chart_type
        return config.with_options(
            chart_type=base_type,
            filled=config.filled or base_type == "area",
        )

    def validate(self, config: TransformConfig | None) -> ValidationResult:
        result = super().validate(config)
        if not result.is_valid or config is None:
            return result
        if not config.base_chart_type:
            return ValidationResult.failed("Period comparison requires a base chart type")
        if config.base_chart_type == self.type:
            return ValidationResult.failed("Period comparison cannot compare itself")

        base = self._registry.get_strategy(config.base_chart_type)
        if base is None:
            return ValidationResult.failed(
                f"No strategy registered for base chart type {config.base_chart_type}"
            )
        return base.validate(self._base_config(config))

    def transform(self, records: Sequence[MeasureRecord], config: TransformConfig) -> ChartData:
        base_type = config.base_chart_type or ""
        strategy = self._base_strategy(config.base_chart_type)
        if not records:
            return self.empty(records)

        base_config = self._base_config(config)
        base_validation = strategy.validate(base_config)
        if not base_validation.is_valid:
            raise ChartConfigurationError(base_type, base_validation.errors)

        current = [r for r in records if r.series_id == CURRENT_SERIES]
        comparison = [r for r in records if r.series_id == COMPARISON_SERIES]
        comparison_label = (
            comparison[0].series_label
            if comparison and comparison[0].series_label
            else DEFAULT_COMPARISON_LABEL
        )
        logger.debug(
            "Period comparison on %s: %d current, %d comparison records",
            base_type,
            len(current),
            len(comparison),
        )

        current_data = strategy.transform(current, base_config)
        comparison_data = strategy.transform(comparison, base_config)
        labels = list(current_data.labels or comparison_data.labels)
        by_label = base_type in CATEGORICAL_TYPES

        merged: list[ChartDataset] = [
            replace(
                align_dataset(dataset, current_data.labels, labels, by_label),
                label=current_label(dataset.label),
                series_id=CURRENT_SERIES,
            )
            for dataset in current_data.datasets
        ]
        for dataset in comparison_data.datasets:
            styled = style_comparison_dataset(dataset, base_type)
            merged.append(
                replace(
                    align_dataset(styled, comparison_data.labels, labels, by_label),
                    label=comparison_label_for(dataset.label, comparison_label),
                    series_id=COMPARISON_SERIES,
                )
            )

        scheme = get_period_comparison_scheme(config.comparison_scheme_id)
        return ChartData(
            labels=labels,
            datasets=apply_period_comparison_colors(merged, scheme, base_type),
            measure_type=self.extract_measure_type(records),
        )
