"""Pie and doughnut chart strategy."""

from collections.abc import Sequence

from chartcraft.aggregator import aggregate_across_dates
from chartcraft.colors import apply_colors_with_hover
from chartcraft.config import TransformConfig
from chartcraft.models import ChartData, ChartDataset, MeasureRecord

from .base import ChartStrategy

DEFAULT_PIE_GROUP = "measure"


class PieChartStrategy(ChartStrategy):
    """One slice per group value, summed across all dates."""

    type = "pie"
    handles = frozenset({"pie", "doughnut"})

    def transform(self, records: Sequence[MeasureRecord], config: TransformConfig) -> ChartData:
        if not records:
            return self.empty(records)

        self.check_groupable(config)
        field = config.group_by if config.is_grouped else DEFAULT_PIE_GROUP
        totals = aggregate_across_dates(records, field, "sum")
        labels = list(totals)
        colors, hover_colors = apply_colors_with_hover(len(labels), config.palette_id)

        dataset = ChartDataset(
            label=self.series_label(records),
            data=[totals[label] for label in labels],
            background_color=colors,
            hover_background_color=hover_colors,
            border_width=0,
        )
        return ChartData(
            labels=list(labels),
            datasets=[dataset],
            measure_type=self.extract_measure_type(records),
        )
