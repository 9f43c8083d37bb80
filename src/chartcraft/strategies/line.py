"""Line and area chart strategy (time series)."""

import logging
from collections.abc import Sequence

from chartcraft.aggregator import (
    extract_and_sort_dates,
    filter_dates_with_data,
    group_by_field_and_date,
    sum_by_date,
)
from chartcraft.colors import adjust_color_opacity, get_color_palette, get_palette_color
from chartcraft.config import TransformConfig
from chartcraft.formatters.dates import to_chart_date
from chartcraft.models import ChartData, ChartDataset, MeasureRecord

from .base import ChartStrategy

logger = logging.getLogger(__name__)

AREA_FILL_OPACITY = 0.1


def line_dataset(label: str, data: list[float], color: str, filled: bool) -> ChartDataset:
    """Build a styled line/area dataset."""
    return ChartDataset(
        label=label,
        data=data,
        border_color=color,
        background_color=adjust_color_opacity(color, AREA_FILL_OPACITY) if filled else color,
        fill=filled,
        tension=0.4,
        point_radius=3,
        point_hover_radius=5,
        point_background_color=color,
        point_hover_background_color=adjust_color_opacity(color, 0.8),
        point_border_width=0,
        point_hover_border_width=0,
    )


class LineChartStrategy(ChartStrategy):
    """Time-series strategy for line and area charts.

    Without grouping, values are summed per date into one series. With
    grouping, each group value becomes its own series and dates that carry
    no data for any group are dropped. Labels are dates: the actual day for
    weekly data, the first of the month for monthly and quarterly data.
    """

    type = "line"
    handles = frozenset({"line", "area"})

    def transform(self, records: Sequence[MeasureRecord], config: TransformConfig) -> ChartData:
        if not records:
            return self.empty(records)

        filled = config.filled or config.chart_type == "area"
        frequency = self.extract_frequency(records)
        palette = get_color_palette(config.palette_id)
        measure_type = self.extract_measure_type(records)

        if not config.is_grouped:
            totals = sum_by_date(records)
            dates = extract_and_sort_dates(records)
            color = get_palette_color(palette, 0)
            dataset = line_dataset(
                self.series_label(records), [totals[d] for d in dates], color, filled
            )
            return ChartData(
                labels=[to_chart_date(d, frequency) for d in dates],
                datasets=[dataset],
                measure_type=measure_type,
            )

        self.check_groupable(config)
        grouped = group_by_field_and_date(records, config.group_by)
        dates = filter_dates_with_data(extract_and_sort_dates(records), grouped)
        logger.debug(
            "Line chart grouped by %s: %d series over %d dates",
            config.group_by,
            len(grouped),
            len(dates),
        )

        datasets = [
            line_dataset(
                group_key,
                [sum(date_map.get(d, []), 0.0) for d in dates],
                get_palette_color(palette, index),
                filled,
            )
            for index, (group_key, date_map) in enumerate(grouped.items())
        ]
        return ChartData(
            labels=[to_chart_date(d, frequency) for d in dates],
            datasets=datasets,
            measure_type=measure_type,
        )
