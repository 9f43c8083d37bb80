"""Bar and stacked-bar chart strategy."""

import logging
from collections.abc import Sequence

from chartcraft.aggregator import (
    descending_key,
    extract_and_sort_dates,
    filter_dates_with_data,
    group_by_field_and_date,
    sum_by_date,
)
from chartcraft.colors import adjust_color_opacity, get_color_palette, get_palette_color
from chartcraft.config import TransformConfig
from chartcraft.formatters.dates import format_category_date
from chartcraft.models import ChartData, ChartDataset, MeasureRecord

from .base import ChartStrategy

logger = logging.getLogger(__name__)


def bar_dataset(label: str, data: list[float], color: str) -> ChartDataset:
    """Build a styled vertical bar dataset."""
    return ChartDataset(
        label=label,
        data=data,
        background_color=color,
        hover_background_color=adjust_color_opacity(color, 0.8),
        border_radius=4,
        bar_percentage=0.7,
        category_percentage=0.7,
    )


class BarChartStrategy(ChartStrategy):
    """Categorical bar strategy with MM-DD-YYYY date categories.

    Aggregation follows the line strategy. Grouped (stacked) datasets are
    ordered by descending total so the largest segment sits at the base of
    the stack; ties keep first-seen order.
    """

    type = "bar"
    handles = frozenset({"bar", "stacked-bar"})

    def transform(self, records: Sequence[MeasureRecord], config: TransformConfig) -> ChartData:
        if not records:
            return self.empty(records)

        palette = get_color_palette(config.palette_id)
        measure_type = self.extract_measure_type(records)

        if not config.is_grouped:
            totals = sum_by_date(records)
            dates = extract_and_sort_dates(records)
            dataset = bar_dataset(
                self.series_label(records),
                [totals[d] for d in dates],
                get_palette_color(palette, 0),
            )
            return ChartData(
                labels=[format_category_date(d) for d in dates],
                datasets=[dataset],
                measure_type=measure_type,
            )

        self.check_groupable(config)
        grouped = group_by_field_and_date(records, config.group_by)
        dates = filter_dates_with_data(extract_and_sort_dates(records), grouped)

        series = [
            (group_key, [sum(date_map.get(d, []), 0.0) for d in dates])
            for group_key, date_map in grouped.items()
        ]
        # sorted() is stable, so equal totals keep insertion order
        series = sorted(series, key=lambda item: descending_key(sum(item[1], 0.0)))
        logger.debug("Stacked bar order for %s: %s", config.group_by, [s[0] for s in series])

        datasets = [
            bar_dataset(group_key, data, get_palette_color(palette, index))
            for index, (group_key, data) in enumerate(series)
        ]
        return ChartData(
            labels=[format_category_date(d) for d in dates],
            datasets=datasets,
            measure_type=measure_type,
        )
