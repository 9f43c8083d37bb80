"""Multi-series (multi-measure overlay) chart strategy."""

import logging
from collections.abc import Sequence

from chartcraft.aggregator import (
    apply_aggregation,
    extract_and_sort_dates,
    group_by_field_and_date,
    group_by_series_and_date,
    series_label_of,
)
from chartcraft.colors import get_color_palette, get_palette_color
from chartcraft.config import TransformConfig
from chartcraft.formatters.dates import format_date_label
from chartcraft.models import ChartData, ChartDataset, MeasureRecord

from .base import ChartStrategy

logger = logging.getLogger(__name__)

DEFAULT_MULTI_SERIES_GROUP = "measure"


def has_series_labels(records: Sequence[MeasureRecord]) -> bool:
    """Whether the records were tagged with explicit series labels upstream."""
    return any(record.series_label for record in records)


class MultiSeriesStrategy(ChartStrategy):
    """Overlay several series on one time axis.

    Records that already carry series labels are grouped by label; otherwise
    they are grouped by the configured field (``measure`` when none). Each
    series is reduced per date with its own aggregation function from
    ``config.aggregations`` (default sum). Dates where a series has no
    values plot as 0.
    """

    type = "multi-series"

    def transform(self, records: Sequence[MeasureRecord], config: TransformConfig) -> ChartData:
        if not records:
            return self.empty(records)

        tagged = has_series_labels(records)
        if tagged:
            grouped = group_by_series_and_date(records)
        else:
            self.check_groupable(config)
            field = config.group_by if config.is_grouped else DEFAULT_MULTI_SERIES_GROUP
            grouped = group_by_field_and_date(records, field)

        dates = extract_and_sort_dates(records)
        frequency = self.extract_frequency(records)
        palette = get_color_palette(config.palette_id)
        custom_colors = _series_colors(records) if tagged else {}
        logger.debug(
            "Multi-series chart: %d series (tagged=%s), aggregations=%s",
            len(grouped),
            tagged,
            config.aggregations,
        )

        datasets: list[ChartDataset] = []
        for index, (series_key, date_map) in enumerate(grouped.items()):
            fn = config.aggregations.get(series_key, "sum")
            color = custom_colors.get(series_key) or get_palette_color(palette, index)
            datasets.append(
                ChartDataset(
                    label=series_key,
                    data=[apply_aggregation(date_map.get(d, []), fn) for d in dates],
                    border_color=color,
                    background_color=color,
                    fill=False,
                    tension=0.4,
                    point_radius=3,
                    point_hover_radius=5,
                    border_radius=4,
                    bar_percentage=0.7,
                    category_percentage=0.7,
                )
            )

        return ChartData(
            labels=[format_date_label(d, frequency) for d in dates],
            datasets=datasets,
            measure_type=self.extract_measure_type(records),
        )


def _series_colors(records: Sequence[MeasureRecord]) -> dict[str, str]:
    colors: dict[str, str] = {}
    for record in records:
        if record.series_color:
            colors.setdefault(series_label_of(record), record.series_color)
    return colors
