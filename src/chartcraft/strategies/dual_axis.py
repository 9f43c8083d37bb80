"""Dual-axis (bar + line combo) chart strategy."""

import logging
from collections.abc import Sequence

from chartcraft.aggregator import extract_and_sort_dates, sum_by_date
from chartcraft.colors import adjust_color_opacity, get_color_palette, get_palette_color
from chartcraft.config import TransformConfig
from chartcraft.formatters.dates import format_date_label
from chartcraft.models import ChartData, ChartDataset, MeasureRecord, ValidationResult

from .base import ChartStrategy

logger = logging.getLogger(__name__)

PRIMARY_SERIES = "primary"
SECONDARY_SERIES = "secondary"
PRIMARY_AXIS = "y-left"
SECONDARY_AXIS = "y-right"


class DualAxisStrategy(ChartStrategy):
    """Two measures on independent y-axes.

    Records are split by ``series_id`` into primary and secondary subsets.
    The primary measure renders as bars on the left axis behind the
    secondary measure, which renders as a line or bar on the right axis.
    Labels are the union of both subsets' dates; a missing value is 0.
    """

    type = "dual-axis"

    def validate(self, config: TransformConfig | None) -> ValidationResult:
        result = super().validate(config)
        if not result.is_valid or config is None:
            return result
        if config.secondary_chart_type not in ("line", "bar"):
            return ValidationResult.failed("secondaryChartType must be 'line' or 'bar'")
        return result

    def transform(self, records: Sequence[MeasureRecord], config: TransformConfig) -> ChartData:
        if not records:
            return self.empty(records)

        primary = [r for r in records if r.series_id == PRIMARY_SERIES]
        secondary = [r for r in records if r.series_id == SECONDARY_SERIES]
        if not primary or not secondary:
            logger.warning(
                "Dual-axis chart has %d primary and %d secondary records",
                len(primary),
                len(secondary),
            )

        dates = extract_and_sort_dates([*primary, *secondary])
        primary_totals = sum_by_date(primary)
        secondary_totals = sum_by_date(secondary)

        palette = get_color_palette(config.palette_id)
        primary_color = get_palette_color(palette, 0)
        secondary_color = get_palette_color(palette, 1)
        primary_type = self.extract_measure_type(primary or records)
        secondary_type = self.extract_measure_type(secondary or records)

        primary_dataset = ChartDataset(
            label=config.primary_label or self.series_label(primary),
            type="bar",
            data=[primary_totals.get(d, 0.0) for d in dates],
            background_color=primary_color,
            hover_background_color=adjust_color_opacity(primary_color, 0.8),
            border_radius=4,
            y_axis_id=PRIMARY_AXIS,
            order=2,
            measure_type=primary_type,
            series_id=PRIMARY_SERIES,
        )

        secondary_is_line = config.secondary_chart_type == "line"
        secondary_dataset = ChartDataset(
            label=config.secondary_label or self.series_label(secondary),
            type=config.secondary_chart_type,
            data=[secondary_totals.get(d, 0.0) for d in dates],
            border_color=secondary_color,
            background_color=(
                adjust_color_opacity(secondary_color, 0.1) if secondary_is_line else secondary_color
            ),
            hover_background_color=adjust_color_opacity(secondary_color, 0.8),
            fill=False if secondary_is_line else None,
            tension=0.4 if secondary_is_line else None,
            point_radius=3 if secondary_is_line else None,
            point_hover_radius=5 if secondary_is_line else None,
            border_radius=None if secondary_is_line else 4,
            y_axis_id=SECONDARY_AXIS,
            order=1,
            measure_type=secondary_type,
            series_id=SECONDARY_SERIES,
        )

        frequency = self.extract_frequency(primary or records)
        return ChartData(
            labels=[format_date_label(d, frequency) for d in dates],
            datasets=[primary_dataset, secondary_dataset],
            measure_type=primary_type,
        )
