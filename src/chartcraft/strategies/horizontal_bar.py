"""Horizontal bar (ranking) chart strategy."""

from collections.abc import Sequence

from chartcraft.aggregator import aggregate_across_dates, descending_key, get_group_value
from chartcraft.colors import apply_colors_with_hover
from chartcraft.config import TransformConfig
from chartcraft.models import ChartData, ChartDataset, MeasureRecord

from .base import GroupedStrategy


def rank_groups(records: Sequence[MeasureRecord], field: str) -> list[tuple[str, float]]:
    """Sum every group across all dates and sort by descending total.

    Args:
        records: Measure records to rank.
        field: Grouping field.

    Returns:
        (group, total) pairs, largest first; ties keep first-seen order and NaN
        totals sort last.
    """
    totals = aggregate_across_dates(records, field, "sum")
    return sorted(totals.items(), key=lambda item: descending_key(item[1]))


def series_color_overrides(
    records: Sequence[MeasureRecord], field: str, labels: Sequence[str]
) -> list[str | None]:
    """Collect the first explicit series color seen for each group label."""
    overrides: dict[str, str] = {}
    for record in records:
        if record.series_color:
            overrides.setdefault(get_group_value(record, field), record.series_color)
    return [overrides.get(label) for label in labels]


class HorizontalBarStrategy(GroupedStrategy):
    """Ranking chart: one bar per group, totals across all dates.

    A record's series color, when present, takes precedence over the palette
    color for its group.
    """

    type = "horizontal-bar"

    def transform(self, records: Sequence[MeasureRecord], config: TransformConfig) -> ChartData:
        if not records:
            return self.empty(records)

        self.check_groupable(config)
        ranked = rank_groups(records, config.group_by)
        labels = [label for label, _ in ranked]
        colors, hover_colors = apply_colors_with_hover(
            len(labels),
            config.palette_id,
            series_color_overrides(records, config.group_by, labels),
        )

        dataset = ChartDataset(
            label=self.series_label(records),
            data=[total for _, total in ranked],
            background_color=colors,
            hover_background_color=hover_colors,
            border_radius=4,
            bar_percentage=0.8,
            category_percentage=0.9,
        )
        return ChartData(
            labels=list(labels),
            datasets=[dataset],
            measure_type=self.extract_measure_type(records),
        )
