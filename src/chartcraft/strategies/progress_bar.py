"""Progress bar chart strategy."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from chartcraft.colors import apply_colors_with_hover
from chartcraft.config import TransformConfig
from chartcraft.models import ChartData, ChartDataset, MeasureRecord

from .base import GroupedStrategy
from .horizontal_bar import rank_groups

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEntry:
    """One progress bar row."""

    label: str
    value: float
    percentage: float


def build_progress_entries(
    records: Sequence[MeasureRecord], field: str
) -> list[ProgressEntry]:
    """Rank groups and compute each group's share of the grand total.

    Returns entries sorted by descending value. When the grand total is zero
    every percentage is zero.
    """
    ranked = rank_groups(records, field)
    grand_total = sum((value for _, value in ranked), 0.0)
    return [
        ProgressEntry(
            label=label,
            value=value,
            percentage=(value / grand_total) * 100 if grand_total != 0 else 0.0,
        )
        for label, value in ranked
    ]


class ProgressBarStrategy(GroupedStrategy):
    """Progress bars: one row per group with its percentage of the total.

    The configured target is carried on the dataset for the renderer.
    """

    type = "progress-bar"

    def transform(self, records: Sequence[MeasureRecord], config: TransformConfig) -> ChartData:
        if not records:
            return self.empty(records)

        self.check_groupable(config)
        entries = build_progress_entries(records, config.group_by)
        colors, hover_colors = apply_colors_with_hover(len(entries), config.palette_id)
        logger.debug("Progress bar with %d entries, target=%s", len(entries), config.target)

        dataset = ChartDataset(
            label=self.series_label(records),
            data=[entry.value for entry in entries],
            percentages=[entry.percentage for entry in entries],
            target=config.target,
            background_color=colors,
            hover_background_color=hover_colors,
            border_radius=4,
        )
        return ChartData(
            labels=[entry.label for entry in entries],
            datasets=[dataset],
            measure_type=self.extract_measure_type(records),
        )
