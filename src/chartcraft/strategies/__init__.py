"""Chart transformation strategies.

One strategy per chart family, all implementing ChartStrategy, plus the
registry that resolves a chart type to its strategy.
"""

from chartcraft.strategies.bar import BarChartStrategy
from chartcraft.strategies.base import (
    ChartConfigurationError,
    ChartStrategy,
    GroupedStrategy,
    StrategyNotFoundError,
)
from chartcraft.strategies.dual_axis import DualAxisStrategy
from chartcraft.strategies.horizontal_bar import HorizontalBarStrategy
from chartcraft.strategies.line import LineChartStrategy
from chartcraft.strategies.multi_series import MultiSeriesStrategy
from chartcraft.strategies.period_comparison import PeriodComparisonStrategy
from chartcraft.strategies.pie import PieChartStrategy
from chartcraft.strategies.progress_bar import ProgressBarStrategy
from chartcraft.strategies.registry import (
    ChartTransformerFactory,
    chart_transformer_factory,
    create_default_factory,
)

__all__ = [
    "BarChartStrategy",
    "ChartConfigurationError",
    "ChartStrategy",
    "ChartTransformerFactory",
    "DualAxisStrategy",
    "GroupedStrategy",
    "HorizontalBarStrategy",
    "LineChartStrategy",
    "MultiSeriesStrategy",
    "PeriodComparisonStrategy",
    "PieChartStrategy",
    "ProgressBarStrategy",
    "StrategyNotFoundError",
    "chart_transformer_factory",
    "create_default_factory",
]
