"""Strategy registry mapping chart types to transformation strategies.

The default factory is populated once at import time and then frozen, so
request handlers only ever read from it.
"""

import logging

from .bar import BarChartStrategy
from .base import ChartStrategy, StrategyNotFoundError
from .dual_axis import DualAxisStrategy
from .horizontal_bar import HorizontalBarStrategy
from .line import LineChartStrategy
from .multi_series import MultiSeriesStrategy
from .period_comparison import PeriodComparisonStrategy
from .pie import PieChartStrategy
from .progress_bar import ProgressBarStrategy

logger = logging.getLogger(__name__)


class ChartTransformerFactory:
    """Lookup table of chart strategies.

    Resolves a chart type by exact strategy type first, then by asking each
    registered strategy whether it can handle the type.
    """

    def __init__(self) -> None:
        self._strategies: dict[str, ChartStrategy] = {}
        self._frozen = False

    def register(self, strategy: ChartStrategy) -> None:
        """Register a strategy under its type identifier.

        Args:
            strategy: Strategy instance to register.

        Raises:
            RuntimeError: If the factory has been frozen.
            ValueError: If a strategy with the same type is already registered.
        """
        if self._frozen:
            msg = f"Cannot register {strategy.type}: strategy registry is frozen"
            raise RuntimeError(msg)
        if strategy.type in self._strategies:
            msg = f"Duplicate strategy type: {strategy.type!r}"
            raise ValueError(msg)
        self._strategies[strategy.type] = strategy
        logger.debug("Registered chart strategy %r", strategy)

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get_strategy(self, chart_type: str) -> ChartStrategy | None:
        """Return the strategy for a chart type, or None when unsupported."""
        strategy = self._strategies.get(chart_type)
        if strategy is not None:
            return strategy
        for candidate in self._strategies.values():
            if candidate.can_handle(chart_type):
                return candidate
        return None

    def require_strategy(self, chart_type: str) -> ChartStrategy:
        """Return the strategy for a chart type.

        Raises:
            StrategyNotFoundError: If no registered strategy handles the type.
        """
        strategy = self.get_strategy(chart_type)
        if strategy is None:
            raise StrategyNotFoundError(chart_type)
        return strategy

    def has_strategy(self, chart_type: str) -> bool:
        return self.get_strategy(chart_type) is not None

    def get_all_types(self) -> list[str]:
        """Registered strategy type identifiers, in registration order."""
        return list(self._strategies)

    def get_all_strategies(self) -> list[ChartStrategy]:
        return list(self._strategies.values())


def create_default_factory() -> ChartTransformerFactory:
    """Build a frozen factory holding every built-in strategy."""
    factory = ChartTransformerFactory()
    for strategy in (
        LineChartStrategy(),
        BarChartStrategy(),
        HorizontalBarStrategy(),
        ProgressBarStrategy(),
        PieChartStrategy(),
        MultiSeriesStrategy(),
        DualAxisStrategy(),
        PeriodComparisonStrategy(factory),
    ):
        factory.register(strategy)
    factory.freeze()
    return factory


chart_transformer_factory = create_default_factory()
