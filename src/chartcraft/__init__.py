"""Chart data transformation engine.

Turns pre-aggregated measure records into renderer-neutral chart
structures (labels plus styled datasets) for line, area, bar, stacked-bar,
horizontal-bar, progress-bar, pie, doughnut, multi-series, dual-axis and
period-comparison charts.
"""

import logging

__version__ = "0.1.0"

from chartcraft.cache_keys import generate_cache_key, generate_cache_key_pattern
from chartcraft.config import ColumnConfig, TransformConfig, load_transform_config
from chartcraft.models import ChartData, ChartDataset, MeasureRecord, ValidationResult
from chartcraft.strategies import (
    ChartConfigurationError,
    ChartStrategy,
    ChartTransformerFactory,
    StrategyNotFoundError,
    chart_transformer_factory,
)
from chartcraft.transformer import ChartTransformer, transform

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ChartConfigurationError",
    "ChartData",
    "ChartDataset",
    "ChartStrategy",
    "ChartTransformer",
    "ChartTransformerFactory",
    "ColumnConfig",
    "MeasureRecord",
    "StrategyNotFoundError",
    "TransformConfig",
    "ValidationResult",
    "__version__",
    "chart_transformer_factory",
    "generate_cache_key",
    "generate_cache_key_pattern",
    "load_transform_config",
    "transform",
]
