"""Deterministic cache keys for chart transform requests.

Only the data-shaping part of a chart configuration contributes to the key.
Presentation-only properties and unset values are dropped, the remainder is
serialized with sorted keys and hashed, and the short digest is prefixed with
the chart type, data source and chart definition so that two chart
definitions with identical shaping config never share an entry.

Key format::

    {chartType}:{dataSourceId}:{chartDefinitionId}:{sha256[:12]}
"""

import hashlib
import json
import logging
import secrets
import time
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

__all__ = [
    "HASH_LENGTH",
    "UI_ONLY_PROPERTIES",
    "generate_cache_key",
    "generate_cache_key_pattern",
]

HASH_LENGTH = 12
MISSING_COMPONENT = "unknown"

UI_ONLY_PROPERTIES = frozenset(
    {
        "width",
        "height",
        "title",
        "subtitle",
        "chartTitle",
        "chart_title",
        "description",
        "responsive",
        "maintainAspectRatio",
        "maintain_aspect_ratio",
        "aspectRatio",
        "aspect_ratio",
        "showLegend",
        "show_legend",
        "legendPosition",
        "legend_position",
    }
)

_COMPONENT_KEYS: dict[str, tuple[str, ...]] = {
    "chart_type": ("chartType", "chart_type"),
    "data_source_id": ("dataSourceId", "data_source_id"),
    "chart_definition_id": ("chartDefinitionId", "chart_definition_id"),
}


def _component(config: Mapping[str, Any], name: str) -> str:
    for key in _COMPONENT_KEYS[name]:
        value = config.get(key)
        if value is not None and value != "":
            return str(value)
    return MISSING_COMPONENT


def _strip_none(value: Any, _path: frozenset[int] = frozenset()) -> Any:
    """Recursively drop None entries from mappings.

    Raises:
        ValueError: If the value contains a reference cycle.
    """
    if isinstance(value, Mapping | list | tuple):
        if id(value) in _path:
            msg = "Circular reference in cache key config"
            raise ValueError(msg)
        _path = _path | {id(value)}
    if isinstance(value, Mapping):
        return {k: _strip_none(v, _path) for k, v in value.items() if v is not None}
    if isinstance(value, list | tuple):
        return [_strip_none(v, _path) for v in value]
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return value.isoformat()
    msg = f"Object of type {type(value).__name__} is not serializable for cache keys"
    raise TypeError(msg)


def _as_mapping(config: Mapping[str, Any] | BaseModel) -> Mapping[str, Any]:
    if isinstance(config, BaseModel):
        return config.model_dump(by_alias=True, exclude_none=True)
    return config


def canonical_config(config: Mapping[str, Any] | BaseModel) -> str:
    """Serialize the cache-relevant subset of a config to canonical JSON.

    Raises:
        TypeError: If the config contains values that cannot be serialized.
    """
    mapping = _as_mapping(config)
    relevant = {
        key: value
        for key, value in mapping.items()
        if key not in UI_ONLY_PROPERTIES and value is not None
    }
    return json.dumps(
        _strip_none(relevant),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=_json_default,
    )


def generate_cache_key(config: Mapping[str, Any] | BaseModel) -> str:
    """Derive a deterministic cache key from a chart configuration.

    Args:
        config: Chart configuration as a mapping or pydantic model.

    Returns:
        ``{chartType}:{dataSourceId}:{chartDefinitionId}:{hash}``. If the
        config cannot be serialized, a unique fallback key is returned
        instead so the request still succeeds without sharing cache.
    """
    try:
        mapping = _as_mapping(config)
        digest = hashlib.sha256(canonical_config(mapping).encode("utf-8")).hexdigest()
        return ":".join(
            (
                _component(mapping, "chart_type"),
                _component(mapping, "data_source_id"),
                _component(mapping, "chart_definition_id"),
                digest[:HASH_LENGTH],
            )
        )
    except (TypeError, ValueError, AttributeError, RecursionError) as e:
        chart_type = MISSING_COMPONENT
        if isinstance(config, Mapping):
            chart_type = _component(config, "chart_type")
        fallback = f"{chart_type}:fallback:{int(time.time() * 1000)}:{secrets.token_hex(4)}"
        logger.warning("Cache key generation failed (%s), using fallback key %s", e, fallback)
        return fallback


def generate_cache_key_pattern(
    chart_type: str | None = None,
    data_source_id: int | str | None = None,
) -> str:
    """Build a wildcard pattern for bulk invalidation.

    Examples:
        >>> generate_cache_key_pattern("bar")
        'bar:*'
        >>> generate_cache_key_pattern(data_source_id=42)
        '*:42:*'
        >>> generate_cache_key_pattern("bar", 42)
        'bar:42:*'
    """
    if chart_type is None and data_source_id is None:
        return "*"
    if data_source_id is None:
        return f"{chart_type}:*"
    return f"{chart_type or '*'}:{data_source_id}:*"
