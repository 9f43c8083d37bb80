"""Palettes, opacity adjustment and period-comparison color schemes.

Palette and scheme tables are built once at import time and exposed as
read-only mappings of tuples, so concurrent readers never observe a partial
update.
"""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from types import MappingProxyType

from chartcraft.models import ChartDataset

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_COLOR",
    "HOVER_OPACITY",
    "PALETTES",
    "PERIOD_COMPARISON_SCHEMES",
    "PeriodColorScheme",
    "adjust_color_opacity",
    "apply_colors_with_hover",
    "apply_period_comparison_colors",
    "darken_color",
    "generate_color_array",
    "get_color_palette",
    "get_palette_color",
    "get_period_comparison_scheme",
    "hex_to_rgb",
]

DEFAULT_COLOR = "#00AEEF"
DEFAULT_PALETTE_ID = "default"
HOVER_OPACITY = 0.8

PALETTES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "default": (
            "#00AEEF",
            "#44C0AE",
            "#8B5CF6",
            "#F59E0B",
            "#EF4444",
            "#EC4899",
            "#6366F1",
            "#F97316",
            "#10B981",
            "#64748B",
        ),
        "blue": (
            "#1E3A8A",
            "#1D4ED8",
            "#2563EB",
            "#3B82F6",
            "#60A5FA",
            "#93C5FD",
            "#BFDBFE",
            "#DBEAFE",
        ),
        "green": (
            "#064E3B",
            "#047857",
            "#059669",
            "#10B981",
            "#34D399",
            "#6EE7B7",
            "#A7F3D0",
            "#D1FAE5",
        ),
        "warm": (
            "#7C2D12",
            "#C2410C",
            "#EA580C",
            "#F97316",
            "#FB923C",
            "#FDBA74",
            "#FCD34D",
            "#FDE68A",
        ),
        "vibrant": (
            "#8B5CF6",
            "#0EA5E9",
            "#22C55E",
            "#EAB308",
            "#EF4444",
            "#EC4899",
            "#6366F1",
            "#F97316",
        ),
        "tableau20": (
            "#1f77b4",
            "#aec7e8",
            "#2ca02c",
            "#98df8a",
            "#d62728",
            "#ff9896",
            "#9467bd",
            "#c5b0d5",
            "#8c564b",
            "#c49c94",
            "#e377c2",
            "#f7b6d2",
            "#7f7f7f",
            "#c7c7c7",
            "#ff7f0e",
            "#ffbb78",
            "#bcbd22",
            "#dbdb8d",
            "#17becf",
            "#9edae5",
        ),
    }
)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNCTIONAL_RE = re.compile(r"^(rgba?|hsla?)\(\s*([^)]*)\)$", re.IGNORECASE)


def get_color_palette(palette_id: str | None = DEFAULT_PALETTE_ID) -> list[str]:
    """Resolve a palette identifier to its ordered color list.

    Unknown identifiers fall back to the default palette.
    """
    palette = PALETTES.get(palette_id or DEFAULT_PALETTE_ID)
    if palette is None:
        logger.warning("Unknown palette %s, using %s", palette_id, DEFAULT_PALETTE_ID)
        palette = PALETTES[DEFAULT_PALETTE_ID]
    return list(palette)


def get_palette_color(palette: Sequence[str], index: int) -> str:
    """Pick a palette color by index with wraparound; never returns an empty value."""
    if not palette:
        return DEFAULT_COLOR
    return palette[index % len(palette)] or DEFAULT_COLOR


def _format_opacity(opacity: float) -> str:
    return f"{opacity:g}"


def hex_to_rgb(color: str) -> tuple[int, int, int] | None:
    """Convert a 3- or 6-digit hex color to an (r, g, b) tuple.

    Returns None for anything that is not a valid hex color.
    """
    match = _HEX_RE.match(color.strip())
    if match is None or len(match.group(1)) == 8:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def darken_color(color: str, percent: float) -> str:
    """Darken a hex color by a percentage (0-100).

    Invalid colors are returned unchanged.
    """
    rgb = hex_to_rgb(color)
    if rgb is None:
        return color
    factor = max(0.0, min(100.0, 100.0 - percent)) / 100.0
    r, g, b = (round(channel * factor) for channel in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def adjust_color_opacity(color: str, opacity: float) -> str:
    """Return a translucent variant of a color.

    Supports hex (#rgb, #rrggbb, #rrggbbaa), rgb()/rgba() and hsl()/hsla().
    Colors in any other syntax are returned unchanged.

    Args:
        color: Source color.
        opacity: Alpha value between 0 and 1.

    Returns:
        rgba()/hsla() color string with the requested alpha.
    """
    value = color.strip()
    alpha = _format_opacity(opacity)

    hex_match = _HEX_RE.match(value)
    if hex_match is not None and (value.startswith("#") or len(hex_match.group(1)) == 6):
        digits = hex_match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        r, g, b = int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
        return f"rgba({r}, {g}, {b}, {alpha})"

    functional = _FUNCTIONAL_RE.match(value)
    if functional is not None:
        kind = functional.group(1).lower().rstrip("a")
        parts = [part.strip() for part in re.split(r"[,\s/]+", functional.group(2)) if part.strip()]
        if len(parts) >= 3:
            return f"{kind}a({parts[0]}, {parts[1]}, {parts[2]}, {alpha})"

    logger.debug("Cannot adjust opacity of color %s", color)
    return color


def generate_color_array(count: int, palette_id: str | None = DEFAULT_PALETTE_ID) -> list[str]:
    """Assign ``count`` colors from a palette, wrapping around as needed."""
    palette = get_color_palette(palette_id)
    return [get_palette_color(palette, i) for i in range(count)]


def apply_colors_with_hover(
    count: int,
    palette_id: str | None = DEFAULT_PALETTE_ID,
    overrides: Sequence[str | None] | None = None,
) -> tuple[list[str], list[str]]:
    """Build per-item colors and their hover-state variants.

    Args:
        count: Number of items to color.
        palette_id: Palette to assign from.
        overrides: Optional per-item explicit colors; a non-empty entry wins
            over the palette color at the same position.

    Returns:
        Tuple of (colors, hover_colors).
    """
    colors = generate_color_array(count, palette_id)
    if overrides:
        for i, override in enumerate(overrides[:count]):
            if override:
                colors[i] = override
    hover = [adjust_color_opacity(color, HOVER_OPACITY) for color in colors]
    return colors, hover


@dataclass(frozen=True)
class PeriodColorScheme:
    """Two-tone colors distinguishing current and comparison periods."""

    current: str
    current_hover: str
    comparison: str
    comparison_hover: str


PERIOD_COMPARISON_SCHEMES: Mapping[str, PeriodColorScheme] = MappingProxyType(
    {
        "default": PeriodColorScheme(
            current="#00AEEF",
            current_hover="#0090C7",
            comparison="#94A3B8",
            comparison_hover="#64748B",
        ),
        "warm": PeriodColorScheme(
            current="#F97316",
            current_hover="#EA580C",
            comparison="#FDBA74",
            comparison_hover="#FB923C",
        ),
        "green": PeriodColorScheme(
            current="#10B981",
            current_hover="#059669",
            comparison="#A7F3D0",
            comparison_hover="#6EE7B7",
        ),
    }
)

LINE_CHART_TYPES = frozenset({"line", "area"})
SLICE_CHART_TYPES = frozenset({"pie", "doughnut"})


def get_period_comparison_scheme(scheme_id: str | None = DEFAULT_PALETTE_ID) -> PeriodColorScheme:
    """Resolve a period-comparison scheme, falling back to the default one."""
    scheme = PERIOD_COMPARISON_SCHEMES.get(scheme_id or DEFAULT_PALETTE_ID)
    if scheme is None:
        logger.warning("Unknown period comparison scheme %s, using default", scheme_id)
        scheme = PERIOD_COMPARISON_SCHEMES[DEFAULT_PALETTE_ID]
    return scheme


def _fill_like(template: str | list[str] | None, color: str) -> str | list[str]:
    """Repeat a color to match a per-item color list, or return it as-is."""
    if isinstance(template, list):
        return [color] * len(template)
    return color


def apply_period_comparison_colors(
    datasets: Iterable[ChartDataset],
    scheme: PeriodColorScheme,
    chart_type: str,
) -> list[ChartDataset]:
    """Apply the two-tone current/comparison scheme to merged datasets.

    Datasets whose ``series_id`` is "comparison" receive the comparison
    colors; all others receive the current colors. Pie and doughnut slices
    keep their per-slice palette colors.
    """
    colored: list[ChartDataset] = []
    for dataset in datasets:
        if chart_type in SLICE_CHART_TYPES:
            colored.append(dataset)
            continue

        is_comparison = dataset.series_id == "comparison"
        base = scheme.comparison if is_comparison else scheme.current
        hover = scheme.comparison_hover if is_comparison else scheme.current_hover

        if chart_type in LINE_CHART_TYPES:
            background = adjust_color_opacity(base, 0.1) if dataset.fill else base
            colored.append(
                replace(
                    dataset,
                    border_color=base,
                    background_color=background,
                    point_background_color=base,
                    point_hover_background_color=hover,
                )
            )
        else:
            colored.append(
                replace(
                    dataset,
                    background_color=_fill_like(dataset.background_color, base),
                    hover_background_color=_fill_like(dataset.hover_background_color, hover),
                )
            )
    return colored
