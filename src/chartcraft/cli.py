"""CLI entry point for chartcraft.

Developer tooling around the transformation engine:
- transform: Transform a JSON file of measure records into chart data
- cache-key: Print the cache key for a chart configuration
- chart-types: List the registered chart strategies
"""

import json
from pathlib import Path
from typing import Any

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from chartcraft import __version__
from chartcraft.cache_keys import generate_cache_key
from chartcraft.config import TransformConfig, load_transform_config
from chartcraft.formatters import format_value, format_value_compact
from chartcraft.logging import setup_logging
from chartcraft.models import ChartData
from chartcraft.strategies import (
    ChartConfigurationError,
    StrategyNotFoundError,
    chart_transformer_factory,
)
from chartcraft.transformer import ChartTransformer

console = Console()


def _load_records(path: Path) -> list[dict[str, Any]]:
    with path.open() as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        payload = payload.get("records", [])
    if not isinstance(payload, list):
        msg = f"Expected a list of records in {path}"
        raise click.BadParameter(msg)
    return payload


def _summary_table(chart: ChartData) -> Table:
    table = Table(title="Datasets")
    table.add_column("Dataset", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Peak", justify="right")
    for dataset in chart.datasets:
        measure_type = dataset.measure_type or chart.measure_type
        total = sum(dataset.data, 0.0)
        peak = max(dataset.data, default=0.0)
        table.add_row(
            dataset.label,
            format_value(total, measure_type),
            format_value_compact(peak, measure_type),
        )
    return table


@click.group()
@click.version_option(version=__version__, prog_name="chartcraft")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Chart data transformation engine.

    Turns pre-aggregated measure records into chart-ready labels and
    datasets.

    \b
    Quick Start:
        1. List chart types: chartcraft chart-types
        2. Transform records: chartcraft transform records.json --chart-type bar
        3. Inspect cache keys: chartcraft cache-key chart.yaml
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose)


@main.command()
@click.argument("records", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--chart-type", "-t", required=True, help="Chart type to produce (line, bar, ...)")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to a transform config YAML file",
)
@click.option("--group-by", "-g", default=None, help="Override the grouping field")
@click.option("--palette", "-p", default=None, help="Override the color palette")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write chart JSON to this file instead of stdout",
)
@click.pass_context
def transform(
    ctx: click.Context,
    records: Path,
    chart_type: str,
    config: Path | None,
    group_by: str | None,
    palette: str | None,
    output: Path | None,
) -> None:
    """Transform a JSON file of measure records into chart data.

    RECORDS is a JSON list of records (or an object with a "records" list).
    Records tagged with series_id "current"/"comparison" are rendered as a
    period comparison on top of the requested chart type.
    """
    try:
        cfg = load_transform_config(config) if config else TransformConfig()
    except (ValidationError, yaml.YAMLError) as e:
        console.print(f"[bold red]Invalid config:[/bold red] {e}")
        raise click.Abort() from e

    overrides: dict[str, Any] = {}
    if group_by is not None:
        overrides["group_by"] = group_by
    if palette is not None:
        overrides["palette_id"] = palette
    if overrides:
        cfg = TransformConfig.model_validate({**cfg.model_dump(), **overrides})

    rows = _load_records(records)
    try:
        chart = ChartTransformer().transform_with_period_comparison(rows, chart_type, cfg)
    except (StrategyNotFoundError, ChartConfigurationError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if ctx.obj.get("verbose"):
            import traceback

            console.print("\n[dim]Traceback:[/dim]")
            console.print(traceback.format_exc())
        raise click.Abort() from e

    rendered = json.dumps(chart.to_dict(), indent=2)
    if output is None:
        click.echo(rendered)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered + "\n")
    console.print(f"[bold green]Chart written:[/bold green] {output}")
    console.print(f"  Labels: {len(chart.labels)}")
    console.print(f"  Datasets: {len(chart.datasets)}")
    if chart.datasets:
        console.print(_summary_table(chart))


@main.command(name="cache-key")
@click.argument("chart_config", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def cache_key(chart_config: Path) -> None:
    """Print the cache key for a chart configuration file (YAML or JSON)."""
    with chart_config.open() as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        console.print(f"[bold red]Error:[/bold red] {chart_config} must contain a mapping")
        raise click.Abort()
    click.echo(generate_cache_key(raw))


@main.command(name="chart-types")
def chart_types() -> None:
    """List registered chart strategies and the chart types they handle."""
    table = Table(title="Chart strategies")
    table.add_column("Strategy", style="cyan")
    table.add_column("Chart types")
    for strategy in chart_transformer_factory.get_all_strategies():
        handled = sorted(strategy.handles | {strategy.type})
        table.add_row(strategy.type, ", ".join(handled))
    console.print(table)


if __name__ == "__main__":
    main()
