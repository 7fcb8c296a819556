"""
Inspect command: summarize Parquet audio files without starting a server.
"""

import click
from pathlib import Path
from rich.console import Console
from rich.table import Table

from audioviewer.cli import cli, common_options, load_catalog_or_abort, load_config_or_abort
from audioviewer.dataset.loader import get_parquet_file_info
from audioviewer.logger import configure_logging
from audioviewer.query.projector import format_duration


console = Console()


def summarize_durations(dataset):
    """Duration statistics for one dataset, computed with pandas."""
    durations = dataset.table.column('duration').to_pandas()
    if durations.empty:
        return {'count': 0, 'total': 0.0, 'mean': 0.0, 'min': 0.0, 'max': 0.0}

    stats = durations.describe()
    return {
        'count': int(stats['count']),
        'total': float(durations.sum()),
        'mean': float(stats['mean']),
        'min': float(stats['min']),
        'max': float(stats['max']),
    }


@cli.command()
@common_options
@click.argument('path', type=click.Path(exists=True, path_type=Path))
def inspect(path, config_file, log_level):
    """
    Show row counts and duration statistics for Parquet audio files.

    PATH can be a single Parquet file or a folder of Parquet files.

    Examples:

        audioviewer inspect data/
    """
    configure_logging(level=log_level)

    config = load_config_or_abort(config_file)
    catalog = load_catalog_or_abort(path, config)

    table = Table(title="Parquet Audio Files")
    table.add_column("File", style="cyan")
    table.add_column("Rows", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Mean", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Size", justify="right")

    for dataset in catalog:
        stats = summarize_durations(dataset)
        info = get_parquet_file_info(dataset.path)
        table.add_row(
            dataset.name,
            str(stats['count']),
            format_duration(stats['total']),
            format_duration(stats['mean']),
            format_duration(stats['min']),
            format_duration(stats['max']),
            f"{info['file_size_bytes'] / 1024:.1f} KB",
        )

    console.print(table)
    console.print(f"\n[bold]{len(catalog)}[/bold] file(s), [bold]{catalog.total_rows}[/bold] rows")
