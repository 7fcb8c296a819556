"""
Browse command: print one page of a Parquet audio file to the terminal.
"""

import click
from pathlib import Path
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from audioviewer.cli import cli, common_options, load_catalog_or_abort, load_config_or_abort
from audioviewer.exceptions import InvalidRequest
from audioviewer.logger import configure_logging
from audioviewer.query.pagination import PageRequest, QueryEngine
from audioviewer.query.projector import RowProjector


console = Console()


@cli.command()
@common_options
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.option('--file', 'filename', default=None, help='File to browse when PATH is a folder (default: first file)')
@click.option('--page', default=1, type=int, help='Page number, starting at 1 (default: 1)')
@click.option('--page-size', default=None, type=int, help='Rows per page (default from config: 10)')
@click.option('--filter', 'filter_text', default=None, help='Case-insensitive transcript substring')
def browse(path, filename, page, page_size, filter_text, config_file, log_level):
    """
    Print a page of records from a Parquet audio file.

    Examples:

        # First page of a single file
        audioviewer browse data/train.parquet

        # Third page of matching transcripts in one file of a folder
        audioviewer browse data/ --file train.parquet --page 3 --filter "weather"
    """
    configure_logging(level=log_level)

    config = load_config_or_abort(config_file)
    catalog = load_catalog_or_abort(path, config)

    if filename is None:
        filename = catalog.names[0]
    dataset = catalog.get(filename)
    if dataset is None:
        raise click.ClickException(
            f"File not found: {filename}. Available: {', '.join(catalog.names)}"
        )

    if page < 1:
        raise click.ClickException(f"Invalid request: page must be at least 1, got {page}")

    engine = QueryEngine(
        max_page_size=config.max_page_size,
        projector=RowProjector(config.preview_length, config.display['ellipsis']),
    )
    request = PageRequest(
        page_index=page - 1,
        page_size=config.default_page_size if page_size is None else page_size,
        filter=filter_text,
    )

    try:
        result = engine.query(dataset, request)
    except InvalidRequest as e:
        raise click.ClickException(f"Invalid request: {e}")

    table = Table(title=f"{dataset.name} - page {page} of {max(result.total_pages, 1)}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Duration", style="cyan")
    table.add_column("Audio", justify="right")
    table.add_column("Transcript")

    for record in result.items:
        table.add_row(
            str(record.index),
            record.duration,
            f"{record.audio.size} B",
            escape(record.preview),
        )

    console.print(table)
    console.print(f"{result.total_matching} matching record(s)")
