"""
Serve command: load Parquet files and start the web viewer.
"""

import click
import uvicorn
from pathlib import Path
from rich.console import Console

from audioviewer.cli import cli, common_options, load_catalog_or_abort, load_config_or_abort
from audioviewer.logger import configure_logging
from audioviewer.web.app import create_app


console = Console()


def parse_bind(bind, default_host, default_port):
    """
    Split a HOST:PORT bind address.

    Either part may be omitted ("0.0.0.0", ":8080") and falls back to the
    configured default.
    """
    if bind is None:
        return default_host, default_port

    host, sep, port = bind.rpartition(':')
    if not sep:
        return bind, default_port

    try:
        port_number = int(port)
    except ValueError:
        raise click.BadParameter(f"Invalid port in bind address: {bind}", param_hint='--bind')
    if not 0 < port_number < 65536:
        raise click.BadParameter(f"Port out of range in bind address: {bind}", param_hint='--bind')

    return host or default_host, port_number


@cli.command()
@common_options
@click.argument('path', type=click.Path(exists=True, path_type=Path))
@click.option(
    '--bind',
    '-b',
    default=None,
    help='Address to bind the server to, as HOST:PORT (default from config: 0.0.0.0:3000)',
)
def serve(path, bind, config_file, log_level):
    """
    Serve Parquet audio files as a browsable web page.

    PATH can be a single Parquet file or a folder of Parquet files. Every
    file is loaded before the server starts; any load failure aborts.

    Examples:

        # Serve a folder on the default address
        audioviewer serve data/

        # Serve one file on a custom port
        audioviewer serve data/train.parquet --bind 127.0.0.1:8080
    """
    configure_logging(level=log_level)

    config = load_config_or_abort(config_file)
    host, port = parse_bind(bind, config.server['host'], config.server['port'])

    console.print("\n[bold blue]Parquet Audio Viewer - Serve[/bold blue]\n")

    catalog = load_catalog_or_abort(path, config)
    console.print(
        f"[green]✓[/green] Loaded {len(catalog)} file(s), {catalog.total_rows} rows from {path}"
    )

    app = create_app(catalog, config)
    console.print(f"[cyan]Listening on[/cyan] http://{host}:{port}\n")

    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())
