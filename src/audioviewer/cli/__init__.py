"""
Command-line interface for the audioviewer package.

Provides commands for serving, inspecting, and browsing audio Parquet files.
"""

import click
from pathlib import Path

from audioviewer import __version__


# Common options that can be reused across commands
def common_options(func):
    """Decorator to add common CLI options."""
    func = click.option(
        '--config',
        'config_file',
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help='Path to an existing YAML configuration file (defaults are used if omitted)',
    )(func)
    func = click.option(
        '--log-level',
        type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
        default='INFO',
        help='Logging level (default: INFO)',
    )(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name='audioviewer')
@click.pass_context
def cli(ctx):
    """
    Parquet Audio Viewer CLI.

    Browse audio datasets stored in Parquet files: each row holds an audio
    payload, its duration in seconds, and a transcript.
    """
    ctx.ensure_object(dict)


def load_config_or_abort(config_file):
    """Load viewer configuration, turning bad values into a CLI error."""
    import yaml

    from audioviewer.config import Config

    try:
        return Config(config_file)
    except (ValueError, OSError, yaml.YAMLError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")


def load_catalog_or_abort(path, config):
    """Load every Parquet file under path, turning LoadError into a CLI error."""
    from audioviewer.dataset.catalog import load_catalog
    from audioviewer.exceptions import LoadError

    try:
        return load_catalog(path, columns=config.columns)
    except LoadError as e:
        raise click.ClickException(f"Failed to load dataset: {e}")


@cli.command()
def version():
    """Display version information."""
    click.echo(f"Parquet Audio Viewer v{__version__}")


def main():
    """Main entry point for the CLI."""
    # Import commands to register them
    from audioviewer.cli.commands import browse, inspect, serve

    cli()


if __name__ == '__main__':
    main()
