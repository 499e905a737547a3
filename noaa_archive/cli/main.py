"""
noaa-archive CLI - Main Entry Point

Command-line interface for the NOAA buoy and storm-track archive client.
Built with Click for argument parsing and help generation.
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from noaa_archive.config import ArchiveConfig, load_config

# Configure logging for CLI
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("noaa_archive")


class ArchiveContext:
    """Context object for passing global options to subcommands."""

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        config_path: Optional[Path] = None,
        cache_dir: Optional[Path] = None,
    ):
        self.verbose = verbose
        self.quiet = quiet
        self.config_path = config_path
        self.cache_dir = cache_dir
        self._config = None

        # Configure logging based on verbosity
        if quiet:
            logger.setLevel(logging.WARNING)
        elif verbose:
            logger.setLevel(logging.DEBUG)
        else:
            logger.setLevel(logging.INFO)

    @property
    def config(self) -> ArchiveConfig:
        """Lazy load configuration from file."""
        if self._config is None:
            config = load_config(self.config_path)
            if self.cache_dir is not None:
                config = replace(config, cache_root=self.cache_dir)
            config.show_progress = not self.quiet
            self._config = config
        return self._config


class ArchiveGroup(click.Group):
    """Click group with an examples section in its help."""

    def format_help(self, ctx, formatter):
        """Format help with banner and examples."""
        formatter.write_paragraph()
        formatter.write_text("noaa-archive - NOAA buoy and IBTrACS storm archive client")
        formatter.write_paragraph()

        super().format_help(ctx, formatter)

        formatter.write_paragraph()
        formatter.write_text("Examples:")
        formatter.indent()

        examples = [
            "# Storm tracks for the western Pacific basin",
            "noaa-archive storms data --basin WP",
            "",
            "# One storm, saved as CSV",
            "noaa-archive storms data --storm 1970143N19091 --output storm.csv",
            "",
            "# Track lines shapefile for 1940",
            "noaa-archive storms shp --year 1940 --type lines",
            "",
            "# Buoys in the cwind dataset",
            "noaa-archive buoys list cwind",
            "",
            "# Continuous winds from buoy 41001 for 2008",
            "noaa-archive buoys get cwind 41001 --year 2008 --datatype c",
        ]

        for line in examples:
            formatter.write_text(line)

        formatter.dedent()


pass_context = click.make_pass_decorator(ArchiveContext, ensure=True)


@click.group(cls=ArchiveGroup)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Enable verbose output (debug logging).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Quiet mode (only warnings and errors).",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file.",
)
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Override the cache directory.",
)
@click.version_option(
    version="0.1.0",
    prog_name="noaa-archive",
    message="%(prog)s version %(version)s",
)
@click.pass_context
def app(ctx, verbose: bool, quiet: bool, config_path: Optional[Path], cache_dir: Optional[Path]):
    """
    noaa-archive - NOAA archive retrieval

    Fetches NDBC buoy observations and IBTrACS storm tracks, caching
    every download on local disk.
    """
    if verbose and quiet:
        raise click.UsageError("Cannot use both --verbose and --quiet")

    ctx.obj = ArchiveContext(
        verbose=verbose,
        quiet=quiet,
        config_path=config_path,
        cache_dir=cache_dir,
    )


def register_commands():
    """Register all subcommands."""
    from noaa_archive.cli.commands import buoys, storms

    app.add_command(storms.storms)
    app.add_command(buoys.buoys)


@app.command("info")
@pass_context
def info(ctx):
    """Display configuration and cache information."""
    import importlib.metadata
    import platform

    click.echo("\n=== noaa-archive Info ===\n")
    click.echo(f"Python: {platform.python_version()}")
    click.echo(f"Platform: {platform.system()} {platform.release()}")

    click.echo("\n--- Package Versions ---")
    for pkg in ["pandas", "xarray", "geopandas", "requests", "click"]:
        try:
            version = importlib.metadata.version(pkg)
            click.echo(f"  {pkg}: {version}")
        except importlib.metadata.PackageNotFoundError:
            click.echo(f"  {pkg}: not installed")

    click.echo("\n--- Configuration ---")
    for key, value in ctx.config.to_dict().items():
        click.echo(f"  {key}: {value}")
    click.echo()


register_commands()


def main():
    """Main entry point for the CLI."""
    try:
        app()
    except Exception as e:
        logger.error(f"Error: {e}")
        if "--verbose" in sys.argv or "-v" in sys.argv:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
