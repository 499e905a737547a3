"""
Storms Command - Retrieve IBTrACS storm-track data.

Usage:
    noaa-archive storms data --basin WP
    noaa-archive storms data --storm 1970143N19091 --output storm.csv
    noaa-archive storms shp --year 1940 --type lines
"""

from pathlib import Path
from typing import Optional

import click

from noaa_archive.errors import NoaaArchiveError
from noaa_archive.storms import StormClient


def selector_options(func):
    """Attach the mutually exclusive storm selector options."""
    func = click.option(
        "--year", type=int, default=None, help="Season year, e.g. 1940."
    )(func)
    func = click.option(
        "--storm", default=None, help="Storm serial number, e.g. 1970143N19091."
    )(func)
    func = click.option(
        "--basin", default=None, help="Basin code: EP, NA, NI, SA, SI, SP or WP."
    )(func)
    return func


@click.group("storms")
def storms():
    """IBTrACS storm-track archive (v03r10)."""


@storms.command("data")
@selector_options
@click.option(
    "--overwrite/--no-overwrite",
    default=True,
    show_default=True,
    help="Refetch even when the slice is cached.",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the table to this CSV file.",
)
@click.option(
    "--rows",
    type=int,
    default=10,
    show_default=True,
    help="Number of rows to preview.",
)
@click.pass_obj
def data(
    ctx,
    basin: Optional[str],
    storm: Optional[str],
    year: Optional[int],
    overwrite: bool,
    output_path: Optional[Path],
    rows: int,
):
    """
    Get tabular storm data for all storms, a basin, a storm or a year.

    With no selector the full (gzipped) archive is retrieved.
    """
    client = StormClient(ctx.config)
    try:
        table = client.get_storm_data(
            basin=basin, storm=storm, year=year, overwrite=overwrite
        )
    except NoaaArchiveError as e:
        raise click.ClickException(str(e))

    click.echo(f"{len(table)} rows x {len(table.columns)} columns")
    if rows > 0:
        click.echo(table.head(rows).to_string())
    if output_path is not None:
        table.to_csv(output_path, index=False)
        click.echo(f"Saved to {output_path}")


@storms.command("shp")
@selector_options
@click.option(
    "--type",
    "shp_type",
    type=click.Choice(["points", "lines"]),
    default="points",
    show_default=True,
    help="Track points or track lines.",
)
@click.option(
    "--overwrite/--no-overwrite",
    default=True,
    show_default=True,
    help="Refetch even when the shapefile is cached.",
)
@click.pass_obj
def shp(
    ctx,
    basin: Optional[str],
    storm: Optional[str],
    year: Optional[int],
    shp_type: str,
    overwrite: bool,
):
    """Download a storm shapefile and print its path."""
    client = StormClient(ctx.config)
    try:
        handle = client.get_storm_shapefile(
            basin=basin, storm=storm, year=year, type=shp_type, overwrite=overwrite
        )
    except NoaaArchiveError as e:
        raise click.ClickException(str(e))

    click.echo(str(handle.path))
