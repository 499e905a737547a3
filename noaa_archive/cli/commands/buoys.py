"""
Buoys Command - Retrieve NDBC buoy data.

Usage:
    noaa-archive buoys list cwind
    noaa-archive buoys get cwind 41001 --year 2008 --datatype c
"""

from pathlib import Path
from typing import Optional

import click

from noaa_archive.buoys import BuoyClient
from noaa_archive.data.selectors import BUOY_DATASETS
from noaa_archive.errors import NoaaArchiveError

DATASET = click.Choice(list(BUOY_DATASETS), case_sensitive=False)


@click.group("buoys")
def buoys():
    """NDBC buoy archives served over THREDDS."""


@buoys.command("list")
@click.argument("dataset", type=DATASET)
@click.pass_obj
def list_cmd(ctx, dataset: str):
    """List the buoys available in DATASET."""
    client = BuoyClient(ctx.config)
    try:
        table = client.list_buoys(dataset)
    except NoaaArchiveError as e:
        raise click.ClickException(str(e))

    if table.empty:
        click.echo(f"No buoys found in {dataset}")
        return
    click.echo(table.to_string(index=False))


@buoys.command("get")
@click.argument("dataset", type=DATASET)
@click.argument("buoy_id")
@click.option("--year", type=int, default=None, help="Year of data.")
@click.option(
    "--datatype", default=None, help="File type code, e.g. h (stdmet) or c (cwind)."
)
@click.option(
    "--overwrite/--no-overwrite",
    default=False,
    show_default=True,
    help="Refetch even when the file is cached.",
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
def get(
    ctx,
    dataset: str,
    buoy_id: str,
    year: Optional[int],
    datatype: Optional[str],
    overwrite: bool,
    output_path: Optional[Path],
    rows: int,
):
    """
    Get data for BUOY_ID from DATASET.

    Without --year and --datatype the first file in the buoy's catalog is
    used.
    """
    client = BuoyClient(ctx.config)
    try:
        table = client.get_buoy(
            dataset, buoy_id, year=year, datatype=datatype, overwrite=overwrite
        )
    except NoaaArchiveError as e:
        raise click.ClickException(str(e))

    click.echo(f"{len(table)} rows x {len(table.columns)} columns")
    if rows > 0:
        click.echo(table.head(rows).to_string())
    if output_path is not None:
        table.to_csv(output_path, index=False)
        click.echo(f"Saved to {output_path}")
