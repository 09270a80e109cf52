"""
Command line interface for RNDF files.

Commands to summarize, query and re-emit a road network description.
"""

import logging
import sys
from pathlib import Path

import typer

from rndfio.ingestor.reader import ReaderOptions
from rndfio.models.network import RoadNetwork

app = typer.Typer(help="Inspect RNDF road network files", no_args_is_help=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(path: Path, strict_exits: bool = False) -> RoadNetwork:
    network = RoadNetwork()
    if not network.load(path, ReaderOptions(strict_exits=strict_exits)):
        typer.echo(f"File [{path}] is invalid", err=True)
        raise typer.Exit(code=1)
    return network


@app.command("info")
def info(
    path: Path = typer.Argument(..., help="RNDF file to load"),
    strict_exits: bool = typer.Option(False, "--strict-exits", help="Reject exits leading to unknown waypoints"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Print the name, metadata and block counts of a file."""
    _configure_logging(verbose)
    network = _load(path, strict_exits)

    typer.echo(f"Name:               [{network.name}]")
    if network.version:
        typer.echo(f"Version:            [{network.version}]")
    if network.creation_date:
        typer.echo(f"Creation date:      [{network.creation_date}]")
    typer.echo(f"Number of segments: {len(network.segments)}")
    typer.echo(f"Number of zones:    {len(network.zones)}")


@app.command("lookup")
def lookup(
    path: Path = typer.Argument(..., help="RNDF file to load"),
    unique_id: str = typer.Argument(..., help="Waypoint id, as x.y.z"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Print which segment/lane or zone/spot owns a waypoint."""
    _configure_logging(verbose)
    network = _load(path)

    entry = network.info(unique_id)
    if entry is None:
        typer.echo(f"Unknown waypoint [{unique_id}]", err=True)
        raise typer.Exit(code=1)

    if entry.lane is not None:
        typer.echo(f"segment {entry.segment.id} lane {entry.lane.id}")
    elif entry.spot is not None:
        typer.echo(f"zone {entry.zone.id} spot {entry.spot.id}")
    else:
        typer.echo(f"zone {entry.zone.id} perimeter")


@app.command("dump")
def dump(
    path: Path = typer.Argument(..., help="RNDF file to load"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Re-emit a parsed file in normalized RNDF syntax."""
    _configure_logging(verbose)
    network = _load(path)
    network.write(sys.stdout)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
