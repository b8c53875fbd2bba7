"""Command Line Interface for House Editor.

This module provides a small CLI to inspect edit journals: list walls,
report collisions and snap guides, check and draw new walls.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import DEFAULT_WALL_HEIGHT, DEFAULT_WALL_WIDTH
from .core.model import World
from .engine.api import draw_wall
from .engine.collision import colliding_pairs
from .engine.validators import validate_placement
from .errors import InvariantError
from .geom.primitives import Point
from .io.journal import load_world, save_journal

app = typer.Typer(
    name="house-editor",
    help="A CLI tool for inspecting and editing wall journals",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _parse_point(text: str, y: float = 0.0) -> Point:
    """Parse "X,Z" into a point on the floor at height ``y``."""
    try:
        x, z = (float(part) for part in text.split(","))
    except ValueError:
        raise typer.BadParameter(f"expected X,Z but got {text!r}")
    return Point(x, y, z)


def _fmt(point: Point) -> str:
    return f"({point.x:g}, {point.z:g})"


def _load(journal: Path) -> World:
    world = load_world(journal)
    console.print(f"[green]✓[/green] Replayed {journal}")
    return world


@app.command()
def show(
    journal: Path = typer.Option(..., "--journal", "-j", help="Path to journal JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Replay a journal and list its walls."""
    _setup_logging(verbose)
    try:
        world = _load(journal)
        table = Table(title="Walls")
        table.add_column("ID", style="cyan")
        table.add_column("Start")
        table.add_column("End")
        table.add_column("Angle", justify="right")
        table.add_column("Width", justify="right")
        table.add_column("Area", justify="right")
        for wall in sorted(world.walls(), key=lambda w: w.id):
            table.add_row(
                wall.id,
                _fmt(wall.start),
                _fmt(wall.end),
                str(wall.angle),
                f"{wall.width:g}",
                f"{wall.footprint.area:.3f}",
            )
        console.print(table)
    except (FileNotFoundError, json.JSONDecodeError, InvariantError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def collisions(
    journal: Path = typer.Option(..., "--journal", "-j", help="Path to journal JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Report overlapping walls; exits with 1 if there are any."""
    _setup_logging(verbose)
    try:
        world = _load(journal)
        pairs = []
        for level in world.levels.values():
            pairs.extend(colliding_pairs(level))
    except (FileNotFoundError, json.JSONDecodeError, InvariantError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not pairs:
        console.print("[green]No collisions[/green]")
        return
    for wall_a, wall_b in pairs:
        console.print(f"[red]✗[/red] {wall_a} overlaps {wall_b}")
    raise typer.Exit(1)


@app.command()
def snaps(
    journal: Path = typer.Option(..., "--journal", "-j", help="Path to journal JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Show the snap angles and alignment points of the active level."""
    _setup_logging(verbose)
    try:
        world = _load(journal)
        guides = world.active_level.guides
        console.print(f"[bold]Snap angles:[/bold] {', '.join(str(a) for a in guides.angles)}")
        table = Table(title="Alignment intersections")
        table.add_column("Point")
        table.add_column("Wall A", style="cyan")
        table.add_column("Wall B", style="cyan")
        table.add_column("Distance", justify="right")
        for key in sorted(guides.alignments):
            alignment = guides.alignments[key]
            table.add_row(
                _fmt(alignment.point),
                f"{alignment.wall_a} ({alignment.end_a})",
                f"{alignment.wall_b} ({alignment.end_b})",
                f"{alignment.distance:.3f}",
            )
        console.print(table)
    except (FileNotFoundError, json.JSONDecodeError, InvariantError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def check(
    journal: Path = typer.Option(..., "--journal", "-j", help="Path to journal JSON file"),
    start: str = typer.Option(..., "--start", help="Start point as X,Z"),
    end: str = typer.Option(..., "--end", help="End point as X,Z"),
    width: float = typer.Option(DEFAULT_WALL_WIDTH, "--width", "-w", help="Wall width"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Check whether a new wall could be placed."""
    _setup_logging(verbose)
    try:
        world = _load(journal)
        level = world.active_level
        result = validate_placement(level, _parse_point(start, level.y), _parse_point(end, level.y), width)
    except (FileNotFoundError, json.JSONDecodeError, InvariantError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if result:
        console.print("[green]✓ Placement is valid[/green]")
        return
    detail = f" with {', '.join(result.collisions)}" if result.collisions else ""
    console.print(f"[red]✗ Placement rejected: {result.reason}{detail}[/red]")
    raise typer.Exit(1)


@app.command()
def draw(
    journal: Path = typer.Option(..., "--journal", "-j", help="Path to journal JSON file"),
    start: str = typer.Option(..., "--start", help="Start point as X,Z"),
    end: str = typer.Option(..., "--end", help="End point as X,Z"),
    width: float = typer.Option(DEFAULT_WALL_WIDTH, "--width", "-w", help="Wall width"),
    height: float = typer.Option(DEFAULT_WALL_HEIGHT, "--height", help="Wall height"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Output journal (default: overwrite)"),
    new: bool = typer.Option(False, "--new", help="Start from an empty world instead of reading the journal"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Add a wall to a journal if the placement is valid."""
    _setup_logging(verbose)
    try:
        world = World() if new else _load(journal)
        level = world.active_level
        result = draw_wall(
            world, _parse_point(start, level.y), _parse_point(end, level.y), width, height
        )
        if result:
            save_journal(world, output or journal)
    except (FileNotFoundError, json.JSONDecodeError, InvariantError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not result:
        console.print(f"[red]✗ Placement rejected: {result.reason}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Saved {output or journal}")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
