"""Main CLI entry point for bedarrange."""

import sys

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from bedarrange import __version__
from bedarrange.config import get_settings
from bedarrange.utils import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="bedarrange")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """bedarrange - arrange parts across multiple print beds.

    Printable parts are packed first; unprintable parts go to beds of their
    own, numbered after the last printable bed.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        sys.exit(1)

    setup_logging("DEBUG" if verbose else settings.log_level.upper())


# Import and register commands
from bedarrange.cli.arrange_cmd import arrange

cli.add_command(arrange)


@cli.command()
def status() -> None:
    """Show the effective arrange configuration."""
    settings = get_settings()

    console.print("[bold]bedarrange Status[/bold]")
    console.print(f"Version: {__version__}")
    console.print()
    console.print("[bold]Bed:[/bold]")
    console.print(f"  Size: {settings.plate_width} x {settings.plate_depth} mm")
    console.print(f"  Edge Margin: {settings.edge_margin} mm")
    console.print()
    console.print("[bold]Packing:[/bold]")
    console.print(f"  Strategy: {settings.strategy}")
    console.print(f"  Part Spacing: {settings.part_spacing} mm")
    console.print(f"  Rotation: {'[green]Allowed[/green]' if settings.allow_rotation else '[yellow]Disabled[/yellow]'}")
    console.print(f"  Max Beds: {settings.max_beds or 'Unlimited'}")
    console.print(f"  Output Directory: {settings.output_dir}")


if __name__ == "__main__":
    cli()
