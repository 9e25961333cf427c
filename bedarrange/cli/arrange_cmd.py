"""Arrange CLI command for bedarrange."""

import json
import signal
import sys
import threading
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from bedarrange.utils import format_duration

console = Console()


@click.command()
@click.argument("scene_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False),
              help="Write the arranged scene to this JSON file")
@click.option("--apply/--no-apply", default=True,
              help="Apply placements to the scene before writing it")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def arrange(scene_path: str, output: Optional[str], apply: bool, as_json: bool) -> None:
    """Arrange the objects of a JSON scene across print beds.

    Example: bedarrange arrange plate.json --output arranged.json
    """
    from bedarrange.arrange import ArrangeTask, EventCtl, SceneError, load_scene, save_scene
    from bedarrange.nesting import ArrangeError

    try:
        scene = load_scene(scene_path)
        task = ArrangeTask.create(scene)
    except (SceneError, OSError) as e:
        console.print(f"[red]Invalid scene: {escape(str(e))}[/red]")
        sys.exit(1)

    total = task.selected_count
    cancel = threading.Event()

    # Ctrl-C stops the engine after the current placement
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            console=console,
            transient=True,
            disable=as_json,
        ) as progress:
            bar = progress.add_task("Arranging", total=total)
            ctl = EventCtl(
                on_status=lambda remaining: progress.update(bar, completed=total - remaining),
                cancel_event=cancel,
            )
            result = task.process(ctl)
    except ArrangeError as e:
        console.print(f"[red]Arrange failed: {escape(str(e))}[/red]")
        sys.exit(1)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result)

    if output:
        if apply:
            result.apply_on(scene)
        try:
            path = save_scene(scene, output)
        except OSError as e:
            console.print(f"[red]Could not write {output}: {escape(str(e))}[/red]")
            sys.exit(1)
        if not as_json:
            console.print(f"[green]Scene written to {path}[/green]")


def _print_result(result) -> None:
    """Print placements as a table."""
    if not result.items:
        console.print("[yellow]Scene has no objects to arrange[/yellow]")
        return

    table = Table(title="Arrangement")
    table.add_column("ID", style="cyan")
    table.add_column("Bed", justify="right")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Rotation", justify="right")

    for item in result.items:
        if item.is_arranged:
            table.add_row(
                item.item_id,
                str(item.bed_idx),
                f"{item.x:.1f}",
                f"{item.y:.1f}",
                f"{item.rotation:.0f}°",
            )
        else:
            table.add_row(item.item_id, "[red]unplaced[/red]", "-", "-", "-")

    console.print(table)

    summary = (
        f"{len(result.arranged)}/{len(result)} placed on {result.bed_count} beds "
        f"in {format_duration(result.processing_time)}"
    )
    if result.cancelled:
        console.print(f"[yellow]Cancelled: {summary}[/yellow]")
    elif result.unarranged:
        console.print(f"[yellow]{summary}[/yellow]")
    else:
        console.print(f"[green]{summary}[/green]")
