"""Commands for extraction workspaces left behind by the CLI.

Files extracted from module jars are kept after each command so the printed
paths stay usable. These commands show and remove them.
"""

from __future__ import annotations

import contextlib
import shutil
from pathlib import Path

import click
from rich.table import Table

from ..archive import list_workspaces
from ..console import console
from ..settings import ModuleDevSettings
from ..utils.error_format import escape_markup


def _extracted_bytes(workspace: Path) -> int:
    """Bytes extracted into a workspace; files that vanish mid-scan are skipped."""
    total = 0
    for entry in workspace.rglob("*"):
        with contextlib.suppress(OSError):
            if entry.is_file():
                total += entry.stat().st_size
    return total


_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def _human_size(num_bytes: int) -> str:
    size = float(num_bytes)
    for unit in _SIZE_UNITS:
        if size < 1024 or unit == _SIZE_UNITS[-1]:
            break
        size /= 1024
    return f"{size:.1f} {unit}"


def _workspaces() -> list[Path]:
    return list_workspaces(ModuleDevSettings().get("temp_parent"))


@click.group(name="temp", invoke_without_command=True)
@click.pass_context
def temp_group(ctx: click.Context):
    """Manage files extracted from module jars."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@temp_group.command(name="list")
def temp_list():
    """List extraction workspaces with sizes."""
    workspaces = _workspaces()
    if not workspaces:
        console.print("[dim]No extraction workspaces found.[/dim]")
        return

    table = Table(title="Extraction Workspaces")
    table.add_column("Path", style="cyan")
    table.add_column("Modules", style="dim")
    table.add_column("Size", justify="right")

    total_size = 0
    for workspace in workspaces:
        size = _extracted_bytes(workspace)
        total_size += size
        modules = sorted(p.name for p in workspace.iterdir() if p.is_dir())
        table.add_row(escape_markup(workspace), ", ".join(modules), _human_size(size))

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {len(workspaces)} workspaces, {_human_size(total_size)}")


@temp_group.command(name="clean")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
def temp_clean(force: bool):
    """Delete all extraction workspaces."""
    workspaces = _workspaces()
    if not workspaces:
        console.print("[dim]No extraction workspaces found - nothing to clean.[/dim]")
        return

    total_size = sum(_extracted_bytes(w) for w in workspaces)
    console.print(f"\n[bold]Will remove {len(workspaces)} workspaces ({_human_size(total_size)})[/bold]")

    if not force and not click.confirm("\nProceed?"):
        console.print("[yellow]Aborted.[/yellow]")
        return

    cleaned = 0
    errors = 0
    for workspace in workspaces:
        try:
            shutil.rmtree(workspace)
            cleaned += 1
        except OSError as e:
            console.print(f"[red]Error removing {escape_markup(workspace)}:[/red] {escape_markup(e)}")
            errors += 1

    if errors == 0:
        console.print(f"\n[green]Cleaned {cleaned} workspaces ({_human_size(total_size)})[/green]")
    else:
        console.print(f"\n[yellow]Cleaned {cleaned} workspaces, {errors} errors[/yellow]")
