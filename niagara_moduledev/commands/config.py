"""Settings commands for the moduledev CLI."""

from __future__ import annotations

import click
import yaml
from rich.table import Table

from ..console import console
from ..settings import SETTINGS_KEYS
from ..settings import ModuleDevSettings
from ..utils.error_format import escape_markup


@click.group(name="config", invoke_without_command=True)
@click.pass_context
def config_group(ctx: click.Context):
    """Show or change moduledev settings."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@config_group.command(name="show")
def config_show():
    """Show merged settings from all scopes."""
    settings = ModuleDevSettings()
    merged = settings.get_merged_settings()

    table = Table(title="moduledev settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key in SETTINGS_KEYS:
        value = merged.get(key)
        table.add_row(key, "[dim]unset[/dim]" if value is None else escape_markup(value))

    console.print(table)


@config_group.command(name="set")
@click.argument("key", type=click.Choice(list(SETTINGS_KEYS)))
@click.argument("value")
@click.option(
    "--scope",
    type=click.Choice(["global", "project", "local"]),
    default="global",
    help="Settings file to write",
)
def config_set(key: str, value: str, scope: str):
    """Set KEY to VALUE (parsed as YAML, so 'true' becomes a boolean)."""
    settings = ModuleDevSettings()
    try:
        settings.set_value(key, yaml.safe_load(value), scope=scope)  # type: ignore[arg-type]
    except ValueError as e:
        raise click.ClickException(str(e))
    console.print(f"[green]✓ Set {key} ({scope})[/green]")
