"""moduledev command line interface."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Coroutine
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import NoReturn
from typing import TypeVar

import click
from rich.table import Table

from .commands.config import config_group
from .commands.temp import temp_group
from .console import console
from .console import err_console
from .errors import ModuleDevError
from .logging_setup import init_json_logging
from .paths import get_default_file_path
from .registry import from_file
from .resolver import Resolver
from .settings import ModuleDevSettings
from .utils.error_format import escape_markup
from .utils.error_format import format_error_details

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CliState:
    """Options shared by all subcommands."""

    settings: ModuleDevSettings
    properties_file: str | None = None
    niagara_home: str | None = None

    def create_resolver(self) -> Resolver:
        """Build a resolver from CLI options and settings.

        Extracted files are retained so printed paths stay valid after the
        command exits; ``moduledev temp clean`` removes them.
        """
        config = self.settings.resolver_config(niagara_home=self.niagara_home, retain_temp=True)
        file_name = self.properties_file or self.settings.get("moduledev_file")
        logger.debug(f"Creating resolver (moduledev file: {file_name or 'default'}, niagara_home: {config.niagara_home})")
        return from_file(file_name, config)


def _fail(error: Exception) -> NoReturn:
    """Print an error (with any per-candidate details) and exit."""
    lines = format_error_details(error)
    err_console.print(f"[red]Error:[/red] {escape_markup(lines[0])}")
    for line in lines[1:]:
        err_console.print(f"[dim]{escape_markup(line)}[/dim]")
    sys.exit(1)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


@click.group()
@click.version_option(package_name="niagara-moduledev")
@click.option(
    "--properties",
    "-p",
    "properties_file",
    type=click.Path(dir_okay=False),
    help="Path to moduledev.properties (default: $niagara_home/etc/moduledev.properties)",
)
@click.option("--niagara-home", type=click.Path(file_okay=False), help="Niagara installation directory")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write JSONL logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for --log-file",
)
@click.pass_context
def cli(ctx: click.Context, properties_file, niagara_home, log_file, log_level):
    """moduledev - resolve Niagara module ORDs to files on disk."""
    settings = ModuleDevSettings()
    init_json_logging(log_file or settings.get("log_path"), log_level or settings.get("log_level"))
    ctx.obj = CliState(settings=settings, properties_file=properties_file, niagara_home=niagara_home)


@cli.command()
@click.argument("identifiers", nargs=-1, required=True)
@click.pass_obj
def resolve(state: CliState, identifiers: tuple[str, ...]):
    """Resolve a module:// ORD, /module/ URL or nmodule/ ID to a path.

    Several IDENTIFIERS are tried in order; the first one found wins.
    """
    target: str | list[str] = identifiers[0] if len(identifiers) == 1 else list(identifiers)
    try:
        with state.create_resolver() as resolver:
            path = _run(resolver.resolve_path(target))
    except ModuleDevError as e:
        _fail(e)
    click.echo(path)


@cli.command("require-paths")
@click.argument("mappings", nargs=-1, required=True)
@click.pass_obj
def require_paths(state: CliState, mappings: tuple[str, ...]):
    """Map RequireJS aliases to extension-less file paths.

    Each MAPPING is ALIAS=ID. Repeat an alias to give fallback IDs:

        moduledev require-paths hbs=nmodule/js/rc/require-handlebars-plugin/hbs
    """
    paths: dict[str, list[str]] = {}
    for mapping in mappings:
        alias, sep, identifier = mapping.partition("=")
        if not sep or not alias or not identifier:
            raise click.BadParameter(f"expected ALIAS=ID, got '{mapping}'", param_hint="MAPPINGS")
        paths.setdefault(alias, []).append(identifier)

    request = {alias: ids[0] if len(ids) == 1 else ids for alias, ids in paths.items()}
    try:
        with state.create_resolver() as resolver:
            result = _run(resolver.resolve_require_ids(request))
    except ModuleDevError as e:
        _fail(e)
    click.echo(json.dumps(result, indent=2))


@cli.command()
@click.pass_obj
def modules(state: CliState):
    """List modules registered in moduledev.properties."""
    try:
        resolver = state.create_resolver()
    except ModuleDevError as e:
        _fail(e)

    with resolver:
        if not resolver.registry:
            console.print("[dim]No modules registered in moduledev.properties.[/dim]")
            return

        table = Table(title="moduledev modules")
        table.add_column("Module", style="cyan")
        table.add_column("Directory")
        table.add_column("Exists", style="dim")

        for name in sorted(resolver.registry):
            directory = resolver.registry[name]
            table.add_row(name, escape_markup(directory), "yes" if Path(directory).is_dir() else "no")

        console.print(table)


@cli.command("default-path")
@click.pass_obj
def default_path(state: CliState):
    """Show the default moduledev.properties location."""
    config = state.settings.resolver_config(niagara_home=state.niagara_home)
    path = get_default_file_path(config)
    if path is None:
        err_console.print("[red]Error:[/red] niagara_home could not be determined")
        err_console.print("[dim]Set $niagara_home, pass --niagara-home or run: moduledev config set niagara_home <dir>[/dim]")
        sys.exit(1)
    click.echo(str(path))


cli.add_command(config_group)
cli.add_command(temp_group)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
