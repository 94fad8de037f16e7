"""CLI entry point for permissioned-store.

Invoked as::

    permstore [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m permissioned_store.cli.main

Commands
--------
- entries   Show the readable top-level fields of a store
- read      Read a value by colon-delimited path
- write     Write a value into the in-memory store and show the result
- check     Show the effective permission of a field
- version   Show version information

The store is loaded from a YAML document (see
:mod:`permissioned_store.config.loader`). Writes are never saved back.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from permissioned_store.config.loader import StoreConfigError, StoreLoader
from permissioned_store.permissions.policy import AccessDenied
from permissioned_store.store.store import PermissionedStore
from permissioned_store.store.values import FieldKind, classify

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CONFIG = Path("store.yaml")

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    show_default=True,
    type=click.Path(exists=True),
    help="Path to the store YAML document.",
)


def _load_store(config_path: str) -> PermissionedStore:
    try:
        return StoreLoader().load(config_path)
    except StoreConfigError as exc:
        err_console.print(f"[red]Invalid store config:[/red] {exc}")
        sys.exit(1)


def _render(value: object) -> str:
    kind = classify(value)
    if kind is FieldKind.STORE:
        return f"<store: {len(value.entries())} readable fields>"
    if kind is FieldKind.LAZY:
        return "<lazy>"
    if kind is FieldKind.STRING:
        return str(value)
    try:
        return json.dumps(value)
    except TypeError:
        return repr(value)


def _entries_table(store: PermissionedStore, title: str) -> Table:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Field", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Permission")
    table.add_column("Value")
    for key, value in store.entries().items():
        table.add_row(
            key,
            classify(value).value,
            ",".join(store.effective_permission(key)) or "-",
            _render(value),
        )
    return table


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="permissioned-store")
def cli() -> None:
    """Permissioned store CLI — inspect and exercise permission-gated stores."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from permissioned_store import __version__

    console.print(
        Panel(
            f"[bold]permissioned-store[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Hierarchical, permission-gated key-value store.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# entries
# ---------------------------------------------------------------------------


@cli.command(name="entries")
@_config_option
def entries_command(config_path: str) -> None:
    """Show the readable top-level fields of a store."""
    store = _load_store(config_path)
    console.print(_entries_table(store, f"Entries of {config_path}"))


# ---------------------------------------------------------------------------
# read
# ---------------------------------------------------------------------------


@cli.command(name="read")
@click.argument("path")
@_config_option
def read_command(path: str, config_path: str) -> None:
    """Read the value at a colon-delimited PATH."""
    store = _load_store(config_path)
    try:
        value = store.read(path)
    except AccessDenied as exc:
        err_console.print(f"[red]ACCESS DENIED:[/red] {exc.message}")
        sys.exit(1)

    if classify(value) is FieldKind.STORE:
        console.print(_entries_table(value, f"Store at {path}"))
    else:
        console.print(_render(value))


# ---------------------------------------------------------------------------
# write
# ---------------------------------------------------------------------------


@cli.command(name="write")
@click.argument("path")
@click.argument("value")
@_config_option
def write_command(path: str, value: str, config_path: str) -> None:
    """Write VALUE at PATH and show the resulting entries.

    VALUE is parsed as JSON; anything that is not valid JSON is written as
    a plain string. The config file is not modified.
    """
    try:
        parsed: object = json.loads(value)
    except json.JSONDecodeError:
        parsed = value

    store = _load_store(config_path)
    try:
        store.write(path, parsed)
    except AccessDenied as exc:
        err_console.print(f"[red]ACCESS DENIED:[/red] {exc.message}")
        sys.exit(1)

    console.print(_entries_table(store, f"Entries after writing {path}"))


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("field")
@_config_option
def check_command(field: str, config_path: str) -> None:
    """Show the effective permission of a top-level FIELD."""
    store = _load_store(config_path)
    tokens = store.effective_permission(field)
    source = "restriction" if field in store.restrictions else "default policy"

    def verdict(allowed: bool) -> str:
        return "[green]ALLOWED[/green]" if allowed else "[red]DENIED[/red]"

    console.print(
        Panel(
            f"Permission: [bold]{','.join(tokens) or '-'}[/bold] ({source})\n"
            f"Read:  {verdict(store.allowed_to_read(field))}\n"
            f"Write: {verdict(store.allowed_to_write(field))}",
            title=f"Field '{field}'",
            border_style="blue",
        )
    )


if __name__ == "__main__":
    cli()
