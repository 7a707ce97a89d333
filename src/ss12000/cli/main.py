"""CLI principal (`ss12000`).

Por qué una CLI:
- Permite explorar la API (listar, paginar a mano, consultar por id) sin
  escribir código.
- Reutiliza `dispatch`, así que cualquier familia de la tabla es accesible
  por nombre.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax

from ss12000.adapters.client import SS12000Client
from ss12000.adapters.json_exporter import export_payload_json
from ss12000.cli import doctor
from ss12000.cli.ui_components import build_error_panel, build_page_table, build_resources_table, print_banner
from ss12000.core.config import ClientSettings
from ss12000.core.domain.models import Page
from ss12000.core.domain.resources import RESOURCES, Operation, ResourceSpec, get_resource
from ss12000.core.errors import ConfigurationError, DecodeError, SS12000Error
from ss12000.core.query import QueryOptions

app = typer.Typer(no_args_is_help=True, help="Query the SS12000 school-administration API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def parse_filters(raw: list[str] | None) -> dict[str, Any]:
    """`key=value` -> dict; una clave repetida se convierte en lista (multi-valor)."""

    filters: dict[str, Any] = {}
    for item in raw or []:
        if "=" not in item:
            raise typer.BadParameter(f"Expected key=value, got '{item}'", param_hint="--filter")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Empty key in '{item}'", param_hint="--filter")
        if key in filters:
            existing = filters[key]
            filters[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            filters[key] = value
    return filters


def _resolve(name: str, operation: Operation) -> ResourceSpec:
    try:
        spec = get_resource(name)
    except KeyError:
        raise typer.BadParameter(f"Unknown resource '{name}'. See `ss12000 resources`.", param_hint="RESOURCE") from None
    if not spec.supports(operation):
        raise typer.BadParameter(f"Resource '{spec.name}' does not support '{operation.value}'.", param_hint="RESOURCE")
    return spec


def _fail(error: SS12000Error) -> typer.Exit:
    _console.print(build_error_panel(error))
    if isinstance(error, ConfigurationError):
        _console.print("[yellow]Hint:[/yellow] set SS12000_BASE_URL or run `ss12000 doctor setup`.")
    return typer.Exit(code=1)


def _run(fetch: Any) -> Any:
    try:
        settings = ClientSettings.load()
        configure_logging(settings.log_level)
        return asyncio.run(fetch(settings))
    except SS12000Error as exc:
        raise _fail(exc) from None


def _page(payload: Any) -> Page:
    try:
        return Page.from_payload(payload)
    except (ValidationError, TypeError) as exc:
        raise _fail(
            DecodeError(f"Unexpected listing payload: {exc}", context={"payload_type": type(payload).__name__})
        ) from None


@app.command("resources")
def list_resource_families() -> None:
    """Show every resource family and the operations it supports."""

    print_banner(_console)
    _console.print(build_resources_table(RESOURCES))


@app.command("list")
def list_command(
    resource: str = typer.Argument(..., help="Resource family, e.g. persons or calendarEvents."),
    filter_: Optional[List[str]] = typer.Option(None, "--filter", "-f", help="API filter as key=value (repeatable)."),
    expand: Optional[List[str]] = typer.Option(None, "--expand", "-e", help="Relation to expand (repeatable)."),
    expand_reference_names: bool = typer.Option(False, "--expand-reference-names", help="Include displayName for references."),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1),
    page_token: Optional[str] = typer.Option(None, "--page-token"),
    sort_key: Optional[str] = typer.Option(None, "--sort-key"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON payload to this file."),
) -> None:
    """List a collection (one page)."""

    spec = _resolve(resource, Operation.LIST)
    filters = parse_filters(filter_)
    if expand and not spec.expandable:
        raise typer.BadParameter(f"Resource '{spec.name}' has no expandable relations.", param_hint="--expand")
    options = QueryOptions(
        expand=tuple(expand or ()),
        expand_reference_names=expand_reference_names,
        limit=limit,
        page_token=page_token,
        sort_key=sort_key,
    )

    async def _fetch(settings: ClientSettings) -> Any:
        async with SS12000Client.from_settings(settings) as client:
            return await client.dispatch(spec, Operation.LIST, filters=filters, options=options)

    payload = _run(_fetch)
    if output is not None:
        path = export_payload_json(payload=payload, output_path=output)
        _console.print(f"[green]Saved:[/green] {path}")
        return
    _console.print(build_page_table(_page(payload), title=spec.name))


@app.command("get")
def get_command(
    resource: str = typer.Argument(..., help="Resource family, e.g. persons."),
    resource_id: str = typer.Argument(..., help="Identifier of the item."),
    expand: Optional[List[str]] = typer.Option(None, "--expand", "-e", help="Relation to expand (repeatable)."),
    expand_reference_names: bool = typer.Option(False, "--expand-reference-names"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON payload to this file."),
) -> None:
    """Fetch one item by id and print it as JSON."""

    spec = _resolve(resource, Operation.GET)
    if expand and not spec.expandable:
        raise typer.BadParameter(f"Resource '{spec.name}' has no expandable relations.", param_hint="--expand")
    options = QueryOptions(expand=tuple(expand or ()), expand_reference_names=expand_reference_names)

    async def _fetch(settings: ClientSettings) -> Any:
        async with SS12000Client.from_settings(settings) as client:
            return await client.dispatch(spec, Operation.GET, resource_id=resource_id, options=options)

    payload = _run(_fetch)
    if output is not None:
        path = export_payload_json(payload=payload, output_path=output)
        _console.print(f"[green]Saved:[/green] {path}")
        return
    _console.print(Syntax(json.dumps(payload, ensure_ascii=False, indent=2), "json"))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
