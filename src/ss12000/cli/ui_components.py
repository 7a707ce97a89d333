"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `list`, `get` y `doctor`.
"""

from __future__ import annotations

from typing import Any, Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ss12000.core.domain.models import Page
from ss12000.core.domain.resources import Operation, ResourceSpec
from ss12000.core.errors import ApiError, SS12000Error


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("SS12000", style="bold cyan")
    subtitle = Text("School administration data exchange client", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_resources_table(specs: Iterable[ResourceSpec]) -> Table:
    """Tabla de familias y operaciones soportadas."""

    table = Table(title="SS12000 resources")
    table.add_column("Resource", style="cyan", no_wrap=True)
    table.add_column("Path", style="white")
    table.add_column("Operations", style="green")
    table.add_column("Expand", style="magenta")
    for spec in specs:
        ops = ", ".join(op.value for op in Operation if spec.supports(op))
        table.add_row(spec.name, spec.path, ops, "yes" if spec.expandable else "no")
    return table


def _label(item: dict[str, Any]) -> str:
    for key in ("displayName", "name", "title"):
        value = item.get(key)
        if isinstance(value, str) and value:
            return value
    given = item.get("givenName")
    family = item.get("familyName")
    if isinstance(given, str) or isinstance(family, str):
        return " ".join(part for part in (given, family) if isinstance(part, str))
    return ""


def build_page_table(page: Page, *, title: str) -> Table:
    """Tabla id + nombre legible de una página."""

    table = Table(title=title)
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    for index, item in enumerate(page.data, start=1):
        table.add_row(str(index), str(item.get("id", "")), _label(item))
    if page.page_token:
        table.caption = f"pageToken: {page.page_token}"
    return table


def build_error_panel(error: SS12000Error) -> Panel:
    body = Text(error.message + "\n")
    if isinstance(error, ApiError) and error.body:
        body.append("\nResponse body:\n", style="bold")
        body.append(error.body)
    return Panel(body, title=Text(type(error).__name__, style="bold red"), border_style="red")
