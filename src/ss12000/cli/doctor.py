"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from ss12000.adapters.client import SS12000Client
from ss12000.cli.ui_components import build_error_panel
from ss12000.core.config import ClientSettings, write_user_env_vars
from ss12000.core.errors import ConfigurationError, SS12000Error
from ss12000.core.query import QueryOptions

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: ClientSettings) -> tuple[bool, str]:
    """Fetch a single organisation to prove URL, token and network are usable."""

    try:
        async with SS12000Client.from_settings(settings) as client:
            await client.get_organisations(options=QueryOptions(limit=1))
        return True, "GET /organisations?limit=1 OK"
    except SS12000Error as exc:
        return False, f"{type(exc).__name__}: {exc.message}"


@app.command()
def run(
    offline: bool = typer.Option(False, "--offline", help="Skip the API connectivity check."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    try:
        settings = ClientSettings.load()
    except ConfigurationError as exc:
        _console.print(build_error_panel(exc))
        raise typer.Exit(code=1) from None

    table = Table(title="SS12000 Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if not settings.base_url:
        table.add_row("Base URL", "FAIL", "SS12000_BASE_URL is not set")
    elif not settings.base_url.lower().startswith("https://"):
        table.add_row("Base URL", "WARN", f"{settings.base_url} (not HTTPS)")
    else:
        table.add_row("Base URL", "OK", settings.base_url)

    if settings.auth_token:
        table.add_row("Auth token", "OK", "Bearer token configured")
    else:
        table.add_row("Auth token", "WARN", "No token set -> calls may be rejected")
    table.add_row("Timeout", "OK", f"{settings.timeout_seconds:g}s")

    # Connectivity
    if offline or not settings.base_url:
        table.add_row("API connectivity", "SKIPPED", "")
    else:
        ok_api, detail_api = asyncio.run(_check_api(settings))
        table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not settings.base_url:
        _console.print("\n[yellow]Note:[/yellow] run `ss12000 doctor setup` to store the base URL and token.")


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    base_url = typer.prompt("SS12000 base URL (e.g. https://some.server.se/v2.0)").strip()
    token = typer.prompt("Bearer token (JWT)", default="", show_default=False, hide_input=True).strip()

    if not base_url:
        raise typer.BadParameter("base URL is required")
    if not base_url.lower().startswith("https://"):
        _console.print("[yellow]Warning: base URL does not use HTTPS.[/yellow]")

    env_path = write_user_env_vars(
        {
            "SS12000_BASE_URL": base_url,
            "SS12000_AUTH_TOKEN": token or None,
        }
    )

    _console.print(f"[green]Saved SS12000 config to:[/green] {env_path}")
