"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.services.registry import build_default_registry

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

# Variables each registrar needs, in the names the registrars document.
REGISTRAR_ENV_VARS: dict[str, tuple[str, ...]] = {
    "namecheap": ("NAMECHEAP_API_KEY", "NAMECHEAP_API_USER"),
    "godaddy": ("GODADDY_API_KEY", "GODADDY_API_SECRET"),
    "porkbun": ("PORKBUN_API_KEY", "PORKBUN_SECRET_KEY"),
    "cloudflare": ("CLOUDFLARE_API_TOKEN",),
    "upflare": ("UPFLARE_API_KEY",),
}


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:  # noqa: BLE001 - reported in the table
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="domain-scout doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    registry = build_default_registry(settings)
    for adapter in registry:
        if adapter.enabled():
            table.add_row(f"Registrar {adapter.name}", "OK", "credentials present")
        else:
            needed = ", ".join(REGISTRAR_ENV_VARS.get(adapter.name.lower(), ()))
            table.add_row(f"Registrar {adapter.name}", "MISSING", f"set {needed}")

    if settings.ai_api_key:
        table.add_row("AI key", "OK", "Remote suggestions enabled")
    else:
        table.add_row("AI key", "OPTIONAL", "No key set -> heuristic suggestions")
    table.add_row("AI base_url", "OK", settings.ai_base_url)
    table.add_row("AI model", "OK", settings.ai_model)

    ok_http, detail_http = asyncio.run(
        _check_http(f"{settings.rdap_base_url.rstrip('/')}/domain/example.com", settings)
    )
    table.add_row("RDAP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not registry.enabled():
        _console.print(
            "\n[yellow]Note:[/yellow] no registrar is configured; every quote will report "
            "`not_configured`. Use `doctor setup-registrar`."
        )


@app.command(name="setup-ai")
def setup_ai() -> None:
    """Interactive AI setup (stores config in the user config .env)."""

    provider = typer.prompt("AI provider", default="openai", show_default=True).strip().lower()

    presets: dict[str, dict[str, str]] = {
        "openai": {"DOMAIN_SCOUT_AI_BASE_URL": "https://api.openai.com/v1", "DOMAIN_SCOUT_AI_MODEL": "gpt-4o-mini"},
        "groq": {"DOMAIN_SCOUT_AI_BASE_URL": "https://api.groq.com/openai/v1", "DOMAIN_SCOUT_AI_MODEL": "llama-3.1-8b-instant"},
        "openrouter": {"DOMAIN_SCOUT_AI_BASE_URL": "https://openrouter.ai/api/v1", "DOMAIN_SCOUT_AI_MODEL": "openai/gpt-4o-mini"},
        "ollama": {"DOMAIN_SCOUT_AI_BASE_URL": "http://localhost:11434/v1", "DOMAIN_SCOUT_AI_MODEL": "llama3"},
    }

    values = presets.get(provider, {}).copy()
    if not values:
        _console.print("[yellow]Unknown provider preset. You can still enter custom values.[/yellow]")

    base_url = typer.prompt("AI base URL", default=values.get("DOMAIN_SCOUT_AI_BASE_URL", ""), show_default=True).strip()
    model = typer.prompt("AI model", default=values.get("DOMAIN_SCOUT_AI_MODEL", ""), show_default=True).strip()
    api_key = typer.prompt("AI API key", hide_input=True, confirmation_prompt=False).strip()

    if not base_url or not model:
        raise typer.BadParameter("base_url and model are required")

    env_path = write_user_env_vars(
        {
            "DOMAIN_SCOUT_AI_BASE_URL": base_url,
            "DOMAIN_SCOUT_AI_MODEL": model,
            "DOMAIN_SCOUT_AI_API_KEY": api_key,
        }
    )
    _console.print(f"[green]Saved AI config to:[/green] {env_path}")


@app.command(name="setup-registrar")
def setup_registrar(
    registrar: str = typer.Argument(..., help=f"One of: {', '.join(REGISTRAR_ENV_VARS)}"),
) -> None:
    """Store a registrar's credentials in the user config .env."""

    names = REGISTRAR_ENV_VARS.get(registrar.strip().lower())
    if names is None:
        raise typer.BadParameter(f"unknown registrar {registrar!r}")

    values: dict[str, str] = {}
    for name in names:
        secret = any(part in name for part in ("SECRET", "KEY", "TOKEN"))
        value = typer.prompt(name, hide_input=secret).strip()
        if not value:
            raise typer.BadParameter(f"{name} is required")
        values[f"DOMAIN_SCOUT_{name}"] = value

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved {registrar} credentials to:[/green] {env_path}")
