"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

from rich.console import Console
from rich.table import Table

from vibe.adapters.http_client import build_async_client
from vibe.adapters.providers import build_default_providers
from vibe.core.config import AppSettings, get_user_env_file

_console = Console()

_CONNECTIVITY_URLS = (
    "https://api.openai.com",
    "https://openrouter.ai",
    "https://api.anthropic.com",
)


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings, timeout_seconds=10.0) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


async def _check_all(settings: AppSettings) -> list[tuple[str, bool, str]]:
    checks = await asyncio.gather(*(_check_http(url, settings) for url in _CONNECTIVITY_URLS))
    return [(url, ok, detail) for url, (ok, detail) in zip(_CONNECTIVITY_URLS, checks)]


def doctor(network: bool = True) -> None:
    """Show which providers are configured and whether their hosts are reachable."""

    settings = AppSettings()

    table = Table(title="vibe doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white", no_wrap=True)
    table.add_column("Details", style="dim")

    for provider in build_default_providers(settings):
        if (provider.api_key or "").strip():
            table.add_row(f"{provider.name} key", "OK", provider.credential_env)
        else:
            table.add_row(f"{provider.name} key", "MISSING", f"{provider.credential_env} not set -> provider reported as failed")
        table.add_row(f"{provider.name} model", "OK", getattr(provider, "model", "?"))

    merge_status = "OK" if (settings.openai_api_key or "").strip() else "MISSING"
    table.add_row("Merge model", merge_status, f"{settings.merge_model} (uses OPENAI_API_KEY)")
    table.add_row("Code model", "OK", f"{settings.code_model} (uses OPENROUTER_API_KEY)")
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:.0f}s")
    table.add_row("User config", "OK" if get_user_env_file().exists() else "NONE", str(get_user_env_file()))

    if network:
        for url, ok, detail in asyncio.run(_check_all(settings)):
            table.add_row(f"Reach {url}", "OK" if ok else "FAIL", detail)

    _console.print(table)
