"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers para todos los proveedores.
- Facilita testeo: se puede inyectar un `transport` stub (p.ej. `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from vibe.core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    timeout_seconds: float | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    El timeout por defecto es largo (`http_timeout_seconds`, 20 min): la
    generación de un LLM puede tardar bastante y no reintentamos.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    timeout = timeout_seconds if timeout_seconds is not None else settings.http_timeout_seconds
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
