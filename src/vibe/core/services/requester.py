"""Llamada individual a un proveedor.

`call_provider` es la frontera de errores por proveedor: pase lo que pase
(sin API key, payload inválido, red, status != 200, JSON roto, contenido
vacío) devuelve exactamente un `ProviderResult` y nunca lanza.
"""

from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError

from vibe.adapters.providers.base import describe_error_body
from vibe.core.domain.errors import (
    MissingCredentialError,
    NetworkError,
    NonSuccessStatusError,
    ProviderError,
    RequestConstructionError,
    ResponseParseError,
)
from vibe.core.domain.models import ErrorKind, ProviderFailure, ProviderResult
from vibe.core.interfaces.provider import ProviderAdapter

logger = logging.getLogger(__name__)


async def request_text(adapter: ProviderAdapter, prompt: str, client: httpx.AsyncClient) -> str:
    """Envía el prompt a `adapter` y devuelve el texto, o lanza `ProviderError`."""

    if not (adapter.api_key or "").strip():
        raise MissingCredentialError(f"{adapter.credential_env} environment variable not set")

    try:
        request = adapter.build_request(prompt)
        body = json.dumps(request.payload)
    except (TypeError, ValueError, ValidationError) as exc:
        raise RequestConstructionError(f"failed to build request body: {exc}") from exc

    logger.debug("POST %s (provider=%s, %d bytes)", request.url, adapter.name, len(body))
    try:
        response = await client.post(request.url, headers=request.headers, content=body)
    except httpx.InvalidURL as exc:
        raise RequestConstructionError(f"failed to create request: {exc}") from exc
    except httpx.TimeoutException as exc:
        raise NetworkError(f"request timed out ({type(exc).__name__}): {exc}") from exc
    except httpx.HTTPError as exc:
        raise NetworkError(f"failed to send request: {exc}") from exc

    if response.status_code != httpx.codes.OK:
        text, detail = describe_error_body(response.text)
        raise NonSuccessStatusError(
            f"API request failed with status {response.status_code}: {text}",
            status_code=response.status_code,
            code=detail.code if detail else None,
            type=detail.type if detail else None,
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise ResponseParseError(f"failed to unmarshal response body: {exc}") from exc

    try:
        return adapter.parse_response(data)
    except (AttributeError, KeyError, IndexError, TypeError) as exc:
        raise ResponseParseError(f"unexpected response shape: {exc}") from exc


async def call_provider(adapter: ProviderAdapter, prompt: str, client: httpx.AsyncClient) -> ProviderResult:
    try:
        text = await request_text(adapter, prompt, client)
    except ProviderError as exc:
        logger.info("%s failed: %s", adapter.name, exc.message)
        return ProviderResult.failure(adapter.name, exc.to_failure())
    except Exception as exc:  # noqa: BLE001
        logger.exception("%s raised unexpectedly", adapter.name)
        return ProviderResult.failure(
            adapter.name,
            ProviderFailure(kind=ErrorKind.UNEXPECTED, message=f"{type(exc).__name__}: {exc}"),
        )

    logger.info("%s answered (%d chars)", adapter.name, len(text))
    return ProviderResult.success(adapter.name, text)
