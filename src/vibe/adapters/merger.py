"""Adaptador de merge (OpenAI chat completions vía SDK oficial).

Responsabilidad:
- Enviar el `MergeRequest` al modelo designado.
- Traducir errores del SDK a `MergeError` (sin reintentos).

Se reutiliza el `httpx.AsyncClient` de la invocación para compartir timeouts
y para que los tests puedan inyectar un transport stub.
"""

from __future__ import annotations

import logging

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI, OpenAIError
from openai.types.chat import ChatCompletion

from vibe.adapters.providers.base import extract_api_error
from vibe.core.domain.errors import MergeError
from vibe.core.domain.models import MergeRequest

logger = logging.getLogger(__name__)


class OpenAIMerger:
    """Callable `MergeRequest -> str` respaldado por OpenAI."""

    credential_env = "OPENAI_API_KEY"

    def __init__(
        self,
        *,
        api_key: str | None,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 20 * 60.0,
        base_url: str | None = None,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._http_client = http_client
        self._timeout_seconds = timeout_seconds
        self._base_url = base_url

    def _client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout_seconds,
            max_retries=0,
            http_client=self._http_client,
        )

    async def __call__(self, request: MergeRequest) -> str:
        if not self._api_key:
            raise MergeError(f"{self.credential_env} environment variable not set")

        logger.debug("merging %d responses with %s", len(request.sources), request.model)
        try:
            response = await self._client().chat.completions.create(
                model=request.model,
                messages=[{"role": "user", "content": request.prompt}],
            )
        except APIStatusError as exc:
            raise MergeError(
                f"failed to merge responses: status {exc.status_code}: {exc.message}",
                status_code=exc.status_code,
            ) from exc
        except APITimeoutError as exc:
            raise MergeError(f"failed to merge responses: request timed out: {exc}") from exc
        except APIConnectionError as exc:
            raise MergeError(f"failed to merge responses: {exc}") from exc
        except OpenAIError as exc:
            raise MergeError(f"failed to merge responses: {exc}") from exc
        except (ValueError, AttributeError, TypeError) as exc:
            raise MergeError(f"failed to merge responses: unexpected response: {exc}") from exc

        # Un 200 con cuerpo no-JSON llega como `str`, no como `ChatCompletion`.
        if not isinstance(response, ChatCompletion):
            raise MergeError(
                f"failed to merge responses: unexpected response: {type(response).__name__} body"
            )

        detail = extract_api_error(response.model_extra)
        if detail is not None:
            raise MergeError(
                f"failed to merge responses: API error: {detail.describe()}",
                code=detail.code,
                type=detail.type,
            )

        try:
            content = response.choices[0].message.content if response.choices else None
        except (AttributeError, IndexError, TypeError) as exc:
            raise MergeError(f"failed to merge responses: unexpected response: {exc}") from exc
        if not content or not content.strip():
            raise MergeError("failed to merge responses: no content in merge response")
        return content
