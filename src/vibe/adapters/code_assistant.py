"""Asistente de código vía OpenRouter (comando `vibe code`).

Responsabilidad:
- Construir los mensajes system/user con el contexto recolectado.
- Enviar a OpenRouter en modo streaming (SSE) o respuesta completa.

A diferencia de `gen`, aquí un fallo es fatal: los errores se propagan como
`ProviderError` y la CLI los convierte en exit code != 0.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Callable

import httpx

from vibe import __version__
from vibe.adapters.providers.base import describe_error_body, extract_api_error
from vibe.adapters.providers.openrouter import OPENROUTER_CHAT_URL, extract_chat_content
from vibe.core.domain.errors import (
    MissingCredentialError,
    NetworkError,
    NonSuccessStatusError,
    ProviderAPIError,
    ResponseParseError,
)

logger = logging.getLogger(__name__)

PROJECT_URL = "https://github.com/daviddl9/vibe"
CLIENT_TITLE = f"vibe-code/{__version__}"

SYSTEM_TEMPLATE = """You are an expert programming assistant integrated into a CLI tool called 'vibe'.
The user is working in the project context provided below (code files from their directory).
Analyze the user's request and the provided file context carefully.
Generate the necessary code modifications, additions, or provide explanations as requested.
Format your response clearly using Markdown. Use language-specific code blocks (e.g., ```go ... ```, ```python ... ```).
If modifying existing code, clearly indicate the file and the changes. If adding new code, suggest where it should go.
Focus on fulfilling the user's request accurately based *only* on the provided context and general programming best practices for the relevant language(s).
Do not add extraneous conversation or introductory/concluding remarks outside of the requested code/explanation.

--- FILE CONTEXT START ---
{context}
--- FILE CONTEXT END ---"""

USER_TEMPLATE = """Based on the file context provided in the system message, fulfill the following request:

"{prompt}\""""


def build_messages(*, context: str, prompt: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_TEMPLATE.format(context=context)},
        {"role": "user", "content": USER_TEMPLATE.format(prompt=prompt)},
    ]


class CodeAssistant:
    """Cliente mínimo de chat/completions de OpenRouter."""

    credential_env = "OPENROUTER_API_KEY"

    def __init__(self, *, api_key: str | None, model: str, client: httpx.AsyncClient) -> None:
        if not (api_key or "").strip():
            raise MissingCredentialError(
                f"API key not found. Please set the {self.credential_env} environment variable"
            )
        self._api_key = (api_key or "").strip()
        self.model = model
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": PROJECT_URL,
            "X-Title": CLIENT_TITLE,
        }

    def _payload(self, messages: list[dict[str, str]], *, stream: bool) -> dict[str, Any]:
        payload: dict[str, Any] = {"model": self.model, "messages": messages}
        if stream:
            payload["stream"] = True
        return payload

    @staticmethod
    def _status_error(response: httpx.Response) -> NonSuccessStatusError:
        text, detail = describe_error_body(response.text)
        prefix = "API Error" if detail else "Body"
        return NonSuccessStatusError(
            f"received non-OK status code from OpenRouter: {response.status_code} - "
            f"{response.reason_phrase}. {prefix}: {text}",
            status_code=response.status_code,
            code=detail.code if detail else None,
            type=detail.type if detail else None,
        )

    async def complete(self, messages: list[dict[str, str]]) -> str | None:
        """Respuesta completa; `None` si el modelo devolvió contenido vacío."""

        try:
            response = await self._client.post(
                OPENROUTER_CHAT_URL,
                headers=self._headers(),
                json=self._payload(messages, stream=False),
            )
        except httpx.HTTPError as exc:
            raise NetworkError(f"failed to send request to OpenRouter: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise self._status_error(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise ResponseParseError(
                f"failed to decode non-streaming OpenRouter response: {exc}. Body: {response.text}"
            ) from exc

        detail = extract_api_error(data)
        if detail is not None:
            raise ProviderAPIError(
                f"received API error: Type={detail.type}, Message={detail.message}",
                code=detail.code,
                type=detail.type,
            )
        content = extract_chat_content(data)
        return content or None

    async def stream(
        self,
        messages: list[dict[str, str]],
        *,
        warn: Callable[[str], None] | None = None,
    ) -> AsyncIterator[str]:
        """Produce los deltas de texto según llegan (SSE `data: ...`).

        Chunks ilegibles o con error se reportan vía `warn` y se saltan.
        """

        try:
            async with self._client.stream(
                "POST",
                OPENROUTER_CHAT_URL,
                headers=self._headers(),
                json=self._payload(messages, stream=True),
            ) as response:
                if response.status_code != httpx.codes.OK:
                    await response.aread()
                    raise self._status_error(response)

                async for line in response.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data = line.removeprefix("data: ").strip()
                    if data == "[DONE]":
                        break
                    try:
                        chunk = json.loads(data)
                    except json.JSONDecodeError as exc:
                        if warn:
                            warn(f"Failed to decode stream chunk: {exc} (data: {data})")
                        continue
                    detail = extract_api_error(chunk)
                    if detail is not None:
                        if warn:
                            warn(f"API Error during stream: Type={detail.type}, Message={detail.message}")
                        continue
                    delta = _stream_delta(chunk)
                    if delta:
                        yield delta
        except httpx.HTTPError as exc:
            raise NetworkError(f"error reading stream from OpenRouter: {exc}") from exc


def _stream_delta(chunk: Any) -> str:
    if not isinstance(chunk, dict):
        return ""
    choices = chunk.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        return ""
    content = delta.get("content")
    return content if isinstance(content, str) else ""
