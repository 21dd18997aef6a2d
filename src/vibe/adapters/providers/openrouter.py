"""Proveedor: Gemini vía OpenRouter (chat/completions compatible OpenAI).

El mensaje de usuario se envía como lista de partes (`type: text`), que es la
forma que OpenRouter reenvía sin cambios a Gemini.
"""

from __future__ import annotations

from typing import Any

from vibe.adapters.providers.base import extract_api_error
from vibe.core.config import AppSettings
from vibe.core.domain.errors import EmptyContentError, ProviderAPIError
from vibe.core.domain.models import ProviderRequest

OPENROUTER_CHAT_URL = "https://openrouter.ai/api/v1/chat/completions"


def extract_chat_content(data: Any) -> str | None:
    """`choices[0].message.content` de una respuesta chat/completions."""

    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


class OpenRouterProvider:
    name = "Gemini (OpenRouter)"
    credential_env = "OPENROUTER_API_KEY"
    url = OPENROUTER_CHAT_URL

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str = "google/gemini-2.5-pro-preview-03-25",
    ) -> None:
        self.api_key = api_key
        self.model = model

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "OpenRouterProvider":
        return cls(api_key=settings.openrouter_api_key, model=settings.openrouter_model)

    def build_request(self, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            provider=self.name,
            url=self.url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            payload={
                "model": self.model,
                "messages": [
                    {
                        "role": "user",
                        "content": [{"type": "text", "text": prompt}],
                    }
                ],
            },
        )

    def parse_response(self, data: Any) -> str:
        detail = extract_api_error(data)
        if detail is not None:
            raise ProviderAPIError(
                f"OpenRouter API error ({detail.code or 'unknown'}): {detail.message}",
                code=detail.code,
                type=detail.type,
            )

        content = extract_chat_content(data)
        if not content or not content.strip():
            raise EmptyContentError("no content found in response")
        return content
