"""Proveedor: OpenAI (Responses API).

- Endpoint `POST /v1/responses` con `input` como texto plano.
- El texto vive en `output[*].content[*].text`; los items sin contenido
  (p.ej. `reasoning`) se ignoran.
"""

from __future__ import annotations

from typing import Any

from vibe.adapters.providers.base import extract_api_error
from vibe.core.config import AppSettings
from vibe.core.domain.errors import EmptyContentError, ProviderAPIError
from vibe.core.domain.models import ProviderRequest


class OpenAIResponsesProvider:
    name = "OpenAI"
    credential_env = "OPENAI_API_KEY"
    url = "https://api.openai.com/v1/responses"

    def __init__(self, *, api_key: str | None, model: str = "gpt-4.1") -> None:
        self.api_key = api_key
        self.model = model

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "OpenAIResponsesProvider":
        return cls(api_key=settings.openai_api_key, model=settings.openai_model)

    def build_request(self, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            provider=self.name,
            url=self.url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            payload={"model": self.model, "input": prompt},
        )

    def parse_response(self, data: Any) -> str:
        detail = extract_api_error(data)
        if detail is not None:
            raise ProviderAPIError(
                f"OpenAI API error ({detail.code or 'unknown'}): {detail.message}",
                code=detail.code,
                type=detail.type,
            )

        parts: list[str] = []
        output = data.get("output") if isinstance(data, dict) else None
        for item in output or []:
            if not isinstance(item, dict):
                continue
            for part in item.get("content") or []:
                if isinstance(part, dict) and isinstance(part.get("text"), str):
                    parts.append(part["text"])

        text = "".join(parts)
        if not text.strip():
            raise EmptyContentError("no content found in response structure")
        return text
