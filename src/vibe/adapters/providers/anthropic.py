"""Proveedor: Claude (Anthropic Messages API).

Auth por header `x-api-key` + `anthropic-version`, no Bearer.
"""

from __future__ import annotations

from typing import Any

from vibe.adapters.providers.base import extract_api_error
from vibe.core.config import AppSettings
from vibe.core.domain.errors import EmptyContentError, ProviderAPIError
from vibe.core.domain.models import ProviderRequest

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider:
    name = "Claude"
    credential_env = "ANTHROPIC_API_KEY"
    url = "https://api.anthropic.com/v1/messages"

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str = "claude-3-5-sonnet-20241022",
        max_tokens: int = 2048,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "AnthropicProvider":
        return cls(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            max_tokens=settings.anthropic_max_tokens,
        )

    def build_request(self, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            provider=self.name,
            url=self.url,
            headers={
                "x-api-key": self.api_key or "",
                "anthropic-version": ANTHROPIC_VERSION,
                "content-type": "application/json",
            },
            payload={
                "model": self.model,
                "max_tokens": self.max_tokens,
                "messages": [{"role": "user", "content": prompt}],
            },
        )

    def parse_response(self, data: Any) -> str:
        detail = extract_api_error(data)
        if detail is not None:
            raise ProviderAPIError(
                f"Anthropic API error ({detail.type or 'unknown'}): {detail.message}",
                code=detail.code,
                type=detail.type,
            )

        blocks = data.get("content") if isinstance(data, dict) else None
        for block in blocks or []:
            if not isinstance(block, dict):
                continue
            text = block.get("text")
            if isinstance(text, str) and text.strip():
                return text
        raise EmptyContentError("no content found in response")
