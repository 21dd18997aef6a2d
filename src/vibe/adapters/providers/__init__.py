"""Proveedores LLM concretos.

Por qué un paquete:
- Un módulo por proveedor (endpoint, auth y esquema propios).
- Cada clase implementa `vibe.core.interfaces.provider.ProviderAdapter`.
"""

from __future__ import annotations

from vibe.adapters.providers.anthropic import AnthropicProvider
from vibe.adapters.providers.openai_responses import OpenAIResponsesProvider
from vibe.adapters.providers.openrouter import OpenRouterProvider
from vibe.core.config import AppSettings
from vibe.core.interfaces.provider import ProviderAdapter

_DEFAULT_PROVIDERS = (
    OpenAIResponsesProvider,
    OpenRouterProvider,
    AnthropicProvider,
)


def build_default_providers(settings: AppSettings) -> list[ProviderAdapter]:
    """Lista fija de proveedores de `gen`, con credenciales/modelos de `settings`."""

    return [provider.from_settings(settings) for provider in _DEFAULT_PROVIDERS]


__all__ = [
    "AnthropicProvider",
    "OpenAIResponsesProvider",
    "OpenRouterProvider",
    "build_default_providers",
]
