"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Las API keys de cada proveedor se leen con su nombre "oficial"
  (`OPENAI_API_KEY`, ...) para no obligar a duplicarlas con prefijo.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "vibe"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "vibe"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "vibe"
    return Path.home() / ".config" / "vibe"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="VIBE_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    # Credenciales (una por proveedor, todas opcionales).
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "VIBE_OPENAI_API_KEY"),
        description="API key de OpenAI (Responses API y modelo de merge).",
    )
    openrouter_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_API_KEY", "VIBE_OPENROUTER_API_KEY"),
        description="API key de OpenRouter (Gemini en `gen`, modelos de `code`).",
    )
    anthropic_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ANTHROPIC_API_KEY", "VIBE_ANTHROPIC_API_KEY"),
        description="API key de Anthropic (Claude).",
    )

    http_timeout_seconds: float = Field(
        default=20 * 60.0,
        gt=0,
        description="Timeout por request a proveedores LLM (segundos). La generación puede ser lenta.",
    )
    user_agent: str = Field(
        default="vibe/0.2 (+https://github.com/daviddl9/vibe)",
        min_length=1,
        description="User-Agent para peticiones salientes.",
    )

    openai_model: str = Field(default="gpt-4.1", min_length=1)
    openrouter_model: str = Field(default="google/gemini-2.5-pro-preview-03-25", min_length=1)
    anthropic_model: str = Field(default="claude-3-5-sonnet-20241022", min_length=1)
    anthropic_max_tokens: int = Field(default=2048, ge=1)

    merge_model: str = Field(
        default="chatgpt-4o-latest",
        min_length=1,
        description="Modelo OpenAI que combina las respuestas en `gen`.",
    )

    code_model: str = Field(
        default="anthropic/claude-3.5-sonnet",
        min_length=1,
        description="Modelo OpenRouter por defecto para `vibe code`.",
    )
    code_timeout_seconds: float = Field(default=180.0, gt=0)

    max_file_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1,
        description="Archivos más grandes se omiten al recolectar contexto.",
    )

    log_level: str = Field(default="WARNING", description="Nivel de logging (DEBUG/INFO/WARNING/...).")
