"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación y documentación autocontenida (Field) sin acoplar el Core a
  librerías de I/O.
- Un único formato de resultado para proveedores con esquemas incompatibles.

Nota:
- Estos modelos describen *qué* se pide y *qué* se obtuvo, no *cómo*.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class ErrorKind(str, Enum):
    """Categorías de fallo reportables por proveedor."""

    MISSING_CREDENTIAL = "missing_credential"
    REQUEST_CONSTRUCTION = "request_construction"
    NETWORK = "network"
    NON_SUCCESS_STATUS = "non_success_status"
    RESPONSE_PARSE = "response_parse"
    API_ERROR = "api_error"
    EMPTY_CONTENT = "empty_content"
    MERGE = "merge"
    UNEXPECTED = "unexpected"


class ProviderRequest(BaseModel):
    """Request HTTP listo para enviar a un proveedor.

    Inmutable: se construye una vez por proveedor y por invocación.
    """

    model_config = ConfigDict(frozen=True)

    provider: str = Field(..., min_length=1, description="Nombre visible del proveedor.")
    url: str = Field(..., min_length=8, description="Endpoint chat/completions del proveedor.")
    headers: dict[str, str] = Field(default_factory=dict, description="Headers (incluye auth).")
    payload: dict[str, Any] = Field(default_factory=dict, description="Cuerpo JSON.")


class ProviderFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str = Field(..., min_length=1)
    status_code: int | None = None
    code: str | None = Field(default=None, description="Código de error del proveedor, si lo hay.")
    type: str | None = Field(default=None, description="Tipo de error del proveedor, si lo hay.")


class ProviderResult(BaseModel):
    """Resultado terminal de un proveedor: texto o error, nunca ambos."""

    model_config = ConfigDict(frozen=True)

    provider: str = Field(..., min_length=1)
    text: str | None = None
    error: ProviderFailure | None = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "ProviderResult":
        if (self.text is None) == (self.error is None):
            raise ValueError("ProviderResult needs exactly one of 'text' or 'error'")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, provider: str, text: str) -> "ProviderResult":
        return cls(provider=provider, text=text)

    @classmethod
    def failure(cls, provider: str, failure: ProviderFailure) -> "ProviderResult":
        return cls(provider=provider, error=failure)


class MergeRequest(BaseModel):
    """Petición de síntesis construida solo con resultados exitosos."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1)
    sources: list[ProviderResult] = Field(..., min_length=1)


class GenReport(BaseModel):
    """Resumen de una invocación de `gen` (orden = orden de llegada)."""

    results: list[ProviderResult] = Field(default_factory=list)
    merged: str | None = None
    merge_error: ProviderFailure | None = None
    merge_skipped: bool = False

    @property
    def successes(self) -> list[ProviderResult]:
        return [r for r in self.results if r.ok]

    @property
    def failures(self) -> list[ProviderResult]:
        return [r for r in self.results if not r.ok]

    def exit_ok(self, *, strict: bool = False) -> bool:
        if not strict:
            return True
        return not self.failures and self.merge_error is None and bool(self.successes)
