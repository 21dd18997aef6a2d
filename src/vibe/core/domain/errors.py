"""Errores del dominio.

Los errores de proveedor nunca cruzan la frontera de su tarea: el requester
los convierte en `ProviderResult` fallidos. Solo `PromptFileError` y
`ContextError` llegan a la CLI como fatales.
"""

from __future__ import annotations

from vibe.core.domain.models import ErrorKind, ProviderFailure


class VibeError(RuntimeError):
    pass


class PromptFileError(VibeError):
    """No se pudo leer el archivo de prompt de `gen`."""


class ContextError(VibeError):
    """Directorio objetivo inválido al recolectar contexto."""


class ProviderError(VibeError):
    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.type = type

    def to_failure(self) -> ProviderFailure:
        return ProviderFailure(
            kind=self.kind,
            message=self.message,
            status_code=self.status_code,
            code=self.code,
            type=self.type,
        )


class MissingCredentialError(ProviderError):
    kind = ErrorKind.MISSING_CREDENTIAL


class RequestConstructionError(ProviderError):
    kind = ErrorKind.REQUEST_CONSTRUCTION


class NetworkError(ProviderError):
    kind = ErrorKind.NETWORK


class NonSuccessStatusError(ProviderError):
    kind = ErrorKind.NON_SUCCESS_STATUS


class ResponseParseError(ProviderError):
    kind = ErrorKind.RESPONSE_PARSE


class ProviderAPIError(ProviderError):
    """HTTP 200 pero el cuerpo trae un objeto `error`."""

    kind = ErrorKind.API_ERROR


class EmptyContentError(ProviderError):
    kind = ErrorKind.EMPTY_CONTENT


class MergeError(ProviderError):
    kind = ErrorKind.MERGE
