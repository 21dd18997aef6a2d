"""Contrato de proveedores LLM.

Por qué Protocol:
- Cada proveedor tiene un sobre request/response incompatible (nombres de
  campos, forma de errores, convención de auth).
- Un contrato estructural permite que el requester los trate igual y que los
  tests reemplacen cualquiera de ellos sin herencia rígida.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from vibe.core.domain.models import ProviderRequest


@runtime_checkable
class ProviderAdapter(Protocol):
    """Contrato mínimo para un proveedor.

    Reglas de diseño:
    - `build_request` y `parse_response` son puras: el I/O lo hace el requester.
    - `parse_response` recibe el JSON ya decodificado de una respuesta 200 y
      devuelve el texto, o lanza un `ProviderError`.
    """

    name: str
    credential_env: str
    api_key: str | None

    def build_request(self, prompt: str) -> ProviderRequest:
        ...

    def parse_response(self, data: Any) -> str:
        ...
