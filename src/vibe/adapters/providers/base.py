"""Helpers compartidos por los adaptadores de proveedor.

Todos los proveedores soportados devuelven errores como un objeto JSON
`{"error": {"message": ..., "type": ..., "code": ...}}` (Anthropic añade un
`"type": "error"` de primer nivel). Aquí normalizamos esa forma.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ApiErrorDetail:
    message: str
    type: str | None = None
    code: str | None = None

    def describe(self) -> str:
        if self.type:
            return f"{self.message} (type={self.type})"
        return self.message


def extract_api_error(data: Any) -> ApiErrorDetail | None:
    """Devuelve el objeto `error` de un cuerpo JSON ya decodificado, si existe."""

    if not isinstance(data, dict):
        return None
    err = data.get("error")
    if not isinstance(err, dict):
        return None
    message = err.get("message")
    if not isinstance(message, str) or not message.strip():
        return None
    err_type = err.get("type")
    code = err.get("code")
    return ApiErrorDetail(
        message=message.strip(),
        type=str(err_type) if err_type not in (None, "") else None,
        code=str(code) if code not in (None, "") else None,
    )


def describe_error_body(body: str) -> tuple[str, ApiErrorDetail | None]:
    """Texto legible para un cuerpo de error: mensaje estructurado o cuerpo crudo."""

    detail: ApiErrorDetail | None = None
    try:
        detail = extract_api_error(json.loads(body))
    except (json.JSONDecodeError, ValueError):
        detail = None
    if detail is not None:
        return detail.describe(), detail

    return body.strip() or "<empty body>", None
