"""Jerarquía de errores del cliente SS12000.

Por qué una jerarquía propia:
- El llamador distingue fallos de red (reintentables) de rechazos de la API
  sin conocer `httpx`.
- Cada error lleva `message` + `context` (método, URL, status...) para
  diagnóstico sin parsear strings.

Jerarquía:
    SS12000Error
    ├── ConfigurationError
    ├── TransportError
    │   └── RequestTimeoutError
    ├── ApiError
    ├── DecodeError
    ├── UnknownError
    └── UnsupportedOperationError
"""

from __future__ import annotations

from typing import Any


class SS12000Error(Exception):
    """Raíz de todos los errores del cliente."""

    def __init__(self, message: str = "SS12000 client error", context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigurationError(SS12000Error, ValueError):
    """Entrada inválida al construir el cliente (p.ej. base URL vacía)."""


class TransportError(SS12000Error):
    """Fallo de conexión/red antes de obtener una respuesta HTTP.

    El cliente no reintenta: decidir si repetir la llamada es del llamador.
    """


class RequestTimeoutError(TransportError):
    """La llamada superó el timeout configurado."""


class ApiError(SS12000Error):
    """La API respondió con un status fuera de 2xx.

    Attributes:
        status_code: status HTTP devuelto.
        body: cuerpo crudo de la respuesta (texto, puede ser vacío).
        payload: cuerpo decodificado como JSON si era JSON válido, si no `None`.
    """

    def __init__(
        self,
        status_code: int,
        body: str = "",
        payload: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["status_code"] = status_code
        super().__init__(f"SS12000 API responded with HTTP {status_code}", context=ctx)
        self.status_code = status_code
        self.body = body
        self.payload = payload


class DecodeError(SS12000Error):
    """Respuesta 2xx cuyo cuerpo no es JSON válido."""

    def __init__(self, message: str, body: str = "", context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context=context)
        self.body = body


class UnknownError(SS12000Error):
    """Fallo no clasificado; la causa original queda en `__cause__`."""


class UnsupportedOperationError(SS12000Error):
    """La familia de recursos no expone la operación pedida."""

    def __init__(self, resource: str, operation: str) -> None:
        super().__init__(
            f"Resource '{resource}' does not support operation '{operation}'",
            context={"resource": resource, "operation": operation},
        )
        self.resource = resource
        self.operation = operation
