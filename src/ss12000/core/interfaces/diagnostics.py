"""Contrato del sumidero de diagnósticos.

Por qué Protocol:
- El transporte emite eventos (warnings de configuración, errores de request)
  sin saber si terminan en `logging`, en la consola o en una lista de un test.
- El contrato es "se emite un evento con este contenido", no "se llama a
  logging de esta forma".
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DiagnosticsSink(Protocol):
    """Recibe eventos de diagnóstico del cliente.

    Reglas:
    - No debe lanzar: un sink roto no puede cambiar el resultado de una llamada.
    - `event` es un identificador estable (p.ej. `insecure_base_url`).
    """

    def warning(self, event: str, message: str, **context: Any) -> None:
        ...

    def error(self, event: str, message: str, **context: Any) -> None:
        ...


class LoggingDiagnostics:
    """Sink por defecto: reenvía a `logging` bajo el logger `ss12000`."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("ss12000")

    def warning(self, event: str, message: str, **context: Any) -> None:
        self._logger.warning("%s", message, extra={"event": event, "context": context})

    def error(self, event: str, message: str, **context: Any) -> None:
        self._logger.error("%s", message, extra={"event": event, "context": context})
