"""Núcleo de transporte: una request HTTP -> JSON o error clasificado.

Por qué aquí:
- Es el único punto que habla con `httpx`; el resto del cliente solo ve
  `invoke`/`invoke_void` y la jerarquía de `ss12000.core.errors`.
- No guarda estado por llamada: solo la configuración inmutable y el
  `httpx.AsyncClient`, que admite uso concurrente desde tareas del mismo
  event loop.

Clasificación de fallos:
- `httpx.TimeoutException` -> `RequestTimeoutError`
- otro `httpx.TransportError` -> `TransportError`
- status fuera de 2xx -> `ApiError`
- 2xx con JSON inválido -> `DecodeError`
- cualquier otra cosa -> `UnknownError`

No hay reintentos: cada error se reporta una vez y sube al llamador.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ss12000.adapters.http_client import build_async_client, build_default_headers
from ss12000.core.config import ClientConfig
from ss12000.core.errors import (
    ApiError,
    DecodeError,
    RequestTimeoutError,
    SS12000Error,
    TransportError,
    UnknownError,
)
from ss12000.core.interfaces.diagnostics import DiagnosticsSink, LoggingDiagnostics
from ss12000.core.query import QueryPairs

logger = logging.getLogger(__name__)


class Transport:
    """Ejecuta requests contra `config.base_url`.

    `http_client` (opcional) es un `httpx.AsyncClient` del llamador: se reutiliza
    su pool, pero cada request lleva los headers y el timeout de `config`. Nunca
    se cierra aquí. Si no se pasa, se crea uno propio (con
    `transport` si se indicó) que `aclose()` libera.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ) -> None:
        self._config = config
        self._diagnostics = diagnostics or LoggingDiagnostics()

        if not config.uses_https:
            self._emit_warning(
                "insecure_base_url",
                "Base URL does not use HTTPS. All communication should occur over HTTPS "
                "in production environments to ensure security.",
                base_url=config.base_url,
            )
        if not config.auth_token:
            self._emit_warning(
                "missing_auth_token",
                "Authentication token is missing. Calls may fail if the API requires authentication.",
            )

        self._owns_client = http_client is None
        self._client = http_client or build_async_client(config, transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._config

    def build_url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self._config.base_url}{path}"

    async def invoke(
        self,
        method: str,
        path: str,
        query: QueryPairs | None = None,
        body: Any = None,
    ) -> Any:
        """Ejecuta la request y devuelve el JSON decodificado.

        204 o cuerpo vacío -> `None`, sin intentar decodificar.
        """

        response = await self._send(method, path, query, body)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            # json.JSONDecodeError y UnicodeDecodeError son ValueError.
            url = str(response.request.url)
            raise self._fail(
                DecodeError(
                    f"JSON decoding error: {exc}",
                    body=response.text,
                    context={"method": method.upper(), "url": url, "status_code": response.status_code},
                ),
                method.upper(),
                url,
            ) from exc

    async def invoke_void(
        self,
        method: str,
        path: str,
        query: QueryPairs | None = None,
        body: Any = None,
    ) -> None:
        """Igual que `invoke` pero descarta el cuerpo de la respuesta."""

        await self._send(method, path, query, body)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        query: QueryPairs | None,
        body: Any,
    ) -> httpx.Response:
        method = method.upper()
        url = self.build_url(path)

        # Headers y timeout por request: también aplican a un `http_client` ajeno.
        kwargs: dict[str, Any] = {
            "headers": build_default_headers(self._config),
            "timeout": httpx.Timeout(self._config.timeout_seconds),
        }
        if query:
            kwargs["params"] = query
        if body is not None:
            kwargs["json"] = body

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            error: SS12000Error = RequestTimeoutError(
                f"Request timed out after {self._config.timeout_seconds}s: {exc}",
                context={"method": method, "url": url, "timeout_seconds": self._config.timeout_seconds},
            )
            raise self._fail(error, method, url) from exc
        except httpx.TransportError as exc:
            error = TransportError(
                f"Connection failed: {exc}",
                context={"method": method, "url": url},
            )
            raise self._fail(error, method, url) from exc
        except Exception as exc:
            error = UnknownError(
                f"An unexpected error occurred: {exc}",
                context={"method": method, "url": url},
            )
            raise self._fail(error, method, url) from exc

        if not response.is_success:
            full_url = str(response.request.url)
            text = response.text
            error = ApiError(
                response.status_code,
                body=text,
                payload=_try_json(response),
                context={"method": method, "url": full_url},
            )
            raise self._fail(error, method, full_url, body=text)
        return response

    def _fail(self, error: SS12000Error, method: str, url: str, *, body: str | None = None) -> SS12000Error:
        """Reporta el error una sola vez y lo devuelve para que el llamador lo lance."""

        context: dict[str, Any] = {"method": method, "url": url}
        message = f"Error during {method} call to {url}: {error.message}"
        if body:
            context["body"] = body
            message = f"{message}. API Error Response: {body}"
        self._emit_error(type(error).__name__, message, **context)
        return error

    def _emit_warning(self, event: str, message: str, **context: Any) -> None:
        try:
            self._diagnostics.warning(event, message, **context)
        except Exception:
            logger.exception("Diagnostics sink failed while reporting %s", event)

    def _emit_error(self, event: str, message: str, **context: Any) -> None:
        try:
            self._diagnostics.error(event, message, **context)
        except Exception:
            logger.exception("Diagnostics sink failed while reporting %s", event)


def _try_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
