"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers (JSON + Bearer) para todas las llamadas.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from ss12000.core.config import ClientConfig


def build_default_headers(config: ClientConfig) -> dict[str, str]:
    headers: dict[str, str] = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": config.user_agent,
    }
    if config.auth_token:
        headers["Authorization"] = f"Bearer {config.auth_token}"
    return headers


def build_async_client(
    config: ClientConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults de la API SS12000.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las familias se comporten igual.
    - `transport` permite sustituir la red (tests, proxies propios).
    """

    headers = build_default_headers(config)
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
