"""Modelos del dominio (Pydantic v2).

Por qué tan pocos:
- El cliente es un pass-through: devuelve el JSON tal cual lo entrega la API.
- `Page` solo ayuda a quien pagina a mano a leer `data` + token de
  continuación sin acoplarse a la forma exacta de la respuesta.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, Field
from pydantic.config import ConfigDict


class Page(BaseModel):
    """Una página de una colección SS12000."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    data: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Elementos de la página.",
    )
    page_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("pageToken", "nextPageToken", "page_token"),
        description="Token a reenviar como `pageToken` para la página siguiente.",
    )

    @property
    def has_more(self) -> bool:
        return bool(self.page_token)

    @classmethod
    def from_payload(cls, payload: Any) -> "Page":
        """Construye una `Page` desde el JSON decodificado de un listado.

        Una lista desnuda se interpreta como `data`; `None` (204) como página vacía.
        """

        if payload is None:
            return cls()
        if isinstance(payload, list):
            return cls(data=[item for item in payload if isinstance(item, dict)])
        if isinstance(payload, dict):
            return cls.model_validate(payload)
        raise TypeError(f"Unexpected list payload type: {type(payload).__name__}")
