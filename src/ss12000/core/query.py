"""Normalización de parámetros de query.

Por qué un módulo propio:
- Todas las operaciones de la fachada pasan por aquí: mapear claves al
  nombre que espera la API y serializar valores multi-valor y booleanos.
- Es lógica pura (sin I/O), así que se testea sin transporte.

Convenciones de la API SS12000:
- Los nombres de parámetros son dotted/camelCase (`meta.modifiedAfter`,
  `startDate.onOrBefore`). Quien llama debería pasarlos tal cual.
- Los parámetros multi-valor se repiten (`expand=a&expand=b`).
- Los booleanos viajan como `true`/`false`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

QueryPairs = list[tuple[str, str]]

_SNAKE_SEGMENT = re.compile(r"_([a-z])")


def map_key(key: str) -> str:
    """Traduce `start_date_on_or_before` -> `startDateOnOrBefore`.

    Cualquier otra cosa (incluidos los puntos) pasa sin cambios. Nunca lanza.
    """

    return _SNAKE_SEGMENT.sub(lambda m: m.group(1).upper(), key)


def map_filters(filters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Aplica `map_key` a cada clave conservando el orden."""

    if not filters:
        return {}
    return {map_key(str(key)): value for key, value in filters.items()}


def _scalar_to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(params: Mapping[str, Any] | Iterable[tuple[str, Any]] | None) -> QueryPairs:
    """Convierte un mapping de parámetros en pares `(nombre, valor)` ordenados.

    - `None` se omite.
    - list/tuple repite la clave por cada elemento, en orden y sin deduplicar.
    - bool -> `true`/`false`; el resto con `str()`.
    """

    if not params:
        return []
    items = params.items() if isinstance(params, Mapping) else params

    pairs: QueryPairs = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _scalar_to_str(v)) for v in value if v is not None)
        else:
            pairs.append((key, _scalar_to_str(value)))
    return pairs


@dataclass(frozen=True)
class QueryOptions:
    """Controles comunes de listado/expansión.

    Reemplaza a los argumentos posicionales opcionales: cada campo tiene nombre
    y default explícito.
    """

    expand: Sequence[str] = ()
    expand_reference_names: bool = False
    limit: int | None = None
    page_token: str | None = None
    sort_key: str | None = None

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.expand:
            # Un str suelto es una sola relación, no una secuencia de letras.
            params["expand"] = [self.expand] if isinstance(self.expand, str) else list(self.expand)
        if self.expand_reference_names:
            params["expandReferenceNames"] = True
        if self.limit is not None:
            params["limit"] = self.limit
        if self.page_token:
            params["pageToken"] = self.page_token
        if self.sort_key:
            params["sortkey"] = self.sort_key
        return params

    def expansion_only(self) -> "QueryOptions":
        """Copia con solo `expand`/`expandReferenceNames` (lookup y get-by-id)."""

        return QueryOptions(expand=self.expand, expand_reference_names=self.expand_reference_names)


def build_list_query(filters: Mapping[str, Any] | None, options: QueryOptions | None = None) -> QueryPairs:
    """Filtros mapeados primero; las opciones pisan un filtro con el mismo nombre."""

    params = map_filters(filters)
    if options is not None:
        params.update(options.to_params())
    return build_query(params)
