"""Cliente Python para la API SS12000 (intercambio de datos escolares).

Punto de entrada:
    from ss12000 import SS12000Client, QueryOptions
"""

__version__ = "0.1.0"

from ss12000.adapters.client import SS12000Client  # noqa: E402
from ss12000.core.domain.models import Page  # noqa: E402
from ss12000.core.domain.resources import RESOURCES, Operation, ResourceSpec, get_resource  # noqa: E402
from ss12000.core.errors import (  # noqa: E402
    ApiError,
    ConfigurationError,
    DecodeError,
    RequestTimeoutError,
    SS12000Error,
    TransportError,
    UnknownError,
    UnsupportedOperationError,
)
from ss12000.core.interfaces.diagnostics import DiagnosticsSink, LoggingDiagnostics  # noqa: E402
from ss12000.core.query import QueryOptions, map_key  # noqa: E402

__all__ = [
    "ApiError",
    "ConfigurationError",
    "DecodeError",
    "DiagnosticsSink",
    "LoggingDiagnostics",
    "Operation",
    "Page",
    "QueryOptions",
    "RESOURCES",
    "RequestTimeoutError",
    "ResourceSpec",
    "SS12000Client",
    "SS12000Error",
    "TransportError",
    "UnknownError",
    "UnsupportedOperationError",
    "get_resource",
    "map_key",
]
