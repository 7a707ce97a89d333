"""Configuración del cliente.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- `ClientConfig` es el contrato inmutable que recibe el transporte: se valida
  una vez al construir y no cambia durante la vida del cliente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ss12000 import __version__
from ss12000.core.errors import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = f"ss12000-client/{__version__}"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "ss12000"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "ss12000"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "ss12000"
    return Path.home() / ".config" / "ss12000"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


ENV_PREFIX = "SS12000_"
_ENV_HEADER = "# SS12000 client user config (.env)"


def _env_line_key(line: str) -> str | None:
    stripped = line.strip()
    if not stripped or stripped.startswith("#") or "=" not in stripped:
        return None
    return stripped.split("=", 1)[0].strip() or None


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Actualiza claves `SS12000_*` en el .env global del usuario.

    Las líneas existentes (comentarios y variables de otras herramientas) se
    conservan en su sitio; una clave ya presente se reescribe donde está y las
    nuevas se añaden al final. `None` deja la clave como estaba.
    """

    foreign = sorted(key for key in values if not key.startswith(ENV_PREFIX))
    if foreign:
        raise ConfigurationError(
            f"Only {ENV_PREFIX}* settings can be stored, got: {', '.join(foreign)}",
            context={"keys": foreign},
        )
    pending = {key: value for key, value in values.items() if value is not None}

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    lines = env_path.read_text(encoding="utf-8").splitlines() if env_path.exists() else [_ENV_HEADER]

    updated: list[str] = []
    for line in lines:
        key = _env_line_key(line)
        if key is not None and key in pending:
            updated.append(f"{key}={pending.pop(key)}")
        else:
            updated.append(line)
    updated.extend(f"{key}={value}" for key, value in sorted(pending.items()))

    env_path.write_text("\n".join(updated) + "\n", encoding="utf-8")
    return env_path


class ClientConfig(BaseModel):
    """Configuración inmutable de una instancia de transporte."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        ...,
        min_length=1,
        description="Base URL de la API SS12000 (p.ej. https://some.server.se/v2.0).",
    )
    auth_token: str | None = Field(
        default=None,
        description="JWT usado como Bearer token.",
    )
    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def _strip_base_url(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value

    @field_validator("auth_token", mode="before")
    @classmethod
    def _blank_token_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def uses_https(self) -> bool:
        return self.base_url.lower().startswith("https://")

    @classmethod
    def build(
        cls,
        base_url: str | None,
        auth_token: str | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> "ClientConfig":
        """Valida la entrada y traduce errores de pydantic a `ConfigurationError`."""

        if not base_url or not base_url.strip():
            raise ConfigurationError("Base URL is mandatory for SS12000Client.", context={"field": "base_url"})
        if not base_url.strip().lower().startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Base URL must be absolute (http:// or https://), got '{base_url}'.",
                context={"field": "base_url"},
            )
        try:
            return cls(
                base_url=base_url,
                auth_token=auth_token,
                timeout_seconds=timeout_seconds,
                user_agent=user_agent,
            )
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid SS12000 client configuration: {exc.errors()[0]['msg']}",
                context={"errors": exc.errors()},
            ) from exc


class ClientSettings(BaseSettings):
    """Configuración leída del entorno (`SS12000_*`).

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars).
    - El mismo contrato sirve para la CLI y para quien embebe el cliente.
    """

    model_config = SettingsConfigDict(
        env_prefix="SS12000_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default="",
        description="Base URL de la API SS12000.",
    )
    auth_token: str | None = Field(
        default=None,
        description="JWT Bearer token.",
    )
    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging de la CLI.",
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log_level '{value}'")
        return upper

    def to_client_config(self) -> ClientConfig:
        return ClientConfig.build(
            self.base_url,
            self.auth_token,
            timeout_seconds=self.timeout_seconds,
            user_agent=self.user_agent,
        )

    @classmethod
    def load(cls) -> "ClientSettings":
        """Lee el entorno y traduce errores de validación a `ConfigurationError`."""

        try:
            return cls()
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            raise ConfigurationError(
                f"Invalid SS12000_{field.upper()} setting: {first['msg']}",
                context={"field": field, "errors": exc.errors()},
            ) from exc
