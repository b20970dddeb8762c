"""Pydantic models describing the application configuration.

The root :class:`Config` is a pydantic-settings class whose only sources are
init kwargs and the prefixed environment. Sections are immutable once built.
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict
from sqlalchemy.engine import URL

from . import rules
from .sources import ENV_PREFIX, PrefixedEnvSettingsSource
from .types import Duration, StrList, UInt

MAX_PORT = 65535
MIN_HEALTH_CHECK_PERIOD = timedelta(seconds=1)
LOG_LEVELS = ("debug", "info", "warn", "warning", "error")
SSL_MODES = ("disable", "allow", "prefer", "require", "verify-ca", "verify-full")


class Environment(str, Enum):
    """Runtime environment the service is deployed to.

    Construction never fails: aliases are folded onto their canonical member
    and unknown input falls back to :attr:`DEVELOPMENT`.
    """

    DEVELOPMENT = "DEVELOPMENT"
    STAGING = "STAGING"
    PRODUCTION = "PRODUCTION"

    @classmethod
    def _missing_(cls, value: object) -> "Environment":
        if isinstance(value, str):
            return _ENVIRONMENT_ALIASES.get(value.strip().lower(), cls.DEVELOPMENT)
        return cls.DEVELOPMENT

    def __str__(self) -> str:
        return self.value.lower()


_ENVIRONMENT_ALIASES: Dict[str, Environment] = {
    "production": Environment.PRODUCTION,
    "prod": Environment.PRODUCTION,
    "staging": Environment.STAGING,
    "stage": Environment.STAGING,
    "uat": Environment.STAGING,
    "qa": Environment.STAGING,
    "testing": Environment.STAGING,
    "development": Environment.DEVELOPMENT,
    "develop": Environment.DEVELOPMENT,
    "dev": Environment.DEVELOPMENT,
    "local": Environment.DEVELOPMENT,
}


def to_environment(value: str) -> Environment:
    """Parse ``value`` case-insensitively, falling back to development."""
    return Environment(value)


def environment_name(value: Any) -> str:
    """Display form of ``value``; anything unrecognised renders as development."""
    if isinstance(value, Environment):
        return str(value)
    return str(Environment(value))


def _coerce_environment(value: Any) -> Any:
    if value is None or isinstance(value, Environment):
        return value
    return Environment(value)


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    section: ClassVar[str]

    def _path(self, field: str) -> str:
        return f"{self.section}.{field}"

    def check(self) -> None:
        raise NotImplementedError


class Server(_Section):
    """HTTP listener address and timeouts."""

    section: ClassVar[str] = "server"

    host: str = ""
    port: UInt = 0
    read_timeout: Duration = timedelta(0)
    write_timeout: Duration = timedelta(0)
    idle_timeout: Duration = timedelta(0)
    shutdown_timeout: Duration = timedelta(0)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def check(self) -> None:
        rules.required(self.host, self._path("host"))
        rules.required(self.port, self._path("port"))
        rules.maximum(self.port, MAX_PORT, self._path("port"))
        for field in ("read_timeout", "write_timeout", "idle_timeout", "shutdown_timeout"):
            rules.required(getattr(self, field), self._path(field))


class Logging(_Section):
    """Log level and destinations (``stderr``, ``stdout`` or a file path)."""

    section: ClassVar[str] = "logging"

    level: str = ""
    outputs: StrList = Field(default_factory=list)

    def check(self) -> None:
        rules.required(self.level, self._path("level"))
        rules.one_of(self.level.strip().lower(), LOG_LEVELS, self._path("level"))
        rules.required(self.outputs, self._path("outputs"))
        for idx, output in enumerate(self.outputs):
            rules.required(output, self._path(f"outputs[{idx}]"))


class Database(_Section):
    """Connection parameters and pool tuning. Lifetimes are in seconds."""

    section: ClassVar[str] = "database"

    host: str = ""
    port: UInt = 0
    user: str = ""
    password: str = Field(default="", repr=False)
    name: str = ""
    ssl_mode: str = ""
    max_open_conns: UInt = 0
    max_idle_conns: UInt = 0
    conn_max_lifetime: UInt = 0
    conn_max_idle_time: UInt = 0

    @property
    def conn_max_lifetime_delta(self) -> timedelta:
        return timedelta(seconds=self.conn_max_lifetime)

    @property
    def conn_max_idle_time_delta(self) -> timedelta:
        return timedelta(seconds=self.conn_max_idle_time)

    def url(self, drivername: str = "postgresql+psycopg") -> URL:
        """SQLAlchemy URL for this database; render with ``hide_password=True`` for logs."""
        return URL.create(
            drivername,
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=self.port or None,
            database=self.name or None,
            query={"sslmode": self.ssl_mode} if self.ssl_mode else {},
        )

    def check(self) -> None:
        rules.required(self.host, self._path("host"))
        rules.required(self.port, self._path("port"))
        rules.maximum(self.port, MAX_PORT, self._path("port"))
        rules.required(self.user, self._path("user"))
        rules.required(self.name, self._path("name"))
        rules.required(self.ssl_mode, self._path("ssl_mode"))
        rules.one_of(self.ssl_mode, SSL_MODES, self._path("ssl_mode"))
        rules.required(self.max_open_conns, self._path("max_open_conns"))
        rules.required(self.max_idle_conns, self._path("max_idle_conns"))
        rules.maximum(self.max_idle_conns, self.max_open_conns, self._path("max_idle_conns"))
        rules.required(self.conn_max_lifetime, self._path("conn_max_lifetime"))
        rules.required(self.conn_max_idle_time, self._path("conn_max_idle_time"))


class Service(_Section):
    """Identity of the running service."""

    section: ClassVar[str] = "service"

    name: str = ""
    version: str = ""
    environment: Annotated[Optional[Environment], BeforeValidator(_coerce_environment)] = None

    def check(self) -> None:
        rules.required(self.name, self._path("name"))
        rules.required(self.version, self._path("version"))
        rules.required(self.environment, self._path("environment"))


class HealthChecks(_Section):
    section: ClassVar[str] = "health_checks"

    enabled: bool = False
    checks: StrList = Field(default_factory=list)
    timeout: Duration = timedelta(0)
    interval: Duration = timedelta(0)

    def check(self) -> None:
        if self.enabled:
            rules.required(self.checks, self._path("checks"))
        for idx, check in enumerate(self.checks):
            rules.required(check, self._path(f"checks[{idx}]"))
        rules.minimum(self.timeout, MIN_HEALTH_CHECK_PERIOD, self._path("timeout"))
        rules.minimum(self.interval, MIN_HEALTH_CHECK_PERIOD, self._path("interval"))


class Config(BaseSettings):
    """Root configuration. A section is ``None`` when no variable addressed it."""

    server: Optional[Server] = None
    logging: Optional[Logging] = None
    database: Optional[Database] = Field(default=None, alias="db")
    service: Optional[Service] = None
    health_checks: Optional[HealthChecks] = None

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=True,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, PrefixedEnvSettingsSource(settings_cls))


__all__ = [
    "Config",
    "Server",
    "Logging",
    "Database",
    "Service",
    "HealthChecks",
    "Environment",
    "to_environment",
    "environment_name",
]
