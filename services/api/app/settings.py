from __future__ import annotations

import json
import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Annotated, Any, Literal

import sqlalchemy as sa
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, ValidationError, model_validator
from dotenv import dotenv_values
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


class ConfigError(RuntimeError):
    pass


_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_DURATION_FULL = re.compile(r"(?:\d+(?:\.\d+)?(?:ns|us|µs|ms|s|m|h))+")
_DURATION_UNITS = {"ns": 1e-9, "us": 1e-6, "µs": 1e-6, "ms": 1e-3, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: Any) -> Any:
    """
    Accept Go-style duration strings ("30s", "1h30m", "500ms").

    Anything else is passed through unchanged so pydantic can apply its own timedelta parsing
    (seconds as a number, ISO 8601).
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text == "0":
        return timedelta(0)
    if not _DURATION_FULL.fullmatch(text):
        return value
    seconds = sum(float(n) * _DURATION_UNITS[unit] for n, unit in _DURATION_PART.findall(text))
    return timedelta(seconds=seconds)


Duration = Annotated[timedelta, BeforeValidator(parse_duration)]


class _Group(BaseModel):
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _fill_zero_values(self) -> _Group:
        # Empty strings and zeros fall back to the compiled-in default (booleans are real values).
        for name, field in type(self).model_fields.items():
            default = field.get_default(call_default_factory=True)
            if isinstance(default, bool) or not default:
                continue
            if not getattr(self, name):
                setattr(self, name, default)
        return self


class ServerConfig(_Group):
    host: str = "0.0.0.0"
    port: int = 5001
    read_timeout: Duration = timedelta(seconds=30)
    write_timeout: Duration = timedelta(seconds=30)
    idle_timeout: Duration = timedelta(seconds=120)
    environment: str = "development"

    # CORS
    frontend_url: str = ""
    cors_debug: bool = False


class DatabaseConfig(_Group):
    driver: str = "postgres"
    host: str = "localhost"
    port: int = 5432
    user: str = "ecommerce"
    password: str = "ecommerce"
    database: str = "ecommerce"
    ssl_mode: str = "disable"
    max_open_conns: int = 25
    max_idle_conns: int = 5
    conn_max_lifetime: Duration = timedelta(minutes=5)
    conn_max_idle_time: Duration = timedelta(minutes=1)


class RedisConfig(_Group):
    host: str = "localhost"
    port: int = 6379
    password: str = ""
    db: int = 0


class JWTConfig(_Group):
    secret: str = "dev-secret"
    expires_in: Duration = timedelta(hours=24)
    refresh_in: Duration = timedelta(days=7)
    issuer: str = "ecommerce-api"
    audience: str = "ecommerce-client"


class StripeConfig(_Group):
    secret_key: str = ""
    webhook_secret: str = ""
    publishable_key: str = ""


def _lower(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


LogLevel = Annotated[Literal["debug", "info", "warn", "warning", "error", "critical"], BeforeValidator(_lower)]


class LoggingConfig(_Group):
    level: LogLevel = "info"
    format: str = "json"
    output: str = "stdout"
    filename: str = ""
    max_size: int = 100
    max_backups: int = 3
    max_age: int = 28
    compress: bool = False


class CacheConfig(_Group):
    default_ttl: Duration = timedelta(hours=1)
    max_size: int = 1000
    cleanup_interval: Duration = timedelta(minutes=10)


class MetricsConfig(_Group):
    enabled: bool = False
    port: int = 9090
    path: str = "/metrics"
    namespace: str = "ecommerce"


DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://localhost:3001", "https://yourdomain.com")

ENV_FILE = ".env"

# Flat environment names -> (group, field).
ENV_VARS: dict[str, tuple[str, str]] = {
    "SERVER_HOST": ("server", "host"),
    "SERVER_PORT": ("server", "port"),
    "ENVIRONMENT": ("server", "environment"),
    "FRONTEND_URL": ("server", "frontend_url"),
    "CORS_DEBUG": ("server", "cors_debug"),
    "DB_DRIVER": ("database", "driver"),
    "DB_HOST": ("database", "host"),
    "DB_PORT": ("database", "port"),
    "DB_USER": ("database", "user"),
    "DB_PASSWORD": ("database", "password"),
    "DB_NAME": ("database", "database"),
    "DB_SSLMODE": ("database", "ssl_mode"),
    "DB_MAX_OPEN_CONNS": ("database", "max_open_conns"),
    "DB_MAX_IDLE_CONNS": ("database", "max_idle_conns"),
    "REDIS_HOST": ("redis", "host"),
    "REDIS_PORT": ("redis", "port"),
    "REDIS_PASSWORD": ("redis", "password"),
    "REDIS_DB": ("redis", "db"),
    "JWT_SECRET": ("jwt", "secret"),
    "JWT_EXPIRES_IN": ("jwt", "expires_in"),
    "JWT_REFRESH_IN": ("jwt", "refresh_in"),
    "JWT_ISSUER": ("jwt", "issuer"),
    "JWT_AUDIENCE": ("jwt", "audience"),
    "STRIPE_SECRET_KEY": ("stripe", "secret_key"),
    "STRIPE_WEBHOOK_SECRET": ("stripe", "webhook_secret"),
    "STRIPE_PUBLISHABLE_KEY": ("stripe", "publishable_key"),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_FORMAT": ("logging", "format"),
    "LOG_OUTPUT": ("logging", "output"),
    "LOG_FILENAME": ("logging", "filename"),
    "LOG_MAX_SIZE": ("logging", "max_size"),
    "LOG_MAX_BACKUPS": ("logging", "max_backups"),
    "LOG_MAX_AGE": ("logging", "max_age"),
    "LOG_COMPRESS": ("logging", "compress"),
    "CACHE_DEFAULT_TTL": ("cache", "default_ttl"),
    "CACHE_MAX_SIZE": ("cache", "max_size"),
    "CACHE_CLEANUP_INTERVAL": ("cache", "cleanup_interval"),
    "METRICS_ENABLED": ("metrics", "enabled"),
    "METRICS_PORT": ("metrics", "port"),
    "METRICS_PATH": ("metrics", "path"),
    "METRICS_NAMESPACE": ("metrics", "namespace"),
}


class FlatEnvSettingsSource(PydanticBaseSettingsSource):
    """
    Environment overrides keyed by flat names (SERVER_PORT, DB_HOST, ...).

    Process environment wins over a dotenv file in the working directory. A value that is empty
    or does not parse for its field is dropped, so the file/default tier wins.
    """

    def __init__(self, settings_cls: type[BaseSettings], env_file: str | Path | None = ENV_FILE) -> None:
        super().__init__(settings_cls)
        self.env_file = env_file

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        # Values are resolved per variable in __call__.
        return None, field_name, False

    def _environ(self) -> dict[str, str | None]:
        merged: dict[str, str | None] = {}
        if self.env_file and Path(self.env_file).is_file():
            merged.update(dotenv_values(self.env_file))
        merged.update(os.environ)
        return merged

    def __call__(self) -> dict[str, Any]:
        environ = self._environ()
        out: dict[str, dict[str, Any]] = {}
        for env_name, (group, key) in ENV_VARS.items():
            raw = environ.get(env_name) or ""
            if not raw:
                continue
            group_model = self.settings_cls.model_fields[group].annotation
            field = group_model.model_fields[key]
            tp = Annotated[(field.annotation, *field.metadata)] if field.metadata else field.annotation
            try:
                value = TypeAdapter(tp).validate_python(raw)
            except ValidationError:
                continue
            out.setdefault(group, {})[key] = value
        return out


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(extra="forbid")

    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    jwt: JWTConfig = Field(default_factory=JWTConfig)
    stripe: StripeConfig = Field(default_factory=StripeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Earlier sources win: environment > file contents (passed as init kwargs) > defaults.
        return (FlatEnvSettingsSource(settings_cls), init_settings)

    def is_development(self) -> bool:
        return self.server.environment.lower() == "development"

    def is_production(self) -> bool:
        return self.server.environment.lower() == "production"

    def is_testing(self) -> bool:
        return self.server.environment.lower() == "testing"

    def server_address(self) -> str:
        return f"{self.server.host}:{self.server.port}"

    def redis_address(self) -> str:
        return f"{self.redis.host}:{self.redis.port}"

    def cors_origins(self) -> list[str]:
        if self.server.frontend_url:
            return [self.server.frontend_url]
        return list(DEFAULT_CORS_ORIGINS)

    def database_dsn(self) -> str:
        db = self.database
        if db.driver == "mysql":
            return f"{db.user}:{db.password}@tcp({db.host}:{db.port})/{db.database}?parseTime=true"
        if db.driver == "sqlite3":
            return db.database
        return (
            f"host={db.host} port={db.port} user={db.user} password={db.password} "
            f"dbname={db.database} sslmode={db.ssl_mode}"
        )

    def database_url(self) -> str:
        """SQLAlchemy URL for the configured driver (postgres uses psycopg 3)."""
        db = self.database
        if db.driver == "sqlite3":
            return f"sqlite:///{db.database}"
        if db.driver == "mysql":
            url = sa.URL.create(
                "mysql+pymysql",
                username=db.user,
                password=db.password,
                host=db.host,
                port=db.port,
                database=db.database,
            )
        else:
            url = sa.URL.create(
                "postgresql+psycopg",
                username=db.user,
                password=db.password,
                host=db.host,
                port=db.port,
                database=db.database,
                query={"sslmode": db.ssl_mode},
            )
        return url.render_as_string(hide_password=False)


_CURRENT: AppConfig | None = None


def load_config(config_path: str | Path | None = None) -> AppConfig:
    global _CURRENT

    data: Any = {}
    if config_path:
        try:
            data = json.loads(Path(config_path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"failed to load config from file: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("failed to load config from file: top-level JSON value must be an object")

    try:
        config = AppConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"failed to load config from file: {e}") from e

    _CURRENT = config
    return config


def get_config() -> AppConfig:
    if _CURRENT is None:
        return load_config()
    return _CURRENT
