from __future__ import annotations

from datetime import timedelta

import sqlalchemy as sa
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import Engine

from services.api.app.logging import logger


MAX_OPEN_CONNS = 25
MAX_IDLE_CONNS = 5
CONN_MAX_LIFETIME = timedelta(minutes=5)


class DatabaseError(RuntimeError):
    pass


class DatabaseEnv(BaseSettings):
    """
    Connection parameters read from DB_* environment variables or a .env file.

    Unlike the app config there is no fallback: blank values are reported as missing.
    """

    model_config = SettingsConfigDict(env_prefix="DB_", env_file=".env", extra="ignore")

    host: str = ""
    port: str = ""
    user: str = ""
    password: str = ""
    name: str = ""
    sslmode: str = ""

    def missing(self) -> list[str]:
        required = ("host", "port", "user", "password", "name")
        return [f"DB_{key.upper()}" for key in required if not getattr(self, key).strip()]

    def url(self) -> sa.URL:
        query = {"sslmode": self.sslmode} if self.sslmode else {}
        return sa.URL.create(
            "postgresql+psycopg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=int(self.port),
            database=self.name,
            query=query,
        )


class Database:
    """Shared handle around a pooled engine."""

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise DatabaseError("database is not open")
        return self._engine

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(sa.text("SELECT 1"))

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None


def init_database(
    env: DatabaseEnv | None = None,
    *,
    max_open_conns: int = MAX_OPEN_CONNS,
    max_idle_conns: int = MAX_IDLE_CONNS,
    conn_max_lifetime: timedelta = CONN_MAX_LIFETIME,
) -> Database:
    env = env or DatabaseEnv()
    missing = env.missing()
    if missing:
        raise DatabaseError(f"missing required database environment variables: {', '.join(missing)}")

    try:
        url = env.url()
    except ValueError as e:
        raise DatabaseError(f"invalid DB_PORT: {env.port!r}") from e

    try:
        engine = sa.create_engine(
            url,
            pool_size=max_idle_conns,
            max_overflow=max(max_open_conns - max_idle_conns, 0),
            pool_recycle=int(conn_max_lifetime.total_seconds()),
            pool_pre_ping=True,
        )
    except (sa.exc.ArgumentError, ImportError) as e:
        raise DatabaseError(f"failed to open database: {e}") from e

    db = Database(engine)
    try:
        db.ping()
    except sa.exc.SQLAlchemyError as e:
        engine.dispose()
        raise DatabaseError(f"failed to ping database: {e}") from e

    logger.info("database_connected", host=env.host, port=env.port, database=env.name)
    return db
