from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from services.api.app.db import Database, init_database
from services.api.app.logging import configure_logging, logger
from services.api.app.observability import Metrics
from services.api.app.settings import AppConfig, load_config


@dataclass
class AppContext:
    config: AppConfig
    database: Database
    metrics: Metrics = field(default_factory=Metrics)

    def close(self) -> None:
        self.database.close()


def build_context(config_path: str | Path | None = None) -> AppContext:
    """Load config, set up logging and open the database. Errors here are fatal to startup."""
    config = load_config(config_path)
    configure_logging(
        config.logging.level,
        log_format=config.logging.format,
        output=config.logging.output,
        filename=config.logging.filename,
    )
    database = init_database(
        max_open_conns=config.database.max_open_conns,
        max_idle_conns=config.database.max_idle_conns,
        conn_max_lifetime=config.database.conn_max_lifetime,
    )
    logger.info("context_ready", environment=config.server.environment, address=config.server_address())
    return AppContext(config=config, database=database, metrics=Metrics(config.metrics.namespace))
