from __future__ import annotations

from fastapi import FastAPI, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from services.api.app.context import AppContext
from services.api.app.db import DatabaseError
from services.api.app.logging import logger
from services.api.app.middleware import install_cors, install_debug_cors, install_security_headers
from services.api.app.observability import add_metrics_middleware


def create_app(ctx: AppContext) -> FastAPI:
    app = FastAPI(title="E-commerce API", version="0.1.0")
    app.state.ctx = ctx

    if ctx.config.metrics.enabled:
        add_metrics_middleware(app, ctx.metrics, path=ctx.config.metrics.path)
    install_security_headers(app)
    # Added last so it is the outermost middleware and answers preflights first.
    if ctx.config.server.cors_debug:
        logger.warning("cors_debug_enabled")
        install_debug_cors(app)
    else:
        install_cors(app, ctx.config)

    @app.get("/healthz")
    def healthz() -> dict:
        try:
            ctx.database.ping()
        except (SQLAlchemyError, DatabaseError) as e:
            logger.warning("healthz_database_unavailable", error=str(e))
            raise HTTPException(status_code=503, detail="database unavailable") from e
        return {"ok": True, "environment": ctx.config.server.environment}

    return app
