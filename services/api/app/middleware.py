from __future__ import annotations

from collections.abc import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from services.api.app.logging import logger
from services.api.app.settings import AppConfig


CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"]
CORS_ALLOW_HEADERS = [
    "Origin",
    "Content-Type",
    "Accept",
    "Authorization",
    "X-Requested-With",
    "X-CSRF-Token",
]
CORS_EXPOSE_HEADERS = ["Content-Length"]
CORS_MAX_AGE_SECONDS = 12 * 60 * 60

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

DEBUG_CORS_ALLOW_HEADERS = (
    "Content-Type, Content-Length, Accept-Encoding, X-CSRF-Token, Authorization, "
    "accept, origin, Cache-Control, X-Requested-With"
)
DEBUG_CORS_ALLOW_METHODS = "POST, OPTIONS, GET, PUT, DELETE"


def install_cors(app: FastAPI, config: AppConfig) -> None:
    # FRONTEND_URL, when set, replaces the local dev origins entirely.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_credentials=True,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
        expose_headers=CORS_EXPOSE_HEADERS,
        max_age=CORS_MAX_AGE_SECONDS,
    )


def install_security_headers(app: FastAPI) -> None:
    @app.middleware("http")
    async def _security_headers(request: Request, call_next: Callable) -> Response:
        resp = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            resp.headers[name] = value
        return resp


def install_debug_cors(app: FastAPI) -> None:
    """
    Permissive CORS for chasing browser-side failures: echoes whatever Origin the request carries.

    Never enable this outside local development.
    """

    @app.middleware("http")
    async def _debug_cors(request: Request, call_next: Callable) -> Response:
        origin = request.headers.get("origin", "")
        logger.debug("cors_debug_request", origin=origin, method=request.method, path=request.url.path)

        if request.method == "OPTIONS":
            resp = Response(status_code=204)
        else:
            resp = await call_next(request)

        resp.headers["Access-Control-Allow-Origin"] = origin
        resp.headers["Access-Control-Allow-Credentials"] = "true"
        resp.headers["Access-Control-Allow-Headers"] = DEBUG_CORS_ALLOW_HEADERS
        resp.headers["Access-Control-Allow-Methods"] = DEBUG_CORS_ALLOW_METHODS

        logger.debug("cors_debug_response", status=resp.status_code, allow_origin=origin)
        return resp
