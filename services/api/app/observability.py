from __future__ import annotations

import time
from collections.abc import Callable

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)


LATENCY_BUCKETS = (5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000)


class Metrics:
    """Prometheus collectors for one application context, all under a single namespace."""

    def __init__(self, namespace: str = "ecommerce") -> None:
        self.registry = CollectorRegistry()
        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)

        self.request_success_total = Counter(
            "request_success_total",
            "Count of successful requests",
            ["route", "method"],
            namespace=namespace,
            registry=self.registry,
        )
        self.request_latency = Histogram(
            "request_latency_ms",
            "Request latency in milliseconds",
            ["route", "method"],
            namespace=namespace,
            buckets=LATENCY_BUCKETS,
            registry=self.registry,
        )
        self.seed_duration = Histogram(
            "seed_duration_ms",
            "Seed unit duration in milliseconds",
            ["seeder"],
            namespace=namespace,
            buckets=(10, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000, 60000),
            registry=self.registry,
        )
        self.seed_error_total = Counter(
            "seed_error_total",
            "Seed unit failures",
            ["seeder"],
            namespace=namespace,
            registry=self.registry,
        )

    def render(self) -> bytes:
        return generate_latest(self.registry)


def add_metrics_middleware(app: FastAPI, metrics: Metrics, path: str = "/metrics") -> None:
    @app.middleware("http")
    async def _metrics(request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        resp = await call_next(request)
        route = request.scope.get("path", "unknown")
        method = request.method
        metrics.request_latency.labels(route, method).observe((time.perf_counter() - start) * 1000)
        if resp.status_code < 500:
            metrics.request_success_total.labels(route, method).inc()
        return resp

    @app.get(path, include_in_schema=False)
    async def _metrics_endpoint() -> Response:
        return Response(metrics.render(), media_type=CONTENT_TYPE_LATEST)
