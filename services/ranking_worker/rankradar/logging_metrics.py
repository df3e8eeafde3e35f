from __future__ import annotations

import contextvars
import json
import logging
import time
from typing import Any

from fastapi import APIRouter, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


# Prometheus custom registry and metrics
registry = CollectorRegistry()
req_counter = Counter(
    "rankradar_requests_total",
    "Total requests",
    ["path", "method", "status"],
    registry=registry,
)
latency_hist = Histogram(
    "rankradar_latency_seconds",
    "Latency by path",
    ["path"],
    registry=registry,
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 15, 60),
)

source_sync_total = Counter(
    "rankradar_source_sync_total",
    "Source sync runs by outcome",
    ["source", "status"],
    registry=registry,
)
rows_extracted_total = Counter(
    "rankradar_rows_extracted_total", "Ranking rows extracted", ["source"], registry=registry
)
duplicate_clusters_total = Counter(
    "rankradar_duplicate_clusters_total", "Duplicate clusters reported", registry=registry
)

readiness_gauge = Gauge(
    "rankradar_readiness", "Readiness status (1=ready, 0=not ready)", registry=registry
)


def set_ready() -> None:
    readiness_gauge.set(1)


def set_unready() -> None:
    readiness_gauge.set(0)


# Correlation id context
correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": time.strftime("%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "correlation_id": correlation_id.get(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.handlers.clear()
    h = logging.StreamHandler()
    h.setFormatter(JsonFormatter())
    root.addHandler(h)
    root.setLevel(level.upper())


# Metrics router
metrics_router = APIRouter()


@metrics_router.get("/metrics")
def metrics() -> Response:
    data = generate_latest(registry)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
