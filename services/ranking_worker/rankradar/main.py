from __future__ import annotations

import hashlib
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import uvicorn
from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

from .config import settings
from .duplicates import find_duplicates
from .errors import RankRadarError
from .logging_metrics import (
    correlation_id,
    duplicate_clusters_total,
    latency_hist,
    metrics_router,
    req_counter,
    set_ready,
    set_unready,
    setup_logging,
)
from .models import SyncOut
from .pipeline import OUTPUT_FILES, sync_source

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    setup_logging(settings.log_level)
    # OTel instrumentation (safe if exporter unset)
    try:
        FastAPIInstrumentor.instrument_app(app)
        HTTPXClientInstrumentor().instrument()
    except Exception as e:
        logger.warning(f"OTel instrumentation failed: {e}")
    set_ready()
    yield
    set_unready()


app = FastAPI(title="RankRadar Ranking Worker", version="0.1.0", lifespan=lifespan)
app.include_router(metrics_router)


@app.middleware("http")
async def correlation_mw(request: Request, call_next):  # type: ignore[no-untyped-def]
    url = str(request.url)
    cid = hashlib.sha256(f"{url}:{time.time_ns()}".encode()).hexdigest()[:16]
    token = correlation_id.set(cid)
    try:
        response = await call_next(request)
        response.headers["x-correlation-id"] = cid
        return response
    finally:
        correlation_id.reset(token)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    start = time.perf_counter()
    status = "500"
    try:
        response = await call_next(request)
        status = str(getattr(response, "status_code", 500))
        return response
    finally:
        elapsed = time.perf_counter() - start
        path = request.url.path
        latency_hist.labels(path=path).observe(elapsed)
        req_counter.labels(path=path, method=request.method, status=status).inc()


@app.exception_handler(RankRadarError)
async def rankradar_failed(_request: Request, exc: RankRadarError):  # type: ignore[no-untyped-def]
    logger.error(f"{exc.code}: {exc}")
    return JSONResponse({"code": exc.code, "message": str(exc)}, status_code=502)


@app.exception_handler(Exception)
async def unhandled(_request: Request, exc: Exception):  # type: ignore[no-untyped-def]
    logger.exception("Unhandled error")
    return JSONResponse({"code": "ERR_UNKNOWN", "message": str(exc)}, status_code=500)


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok", "env": settings.env}


@app.post("/sources/{name}/sync", response_model=SyncOut)
async def sources_sync(name: str) -> SyncOut:
    """Fetch one ranking source now and persist it under OUTPUT_DIR.

    name: ahrefs | tranco | cloudflare
    """
    if name not in OUTPUT_FILES:
        raise HTTPException(status_code=404, detail=f"unknown source: {name}")
    rows = await sync_source(name)
    return SyncOut(source=name, count=len(rows))


@app.post("/duplicates/check")
async def duplicates_check(records: list[dict[str, Any]] = Body(...)) -> dict[str, Any]:
    """Group the posted ranking records by canonical host and report clusters."""
    report = find_duplicates(records)
    duplicate_clusters_total.inc(report.duplicates)
    return report.to_dict()


def main() -> None:
    host = os.getenv("HOST", settings.api_host)
    port = int(os.getenv("PORT", str(settings.api_port)))
    uvicorn.run(
        "rankradar.main:app",
        host=host,
        port=port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
