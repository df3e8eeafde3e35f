from __future__ import annotations

import json
import logging
import os
from typing import Any

import httpx

from .config import settings
from .duplicates import DuplicateReport, find_duplicates
from .errors import RankRadarError, SourceError
from .http import async_http_client
from .logging_metrics import duplicate_clusters_total, rows_extracted_total, source_sync_total
from .paths import AHREFS_FILE, CLOUDFLARE_FILE, DUPLICATES_FILE, TRANCO_FILE
from .sources import fetch_ahrefs, fetch_radar, fetch_tranco
from .storage import load_json, save_json

logger = logging.getLogger(__name__)

OUTPUT_FILES = {
    "ahrefs": AHREFS_FILE,
    "tranco": TRANCO_FILE,
    "cloudflare": CLOUDFLARE_FILE,
}


async def _run_source(name: str, client: httpx.AsyncClient) -> list[dict[str, Any]]:
    if name == "ahrefs":
        records: list[Any] = await fetch_ahrefs(client)
    elif name == "tranco":
        records = await fetch_tranco(client)
    elif name == "cloudflare":
        records = await fetch_radar(client)
    else:
        raise SourceError(f"unknown source: {name}")
    return [r.model_dump() for r in records]


async def sync_source(
    name: str, client: httpx.AsyncClient | None = None, output_dir: str | None = None
) -> list[dict[str, Any]]:
    """Fetch one ranking source and persist it as JSON.

    Fatal extraction conditions propagate as RankRadarError subclasses.
    """
    if name not in OUTPUT_FILES:
        raise SourceError(f"unknown source: {name}")
    logger.info(f"sync_source: fetching {name}")
    try:
        if client is None:
            async with async_http_client() as own:
                rows = await _run_source(name, own)
        else:
            rows = await _run_source(name, client)
    except RankRadarError as e:
        source_sync_total.labels(source=name, status=e.code).inc()
        raise
    except httpx.HTTPError as e:
        source_sync_total.labels(source=name, status="ERR_HTTP").inc()
        raise SourceError(f"{name} download failed: {e}") from e
    path = await save_json(OUTPUT_FILES[name], rows, output_dir)
    rows_extracted_total.labels(source=name).inc(len(rows))
    source_sync_total.labels(source=name, status="ok").inc()
    logger.info(f"sync_source: {name} -> {len(rows)} rows saved to {path}")
    logger.info(f"sync_source: first 5: {json.dumps(rows[:5], ensure_ascii=False)}")
    return rows


def log_report(report: DuplicateReport) -> None:
    logger.info(f"total records: {report.total}")
    logger.info(f"unique after normalization: {report.unique}")
    logger.info(f"duplicated sites: {report.duplicates}")
    for i, cluster in enumerate(report.clusters, start=1):
        members = ", ".join(
            f"{m.get('domain')} (rank: {m.get('rank')}, url: {m.get('url')})"
            if isinstance(m, dict)
            else str(m)
            for m in cluster.members
        )
        logger.info(f"{i}. {cluster.canonical}: {members}")


async def check_duplicates(
    input_path: str | None = None, output_path: str | None = None
) -> DuplicateReport:
    """Build the duplicate report for a saved ranking list and write it next to it."""
    src = input_path or os.path.join(settings.output_dir, TRANCO_FILE)
    try:
        data = load_json(src)
    except FileNotFoundError as e:
        raise SourceError(f"input not found: {src}") from e
    except json.JSONDecodeError as e:
        raise SourceError(f"input is not valid JSON: {src}: {e}") from e
    if not isinstance(data, list):
        raise SourceError(f"input must be a JSON list: {src}")
    report = find_duplicates(data)
    duplicate_clusters_total.inc(report.duplicates)
    log_report(report)
    if output_path:
        out_dir, name = os.path.split(output_path)
        await save_json(name, report.to_dict(), out_dir or ".")
    else:
        await save_json(DUPLICATES_FILE, report.to_dict(), os.path.dirname(src) or ".")
    return report
