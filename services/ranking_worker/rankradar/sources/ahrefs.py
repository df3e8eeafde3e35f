from __future__ import annotations

import logging

import httpx

from ..config import settings
from ..errors import SourceError
from ..extract import extract_table
from ..http import fetch
from ..models import RankingRecord

logger = logging.getLogger(__name__)


async def fetch_ahrefs(
    client: httpx.AsyncClient, url: str | None = None, *, country: str | None = None
) -> list[RankingRecord]:
    """Download the AhrefsTop country page and parse its ranking table."""
    r = await fetch(client, url or settings.ahrefs_url)
    if r.history:
        logger.info(f"AhrefsTop redirected -> {r.url}")
    sites = extract_table(r.text, country=country)
    if not sites:
        raise SourceError("no data parsed from AhrefsTop table")
    return sites
