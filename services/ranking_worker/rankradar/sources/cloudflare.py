from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from ..config import settings
from ..errors import ConfigError, SourceError
from ..http import fetch
from ..models import RadarEntry

PLACEHOLDER_TOKEN = "YOUR_API_TOKEN_HERE"


async def fetch_radar(
    client: httpx.AsyncClient,
    *,
    location: str | None = None,
    limit: int | None = None,
    token: str | None = None,
) -> list[RadarEntry]:
    """Fetch the Cloudflare Radar top-domains ranking for one location."""
    api_token = token if token is not None else settings.cloudflare_api_token
    if not api_token or api_token == PLACEHOLDER_TOKEN:
        raise ConfigError("CLOUDFLARE_API_TOKEN is not set")
    params = {
        "location": location or settings.radar_location,
        "limit": str(limit or settings.radar_limit),
        "format": "json",
    }
    headers = {"Authorization": f"Bearer {api_token}", "Content-Type": "application/json"}
    r = await fetch(client, settings.cloudflare_api_base, params=params, headers=headers)
    try:
        body: dict[str, Any] = r.json()
    except ValueError as e:
        raise SourceError(f"Cloudflare Radar returned invalid JSON: {e}") from e
    if not body.get("success"):
        raise SourceError(f"Cloudflare Radar API error: {body.get('errors')}")
    result = body.get("result") or {}
    # Radar names the first (only) ranking `top_0`
    top = result.get("top_0") or result.get("top") or []
    try:
        return [
            RadarEntry(rank=it["rank"], domain=it["domain"], categories=it.get("categories") or [])
            for it in top
        ]
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise SourceError(f"Cloudflare Radar returned malformed entry: {e}") from e
