from __future__ import annotations

from .ahrefs import fetch_ahrefs
from .cloudflare import fetch_radar
from .tranco import fetch_tranco, parse_tranco_csv

SOURCES = ("ahrefs", "tranco", "cloudflare")

__all__ = ["SOURCES", "fetch_ahrefs", "fetch_radar", "fetch_tranco", "parse_tranco_csv"]
