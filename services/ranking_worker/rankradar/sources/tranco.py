from __future__ import annotations

import csv
import io
import logging
import zipfile

import httpx

from ..config import settings
from ..errors import SourceError
from ..http import fetch
from ..models import TrancoEntry

logger = logging.getLogger(__name__)


def parse_tranco_csv(text: str, suffix: str | None = None) -> list[TrancoEntry]:
    """Parse `rank,domain` lines and keep domains ending with `suffix`.

    Blank lines, lines with fewer than two columns and non-integer ranks are skipped.
    """
    sfx = settings.tranco_suffix if suffix is None else suffix
    out: list[TrancoEntry] = []
    for parts in csv.reader(io.StringIO(text)):
        if len(parts) < 2:
            continue
        try:
            rank = int(parts[0].strip())
        except ValueError:
            continue
        domain = parts[1].strip()
        if rank <= 0 or not domain:
            continue
        if domain.endswith(sfx):
            out.append(TrancoEntry(rank=rank, domain=domain, url=f"https://{domain}"))
    return out


def read_member(payload: bytes, member: str | None = None) -> str:
    name = member or settings.tranco_member
    try:
        with zipfile.ZipFile(io.BytesIO(payload)) as zf:
            if name not in zf.namelist():
                raise SourceError(f"{name} not found in Tranco archive")
            return zf.read(name).decode("utf-8")
    except zipfile.BadZipFile as e:
        raise SourceError(f"Tranco archive unreadable: {e}") from e


async def fetch_tranco(
    client: httpx.AsyncClient, url: str | None = None, *, suffix: str | None = None
) -> list[TrancoEntry]:
    """Download the Tranco top-1m list and filter it to one TLD suffix."""
    r = await fetch(client, url or settings.tranco_url)
    text = read_member(r.content)
    sites = parse_tranco_csv(text, suffix)
    logger.info(f"Tranco: {len(text.splitlines())} lines, kept {len(sites)}")
    return sites
