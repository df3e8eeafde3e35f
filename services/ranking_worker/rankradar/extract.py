from __future__ import annotations

import html
import logging
import re
from typing import Iterator

from .config import settings
from .errors import StructuralError
from .magnitude import parse_magnitude
from .models import RankingRecord

logger = logging.getLogger(__name__)

_ROW_RE = re.compile(r"<tr[^>]*>(.*?)</tr>", re.S | re.I)
_RANK_RE = re.compile(r"<td[^>]*>\s*(\d+)\s*</td>", re.I)
_SITE_RE = re.compile(r'<a[^>]*href="/websites/([^"/]+)"[^>]*>([^<]+)</a>', re.I)
# Traffic cell renders as <span>80.4M</span>, sometimes wrapped in a <div>;
# the first <span> of the row is the traffic figure
_TRAFFIC_RE = re.compile(r"<td[^>]*>(?:(?!</td>).)*?<span[^>]*>([^<]*)</span>", re.S | re.I)
_NUMERIC_RE = re.compile(r"\s*[0-9]")


def decode_entities(text: str | None) -> str | None:
    if not text:
        return text
    return html.unescape(text).replace("\xa0", " ")


def _category_re(country: str) -> re.Pattern[str]:
    return re.compile(rf'<a[^>]*href="/websites/{re.escape(country)}/[^"]*"[^>]*>([^<]+)</a>', re.I)


def table_body(markup: str) -> str:
    """Return the contents of the first <tbody> region."""
    start = markup.find("<tbody")
    if start == -1:
        raise StructuralError("table body (<tbody>) not found")
    end = markup.find("</tbody>", start)
    if end == -1:
        raise StructuralError("table body (<tbody>) is not terminated")
    return markup[start:end]


def iter_rows(markup: str, *, country: str | None = None) -> Iterator[RankingRecord | None]:
    """Yield one item per <tr> in the table body; None for rows missing a required field.

    Raises StructuralError before yielding anything when the body is absent and
    FormatDriftError from the row whose traffic unit is unknown.
    """
    body = table_body(markup)
    category_re = _category_re(country or settings.ahrefs_country)
    for row in _ROW_RE.finditer(body):
        content = row.group(1)

        rank_m = _RANK_RE.search(content)
        if not rank_m:
            yield None
            continue

        site_m = _SITE_RE.search(content)
        website = (decode_entities(site_m.group(2)) or "").strip() if site_m else ""
        if not website:
            yield None
            continue

        cat_m = category_re.search(content)
        category = (decode_entities(cat_m.group(1)) or "").strip() if cat_m else None

        traffic_m = _TRAFFIC_RE.search(content)
        if not traffic_m or not _NUMERIC_RE.match(traffic_m.group(1)):
            yield None
            continue

        rank = int(rank_m.group(1))
        if rank <= 0:
            yield None
            continue
        yield RankingRecord(
            rank=rank,
            website=website,
            category=category or None,
            search_traffic_K=parse_magnitude(traffic_m.group(1)),
        )


def extract_table(markup: str, *, country: str | None = None) -> list[RankingRecord]:
    records: list[RankingRecord] = []
    skipped = 0
    for rec in iter_rows(markup, country=country):
        if rec is None:
            skipped += 1
        else:
            records.append(rec)
    if skipped:
        logger.debug(f"extract_table: kept={len(records)} skipped={skipped}")
    return records
