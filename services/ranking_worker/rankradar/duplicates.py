from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from pydantic import BaseModel

from .domain import canonical_host


def default_key(record: Any) -> str | None:
    """Read the raw host of a record: `domain`, falling back to `website`."""
    if isinstance(record, Mapping):
        return record.get("domain") or record.get("website")
    return getattr(record, "domain", None) or getattr(record, "website", None)


def _as_dict(record: Any) -> Any:
    if isinstance(record, BaseModel):
        return record.model_dump()
    if isinstance(record, Mapping):
        return dict(record)
    return record


@dataclass
class DuplicateCluster:
    canonical: str
    members: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"normalized": self.canonical, "domains": [_as_dict(m) for m in self.members]}


@dataclass
class DuplicateReport:
    total: int
    unique: int
    clusters: list[DuplicateCluster] = field(default_factory=list)

    @property
    def duplicates(self) -> int:
        return len(self.clusters)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "unique": self.unique,
            "duplicates": self.duplicates,
            "duplicateList": [c.to_dict() for c in self.clusters],
        }


def find_duplicates(
    records: Iterable[Any], key_of: Callable[[Any], str | None] = default_key
) -> DuplicateReport:
    """Group records whose hosts canonicalize to the same identity.

    Records with an empty raw host count towards `total` only. Clusters keep
    input order for their members and are sorted by canonical key using plain
    code-point comparison; singletons are counted in `unique` but not reported.
    """
    groups: dict[str, list[Any]] = {}
    total = 0
    for rec in records:
        total += 1
        raw = key_of(rec)
        if not raw:
            continue
        groups.setdefault(canonical_host(raw), []).append(rec)
    clusters = [
        DuplicateCluster(canonical=key, members=members)
        for key, members in sorted(groups.items())
        if len(members) > 1
    ]
    return DuplicateReport(total=total, unique=len(groups), clusters=clusters)
