from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RankingRecord(BaseModel):
    """One row of a scraped ranking table. Traffic is in thousands."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(gt=0)
    website: str = Field(min_length=1)
    category: str | None = None
    search_traffic_K: int = Field(ge=0)


class TrancoEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    rank: int = Field(gt=0)
    domain: str = Field(min_length=1)
    url: str


class RadarEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    rank: int
    domain: str
    categories: list[dict] = Field(default_factory=list)  # type: ignore[type-arg]


class SyncOut(BaseModel):
    source: str
    count: int
