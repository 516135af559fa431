from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from memocache.models.enums import EvictionStrategy


class CacheConfig(BaseModel):
    """Construction-time settings for a single ``CacheService``.

    All fields are optional. Durations are in seconds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_ttl_seconds: float = Field(default=300.0, gt=0)
    max_entries: int = Field(default=500, gt=0)
    strategy: EvictionStrategy = EvictionStrategy.LRU
    enable_metrics: bool = True
    cleanup_interval_seconds: float = Field(default=300.0, gt=0)

    @field_validator("strategy", mode="before")
    @classmethod
    def _normalise_strategy(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


@dataclass(slots=True)
class CacheEntry:
    """A stored value plus the bookkeeping the eviction policies need."""

    key: str
    value: Any
    expires_at: float
    inserted_seq: int
    access_count: int = 0

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now


class CacheMetricsSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    hits: int = 0
    misses: int = 0
    total_requests: int = 0
    hit_rate: float = 0.0
    entries_count: int = 0
    evictions: int = 0
    expirations: int = 0


class CacheInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    size: int
    memory_usage: str
    oldest_entry: str | None = None
    newest_entry: str | None = None
