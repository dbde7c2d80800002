import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

DEFAULT_TTL_SECONDS = 3600


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    created_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.created_at >= self.ttl


class InMemoryCache:
    """
    Process-local key/value cache with a fixed TTL per entry.
    Nothing survives a restart and there is no size bound; expired entries
    are dropped the next time they are read.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            self._entries.pop(key, None)
            return None

        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(key=key, value=value, created_at=self._clock(), ttl=self.ttl)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def search_cache_key(query: str, location: Optional[str], radius: int, place_type: Optional[str]) -> str:
    # Order-sensitive: the tuple is serialized as a JSON array
    return "search:" + json.dumps([query, location, radius, place_type])


def details_cache_key(place_id: str) -> str:
    return f"details:{place_id}"
