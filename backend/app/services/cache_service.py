"""
Cache Service - in-process TTL cache for hot public listings

LRU dictionary with per-key expiry. Public list endpoints cache their
serialized responses here; admin mutations drop every key of the
affected resource.

Resource TTLs (settings):
- services: 15 minutes
- projects / products: 10 minutes
- partners: 30 minutes
- award categories: 1 hour
- nominations: 5 minutes
"""

import fnmatch
import json
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from app.core.config import settings
from app.core.logging_config import logger


@dataclass
class CacheEntry:
    """Stored value and its absolute expiry (monotonic seconds)"""
    value: Any
    expires_at: Optional[float]

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class CacheService:
    """
    LRU cache with TTL.

    - get() returns None on miss or expiry
    - set() evicts the least recently used key when max_keys is reached
    - delete_pattern() accepts shell-style wildcards ("services:*")
    """

    def __init__(self, default_ttl: int = 600, max_keys: int = 1000):
        self.default_ttl = default_ttl
        self.max_keys = max_keys
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {"hits": 0, "misses": 0, "sets": 0, "deletes": 0, "evictions": 0}

    @staticmethod
    def _now() -> float:
        return time.monotonic()

    def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            self._stats["misses"] += 1
            return None

        if entry.is_expired(self._now()):
            del self._store[key]
            self._stats["misses"] += 1
            return None

        self._store.move_to_end(key)
        self._stats["hits"] += 1
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store value; ttl=0 means no expiry"""
        ttl = self.default_ttl if ttl is None else ttl
        expires_at = self._now() + ttl if ttl > 0 else None

        if key in self._store:
            self._store.move_to_end(key)
        else:
            # Drop expired keys before evicting live ones
            if len(self._store) >= self.max_keys:
                self.purge_expired()
            while len(self._store) >= self.max_keys:
                evicted, _ = self._store.popitem(last=False)
                self._stats["evictions"] += 1
                logger.debug(f"[Cache] Evicted {evicted}")

        self._store[key] = CacheEntry(value=value, expires_at=expires_at)
        self._stats["sets"] += 1
        return True

    def has(self, key: str) -> bool:
        entry = self._store.get(key)
        if entry is None:
            return False
        if entry.is_expired(self._now()):
            del self._store[key]
            return False
        return True

    def get_many(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Values for the keys that are present"""
        found = {}
        for key in keys:
            value = self.get(key)
            if value is not None:
                found[key] = value
        return found

    def delete(self, key: str) -> int:
        if self._store.pop(key, None) is not None:
            self._stats["deletes"] += 1
            return 1
        return 0

    def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern, return the count"""
        matching = [key for key in self._store if fnmatch.fnmatchcase(key, pattern)]
        for key in matching:
            del self._store[key]
        self._stats["deletes"] += len(matching)
        if matching:
            logger.debug(f"[Cache] Deleted {len(matching)} keys matching {pattern}")
        return len(matching)

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Any:
        """Return the cached value, computing and storing it on a miss"""
        cached = self.get(key)
        if cached is not None:
            return cached

        value = await factory()
        if value is not None:
            self.set(key, value, ttl)
        return value

    def purge_expired(self) -> int:
        now = self._now()
        expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
        for key in expired:
            del self._store[key]
        return len(expired)

    def keys(self) -> List[str]:
        self.purge_expired()
        return list(self._store.keys())

    def clear(self) -> None:
        """Drop every key and reset counters"""
        self._store.clear()
        self._stats = self._empty_stats()
        logger.info("[Cache] Cleared")

    def stats(self) -> Dict[str, Any]:
        total = self._stats["hits"] + self._stats["misses"]
        hit_rate = (self._stats["hits"] / total * 100) if total else 0.0
        return {
            **self._stats,
            "keys": len(self._store),
            "max_keys": self.max_keys,
            "hit_rate": f"{hit_rate:.2f}%",
        }

    # ========== Resource helpers ==========

    @staticmethod
    def make_key(resource: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Stable key like "nominations:{"page": 1, ...}" from query params"""
        if not params:
            return f"{resource}:all"
        cleaned = {k: v for k, v in params.items() if v is not None and v != ""}
        return f"{resource}:{json.dumps(cleaned, sort_keys=True, default=str)}"

    def get_services(self, key: str):
        return self.get(f"services:{key}")

    def set_services(self, key: str, value: Any):
        return self.set(f"services:{key}", value, settings.CACHE_TTL_SERVICES)

    def invalidate_services(self) -> int:
        return self.delete_pattern("services:*")

    def get_projects(self, key: str):
        return self.get(f"projects:{key}")

    def set_projects(self, key: str, value: Any):
        return self.set(f"projects:{key}", value, settings.CACHE_TTL_PROJECTS)

    def invalidate_projects(self) -> int:
        return self.delete_pattern("projects:*")

    def get_products(self, key: str):
        return self.get(f"products:{key}")

    def set_products(self, key: str, value: Any):
        return self.set(f"products:{key}", value, settings.CACHE_TTL_PRODUCTS)

    def invalidate_products(self) -> int:
        return self.delete_pattern("products:*")

    def get_partners(self, key: str = "public"):
        return self.get(f"partners:{key}")

    def set_partners(self, value: Any, key: str = "public"):
        return self.set(f"partners:{key}", value, settings.CACHE_TTL_PARTNERS)

    def invalidate_partners(self) -> int:
        return self.delete_pattern("partners:*")

    def get_award_categories(self, key: str = "active"):
        return self.get(f"award_categories:{key}")

    def set_award_categories(self, value: Any, key: str = "active"):
        return self.set(f"award_categories:{key}", value, settings.CACHE_TTL_AWARD_CATEGORIES)

    def invalidate_award_categories(self) -> int:
        return self.delete_pattern("award_categories:*")

    def get_nominations(self, key: str):
        return self.get(f"nominations:{key}")

    def set_nominations(self, key: str, value: Any):
        return self.set(f"nominations:{key}", value, settings.CACHE_TTL_NOMINATIONS)

    def invalidate_nominations(self) -> int:
        return self.delete_pattern("nominations:*")

    def invalidate_awards(self) -> int:
        """Categories carry nomination counts, so both go together"""
        return self.invalidate_award_categories() + self.invalidate_nominations()


# Singleton instance
cache_service = CacheService(
    default_ttl=settings.CACHE_DEFAULT_TTL,
    max_keys=settings.CACHE_MAX_KEYS,
)
