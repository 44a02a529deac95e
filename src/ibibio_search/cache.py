from __future__ import annotations

import hashlib
import json
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol

import structlog

from .analyzer import normalize
from .schema import CacheEntry, DictionaryEntry


logger = structlog.get_logger(__name__)

DEFAULT_TTL_SEC = 24 * 60 * 60
STORAGE_KEY = "ibibio-search-cache"


class CacheStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        """Return the stored text for key, or None when absent."""

    def set(self, key: str, value: str) -> None:
        """Store text under key."""

    def remove(self, key: str) -> None:
        """Delete key if present."""


@dataclass
class MemoryCacheStorage:
    data: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FileCacheStorage:
    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def _path(self, key: str) -> Path:
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:16]
        return self.base_dir / f"{digest}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def make_key(query: str, *flags: object) -> str:
    """Cache key: normalized query plus mode flags, e.g. `hello_false`."""
    parts = [normalize(query)]
    for flag in flags:
        parts.append(str(flag).lower() if isinstance(flag, bool) else str(flag))
    return "_".join(parts)


def _entry_to_json(entry: CacheEntry) -> dict:
    return {
        "result": entry.result.to_dict(),
        "timestamp": entry.timestamp,
        "source": entry.source,
        "confidence": entry.confidence,
        "ttl_sec": entry.ttl_sec,
    }


def _entry_from_json(raw: dict) -> CacheEntry:
    return CacheEntry(
        result=DictionaryEntry.from_dict(raw["result"]),
        timestamp=float(raw["timestamp"]),
        source=str(raw.get("source", "")),
        confidence=raw.get("confidence"),
        ttl_sec=raw.get("ttl_sec"),
    )


class ResultCache:
    """TTL cache of resolved lookups, mirrored to a storage backend.

    Expiry is checked lazily on `get`. Storage failures degrade to an empty
    cache or to in-memory-only writes; they never reach the caller.
    """

    def __init__(
        self,
        storage: CacheStorage | None = None,
        *,
        ttl_sec: float = DEFAULT_TTL_SEC,
        clock: Callable[[], float] = time.time,
        storage_key: str = STORAGE_KEY,
    ) -> None:
        self.storage = storage
        self.ttl_sec = float(ttl_sec)
        self._clock = clock
        self._storage_key = storage_key
        self._entries: Dict[str, CacheEntry] = self._load()

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def _load(self) -> Dict[str, CacheEntry]:
        if self.storage is None:
            return {}
        try:
            raw = self.storage.get(self._storage_key)
            if not raw:
                return {}
            payload = json.loads(raw)
            return {str(key): _entry_from_json(value) for key, value in payload.items()}
        except Exception as exc:
            logger.warning("cache_load_failed", error=f"{type(exc).__name__}: {exc}")
            return {}

    def _persist(self) -> None:
        if self.storage is None:
            return
        payload = {key: _entry_to_json(entry) for key, entry in self._entries.items()}
        try:
            self.storage.set(self._storage_key, json.dumps(payload, ensure_ascii=False, sort_keys=True))
        except Exception as exc:
            logger.warning("cache_persist_failed", error=f"{type(exc).__name__}: {exc}")

    def get(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        ttl_sec = self.ttl_sec if entry.ttl_sec is None else float(entry.ttl_sec)
        if (self._now_ms() - entry.timestamp) > ttl_sec * 1000.0:
            self._entries.pop(key, None)
            self._persist()
            logger.debug("cache_expired", key=key)
            return None
        return entry

    def set(
        self,
        key: str,
        value: DictionaryEntry,
        source: str,
        *,
        confidence: float | None = None,
        ttl_sec: float | None = None,
    ) -> CacheEntry:
        entry = CacheEntry(
            result=value,
            timestamp=self._now_ms(),
            source=source,
            confidence=confidence,
            ttl_sec=ttl_sec,
        )
        self._entries[key] = entry
        self._persist()
        return entry

    def clear(self) -> None:
        self._entries = {}
        if self.storage is None:
            return
        try:
            self.storage.remove(self._storage_key)
        except Exception as exc:
            logger.warning("cache_clear_failed", error=f"{type(exc).__name__}: {exc}")

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, object]:
        by_source = Counter(entry.source for entry in self._entries.values())
        return {
            "total_entries": len(self._entries),
            "by_source": dict(sorted(by_source.items())),
            "ttl_sec": self.ttl_sec,
        }
