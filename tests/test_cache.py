from __future__ import annotations

import json

from ibibio_search.cache import FileCacheStorage, MemoryCacheStorage, ResultCache, make_key
from ibibio_search.schema import DictionaryEntry


ENTRY = DictionaryEntry(id="water-1", source_text="water", target_text="mmong", meaning="clear liquid")


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class BrokenStorage:
    def get(self, key):
        raise OSError("storage unavailable")

    def set(self, key, value):
        raise OSError("storage unavailable")

    def remove(self, key):
        raise OSError("storage unavailable")


def test_make_key_normalizes_query_and_flags() -> None:
    assert make_key("Hello!", False) == "hello_false"
    assert make_key("  Big  House ", True) == "big house_true"
    assert make_key("water") == "water"


def test_entries_expire_after_ttl() -> None:
    clock = FakeClock()
    cache = ResultCache(ttl_sec=10, clock=clock)
    cache.set("water_false", ENTRY, "local_dictionary", confidence=95.0)

    clock.now += 9
    hit = cache.get("water_false")
    assert hit is not None
    assert hit.result == ENTRY
    assert hit.confidence == 95.0

    clock.now += 2
    assert cache.get("water_false") is None
    assert len(cache) == 0
    clock.now -= 5
    assert cache.get("water_false") is None


def test_per_entry_ttl_override() -> None:
    clock = FakeClock()
    cache = ResultCache(ttl_sec=3600, clock=clock)
    cache.set("short", ENTRY, "web_glosbe", ttl_sec=1)
    cache.set("long", ENTRY, "web_glosbe")
    clock.now += 2
    assert cache.get("short") is None
    assert cache.get("long") is not None


def test_cache_is_shared_through_storage() -> None:
    storage = MemoryCacheStorage()
    ResultCache(storage).set("water_false", ENTRY, "local_dictionary", confidence=90.0)
    reopened = ResultCache(storage)
    hit = reopened.get("water_false")
    assert hit is not None
    assert hit.result.target_text == "mmong"
    assert hit.source == "local_dictionary"


def test_corrupt_storage_starts_empty() -> None:
    storage = MemoryCacheStorage(data={"ibibio-search-cache": "{not json"})
    cache = ResultCache(storage)
    assert len(cache) == 0


def test_failing_storage_degrades_to_memory() -> None:
    cache = ResultCache(BrokenStorage())
    cache.set("water_false", ENTRY, "local_dictionary")
    assert cache.get("water_false") is not None
    cache.clear()
    assert len(cache) == 0


def test_stats_group_by_source() -> None:
    cache = ResultCache(ttl_sec=60)
    cache.set("a", ENTRY, "local_dictionary")
    cache.set("b", ENTRY, "web_glosbe")
    cache.set("c", ENTRY, "web_glosbe")
    stats = cache.stats()
    assert stats["total_entries"] == 3
    assert stats["by_source"] == {"local_dictionary": 1, "web_glosbe": 2}
    assert stats["ttl_sec"] == 60.0


def test_file_storage_persists_between_instances(tmp_path) -> None:
    storage = FileCacheStorage(tmp_path / "cache")
    ResultCache(storage).set("water_false", ENTRY, "local_dictionary")

    files = list((tmp_path / "cache").glob("*.json"))
    assert len(files) == 1
    payload = json.loads(files[0].read_text(encoding="utf-8"))
    assert payload["water_false"]["result"]["ibibio"] == "mmong"

    reopened = ResultCache(FileCacheStorage(tmp_path / "cache"))
    assert reopened.get("water_false") is not None
    reopened.clear()
    assert list((tmp_path / "cache").glob("*.json")) == []
