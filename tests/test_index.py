from __future__ import annotations

import pytest

from ibibio_search.index import MEANING, TARGET, WORDS, InvertedIndex
from ibibio_search.schema import DictionaryEntry


def _entries() -> list[DictionaryEntry]:
    return [
        DictionaryEntry(id="stop-1", source_text="stop", target_text="tịre", meaning="To cease; to end"),
        DictionaryEntry(id="stop-2", source_text="Stop", target_text="tịbe", meaning="To prevent; to block"),
        DictionaryEntry(id="water-1", source_text="water", target_text="mmong", meaning="Clear liquid essential for life"),
        DictionaryEntry(id="house-1", source_text="big house", target_text="ufok akpa", meaning="a large dwelling"),
    ]


def test_exact_and_prefix_lookup() -> None:
    index = InvertedIndex(_entries())
    assert {e.id for e in index.search_exact("STOP!")} == {"stop-1", "stop-2"}
    assert {e.id for e in index.search_prefix("st")} == {"stop-1", "stop-2"}
    assert {e.id for e in index.search_prefix("w")} == {"water-1"}


def test_word_meaning_and_target_tables() -> None:
    index = InvertedIndex(_entries())
    assert [e.id for e in index.lookup(WORDS, "house")] == ["house-1"]
    assert [e.id for e in index.lookup(MEANING, "clear liquid")] == ["water-1"]
    assert [e.id for e in index.lookup(MEANING, "liquid essential")] == ["water-1"]
    assert [e.id for e in index.lookup(TARGET, "akpa")] == ["house-1"]
    assert [e.id for e in index.search_target("mmong")] == ["water-1"]


def test_invalid_and_duplicate_entries_are_skipped() -> None:
    rows = _entries() + [
        DictionaryEntry(id="bad", source_text="", target_text="nno"),
        DictionaryEntry(id="water-1", source_text="water", target_text="duplicate"),
    ]
    index = InvertedIndex(rows)
    assert index.size == 4
    assert [e.target_text for e in index.search_exact("water")] == ["mmong"]


def test_unbuilt_index_returns_empty_results() -> None:
    index = InvertedIndex()
    assert not index.is_built
    assert index.search_exact("stop") == []
    assert index.search_prefix("s") == []
    assert index.search_target("mmong") == []


def test_rebuild_replaces_previous_tables() -> None:
    index = InvertedIndex(_entries())
    index.build([DictionaryEntry(id="love-1", source_text="love", target_text="uduak")])
    assert index.search_exact("stop") == []
    assert [e.id for e in index.search_exact("love")] == ["love-1"]
    assert index.stats()["entries"] == 1


def test_unknown_table_raises() -> None:
    index = InvertedIndex(_entries())
    with pytest.raises(ValueError):
        index.lookup("bogus", "stop")
