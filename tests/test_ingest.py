from __future__ import annotations

import json

import pytest

from ibibio_search.errors import InvalidEntryError
from ibibio_search.ingest import (
    infer_category,
    infer_part_of_speech,
    normalize_text,
    transform_examples,
    transform_record,
    transform_records,
)
from ibibio_search.store import JsonDictionaryStore, MemoryDictionaryStore


def test_transform_record_accepts_field_synonyms() -> None:
    entry = transform_record({"English": " Water ", "translation": "mmong", "gloss": "liquid"}, 0)
    assert entry.id == "entry-0"
    assert entry.source_text == "Water"
    assert entry.target_text == "mmong"
    assert entry.meaning == "liquid"
    assert entry.part_of_speech == "noun"
    assert entry.category == "food"


def test_transform_record_keeps_explicit_fields() -> None:
    raw = {
        "id": "stop-1",
        "english": "stop",
        "ibibio": "tịre",
        "meaning": "To cease",
        "partOfSpeech": "verb",
        "pronunciation": "/tɪ̃.re/",
        "cultural": "implies completion",
        "category": "action",
        "examples": [{"english": "Stop the car", "ibibio": "Tịre motor oro"}],
    }
    entry = transform_record(raw, 7)
    assert entry.id == "stop-1"
    assert entry.part_of_speech == "verb"
    assert entry.pronunciation == "/tɪ̃.re/"
    assert entry.cultural_note == "implies completion"
    assert entry.examples[0].target_text == "Tịre motor oro"
    assert entry.to_dict()["partOfSpeech"] == "verb"


def test_meaning_falls_back_to_english() -> None:
    assert transform_record({"english": "dog", "ibibio": "ebua"}, 3).meaning == "dog"


@pytest.mark.parametrize(
    "raw, reason",
    [
        ({"english": "", "ibibio": "nno"}, "missing english field"),
        ({"english": "dog"}, "missing ibibio field"),
        ({"english": "ok", "ibibio": "ok"}, "english and ibibio are identical"),
        ({"english": "123", "ibibio": "ikie"}, "contains only numbers"),
        ({"english": "a" * 201, "ibibio": "b"}, "text too long"),
    ],
)
def test_invalid_records_are_rejected(raw, reason) -> None:
    with pytest.raises(InvalidEntryError) as excinfo:
        transform_record(raw, 4)
    assert excinfo.value.reason == reason
    assert excinfo.value.record_index == 4


def test_transform_records_counts_skips() -> None:
    rows = [
        {"english": "water", "ibibio": "mmong"},
        {"english": ""},
        "not a record",
        {"english": "love", "ibibio": "uduak"},
    ]
    entries, stats = transform_records(rows)
    assert [e.target_text for e in entries] == ["mmong", "uduak"]
    assert stats.total_raw_entries == 4
    assert stats.valid_entries == 2
    assert stats.skipped_entries == 2
    assert stats.success_rate == 0.5
    assert stats.as_dict()["transformation_errors"] == 0


def test_empty_input_has_no_success_rate() -> None:
    entries, stats = transform_records([])
    assert entries == []
    assert stats.success_rate is None


def test_normalize_text_cleans_typography() -> None:
    assert normalize_text("  a  “b” — c ") == 'a "b" - c'


def test_transform_examples_mixed_shapes() -> None:
    examples = transform_examples(
        [{"English": "Stop the car", "translation": "Tịre motor"}, "just text", {"ibibio": "orphan"}]
    )
    assert [(ex.source_text, ex.target_text) for ex in examples] == [
        ("Stop the car", "Tịre motor"),
        ("just text", ""),
    ]
    assert transform_examples("nope") == ()


@pytest.mark.parametrize(
    "word, pos",
    [
        ("running", "verb"),
        ("to go", "verb"),
        ("quickly", "adverb"),
        ("beautiful", "adjective"),
        ("under", "preposition"),
        ("they", "pronoun"),
        ("because", "conjunction"),
        ("hello", "interjection"),
        ("dog", "noun"),
    ],
)
def test_infer_part_of_speech(word, pos) -> None:
    assert infer_part_of_speech(word) == pos


def test_infer_category() -> None:
    assert infer_category("mother", "female parent") == "family"
    assert infer_category("pencil", "writing tool") == "general"


def test_json_store_round_trip(tmp_path) -> None:
    path = tmp_path / "dictionary.json"
    store = JsonDictionaryStore(path)
    assert store.load_entries() == []

    entries, _ = transform_records([{"id": "water-1", "english": "water", "ibibio": "mmong", "meaning": "liquid"}])
    assert store.save_entries(entries) == 1
    rows = store.load_entries()
    assert rows[0]["ibibio"] == "mmong"
    assert transform_records(rows)[0] == entries


def test_json_store_accepts_wrapped_entries(tmp_path) -> None:
    path = tmp_path / "dictionary.json"
    path.write_text(json.dumps({"entries": [{"english": "water", "ibibio": "mmong"}]}), encoding="utf-8")
    assert JsonDictionaryStore(path).load_entries() == [{"english": "water", "ibibio": "mmong"}]

    path.write_text("3", encoding="utf-8")
    with pytest.raises(ValueError):
        JsonDictionaryStore(path).load_entries()


def test_memory_store_saves_serialized_entries() -> None:
    store = MemoryDictionaryStore()
    entries, _ = transform_records([{"english": "water", "ibibio": "mmong"}])
    assert store.save_entries(entries) == 1
    assert store.load_entries()[0]["english"] == "water"
