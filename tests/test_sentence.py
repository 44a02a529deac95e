from __future__ import annotations

import pytest

from ibibio_search.fuzzy import FuzzySearchEngine
from ibibio_search.index import InvertedIndex
from ibibio_search.schema import DictionaryEntry
from ibibio_search.seed import seed_entries
from ibibio_search.sentence import SentenceDecomposer


PHRASE = DictionaryEntry(id="good-morning", source_text="good morning", target_text="emesiere", meaning="morning greeting")


def _decomposer(extra: list[DictionaryEntry] | None = None, **kwargs) -> SentenceDecomposer:
    index = InvertedIndex(seed_entries() + list(extra or []))
    return SentenceDecomposer(index, FuzzySearchEngine(index), **kwargs)


def test_decompose_and_multi_word() -> None:
    decomposer = _decomposer()
    assert decomposer.decompose("Big, water!") == ["big", "water"]
    assert decomposer.is_multi_word("big water")
    assert not decomposer.is_multi_word("water")


def test_word_by_word_uses_primary_senses() -> None:
    out = _decomposer().translate("Big water!")
    assert out.source == "word_by_word"
    assert out.result is not None
    assert out.result.target_text == "akpa mmong"
    assert out.result.id == "sentence-big-water"
    assert out.result.category == "sentence"
    assert out.confidence == 100.0
    assert out.coverage == 1.0
    assert [w.source for w in out.word_breakdown] == ["local_exact", "local_exact"]


def test_unknown_words_become_placeholders() -> None:
    out = _decomposer().translate("big zebra")
    assert out.result is not None
    assert out.result.target_text == "akpa [zebra]"
    assert out.confidence == 50.0
    assert out.word_breakdown[1].found is False
    assert out.word_breakdown[1].source == "unknown"


def test_nothing_found_yields_no_result() -> None:
    out = _decomposer().translate("zebra quagga")
    assert out.result is None
    assert out.source == "none"
    assert out.confidence == 0.0
    assert len(out.word_breakdown) == 2


def test_phrase_entry_beats_online_and_words() -> None:
    calls: list[str] = []

    def online(text: str):
        calls.append(text)
        return None

    out = _decomposer([PHRASE]).translate("Good morning", online=online)
    assert out.source == "local_phrase"
    assert out.result == PHRASE
    assert out.confidence == 100.0
    assert calls == []


def test_online_answer_beats_word_by_word() -> None:
    online_entry = DictionaryEntry(id="online", source_text="big zebra", target_text="akpa zebra", meaning="online")
    out = _decomposer().translate("big zebra", online=lambda text: (online_entry, 77.0))
    assert out.source == "online_sentence"
    assert out.result == online_entry
    assert out.confidence == 77.0
    assert out.local_confidence == 50.0


def test_translate_word_fuzzy_threshold() -> None:
    strict = _decomposer().translate_word("hell")
    assert strict.found is False
    assert strict.target_word == "[hell]"

    loose = _decomposer(word_threshold=0.2).translate_word("hell")
    assert loose.found is True
    assert loose.target_word == "nno"
    assert loose.source == "local_fuzzy"
    assert loose.confidence == pytest.approx(23.0)


def test_empty_sentence() -> None:
    out = _decomposer().translate("  ")
    assert out.result is None
    assert out.word_breakdown == []
