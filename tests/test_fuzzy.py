from __future__ import annotations

from ibibio_search.fuzzy import FuzzySearchEngine
from ibibio_search.index import InvertedIndex
from ibibio_search.schema import DictionaryEntry, Example
from ibibio_search.seed import seed_entries


def _engine(entries: list[DictionaryEntry] | None = None, **kwargs) -> FuzzySearchEngine:
    return FuzzySearchEngine(InvertedIndex(seed_entries() if entries is None else entries), **kwargs)


def test_exact_headwords_rank_first() -> None:
    results = _engine().search_fuzzy("stop")
    assert {r.entry.id for r in results[:2]} == {"stop-1", "stop-2"}
    assert all(r.is_exact for r in results[:2])
    assert all(r.confidence > 0.05 for r in results)


def test_full_phrase_match_outranks_single_words() -> None:
    entries = [
        DictionaryEntry(id="thank-1", source_text="thank", target_text="kọm", meaning="to express gratitude"),
        DictionaryEntry(id="you-1", source_text="you", target_text="afo", meaning="second person pronoun"),
        DictionaryEntry(id="thank-you", source_text="thank you", target_text="sosọ", meaning="expression of gratitude"),
    ]
    results = _engine(entries).search_fuzzy("Thank you!")
    assert results[0].entry.id == "thank-you"
    assert {r.entry.id for r in results} >= {"thank-1", "you-1"}


def test_examples_break_score_ties() -> None:
    entries = [
        DictionaryEntry(id="dog-b", source_text="dog", target_text="ebua", meaning="a domestic animal"),
        DictionaryEntry(
            id="dog-a",
            source_text="dog",
            target_text="ebua",
            meaning="a domestic animal",
            examples=(Example("the dog barks", "ebua ọdọ"),),
        ),
    ]
    results = _engine(entries).search_fuzzy("dog")
    assert [r.entry.id for r in results] == ["dog-a", "dog-b"]


def test_noise_threshold_drops_weak_candidates() -> None:
    assert _engine(noise_threshold=0.99).search_fuzzy("stop") == []


def test_no_candidates_or_empty_inputs() -> None:
    engine = _engine()
    assert engine.search_fuzzy("zzz") == []
    assert engine.search_fuzzy("   ") == []
    assert engine.search_fuzzy("stop", limit=0) == []
    assert _engine([]).search_fuzzy("hello") == []
    assert FuzzySearchEngine(InvertedIndex()).search_fuzzy("hello") == []


def test_search_is_stable_under_normalization() -> None:
    engine = _engine()
    assert [r.entry.id for r in engine.search_fuzzy("Hello!")] == [r.entry.id for r in engine.search_fuzzy("hello")]


def test_limit_caps_results() -> None:
    assert len(_engine().search_fuzzy("stop", limit=1)) == 1


def test_suggest_orders_shortest_first() -> None:
    engine = _engine()
    assert engine.suggest("g") == ["god", "good"]
    assert engine.suggest("g", limit=1) == ["god"]
    assert engine.suggest("") == []
