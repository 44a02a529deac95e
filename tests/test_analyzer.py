from __future__ import annotations

import unicodedata

from ibibio_search.analyzer import (
    fold_diacritics,
    is_multi_word,
    is_significant,
    normalize,
    significant_tokens,
    tokenize,
)


def test_normalize_lowercases_and_strips_punctuation() -> None:
    assert normalize("Hello, World!") == "hello world"
    assert normalize("  What's   up?? ") == "what's up"


def test_normalize_trims_edge_apostrophes_and_hyphens() -> None:
    assert normalize("'quoted' -dash- don't") == "quoted dash don't"
    assert normalize("--- ''") == ""


def test_normalize_is_idempotent() -> None:
    samples = ["Hello, World!", "  'tịre'  -- ", "Mkpọ̀ eket!!", "thank-you very much", ""]
    for text in samples:
        once = normalize(text)
        assert normalize(once) == once


def test_normalize_keeps_tone_marks() -> None:
    assert normalize("Tịre") == "tịre"
    assert normalize("Mkpọ̀!") == unicodedata.normalize("NFC", "mkpọ̀")


def test_tokenize_has_no_empty_tokens() -> None:
    assert tokenize("  ") == []
    assert tokenize("big,  house!") == ["big", "house"]


def test_is_significant_filters_short_and_stop_words() -> None:
    assert not is_significant("the")
    assert not is_significant("a")
    assert is_significant("go")
    assert is_significant("x", min_length=1, stop_words=frozenset())


def test_significant_tokens_for_source_and_target() -> None:
    assert significant_tokens("the big house") == ["big", "house"]
    assert significant_tokens("a kpa", target=True) == ["a", "kpa"]


def test_is_multi_word() -> None:
    assert is_multi_word("thank you")
    assert not is_multi_word(" hello! ")


def test_fold_diacritics() -> None:
    assert fold_diacritics("Tịre") == "tire"
    assert fold_diacritics("  Mkpọ̀ ") == "mkpo"
