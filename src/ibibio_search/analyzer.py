from __future__ import annotations

import re
import unicodedata
from typing import FrozenSet, List


# Combining marks are kept so tone-marked Ibibio vowels survive normalization.
_DISALLOWED_RE = re.compile(r"[^\w\s'\-\u0300-\u036f]")
_SPACE_RE = re.compile(r"\s+")
_EDGE_CHARS = "'-"

STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "but", "by", "for", "from",
        "has", "have", "he", "her", "his", "i", "in", "is", "it", "its", "of",
        "on", "or", "she", "that", "the", "their", "them", "they", "this",
        "to", "was", "were", "will", "with", "you", "your",
    }
)


def normalize(text: str) -> str:
    """Lowercase, strip punctuation other than apostrophes and hyphens, collapse spaces."""
    if not text:
        return ""
    lowered = unicodedata.normalize("NFC", text).lower()
    spaced = _DISALLOWED_RE.sub(" ", lowered)
    tokens = []
    for raw in _SPACE_RE.split(spaced):
        token = raw.strip(_EDGE_CHARS)
        if token:
            tokens.append(token)
    return " ".join(tokens)


def tokenize(text: str) -> List[str]:
    normalized = normalize(text)
    if not normalized:
        return []
    return normalized.split(" ")


def is_significant(
    token: str,
    *,
    min_length: int = 2,
    stop_words: FrozenSet[str] = STOP_WORDS,
) -> bool:
    if len(token) < min_length:
        return False
    return token not in stop_words


def significant_tokens(text: str, *, target: bool = False) -> List[str]:
    """Tokens worth indexing; target-language text keeps one-letter words and English stop words."""
    if target:
        return [t for t in tokenize(text) if is_significant(t, min_length=1, stop_words=frozenset())]
    return [t for t in tokenize(text) if is_significant(t)]


def is_multi_word(text: str) -> bool:
    return len(tokenize(text)) > 1


def fold_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _SPACE_RE.sub(" ", stripped.casefold()).strip()
