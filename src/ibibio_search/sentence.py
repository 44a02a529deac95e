from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import structlog

from .analyzer import is_multi_word, tokenize
from .disambiguation import DisambiguationResolver
from .fuzzy import FuzzySearchEngine
from .index import InvertedIndex
from .schema import DictionaryEntry, PartOfSpeech, WordTranslation


logger = structlog.get_logger(__name__)

OnlineTranslate = Callable[[str], Optional[Tuple[DictionaryEntry, float]]]

_SLUG_RE = re.compile(r"[^\w]+")


@dataclass(frozen=True)
class SentenceTranslation:
    text: str
    result: Optional[DictionaryEntry] = None
    confidence: float = 0.0
    source: str = "none"
    word_breakdown: List[WordTranslation] = field(default_factory=list)
    coverage: float = 0.0
    local_confidence: float = 0.0


def placeholder(word: str) -> str:
    return f"[{word}]"


class SentenceDecomposer:
    """Translates multi-word input: whole phrase first, then online, then word by word."""

    def __init__(
        self,
        index: InvertedIndex,
        fuzzy: FuzzySearchEngine,
        *,
        resolver: DisambiguationResolver | None = None,
        word_threshold: float = 0.4,
    ) -> None:
        self.index = index
        self.fuzzy = fuzzy
        self.resolver = resolver or DisambiguationResolver()
        self.word_threshold = word_threshold

    def decompose(self, text: str) -> List[str]:
        return tokenize(text)

    def is_multi_word(self, text: str) -> bool:
        return is_multi_word(text)

    def translate_word(self, word: str) -> WordTranslation:
        exact = self.index.search_exact(word)
        if exact:
            chosen = self.resolver.disambiguate(word, exact)
            entry = chosen.primary_entry if chosen else exact[0]
            return WordTranslation(word, entry.target_text, True, 100.0, "local_exact")

        results = self.fuzzy.search_fuzzy(word, limit=1)
        if results and results[0].confidence >= self.word_threshold:
            top = results[0]
            return WordTranslation(word, top.entry.target_text, True, round(top.confidence * 100.0, 2), "local_fuzzy")
        return WordTranslation(word, placeholder(word), False, 0.0, "unknown")

    def translate(self, text: str, *, online: OnlineTranslate | None = None) -> SentenceTranslation:
        words = self.decompose(text)
        if not words:
            return SentenceTranslation(text=text)

        breakdown = [self.translate_word(word) for word in words]
        found = [row for row in breakdown if row.found]
        coverage = len(found) / len(words)
        average = sum(row.confidence for row in found) / len(found) if found else 0.0
        local_confidence = float(round(coverage * average))
        base = dict(text=text, word_breakdown=breakdown, coverage=coverage, local_confidence=local_confidence)

        phrase = self.index.search_exact(text)
        if phrase:
            chosen = self.resolver.disambiguate(text, phrase)
            entry = chosen.primary_entry if chosen else phrase[0]
            return SentenceTranslation(result=entry, confidence=100.0, source="local_phrase", **base)

        if online is not None:
            answer = online(text)
            if answer is not None:
                entry, confidence = answer
                return SentenceTranslation(result=entry, confidence=confidence, source="online_sentence", **base)

        if not found:
            logger.info("sentence_untranslated", text=text, words=len(words))
            return SentenceTranslation(**base)

        slug = _SLUG_RE.sub("-", " ".join(words)).strip("-")
        entry = DictionaryEntry(
            id=f"sentence-{slug}",
            source_text=text.strip(),
            target_text=" ".join(row.target_word for row in breakdown),
            meaning=f"Word-by-word translation ({len(found)} of {len(words)} words found)",
            part_of_speech=PartOfSpeech.PHRASE.value,
            category="sentence",
        )
        return SentenceTranslation(result=entry, confidence=local_confidence, source="word_by_word", **base)
