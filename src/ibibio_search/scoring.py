from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Pattern, Protocol, Tuple

from .analyzer import normalize
from .schema import DictionaryEntry, SemanticScore


_BRACKETS_RE = re.compile(r"[()\[\]]")
_SEGMENT_SPLIT_RE = re.compile(r"[;,]")
_STRUCTURED_DEF_RE = re.compile(r"^(to\s+)?\w+[;,]")

# {q} is replaced with the escaped query.
_COMPOUND_SENSE_TEMPLATES = (
    r"{q} from",
    r"{q} something",
    r"{q} someone",
    r"{q} (something|someone|from)",
    r"prevent.*{q}",
    r"make.*{q}",
    r"cause.*{q}",
    r"{q}.*from happening",
    r"to.*{q}.*from",
)


@lru_cache(maxsize=512)
def _word_re(query: str) -> Pattern[str]:
    return re.compile(rf"\b{re.escape(query)}\b")


@lru_cache(maxsize=512)
def _compound_res(query: str) -> Tuple[Pattern[str], ...]:
    esc = re.escape(query)
    return tuple(re.compile(t.replace("{q}", esc)) for t in _COMPOUND_SENSE_TEMPLATES)


def _starts_with_sense(query: str, meaning: str) -> bool:
    if meaning == query:
        return True
    if meaning.startswith((f"{query},", f"{query};", f"{query} ")):
        return True
    return re.match(rf"to {re.escape(query)}\b", meaning) is not None


def primary_match(query: str, source_text: str) -> float:
    q = normalize(query)
    s = normalize(source_text)
    if not q or not s:
        return 0.0
    if q == s:
        return 1.0
    if " " not in q and q in s.split(" "):
        return 0.95
    if re.match(rf"{re.escape(q)}\b", s):
        return 0.9
    if _word_re(q).search(s):
        return 0.85 if s.startswith(q) else 0.7
    if q in s:
        return 0.4
    return 0.0


def position_score(query: str, meaning: str) -> float:
    if not query or not meaning:
        return 0.0
    cleaned = _BRACKETS_RE.sub("", meaning)
    for i, raw in enumerate(_SEGMENT_SPLIT_RE.split(cleaned)):
        segment = raw.strip()
        pos = segment.find(query)
        if pos < 0:
            continue
        segment_weight = 1.0 - 0.2 * i
        if pos == 0:
            position_weight = 1.0
        elif pos < len(segment) * 0.25:
            position_weight = 0.8
        elif pos < len(segment) * 0.5:
            position_weight = 0.6
        else:
            position_weight = 0.4
        return max(0.2, segment_weight * position_weight)
    return 0.0


def context_score(query: str, meaning: str) -> float:
    if not query or not meaning:
        return 0.0
    if _starts_with_sense(query, meaning):
        return 1.0
    if any(p.search(meaning) for p in _compound_res(query)):
        return 0.3
    indicators = (f"{query},", f"{query};", f"{query}.", f", {query},", f", {query};", f", {query}.")
    for indicator in indicators:
        idx = meaning.find(indicator)
        if idx >= 0:
            return 1.0 if idx == 0 else 0.9
    hit = _word_re(query).search(meaning)
    if hit:
        if hit.start() < 10:
            return 0.8
        if hit.start() < 20:
            return 0.7
        return 0.6
    return 0.2


def definition_score(query: str, meaning: str) -> float:
    if not query or not meaning:
        return 0.0
    if _starts_with_sense(query, meaning):
        return 1.0
    first = _SEGMENT_SPLIT_RE.split(meaning, maxsplit=1)[0].strip()
    if first == query or first == f"to {query}" or first.startswith(f"{query} "):
        return 0.95
    if _STRUCTURED_DEF_RE.match(meaning) and query in first:
        return 0.8 if _word_re(query).search(first) else 0.6
    if re.search(rf"\(var\.?\s*{re.escape(query)}\)", meaning):
        return 0.7
    if _word_re(query).search(meaning):
        return 0.4
    return 0.2


class EntryScorer(Protocol):
    model_name: str

    def score(self, query: str, entry: DictionaryEntry) -> SemanticScore:
        """Score how well an entry's primary sense answers the query."""


@dataclass(frozen=True)
class SemanticScorer:
    model_name: str = "semantic-scorer"
    primary_weight: float = 0.40
    position_weight: float = 0.25
    context_weight: float = 0.20
    definition_weight: float = 0.15

    def score(self, query: str, entry: DictionaryEntry) -> SemanticScore:
        q = normalize(query)
        if not q:
            return SemanticScore(0.0, 0.0, 0.0, 0.0, 0.0)
        meaning = entry.meaning.strip().lower()
        primary = primary_match(q, entry.source_text)
        position = position_score(q, meaning)
        context = context_score(q, meaning)
        definition = definition_score(q, meaning)
        total = (
            self.primary_weight * primary
            + self.position_weight * position
            + self.context_weight * context
            + self.definition_weight * definition
        )
        return SemanticScore(
            primary_match=primary,
            position_score=position,
            context_score=context,
            definition_score=definition,
            total_score=round(total, 6),
        )

    def explain(self, query: str, entry: DictionaryEntry) -> str:
        s = self.score(query, entry)
        return (
            f"{entry.source_text} -> {entry.target_text}: total={s.total_score:.3f} "
            f"(primary={s.primary_match:.2f}*{self.primary_weight:.2f}, "
            f"position={s.position_score:.2f}*{self.position_weight:.2f}, "
            f"context={s.context_score:.2f}*{self.context_weight:.2f}, "
            f"definition={s.definition_score:.2f}*{self.definition_weight:.2f})"
        )
