from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

import structlog

from .analyzer import normalize, significant_tokens, tokenize
from .index import IndexTables, InvertedIndex
from .schema import DictionaryEntry, SearchResult
from .scoring import EntryScorer, SemanticScorer


logger = structlog.get_logger(__name__)


def _gather_candidates(tables: IndexTables, query: str) -> Dict[str, DictionaryEntry]:
    found: dict[str, DictionaryEntry] = {}

    def add(rows: List[DictionaryEntry]) -> None:
        for entry in rows:
            found.setdefault(entry.id, entry)

    add(tables.exact.get(query, []))
    add(tables.prefix.get(query, []))

    for token in significant_tokens(query):
        add(tables.words.get(token, []))
        add(tables.meaning.get(token, []))
    if len(tokenize(query)) > 1:
        add(tables.meaning.get(query, []))

    add(tables.target.get(query, []))
    for token in significant_tokens(query, target=True):
        add(tables.target.get(token, []))

    # Two-way containment; a headword inside the query must sit on word boundaries.
    padded = f" {query} "
    for key, rows in tables.exact.items():
        if query in key or f" {key} " in padded:
            add(rows)
    return found


def _sort_key(result: SearchResult) -> tuple:
    entry = result.entry
    return (
        0 if result.is_exact else 1,
        -result.confidence,
        0 if entry.has_examples else 1,
        len(entry.source_text),
        entry.source_text.lower(),
    )


@dataclass
class FuzzySearchEngine:
    index: InvertedIndex
    scorer: EntryScorer = field(default_factory=SemanticScorer)
    noise_threshold: float = 0.05

    def search_fuzzy(self, query: str, limit: int = 10) -> List[SearchResult]:
        q = normalize(query)
        if not q or limit <= 0 or not self.index.is_built:
            return []

        tables = self.index.snapshot()
        candidates = _gather_candidates(tables, q)

        results: list[SearchResult] = []
        for entry in candidates.values():
            score = self.scorer.score(q, entry)
            if score.total_score <= self.noise_threshold:
                continue
            results.append(
                SearchResult(
                    entry=entry,
                    confidence=min(1.0, score.total_score),
                    source="dictionary",
                    stage_scores=score.as_dict(),
                )
            )

        results.sort(key=_sort_key)
        logger.debug("fuzzy_search", query=q, candidates=len(candidates), kept=len(results))
        return results[:limit]

    def suggest(self, prefix: str, limit: int = 10) -> List[str]:
        """Distinct headwords starting with the prefix, shortest first."""
        rows = self.index.search_prefix(prefix)
        words = sorted({entry.source_text for entry in rows}, key=lambda w: (len(w), w.lower()))
        return words[: max(0, limit)]
