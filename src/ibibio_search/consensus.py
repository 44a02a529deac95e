from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

from .analyzer import fold_diacritics, is_multi_word, normalize
from .config import DEFAULT_SOURCE_WEIGHTS
from .ingest import infer_part_of_speech
from .schema import DictionaryEntry, Example, MultiSourceResult, PartOfSpeech, SourceName, SourceResult


UNKNOWN_SOURCE_WEIGHT = 0.5
_SLUG_RE = re.compile(r"[^\w]+")


def source_weight(source: str, weights: Mapping[str, float] | None = None) -> float:
    """Trust weight for a source name; `web_glosbe` falls under the `web` family."""
    table = DEFAULT_SOURCE_WEIGHTS if weights is None else weights
    if source in table:
        return float(table[source])
    for family, weight in table.items():
        if source.startswith(family + "_"):
            return float(weight)
    return UNKNOWN_SOURCE_WEIGHT


def final_confidence(found: Sequence[SourceResult], consensus_score: float) -> float:
    if not found:
        return 0.0
    average = sum(row.confidence for row in found) / len(found)
    source_bonus = min(len(found) * 5.0, 20.0)
    return min(average + source_bonus + consensus_score * 0.1, 100.0)


@dataclass
class _Group:
    key: str
    members: List[SourceResult] = field(default_factory=list)

    @property
    def display(self) -> str:
        return self.members[0].translation.strip()


def _group_key(translation: str, fold: bool) -> str:
    return fold_diacritics(translation) if fold else translation.strip().lower()


def _slug(text: str) -> str:
    return _SLUG_RE.sub("-", text.lower()).strip("-")


def synthesize_entry(query: str, row: SourceResult, consensus_score: float) -> DictionaryEntry:
    local_entry = row.metadata.get("entry")
    if isinstance(local_entry, DictionaryEntry):
        return local_entry
    examples = row.metadata.get("examples") or ()
    pos = PartOfSpeech.PHRASE.value if is_multi_word(query) else infer_part_of_speech(query)
    cultural = str(row.metadata.get("cultural") or "") or (
        f"Confidence: {row.confidence:g}%, Consensus: {consensus_score:.1f}%"
    )
    return DictionaryEntry(
        id=f"multi-source-{_slug(normalize(query))}-{_slug(fold_diacritics(row.translation))}",
        source_text=query.strip(),
        target_text=row.translation.strip(),
        meaning=str(row.metadata.get("meaning") or "") or f"Multi-source translation ({row.source})",
        part_of_speech=pos,
        examples=tuple(ex for ex in examples if isinstance(ex, Example)),
        cultural_note=cultural,
        category="multi-source",
    )


def reconcile(
    query: str,
    results: Sequence[SourceResult],
    *,
    weights: Mapping[str, float] | None = None,
    fold: bool = True,
) -> MultiSourceResult:
    """Merge per-source answers into one result.

    Answers are grouped by translation (case and, when `fold` is set, tone
    marks ignored). The winning group has the highest summed weighted
    confidence; within it the single best-weighted answer is reported.
    """
    found = [row for row in results if row.found and row.translation.strip()]
    if not found:
        return MultiSourceResult(
            query=query,
            source_results=list(results),
            validation_notes=["No translations found from any source"],
            source=SourceName.NONE.value,
        )

    groups: Dict[str, _Group] = {}
    for row in found:
        key = _group_key(row.translation, fold)
        groups.setdefault(key, _Group(key=key)).members.append(row)

    largest = max(len(group.members) for group in groups.values())
    consensus = largest / len(found) * 100.0
    conflicting = len(groups) > 1

    notes: list[str] = []
    if conflicting:
        notes.append(f"Found {len(groups)} different translations")
        for group in groups.values():
            names = ", ".join(row.source for row in group.members)
            notes.append(f'"{group.display}" supported by {len(group.members)} source(s): {names}')
    else:
        notes.append(f"All {len(found)} sources agree on the translation")

    def weighted(row: SourceResult) -> float:
        return row.confidence * source_weight(row.source, weights)

    ordered = list(groups.values())
    ranked = sorted(
        ordered,
        key=lambda g: (-sum(weighted(row) for row in g.members), -len(g.members), ordered.index(g)),
    )
    best_members = [max(group.members, key=weighted) for group in ranked]
    primary_row = best_members[0]

    sources: list[str] = []
    for row in found:
        if row.source not in sources:
            sources.append(row.source)

    return MultiSourceResult(
        query=query,
        primary_result=synthesize_entry(query, primary_row, consensus),
        source_results=list(results),
        final_confidence=final_confidence(found, consensus),
        consensus_score=consensus,
        conflicting_results=conflicting,
        validation_notes=notes,
        source=primary_row.source,
        alternatives=[synthesize_entry(query, row, consensus) for row in best_members[1:]],
        sources=sources,
    )
