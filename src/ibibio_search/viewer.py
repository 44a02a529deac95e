from __future__ import annotations

import re
from typing import Iterable, Sequence

from .analyzer import tokenize
from .schema import MultiSourceResult, SearchResult


def highlight_text(text: str, query: str, *, max_len: int = 220) -> str:
    tokens = sorted(set(tokenize(query)), key=len, reverse=True)
    if not tokens:
        return _trim(text.strip(), max_len=max_len)

    highlighted = text
    for token in tokens:
        if len(token) < 2:
            continue
        pattern = re.compile(re.escape(token), re.IGNORECASE)
        highlighted = pattern.sub(lambda m: f"[[{m.group(0)}]]", highlighted)
    return _trim(highlighted.strip(), max_len=max_len)


def render_result_text(
    result: MultiSourceResult,
    *,
    max_alternatives: int = 5,
    include_diagnostics: bool = True,
) -> str:
    lines: list[str] = []
    entry = result.primary_result
    if entry is None:
        lines.append(f"No translation found for: {result.query}")
        if result.error:
            lines.append(f"Error: {result.error}")
    else:
        lines.append(f"{entry.source_text} -> {entry.target_text}")
        if entry.pronunciation:
            lines.append(f"Pronunciation: {entry.pronunciation}")
        lines.append(f"Part of speech: {entry.part_of_speech}")
        if entry.meaning:
            lines.append(f"Meaning: {highlight_text(entry.meaning, result.query)}")
        for example in entry.examples:
            lines.append(f"  e.g. {example.source_text} = {example.target_text}")
        if entry.cultural_note:
            lines.append(f"Culture: {entry.cultural_note}")
        cached = " (cached)" if result.cached else ""
        lines.append(f"Confidence: {result.final_confidence:.1f} via {result.source}{cached}")

    if result.word_breakdown:
        lines.append("Words: " + " ".join(f"{w.source_word}={w.target_word}" for w in result.word_breakdown))

    alternatives = result.alternatives[: max(max_alternatives, 0)]
    if alternatives:
        lines.append("Alternatives:")
        for idx, alt in enumerate(alternatives, start=1):
            lines.append(f"{idx}. {alt.target_text} - {_trim(alt.meaning, max_len=80)}")

    if include_diagnostics:
        lines.append(f"Consensus: {result.consensus_score:.1f}")
        for note in result.validation_notes:
            lines.append(f"  {note}")
        for row in result.source_results:
            status = row.translation if row.found else (row.error or "not found")
            lines.append(f"  [{row.source}] {status}")
    return "\n".join(lines)


def render_fuzzy_text(query: str, results: Sequence[SearchResult] | Iterable[SearchResult]) -> str:
    rows = list(results)
    if not rows:
        return f"No matches for: {query}"
    lines = []
    for idx, row in enumerate(rows, start=1):
        entry = row.entry
        lines.append(
            f"{idx}. {entry.source_text} -> {entry.target_text} score={row.confidence:.4f}\n"
            f"   {highlight_text(entry.meaning, query)}"
        )
    return "\n".join(lines)


def _trim(text: str, *, max_len: int) -> str:
    if max_len <= 0 or len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
