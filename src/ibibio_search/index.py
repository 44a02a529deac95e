from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

import structlog

from .analyzer import normalize, significant_tokens, tokenize, is_significant
from .schema import DictionaryEntry


logger = structlog.get_logger(__name__)

EXACT = "exact"
PREFIX = "prefix"
WORDS = "words"
TARGET = "target"
MEANING = "meaning"
TABLES = (EXACT, PREFIX, WORDS, TARGET, MEANING)


@dataclass(frozen=True)
class IndexTables:
    exact: Dict[str, List[DictionaryEntry]]
    prefix: Dict[str, List[DictionaryEntry]]
    words: Dict[str, List[DictionaryEntry]]
    target: Dict[str, List[DictionaryEntry]]
    meaning: Dict[str, List[DictionaryEntry]]
    entries: List[DictionaryEntry]

    def table(self, name: str) -> Dict[str, List[DictionaryEntry]]:
        return getattr(self, name)


_EMPTY = IndexTables(exact={}, prefix={}, words={}, target={}, meaning={}, entries=[])


def _meaning_phrases(meaning: str) -> List[str]:
    tokens = tokenize(meaning)
    out = [t for t in tokens if is_significant(t)]
    for n in (2, 3):
        for i in range(len(tokens) - n + 1):
            gram = tokens[i : i + n]
            if all(is_significant(t) for t in gram):
                out.append(" ".join(gram))
    return out


def build_tables(entries: Sequence[DictionaryEntry] | Iterable[DictionaryEntry]) -> IndexTables:
    postings: dict[str, dict[str, dict[str, DictionaryEntry]]] = {
        name: defaultdict(dict) for name in TABLES
    }
    kept: list[DictionaryEntry] = []
    seen_ids: set[str] = set()
    skipped = 0

    for entry in entries:
        if not entry.is_indexable:
            skipped += 1
            logger.warning("index_entry_skipped", entry_id=entry.id, reason="missing source or target text")
            continue
        if entry.id in seen_ids:
            skipped += 1
            logger.warning("index_entry_skipped", entry_id=entry.id, reason="duplicate id")
            continue
        seen_ids.add(entry.id)
        kept.append(entry)

        key = normalize(entry.source_text)
        if key:
            postings[EXACT][key][entry.id] = entry
            for end in range(1, len(key) + 1):
                postings[PREFIX][key[:end]][entry.id] = entry
        for token in significant_tokens(entry.source_text):
            postings[WORDS][token][entry.id] = entry

        target_key = normalize(entry.target_text)
        if target_key:
            postings[TARGET][target_key][entry.id] = entry
        for token in significant_tokens(entry.target_text, target=True):
            postings[TARGET][token][entry.id] = entry

        for phrase in _meaning_phrases(entry.meaning):
            postings[MEANING][phrase][entry.id] = entry

    if skipped:
        logger.info("index_build_skipped_entries", skipped=skipped)

    frozen = {name: {k: list(v.values()) for k, v in table.items()} for name, table in postings.items()}
    return IndexTables(entries=kept, **frozen)


class InvertedIndex:
    """Five lookup tables over dictionary entries.

    `build` prepares a complete new set of tables before publishing it with a
    single assignment, so concurrent readers never see a half-built index.
    """

    def __init__(self, entries: Iterable[DictionaryEntry] | None = None) -> None:
        self._tables: IndexTables = _EMPTY
        self._built = False
        if entries is not None:
            self.build(entries)

    def build(self, entries: Iterable[DictionaryEntry]) -> int:
        tables = build_tables(entries)
        self._tables = tables
        self._built = True
        logger.info("index_built", entries=len(tables.entries), exact_keys=len(tables.exact))
        return len(tables.entries)

    def clear(self) -> None:
        self._tables = _EMPTY
        self._built = False

    @property
    def is_built(self) -> bool:
        return self._built

    @property
    def size(self) -> int:
        return len(self._tables.entries)

    def snapshot(self) -> IndexTables:
        return self._tables

    def entries(self) -> List[DictionaryEntry]:
        return list(self._tables.entries)

    def exact_keys(self) -> List[str]:
        return list(self._tables.exact.keys())

    def lookup(self, table: str, term: str) -> List[DictionaryEntry]:
        if table not in TABLES:
            raise ValueError(f"unknown index table: {table}")
        return list(self._tables.table(table).get(term, ()))

    def search_exact(self, query: str) -> List[DictionaryEntry]:
        key = normalize(query)
        if not key:
            return []
        return self.lookup(EXACT, key)

    def search_prefix(self, prefix: str) -> List[DictionaryEntry]:
        key = normalize(prefix)
        if not key:
            return []
        return self.lookup(PREFIX, key)

    def search_target(self, text: str) -> List[DictionaryEntry]:
        key = normalize(text)
        if not key:
            return []
        tables = self._tables
        out: dict[str, DictionaryEntry] = {e.id: e for e in tables.target.get(key, ())}
        for token in significant_tokens(key, target=True):
            for entry in tables.target.get(token, ()):
                out.setdefault(entry.id, entry)
        return list(out.values())

    def stats(self) -> Dict[str, int]:
        tables = self._tables
        stats = {name: len(tables.table(name)) for name in TABLES}
        stats["entries"] = len(tables.entries)
        return stats
