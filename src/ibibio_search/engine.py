from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from functools import partial
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import structlog

from .analyzer import is_multi_word, normalize
from .backend import BackendTranslationSource, HuggingFaceBackendClient
from .cache import FileCacheStorage, MemoryCacheStorage, ResultCache, make_key
from .config import SearchConfig
from .consensus import reconcile
from .disambiguation import DisambiguationResolver
from .errors import EngineNotReadyError
from .fuzzy import FuzzySearchEngine
from .index import InvertedIndex
from .ingest import LoadStats, transform_records
from .llm import ChatCompletionsTranslator, LLMConfig
from .ollama import OllamaClient, OllamaTranslator
from .schema import DictionaryEntry, MultiSourceResult, SearchResult, SourceName, SourceResult
from .scoring import EntryScorer, SemanticScorer
from .seed import seed_entries
from .sentence import SentenceDecomposer, SentenceTranslation
from .sources import AITranslationSource, TranslationSource, fan_out
from .store import DictionaryStore, JsonDictionaryStore
from .websearch import GlosbeSearchSource


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _LocalAnswer:
    entry: DictionaryEntry
    confidence: float
    reasoning: str
    good_enough: bool
    alternatives: List[DictionaryEntry] = field(default_factory=list)

    def as_source_result(self) -> SourceResult:
        return SourceResult(
            source=SourceName.LOCAL_DICTIONARY.value,
            found=True,
            translation=self.entry.target_text,
            confidence=round(self.confidence * 100.0, 2),
            metadata={"entry": self.entry, "reasoning": self.reasoning},
        )


class DictionaryEngine:
    """English to Ibibio lookup: cache, local dictionary, then external sources."""

    def __init__(
        self,
        entries: Iterable[DictionaryEntry] | None = None,
        *,
        store: DictionaryStore | None = None,
        sources: Sequence[TranslationSource] | None = None,
        cache: ResultCache | None = None,
        scorer: EntryScorer | None = None,
        resolver: DisambiguationResolver | None = None,
        config: SearchConfig | None = None,
    ):
        self.config = config or SearchConfig()
        self.store = store
        self.sources: List[TranslationSource] = list(sources or [])
        self.cache = cache if cache is not None else ResultCache(ttl_sec=self.config.cache_ttl_sec)
        self.resolver = resolver or DisambiguationResolver()
        self.index = InvertedIndex()
        self.fuzzy = FuzzySearchEngine(
            self.index,
            scorer or SemanticScorer(),
            noise_threshold=self.config.noise_threshold,
        )
        self.decomposer = SentenceDecomposer(
            self.index,
            self.fuzzy,
            resolver=self.resolver,
            word_threshold=self.config.word_match_threshold,
        )
        self.load_stats = LoadStats()
        self._load_attempted = False
        if entries is not None:
            self.replace_entries(entries)

    @classmethod
    def from_config(cls, config: SearchConfig) -> "DictionaryEngine":
        store = JsonDictionaryStore(config.dictionary_path) if config.dictionary_path else None
        storage = FileCacheStorage(Path(config.cache_dir)) if config.cache_dir else MemoryCacheStorage()
        ollama_client = (
            OllamaClient(base_url=config.ollama_base_url, timeout_sec=config.source_timeout_sec)
            if config.ollama_base_url
            else OllamaClient(timeout_sec=config.source_timeout_sec)
        )
        sources: list[TranslationSource] = [
            BackendTranslationSource(
                HuggingFaceBackendClient(
                    space_url=config.backend_url,
                    timeout_sec=config.source_timeout_sec,
                    retries=config.backend_retries,
                )
            ),
            GlosbeSearchSource(enabled=config.enable_web_search, timeout_sec=config.source_timeout_sec),
            AITranslationSource(
                ChatCompletionsTranslator(
                    LLMConfig(
                        base_url=config.chat_base_url,
                        model=config.chat_model,
                        api_key=config.chat_api_key,
                        timeout_sec=config.source_timeout_sec,
                    )
                ),
                name="ai_groq",
            ),
            AITranslationSource(
                OllamaTranslator(model=config.ollama_model, client=ollama_client),
                name="ai_ollama",
            ),
        ]
        return cls(
            store=store,
            sources=sources,
            cache=ResultCache(storage, ttl_sec=config.cache_ttl_sec),
            config=config,
        )

    # Dictionary lifecycle

    def initialize(self) -> int:
        entries: list[DictionaryEntry] = []
        stats = LoadStats()
        if self.store is not None:
            try:
                entries, stats = transform_records(self.store.load_entries())
            except (OSError, ValueError) as exc:
                stats.transformation_errors += 1
                logger.warning("dictionary_load_failed", error=f"{type(exc).__name__}: {exc}")
        if not entries and self.config.use_seed_dictionary:
            entries = seed_entries()
            stats.valid_entries = len(entries)
            logger.info("dictionary_seed_loaded", entries=len(entries))
        self.load_stats = stats
        return self.replace_entries(entries)

    def load_entries(self, rows: Iterable[Mapping[str, Any]]) -> LoadStats:
        entries, stats = transform_records(rows)
        self.load_stats = stats
        self.replace_entries(entries)
        return stats

    def replace_entries(self, entries: Iterable[DictionaryEntry]) -> int:
        count = self.index.build(entries)
        self._load_attempted = True
        return count

    def save(self) -> int:
        if self.store is None:
            raise EngineNotReadyError("no dictionary store configured")
        return self.store.save_entries(self.index.entries())

    def reset(self) -> None:
        self.index.clear()
        self.cache.clear()
        self.load_stats = LoadStats()
        self._load_attempted = False

    def _ensure_ready(self) -> None:
        if self._load_attempted:
            return
        if self.store is None and not self.config.use_seed_dictionary:
            raise EngineNotReadyError("dictionary not loaded; call initialize() or load_entries() first")
        self.initialize()

    # Lookups

    def search_fuzzy(self, text: str, limit: int | None = None) -> List[SearchResult]:
        return self.fuzzy.search_fuzzy(text, limit=self.config.fuzzy_limit if limit is None else limit)

    def search_exact(self, text: str) -> List[DictionaryEntry]:
        return self.index.search_exact(text)

    def suggest(self, prefix: str, limit: int = 10) -> List[str]:
        return self.fuzzy.suggest(prefix, limit)

    def translate_sentence(self, text: str) -> SentenceTranslation:
        self._ensure_ready()
        return self.decomposer.translate(text, online=self._online_sentence if self._has_live_sources() else None)

    def search(self, text: str, *, force_online_search: bool = False) -> MultiSourceResult:
        started = time.perf_counter()
        query = (text or "").strip()
        if not normalize(query):
            return MultiSourceResult(query=query, error="no query provided")
        self._ensure_ready()

        key = make_key(query, force_online_search)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("cache_hit", key=key, source=cached.source)
            return MultiSourceResult(
                query=query,
                primary_result=cached.result,
                final_confidence=cached.confidence if cached.confidence is not None else 0.0,
                source=cached.source,
                sources=[cached.source],
                validation_notes=["Served from cache"],
                cached=True,
                response_time_ms=self._elapsed_ms(started),
            )

        if is_multi_word(query):
            result = self._search_sentence(query)
        else:
            result = self._search_word(query, force_online_search=force_online_search)

        if result.primary_result is not None:
            self.cache.set(key, result.primary_result, result.source, confidence=result.final_confidence)
        logger.info(
            "search_complete",
            query=query,
            source=result.source,
            confidence=round(result.final_confidence, 2),
            found=result.found,
        )
        return replace(result, response_time_ms=self._elapsed_ms(started))

    def _local_lookup(self, query: str) -> Optional[_LocalAnswer]:
        results = self.search_fuzzy(query)
        exact = self.index.search_exact(query)
        if exact:
            decision = self.resolver.disambiguate(query, exact)
            if decision is not None:
                exact_ids = {entry.id for entry in exact}
                extra = [r.entry for r in results if r.entry.id not in exact_ids]
                return _LocalAnswer(
                    entry=decision.primary_entry,
                    confidence=decision.confidence,
                    reasoning=decision.reasoning,
                    good_enough=True,
                    alternatives=list(decision.alternatives) + extra,
                )
        if not results:
            return None
        top = results[0]
        return _LocalAnswer(
            entry=top.entry,
            confidence=top.confidence,
            reasoning="Best fuzzy match",
            good_enough=top.confidence >= self.config.local_confidence_threshold,
            alternatives=[r.entry for r in results[1:]],
        )

    def _search_word(self, query: str, *, force_online_search: bool) -> MultiSourceResult:
        local = self._local_lookup(query)
        if local is not None and local.good_enough and not force_online_search:
            row = local.as_source_result()
            return MultiSourceResult(
                query=query,
                primary_result=local.entry,
                source_results=[row],
                final_confidence=row.confidence,
                consensus_score=100.0,
                validation_notes=[local.reasoning],
                source=row.source,
                alternatives=local.alternatives,
                sources=[row.source],
            )

        rows = self._fan_out(query)
        if local is not None:
            rows.insert(0, local.as_source_result())
        merged = reconcile(query, rows, weights=self.config.source_weights, fold=self.config.fold_diacritics)
        if local is not None and merged.source == SourceName.LOCAL_DICTIONARY.value:
            merged = replace(merged, alternatives=local.alternatives + merged.alternatives)
        return merged

    def _search_sentence(self, query: str) -> MultiSourceResult:
        online_rows: list[SourceResult] = []
        online = partial(self._online_sentence, sink=online_rows)
        sentence = self.decomposer.translate(query, online=online if self._has_live_sources() else None)
        found_words = sum(1 for row in sentence.word_breakdown if row.found)
        notes = [f"{found_words} of {len(sentence.word_breakdown)} words found locally"]
        return MultiSourceResult(
            query=query,
            primary_result=sentence.result,
            source_results=online_rows,
            final_confidence=sentence.confidence,
            validation_notes=notes,
            source=sentence.source if sentence.result is not None else SourceName.NONE.value,
            sources=[sentence.source] if sentence.result is not None else [],
            word_breakdown=sentence.word_breakdown,
        )

    def _online_sentence(
        self,
        text: str,
        *,
        sink: List[SourceResult] | None = None,
    ) -> Optional[Tuple[DictionaryEntry, float]]:
        rows = self._fan_out(text)
        if sink is not None:
            sink.extend(rows)
        merged = reconcile(text, rows, weights=self.config.source_weights, fold=self.config.fold_diacritics)
        if merged.primary_result is None:
            return None
        return merged.primary_result, merged.final_confidence

    def _fan_out(self, query: str) -> List[SourceResult]:
        if not self.sources:
            return []
        timeouts = {
            source.name: float(getattr(source, "timeout_sec", self.config.source_timeout_sec))
            for source in self.sources
        }
        return fan_out(self.sources, query, timeout_sec=self.config.source_timeout_sec, timeouts=timeouts)

    def _has_live_sources(self) -> bool:
        return any(source.is_configured() for source in self.sources)

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000.0, 2)

    # Maintenance

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_stats(self) -> Dict[str, object]:
        return {
            "ready": self._load_attempted,
            "index_size": self.index.size,
            "index": self.index.stats(),
            "cache_size": len(self.cache),
            "cache": self.cache.stats(),
            "sources": {source.name: source.is_configured() for source in self.sources},
            "disambiguation": self.resolver.stats(),
            "load": self.load_stats.as_dict(),
        }
