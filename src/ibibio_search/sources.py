from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, replace
from typing import List, Mapping, Optional, Protocol, Sequence

import structlog

from .schema import AITranslation, SourceResult


logger = structlog.get_logger(__name__)


class TranslationSource(Protocol):
    name: str

    def is_configured(self) -> bool:
        """Whether the source has what it needs to be called."""

    def lookup(self, query: str) -> List[SourceResult]:
        """Query the source; may raise, the fan-out records the failure."""


class AITranslator(Protocol):
    model_name: str

    def is_configured(self) -> bool:
        """Whether credentials or an endpoint are available."""

    def translate_with_ai(self, query: str) -> Optional[AITranslation]:
        """Translate one English word or phrase, or None when the reply is unusable."""


@dataclass(frozen=True)
class AITranslationSource:
    translator: AITranslator
    name: str = "ai_groq"

    def is_configured(self) -> bool:
        return self.translator.is_configured()

    def lookup(self, query: str) -> List[SourceResult]:
        started = time.perf_counter()
        translation = self.translator.translate_with_ai(query)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        if translation is None or not translation.target_text:
            return [
                SourceResult(
                    source=self.name,
                    found=False,
                    response_time_ms=elapsed_ms,
                    error="no usable translation in model reply",
                )
            ]
        return [
            SourceResult(
                source=self.name,
                found=True,
                translation=translation.target_text,
                confidence=round(translation.confidence * 100.0, 2),
                metadata={
                    "meaning": translation.meaning,
                    "examples": translation.examples,
                    "cultural": translation.cultural_note,
                    "model": self.translator.model_name,
                },
                response_time_ms=elapsed_ms,
            )
        ]


def _failed(name: str, error: str, *, elapsed_ms: float = 0.0, **metadata: object) -> SourceResult:
    return SourceResult(source=name, found=False, error=error, metadata=dict(metadata), response_time_ms=elapsed_ms)


def _timed_lookup(source: TranslationSource, query: str) -> List[SourceResult]:
    started = time.perf_counter()
    rows = source.lookup(query)
    elapsed_ms = (time.perf_counter() - started) * 1000.0
    return [row if row.response_time_ms else replace(row, response_time_ms=elapsed_ms) for row in rows]


def fan_out(
    sources: Sequence[TranslationSource],
    query: str,
    *,
    timeout_sec: float = 15.0,
    timeouts: Mapping[str, float] | None = None,
) -> List[SourceResult]:
    """Query every configured source concurrently and wait for all of them.

    Each source gets its own deadline measured from submission. A source that
    misses it is recorded as a timeout and left running in the background; the
    caller is never blocked past the longest deadline.
    """
    results: list[SourceResult] = []
    active: list[TranslationSource] = []
    for source in sources:
        if source.is_configured():
            active.append(source)
        else:
            results.append(_failed(source.name, "source not configured", reason="not_configured"))
    if not active:
        return results

    executor = ThreadPoolExecutor(max_workers=len(active), thread_name_prefix="ibibio-source")
    started = time.monotonic()
    try:
        futures = [(source, executor.submit(_timed_lookup, source, query)) for source in active]
        for source, future in futures:
            limit = float((timeouts or {}).get(source.name, timeout_sec))
            remaining = max(0.0, started + limit - time.monotonic())
            try:
                rows = future.result(timeout=remaining)
            except FutureTimeoutError:
                future.cancel()
                elapsed_ms = (time.monotonic() - started) * 1000.0
                logger.warning("source_timeout", source=source.name, timeout_sec=limit)
                results.append(_failed(source.name, f"timeout after {limit:g}s", elapsed_ms=elapsed_ms))
                continue
            except Exception as exc:
                elapsed_ms = (time.monotonic() - started) * 1000.0
                logger.warning("source_failed", source=source.name, error=f"{type(exc).__name__}: {exc}")
                results.append(_failed(source.name, f"error:{type(exc).__name__}: {exc}", elapsed_ms=elapsed_ms))
                continue
            if not rows:
                rows = [_failed(source.name, "source returned no results")]
            results.extend(rows)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    logger.info(
        "fan_out_complete",
        query=query,
        sources=len(active),
        found=sum(1 for row in results if row.found),
        elapsed_ms=round((time.monotonic() - started) * 1000.0, 1),
    )
    return results
