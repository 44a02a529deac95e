from __future__ import annotations

from typing import Any, Mapping

from .schema import DictionaryEntry, Example, MultiSourceResult, SearchResult, SourceResult, WordTranslation


def result_to_payload(
    result: MultiSourceResult,
    *,
    max_alternatives: int = 5,
    include_diagnostics: bool = True,
) -> dict[str, Any]:
    limit = max(0, int(max_alternatives))
    payload: dict[str, Any] = {
        "query": result.query,
        "found": result.found,
        "result": entry_to_payload(result.primary_result) if result.primary_result else None,
        "confidence": round(float(result.final_confidence), 2),
        "source": result.source,
        "sources": list(result.sources),
        "alternatives": [entry_to_payload(entry) for entry in result.alternatives[:limit]],
        "cached": result.cached,
        "response_time_ms": result.response_time_ms,
    }
    if result.word_breakdown:
        payload["word_breakdown"] = [_serialize_word(row) for row in result.word_breakdown]
    if result.error:
        payload["error"] = result.error
    if include_diagnostics:
        payload["diagnostics"] = {
            "consensus_score": round(float(result.consensus_score), 2),
            "conflicting_results": result.conflicting_results,
            "validation_notes": list(result.validation_notes),
            "source_results": [_serialize_source_result(row) for row in result.source_results],
        }
    return payload


def fuzzy_results_to_payload(query: str, results: list[SearchResult]) -> dict[str, Any]:
    return {
        "query": query,
        "count": len(results),
        "results": [
            {
                "confidence": round(float(row.confidence), 4),
                "source": row.source,
                "stage_scores": dict(row.stage_scores),
                "entry": entry_to_payload(row.entry),
            }
            for row in results
        ],
    }


def entry_to_payload(entry: DictionaryEntry) -> dict[str, Any]:
    return entry.to_dict()


def _serialize_word(row: WordTranslation) -> dict[str, Any]:
    return {
        "source_word": row.source_word,
        "target_word": row.target_word,
        "found": row.found,
        "confidence": row.confidence,
        "source": row.source,
    }


def _serialize_source_result(row: SourceResult) -> dict[str, Any]:
    return {
        "source": row.source,
        "found": row.found,
        "translation": row.translation,
        "confidence": row.confidence,
        "response_time_ms": round(float(row.response_time_ms), 2),
        "error": row.error,
        "metadata": _jsonable(row.metadata),
    }


def _jsonable(value: Any) -> Any:
    if isinstance(value, (DictionaryEntry, Example)):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
