from __future__ import annotations

import json
import time
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Protocol

import structlog

from .errors import SourceUnavailableError
from .extraction import extract_translation
from .schema import BackendResponse, SourceResult


logger = structlog.get_logger(__name__)

# Confidence given to a translation pulled out of each backend section.
SECTION_CONFIDENCE = {
    "enhanced_backend_ai": 85.0,
    "enhanced_backend_local": 90.0,
    "enhanced_backend_web": 80.0,
}


class BackendClient(Protocol):
    def is_configured(self) -> bool:
        """Whether a backend endpoint is set."""

    def translate(self, query: str) -> BackendResponse:
        """Run the backend translation pipeline for one query."""


def _parse_backend_payload(payload: Mapping[str, Any]) -> BackendResponse:
    rows = payload.get("data")
    if not isinstance(rows, list) or not rows or not isinstance(rows[0], Mapping):
        raise RuntimeError("Invalid response format from translation backend")
    row = rows[0]
    return BackendResponse(
        ai_response=str(row.get("ai_response") or ""),
        local_dictionary_text=str(row.get("local_dictionary") or ""),
        web_search_text=str(row.get("web_search") or ""),
        status=str(row.get("status") or ""),
        error=row.get("error") or None,
    )


@dataclass(frozen=True)
class HuggingFaceBackendClient:
    """Client for a Gradio Space exposing the translate interface at `/api/predict`."""

    space_url: str = ""
    timeout_sec: float = 15.0
    retries: int = 2
    retry_backoff_sec: float = 1.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def is_configured(self) -> bool:
        return bool(self.space_url.strip())

    def translate(self, query: str) -> BackendResponse:
        if not self.is_configured():
            raise SourceUnavailableError("translation backend URL is not configured")
        clean = query.strip()
        if not clean:
            raise ValueError("query must not be empty")

        attempts = max(1, int(self.retries))
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                payload = self._post_json("/api/predict", {"data": [clean], "fn_index": 0})
                return _parse_backend_payload(payload)
            except RuntimeError as exc:
                last_error = exc
                logger.warning("backend_attempt_failed", attempt=attempt, attempts=attempts, error=str(exc))
                if attempt < attempts:
                    self.sleep(self.retry_backoff_sec * attempt)
        raise RuntimeError(f"translation backend failed after {attempts} attempts: {last_error}")

    def _post_json(self, path: str, payload: Mapping[str, object]) -> dict:
        url = self.space_url.rstrip("/") + path
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        req = urllib.request.Request(
            url=url,
            data=body,
            method="POST",
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_sec) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise RuntimeError(f"backend HTTP error ({exc.code}) for {path}: {detail[:200]}") from exc
        except (urllib.error.URLError, TimeoutError) as exc:
            raise RuntimeError(f"backend connection failed for {path}. space_url={self.space_url}") from exc

        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"backend response is not valid JSON for {path}: {raw[:200]}") from exc


@dataclass(frozen=True)
class BackendTranslationSource:
    client: BackendClient
    name: str = "enhanced_backend"

    def is_configured(self) -> bool:
        return self.client.is_configured()

    def lookup(self, query: str) -> List[SourceResult]:
        started = time.perf_counter()
        response = self.client.translate(query)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        if response.status == "error":
            return [
                SourceResult(
                    source=self.name,
                    found=False,
                    metadata={"status": response.status},
                    response_time_ms=elapsed_ms,
                    error=response.error or "backend error",
                )
            ]

        sections = (
            ("enhanced_backend_ai", response.ai_response),
            ("enhanced_backend_local", response.local_dictionary_text),
            ("enhanced_backend_web", response.web_search_text),
        )
        results: list[SourceResult] = []
        for source, text in sections:
            if not text:
                continue
            translation = extract_translation(text)
            results.append(
                SourceResult(
                    source=source,
                    found=translation is not None,
                    translation=translation or "",
                    confidence=SECTION_CONFIDENCE[source] if translation else 0.0,
                    metadata={"full_response": text},
                    response_time_ms=elapsed_ms,
                )
            )
        if results:
            return results
        return [
            SourceResult(
                source=self.name,
                found=False,
                metadata={"status": response.status},
                response_time_ms=elapsed_ms,
                error=response.error,
            )
        ]
