from __future__ import annotations

import json
import os
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Optional

import structlog

from .extraction import parse_ai_translation
from .llm import SYSTEM_PROMPT, build_translation_prompt
from .schema import AITranslation


logger = structlog.get_logger(__name__)

DEFAULT_OLLAMA_URL = "http://127.0.0.1:11434"


@dataclass(frozen=True)
class OllamaClient:
    """Minimal client for a local Ollama server; only non-streaming JSON generation is used."""

    base_url: str = field(default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", DEFAULT_OLLAMA_URL))
    timeout_sec: float = 60.0

    def generate_json(self, *, model: str, prompt: str, system: str = "", temperature: float = 0.3) -> str:
        """Return the raw `response` text of a JSON-mode generation."""
        request_body: dict[str, object] = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "format": "json",
            "options": {"temperature": temperature},
        }
        if system:
            request_body["system"] = system
        reply = self._call("/api/generate", request_body)
        return str(reply.get("response") or "")

    def _call(self, path: str, request_body: dict[str, object]) -> dict:
        req = urllib.request.Request(
            url=self.base_url.rstrip("/") + path,
            data=json.dumps(request_body, ensure_ascii=False).encode("utf-8"),
            method="POST",
            headers={"Content-Type": "application/json"},
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_sec) as resp:
                text = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            raise RuntimeError(f"Ollama returned HTTP {exc.code} for {path}") from exc
        except (urllib.error.URLError, TimeoutError) as exc:
            raise RuntimeError(f"cannot reach Ollama at {self.base_url}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Ollama reply for {path} is not JSON: {text[:200]}") from exc


@dataclass(frozen=True)
class OllamaTranslator:
    model: str = ""
    client: OllamaClient = field(default_factory=OllamaClient)
    model_name: str = "ollama-translator"

    def is_configured(self) -> bool:
        return bool(self.model and self.client.base_url)

    def translate_with_ai(self, query: str) -> Optional[AITranslation]:
        raw = self.client.generate_json(
            model=self.model,
            prompt=build_translation_prompt(query),
            system=SYSTEM_PROMPT,
        )
        translation = parse_ai_translation(raw)
        if translation is None:
            logger.warning("ai_reply_unparsed", model=self.model, reply=raw[:200])
        return translation
