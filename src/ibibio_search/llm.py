from __future__ import annotations

import json
import os
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Mapping, Optional

import structlog

from .errors import SourceUnavailableError
from .extraction import parse_ai_translation
from .schema import AITranslation


logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = "You are an expert Ibibio language translator. Always respond with valid JSON only, no additional text."


def build_translation_prompt(query: str) -> str:
    lines = [
        "You are an expert English to Ibibio translator. Translate the following English word or phrase "
        "to Ibibio and provide detailed information.",
        "",
        f'English: "{query}"',
        "",
        "Respond with JSON of this shape:",
        '{"ibibio": "the Ibibio translation", "meaning": "detailed meaning in English", "confidence": 0.95, '
        '"examples": [{"english": "example sentence", "ibibio": "example sentence in Ibibio"}], '
        '"cultural": "cultural context or notes (optional)"}',
        "",
        "If you are not confident about the translation, lower the confidence score.",
    ]
    return "\n".join(lines)


@dataclass(frozen=True)
class LLMConfig:
    base_url: str = "https://api.groq.com/openai/v1"
    model: str = "llama-3.1-8b-instant"
    api_key: str = field(default_factory=lambda: os.environ.get("GROQ_API_KEY", ""), repr=False)
    timeout_sec: float = 15.0
    temperature: float = 0.3
    max_tokens: int = 1000


@dataclass(frozen=True)
class ChatCompletionsTranslator:
    """Translator backed by an OpenAI-compatible `/chat/completions` endpoint (Groq by default)."""

    config: LLMConfig = field(default_factory=LLMConfig)
    model_name: str = "chat-completions-translator"

    def is_configured(self) -> bool:
        return bool(self.config.api_key and self.config.base_url)

    def translate_with_ai(self, query: str) -> Optional[AITranslation]:
        if not self.is_configured():
            raise SourceUnavailableError("chat completions API key is not set")
        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_translation_prompt(query)},
            ],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        res = self._post_json("/chat/completions", payload)
        try:
            content = str(res["choices"][0]["message"]["content"] or "")
        except (KeyError, IndexError, TypeError) as exc:
            raise RuntimeError("chat completions response has no message content") from exc
        translation = parse_ai_translation(content)
        if translation is None:
            logger.warning("ai_reply_unparsed", model=self.config.model, reply=content[:200])
        return translation

    def _post_json(self, path: str, payload: Mapping[str, object]) -> dict:
        url = self.config.base_url.rstrip("/") + path
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        req = urllib.request.Request(
            url=url,
            data=body,
            method="POST",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.config.api_key}",
            },
        )
        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout_sec) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise RuntimeError(f"chat completions HTTP error ({exc.code}): {detail[:200]}") from exc
        except (urllib.error.URLError, TimeoutError) as exc:
            raise RuntimeError(f"chat completions connection failed. base_url={self.config.base_url}") from exc

        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"chat completions response is not valid JSON: {raw[:200]}") from exc
