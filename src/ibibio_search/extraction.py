from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

from .schema import AITranslation, Example


# Checked in order; the first pattern yielding more than one character wins.
_TRANSLATION_PATTERNS = (
    re.compile(r"Translation:\s*([^.\n]+)", re.IGNORECASE),
    re.compile(r"Ibibio:\s*([^.\n]+)", re.IGNORECASE),
    re.compile(r"means?\s*\"([^\"]+)\"", re.IGNORECASE),
    re.compile(r"is\s+\"([^\"]+)\"", re.IGNORECASE),
    re.compile(r"\"([^\"]+)\""),
    re.compile(r"→\s*([^.\n]+)"),
    re.compile(r":\s*([^.\n]+)"),
)
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_translation(text: str) -> Optional[str]:
    if not text or not text.strip():
        return None
    for pattern in _TRANSLATION_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        candidate = match.group(1).strip()
        if len(candidate) > 1:
            return candidate

    for line in text.splitlines():
        candidate = line.strip()
        if len(candidate) > 1:
            return candidate
    return None


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Pull the outermost {...} block out of a model reply, if it parses."""
    if not text:
        return None
    match = _JSON_OBJECT_RE.search(text)
    if not match:
        return None
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def parse_ai_translation(text: str) -> Optional[AITranslation]:
    payload = extract_json_object(text)
    if payload is None:
        return None
    target = str(payload.get("ibibio") or "").strip()
    if not target:
        return None
    confidence = payload.get("confidence")
    if not isinstance(confidence, (int, float)) or isinstance(confidence, bool):
        confidence = 0.5
    examples = tuple(
        Example(source_text=str(ex.get("english", "")).strip(), target_text=str(ex.get("ibibio", "")).strip())
        for ex in payload.get("examples") or []
        if isinstance(ex, dict) and str(ex.get("english", "")).strip()
    )
    return AITranslation(
        target_text=target,
        meaning=str(payload.get("meaning") or "").strip(),
        confidence=max(0.0, min(1.0, float(confidence))),
        examples=examples,
        cultural_note=str(payload.get("cultural") or "").strip(),
    )
