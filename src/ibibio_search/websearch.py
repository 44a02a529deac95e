from __future__ import annotations

import html
import re
import time
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import List

from .schema import SourceResult


_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")
# Tried in order; the first marker that yields anything wins.
_TRANSLATION_MARKERS = (
    r'class="[^"]*\btranslation-item\b[^"]*"',
    r'class="[^"]*\bphrase-translation\b[^"]*"',
    r'data-testid="translation"',
    r'class="[^"]*\bphraselist-item\b[^"]*"',
    r'class="[^"]*\btranslation-text\b[^"]*"',
)
_GENERIC_BLOCK_RE = re.compile(r"<(?P<tag>div|span|p)\b[^>]*>(?P<body>[^<]*)</(?P=tag)>", re.IGNORECASE)
_IBIBIO_CHARS_RE = re.compile(r"[ụọịẹ]", re.IGNORECASE)
_IBIBIO_SHAPE_RE = re.compile(r"^[a-zụọịẹ\s]{2,20}$", re.IGNORECASE)
_COMMON_ENGLISH = {"the", "and", "translation", "dictionary", "english", "example", "sentence", "glosbe"}

MAX_TRANSLATIONS = 5


@dataclass(frozen=True)
class WebTranslation:
    text: str
    confidence: float
    rank: int


def _clean_html(text: str) -> str:
    clean = _TAG_RE.sub(" ", text)
    clean = html.unescape(clean)
    return _SPACE_RE.sub(" ", clean).strip()


def _block_re(marker: str) -> re.Pattern[str]:
    return re.compile(
        rf"<(?P<tag>\w+)\b[^>]*{marker}[^>]*>(?P<body>.*?)</(?P=tag)>",
        re.IGNORECASE | re.DOTALL,
    )


def _looks_like_ibibio(text: str) -> bool:
    if any(word in _COMMON_ENGLISH for word in text.lower().split()):
        return False
    return bool(_IBIBIO_CHARS_RE.search(text) or _IBIBIO_SHAPE_RE.match(text))


def parse_glosbe_html(raw_html: str, *, max_results: int = MAX_TRANSLATIONS) -> List[WebTranslation]:
    for marker in _TRANSLATION_MARKERS:
        out: list[WebTranslation] = []
        for idx, match in enumerate(_block_re(marker).finditer(raw_html)):
            if idx >= max_results:
                break
            text = _clean_html(match.group("body"))
            if text and len(text) < 100:
                out.append(WebTranslation(text=text, confidence=round(0.8 - idx * 0.1, 2), rank=idx + 1))
        if out:
            return out

    fallback: list[WebTranslation] = []
    for idx, match in enumerate(_GENERIC_BLOCK_RE.finditer(raw_html)):
        if idx >= 20 or len(fallback) >= 3:
            break
        text = _clean_html(match.group("body"))
        if 2 < len(text) < 50 and _looks_like_ibibio(text):
            fallback.append(WebTranslation(text=text, confidence=0.6, rank=len(fallback) + 1))
    return fallback


@dataclass(frozen=True)
class GlosbeSearchSource:
    name: str = "web_glosbe"
    endpoint: str = "https://glosbe.com/en/ibb/"
    enabled: bool = True
    timeout_sec: float = 10.0
    user_agent: str = "Mozilla/5.0 (compatible; IbibioSearch/0.1)"
    max_bytes: int = 1_500_000

    def is_configured(self) -> bool:
        return self.enabled

    def fetch(self, query: str) -> str:
        url = self.endpoint + urllib.parse.quote(query.strip())
        request = urllib.request.Request(url=url, headers={"User-Agent": self.user_agent})
        with urllib.request.urlopen(request, timeout=self.timeout_sec) as resp:
            return resp.read(max(0, int(self.max_bytes))).decode("utf-8", errors="ignore")

    def lookup(self, query: str) -> List[SourceResult]:
        clean = query.strip()
        if not clean:
            return [SourceResult(source=self.name, found=False, error="empty query")]
        started = time.perf_counter()
        translations = parse_glosbe_html(self.fetch(clean))
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        if not translations:
            return [SourceResult(source=self.name, found=False, response_time_ms=elapsed_ms, error="No translations found")]
        best = translations[0]
        return [
            SourceResult(
                source=self.name,
                found=True,
                translation=best.text,
                confidence=round(best.confidence * 100.0, 2),
                metadata={"alternatives": [row.text for row in translations[1:]], "site": "glosbe.com"},
                response_time_ms=elapsed_ms,
            )
        ]
