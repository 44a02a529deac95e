from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Protocol, Sequence

from .schema import DictionaryEntry


class DictionaryStore(Protocol):
    def load_entries(self) -> List[Dict[str, Any]]:
        """Return raw dictionary records; an absent store yields an empty list."""

    def save_entries(self, entries: Sequence[DictionaryEntry]) -> int:
        """Persist entries and return how many were written."""


@dataclass
class MemoryDictionaryStore:
    records: List[Dict[str, Any]] = field(default_factory=list)

    def load_entries(self) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.records]

    def save_entries(self, entries: Sequence[DictionaryEntry]) -> int:
        self.records = [entry.to_dict() for entry in entries]
        return len(self.records)


class JsonDictionaryStore:
    """Dictionary kept as a JSON array of records (or an object with an `entries` array)."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load_entries(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            payload = payload.get("entries", [])
        if not isinstance(payload, list):
            raise ValueError(f"dictionary file {self.path} does not contain a list of records")
        return payload

    def save_entries(self, entries: Sequence[DictionaryEntry]) -> int:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rows = [entry.to_dict() for entry in entries]
        self.path.write_text(json.dumps(rows, ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")
        return len(rows)
