from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class PartOfSpeech(str, Enum):
    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PRONOUN = "pronoun"
    PREPOSITION = "preposition"
    CONJUNCTION = "conjunction"
    INTERJECTION = "interjection"
    PHRASE = "phrase"


class SourceName(str, Enum):
    LOCAL_DICTIONARY = "local_dictionary"
    ENHANCED_BACKEND_AI = "enhanced_backend_ai"
    ENHANCED_BACKEND_LOCAL = "enhanced_backend_local"
    ENHANCED_BACKEND_WEB = "enhanced_backend_web"
    WEB_GLOSBE = "web_glosbe"
    NONE = "none"


@dataclass(frozen=True)
class Example:
    source_text: str
    target_text: str

    def to_dict(self) -> Dict[str, str]:
        return {"english": self.source_text, "ibibio": self.target_text}


@dataclass(frozen=True)
class DictionaryEntry:
    id: str
    source_text: str
    target_text: str
    meaning: str = ""
    part_of_speech: str = PartOfSpeech.NOUN.value
    examples: Tuple[Example, ...] = ()
    pronunciation: str = ""
    cultural_note: str = ""
    category: str = "general"

    @property
    def has_examples(self) -> bool:
        return bool(self.examples)

    @property
    def is_indexable(self) -> bool:
        return bool(self.source_text.strip()) and bool(self.target_text.strip())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "english": self.source_text,
            "ibibio": self.target_text,
            "meaning": self.meaning,
            "partOfSpeech": self.part_of_speech,
            "examples": [ex.to_dict() for ex in self.examples],
            "pronunciation": self.pronunciation,
            "cultural": self.cultural_note,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "DictionaryEntry":
        examples = tuple(
            Example(source_text=str(ex.get("english", "")), target_text=str(ex.get("ibibio", "")))
            for ex in raw.get("examples") or []
            if isinstance(ex, Mapping)
        )
        return cls(
            id=str(raw.get("id", "")),
            source_text=str(raw.get("english", "")),
            target_text=str(raw.get("ibibio", "")),
            meaning=str(raw.get("meaning", "")),
            part_of_speech=str(raw.get("partOfSpeech", PartOfSpeech.NOUN.value)),
            examples=examples,
            pronunciation=str(raw.get("pronunciation", "")),
            cultural_note=str(raw.get("cultural", "")),
            category=str(raw.get("category", "general")),
        )


@dataclass(frozen=True)
class SemanticScore:
    primary_match: float
    position_score: float
    context_score: float
    definition_score: float
    total_score: float

    def as_dict(self) -> Dict[str, float]:
        return {
            "primary_match": self.primary_match,
            "position_score": self.position_score,
            "context_score": self.context_score,
            "definition_score": self.definition_score,
            "total_score": self.total_score,
        }


@dataclass(frozen=True)
class SearchResult:
    entry: DictionaryEntry
    confidence: float
    source: str = "dictionary"
    stage_scores: Dict[str, float] = field(default_factory=dict)

    @property
    def is_exact(self) -> bool:
        return self.stage_scores.get("primary_match", 0.0) >= 1.0


@dataclass(frozen=True)
class CacheEntry:
    result: DictionaryEntry
    timestamp: float
    source: str
    confidence: Optional[float] = None
    ttl_sec: Optional[float] = None


@dataclass(frozen=True)
class SourceResult:
    source: str
    found: bool
    translation: str = ""
    confidence: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)
    response_time_ms: float = 0.0
    error: Optional[str] = None


@dataclass(frozen=True)
class WordTranslation:
    source_word: str
    target_word: str
    found: bool
    confidence: float
    source: str


@dataclass(frozen=True)
class RuleAlternative:
    translation: str
    priority: Optional[int] = None
    context: str = ""
    usage: str = ""


@dataclass(frozen=True)
class DisambiguationRule:
    primary_translation: str
    priority: int = 1
    context: str = ""
    usage: str = ""
    alternatives: Tuple[RuleAlternative, ...] = ()


@dataclass(frozen=True)
class DisambiguationResult:
    primary_entry: DictionaryEntry
    alternatives: List[DictionaryEntry]
    reasoning: str
    confidence: float


@dataclass(frozen=True)
class MultiSourceResult:
    query: str
    primary_result: Optional[DictionaryEntry] = None
    source_results: List[SourceResult] = field(default_factory=list)
    final_confidence: float = 0.0
    consensus_score: float = 0.0
    conflicting_results: bool = False
    validation_notes: List[str] = field(default_factory=list)
    source: str = SourceName.NONE.value
    alternatives: List[DictionaryEntry] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    word_breakdown: List[WordTranslation] = field(default_factory=list)
    cached: bool = False
    error: Optional[str] = None
    response_time_ms: float = 0.0

    @property
    def result(self) -> Optional[DictionaryEntry]:
        return self.primary_result

    @property
    def confidence(self) -> float:
        return self.final_confidence

    @property
    def found(self) -> bool:
        return self.primary_result is not None


@dataclass(frozen=True)
class AITranslation:
    target_text: str
    meaning: str = ""
    confidence: float = 0.5
    examples: Tuple[Example, ...] = ()
    cultural_note: str = ""


@dataclass(frozen=True)
class BackendResponse:
    ai_response: str = ""
    local_dictionary_text: str = ""
    web_search_text: str = ""
    status: str = ""
    error: Optional[str] = None
