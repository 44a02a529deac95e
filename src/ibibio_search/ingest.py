from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Sequence, Tuple

import structlog

from .errors import InvalidEntryError
from .schema import DictionaryEntry, Example, PartOfSpeech


logger = structlog.get_logger(__name__)

MAX_TEXT_LENGTH = 200

# Raw files come from several exporters; earlier keys win.
FIELD_SYNONYMS = {
    "english": ("english", "English", "english_definition", "english_word", "word", "term"),
    "ibibio": ("ibibio", "Ibibio", "ibibio_word", "ibibio_translation", "translation", "target"),
    "meaning": ("meaning", "Meaning", "definition", "english_definition", "description", "gloss"),
    "part_of_speech": ("partOfSpeech", "part_of_speech", "Part of Speech", "pos", "type"),
    "pronunciation": ("pronunciation", "Pronunciation", "phonetic", "ipa"),
    "cultural": ("cultural", "Cultural", "context", "cultural_context", "notes"),
    "category": ("category", "Category", "type", "domain", "field"),
}
EXAMPLE_SOURCE_KEYS = ("english", "English", "example", "source")
EXAMPLE_TARGET_KEYS = ("ibibio", "Ibibio", "translation", "target")

_SPACE_RE = re.compile(r"\s+")
_DIGITS_RE = re.compile(r"^\d+$")

_POS_PATTERNS: Tuple[Tuple[str, Tuple[re.Pattern[str], ...]], ...] = (
    (
        PartOfSpeech.VERB.value,
        (
            re.compile(r"ing$"),
            re.compile(r"ed$"),
            re.compile(r"^to\s+"),
            re.compile(
                r"^(is|am|are|was|were|be|been|have|has|had|do|does|did|will|would"
                r"|can|could|should|shall|may|might)\s"
            ),
        ),
    ),
    (
        PartOfSpeech.ADVERB.value,
        (
            re.compile(r"ly$"),
            re.compile(r"ward$"),
            re.compile(r"wise$"),
            re.compile(
                r"^(very|quite|really|extremely|completely|totally|absolutely|almost|nearly"
                r"|hardly|just|only|even|still|already|soon|often|always|never|sometimes|usually)$"
            ),
        ),
    ),
    (
        PartOfSpeech.ADJECTIVE.value,
        (
            re.compile(r"(ful|less|ous|ive|able|ible)$"),
            re.compile(
                r"^(good|bad|big|small|hot|cold|new|old|young|beautiful|ugly|fast|slow|high|low"
                r"|long|short|wide|narrow|thick|thin|heavy|light|dark|bright|clean|dirty|rich"
                r"|poor|happy|sad|angry|calm|easy|hard|soft|loud|quiet|sweet|bitter|sour|salty)$"
            ),
        ),
    ),
    (
        PartOfSpeech.PREPOSITION.value,
        (
            re.compile(
                r"^(in|on|at|by|for|of|with|to|from|into|onto|upon|under|over|above|below"
                r"|between|among|through|across|around|behind|before|after|during|within"
                r"|without|against|toward|towards|beneath|beside|beyond|inside|outside)$"
            ),
        ),
    ),
    (
        PartOfSpeech.PRONOUN.value,
        (
            re.compile(
                r"^(i|you|he|she|it|we|they|me|him|her|us|them|my|your|his|its|our|their"
                r"|mine|yours|hers|ours|theirs|this|that|these|those|who|whom|whose|which|what)$"
            ),
        ),
    ),
    (
        PartOfSpeech.CONJUNCTION.value,
        (
            re.compile(
                r"^(and|or|but|so|yet|nor|because|since|although|though|while|if|unless"
                r"|until|when|where|why|how|whether)$"
            ),
        ),
    ),
    (
        PartOfSpeech.INTERJECTION.value,
        (re.compile(r"^(hello|hi|hey|goodbye|bye|yes|no|oh|ah|wow|ouch|hurray|alas|bravo)$"),),
    ),
)

_CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("family", ("family", "mother", "father", "parent", "child", "son", "daughter", "brother",
                "sister", "uncle", "aunt", "cousin", "grandmother", "grandfather")),
    ("food", ("food", "eat", "drink", "meal", "breakfast", "lunch", "dinner", "fruit",
              "vegetable", "meat", "fish", "rice", "bread", "water", "milk")),
    ("body", ("body", "head", "eye", "nose", "mouth", "ear", "hand", "foot", "arm", "leg",
              "finger", "toe", "hair", "skin", "heart")),
    ("nature", ("tree", "flower", "plant", "animal", "bird", "river", "mountain", "forest",
                "sky", "sun", "moon", "star", "rain")),
    ("time", ("time", "day", "night", "morning", "afternoon", "evening", "week", "month",
              "year", "today", "tomorrow", "yesterday", "hour", "minute")),
    ("emotion", ("love", "hate", "happy", "sad", "angry", "fear", "joy", "peace", "worry",
                 "hope", "dream", "feel", "emotion")),
    ("action", ("go", "come", "walk", "run", "sit", "stand", "sleep", "wake", "work", "play",
                "speak", "listen", "see", "look", "hear")),
    ("greeting", ("hello", "goodbye", "welcome", "thank", "please", "sorry", "excuse", "greet")),
    ("spiritual", ("god", "pray", "church", "spirit", "soul", "heaven", "blessing", "worship",
                   "faith", "believe", "sacred", "holy")),
)


@dataclass
class LoadStats:
    total_raw_entries: int = 0
    valid_entries: int = 0
    skipped_entries: int = 0
    transformation_errors: int = 0

    @property
    def success_rate(self) -> float | None:
        if self.total_raw_entries <= 0:
            return None
        return self.valid_entries / self.total_raw_entries

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_raw_entries": self.total_raw_entries,
            "valid_entries": self.valid_entries,
            "skipped_entries": self.skipped_entries,
            "transformation_errors": self.transformation_errors,
            "success_rate": self.success_rate,
        }


def normalize_text(text: str) -> str:
    out = _SPACE_RE.sub(" ", text.strip())
    out = out.replace("“", '"').replace("”", '"').replace("‘", "'").replace("’", "'")
    return out.replace("–", "-").replace("—", "-")


def extract_field(raw: Mapping[str, Any], keys: Sequence[str]) -> str:
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def infer_part_of_speech(text: str) -> str:
    word = text.strip().lower()
    for pos, patterns in _POS_PATTERNS:
        if any(p.search(word) for p in patterns):
            return pos
    return PartOfSpeech.NOUN.value


def infer_category(english: str, meaning: str) -> str:
    text = f"{english} {meaning}".lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return "general"


def validate_fields(english: str, ibibio: str, meaning: str) -> str | None:
    """Return a rejection reason, or None when the fields are usable."""
    if not english:
        return "missing english field"
    if not ibibio:
        return "missing ibibio field"
    if not meaning:
        return "missing meaning field"
    if len(english) > MAX_TEXT_LENGTH or len(ibibio) > MAX_TEXT_LENGTH:
        return "text too long"
    if english == ibibio:
        return "english and ibibio are identical"
    if _DIGITS_RE.match(english) or _DIGITS_RE.match(ibibio):
        return "contains only numbers"
    return None


def transform_examples(raw: Any) -> Tuple[Example, ...]:
    if not isinstance(raw, list):
        return ()
    out: list[Example] = []
    for item in raw:
        if isinstance(item, Mapping):
            source = extract_field(item, EXAMPLE_SOURCE_KEYS)
            target = extract_field(item, EXAMPLE_TARGET_KEYS)
        else:
            source, target = str(item).strip(), ""
        if source:
            out.append(Example(source_text=normalize_text(source), target_text=normalize_text(target)))
    return tuple(out)


def transform_record(raw: Mapping[str, Any], index: int) -> DictionaryEntry:
    if not isinstance(raw, Mapping):
        raise InvalidEntryError("record is not an object", record_index=index)
    english = extract_field(raw, FIELD_SYNONYMS["english"])
    ibibio = extract_field(raw, FIELD_SYNONYMS["ibibio"])
    meaning = extract_field(raw, FIELD_SYNONYMS["meaning"]) or english

    reason = validate_fields(english, ibibio, meaning)
    if reason is not None:
        raise InvalidEntryError(reason, record_index=index)

    raw_id = raw.get("id")
    return DictionaryEntry(
        id=str(raw_id) if raw_id not in (None, "") else f"entry-{index}",
        source_text=normalize_text(english),
        target_text=normalize_text(ibibio),
        meaning=normalize_text(meaning),
        part_of_speech=extract_field(raw, FIELD_SYNONYMS["part_of_speech"]) or infer_part_of_speech(english),
        examples=transform_examples(raw.get("examples")),
        pronunciation=extract_field(raw, FIELD_SYNONYMS["pronunciation"]),
        cultural_note=extract_field(raw, FIELD_SYNONYMS["cultural"]),
        category=extract_field(raw, FIELD_SYNONYMS["category"]) or infer_category(english, meaning),
    )


def transform_records(rows: Iterable[Any]) -> Tuple[List[DictionaryEntry], LoadStats]:
    stats = LoadStats()
    entries: list[DictionaryEntry] = []
    for index, raw in enumerate(rows):
        stats.total_raw_entries += 1
        try:
            entry = transform_record(raw, index)
        except InvalidEntryError as exc:
            stats.skipped_entries += 1
            logger.info("dictionary_record_skipped", index=index, reason=exc.reason)
            continue
        except (TypeError, ValueError, AttributeError) as exc:
            stats.transformation_errors += 1
            logger.warning("dictionary_record_error", index=index, error=f"{type(exc).__name__}: {exc}")
            continue
        entries.append(entry)
        stats.valid_entries += 1

    logger.info("dictionary_records_transformed", **stats.as_dict())
    return entries, stats
