from __future__ import annotations

from typing import List, Tuple

from .schema import DictionaryEntry, Example


def _entry(
    entry_id: str,
    english: str,
    ibibio: str,
    meaning: str,
    pos: str,
    examples: List[Tuple[str, str]],
    pronunciation: str,
    cultural: str,
    category: str,
) -> DictionaryEntry:
    return DictionaryEntry(
        id=entry_id,
        source_text=english,
        target_text=ibibio,
        meaning=meaning,
        part_of_speech=pos,
        examples=tuple(Example(source_text=en, target_text=ib) for en, ib in examples),
        pronunciation=pronunciation,
        cultural_note=cultural,
        category=category,
    )


# Used when no dictionary file could be loaded.
SEED_ENTRIES: Tuple[DictionaryEntry, ...] = (
    _entry(
        "hello-1", "hello", "nno",
        "A greeting; expression of welcome used throughout the day",
        "interjection",
        [("Hello, how are you?", "Nno, afo ufok?"), ("Hello everyone!", "Nno nyenyin!")],
        "/n̩.no/",
        "Greetings show respect; \"nno\" is used throughout the day, often followed by "
        "inquiries about family and health.",
        "greeting",
    ),
    _entry(
        "water-1", "water", "mmong",
        "Clear liquid essential for life; H2O",
        "noun",
        [("I need water", "Nkpo mmong"), ("The water is clean", "Mmong oro afiak")],
        "/m̩.moŋ/",
        "Water is used in purification rituals and is considered a gift from the ancestors.",
        "nature",
    ),
    _entry(
        "love-1", "love", "uduak",
        "Deep affection or care for someone; strong emotional attachment",
        "noun",
        [("I love you", "Nkpo uduak fi"), ("Love is important", "Uduak akpa ntak")],
        "/u.du.ak/",
        "Extends beyond romance to respect for elders, community bonds and spiritual ties.",
        "emotion",
    ),
    _entry(
        "stop-1", "stop", "tịre",
        "To cease; to end; to bring to a halt",
        "verb",
        [("Stop the car", "Tịre motor oro"), ("Please stop", "Meyo tịre")],
        "/tɪ̃.re/",
        "\"tịre\" implies completion or ending, while \"tịbe\" suggests prevention or blocking.",
        "action",
    ),
    _entry(
        "stop-2", "stop", "tịbe",
        "To prevent; to block; to halt something from happening",
        "verb",
        [("Stop him from going", "Tịbe enye ke okod"), ("Stop the rain", "Tịbe usen")],
        "/tɪ̃.be/",
        "Emphasizes prevention and blocking rather than ending an action.",
        "action",
    ),
    _entry(
        "big-1", "big", "akpa",
        "Large in size; having great physical dimensions",
        "adjective",
        [("The house is big", "Ufok oro akpa"), ("Big tree", "Eti akpa")],
        "/ak.pa/",
        "Size and magnitude often relate to importance and respect.",
        "description",
    ),
    _entry(
        "big-2", "big", "eket",
        "Important; significant; of great importance or influence",
        "adjective",
        [("He is a big man", "Enye eket ntak"), ("Big decision", "Mkpọ eket")],
        "/e.ket/",
        "Used for social importance and influence rather than physical size.",
        "description",
    ),
    _entry(
        "good-1", "good", "afiak",
        "Of high quality; positive; pleasant; satisfactory",
        "adjective",
        [("This is good", "Oro afiak"), ("Good food", "Ndidia afiak")],
        "/a.fi.ak/",
        "Tied to quality, beauty and general positive attributes.",
        "description",
    ),
    _entry(
        "good-2", "good", "emenere",
        "Morally good; righteous; virtuous; ethically sound",
        "adjective",
        [("She is a good person", "Enye owo emenere"), ("Good morning", "Emenere")],
        "/e.me.ne.re/",
        "Relates to moral character and ethical behavior.",
        "description",
    ),
    _entry(
        "god-1", "god", "abasi",
        "The supreme deity; creator and sustainer of all life; the Almighty",
        "noun",
        [("God is great", "Abasi akpa ntak"), ("We pray to God", "Nyenyin kere Abasi")],
        "/a.ba.si/",
        "Abasi is the supreme deity in Ibibio traditional religion.",
        "spiritual",
    ),
)


def seed_entries() -> List[DictionaryEntry]:
    return list(SEED_ENTRIES)
