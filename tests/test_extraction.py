from __future__ import annotations

from ibibio_search.extraction import extract_json_object, extract_translation, parse_ai_translation


def test_extract_translation_cascade() -> None:
    assert extract_translation("Translation: mmong. It means water") == "mmong"
    assert extract_translation("Ibibio: abasi") == "abasi"
    assert extract_translation('The word means "uduak" in Ibibio') == "uduak"
    assert extract_translation("water → mmong") == "mmong"
    assert extract_translation("nno\nmore text") == "nno"


def test_extract_translation_rejects_empty_replies() -> None:
    assert extract_translation("") is None
    assert extract_translation("   ") is None
    assert extract_translation("x") is None


def test_extract_json_object_from_chatty_reply() -> None:
    payload = extract_json_object('Sure! {"ibibio": "mmong", "confidence": 0.9} hope that helps')
    assert payload == {"ibibio": "mmong", "confidence": 0.9}
    assert extract_json_object("no json here") is None
    assert extract_json_object("{broken") is None


def test_parse_ai_translation_defaults_and_clamps() -> None:
    parsed = parse_ai_translation(
        '{"ibibio": "mmong", "meaning": "water", '
        '"examples": [{"english": "I need water", "ibibio": "Nkpo mmong"}, {"ibibio": "orphan"}]}'
    )
    assert parsed is not None
    assert parsed.target_text == "mmong"
    assert parsed.confidence == 0.5
    assert len(parsed.examples) == 1
    assert parsed.examples[0].target_text == "Nkpo mmong"

    loud = parse_ai_translation('{"ibibio": "nno", "confidence": 7}')
    assert loud is not None
    assert loud.confidence == 1.0

    assert parse_ai_translation('{"meaning": "no target"}') is None
