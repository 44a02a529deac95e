from __future__ import annotations

import io
import json
from contextlib import redirect_stdout
from unittest.mock import patch

from ibibio_search.cli import main
from ibibio_search.disambiguation import DisambiguationResolver
from ibibio_search.schema import MultiSourceResult, SearchResult, SourceResult
from ibibio_search.seed import seed_entries


SEED = {entry.id: entry for entry in seed_entries()}


def _sample_result() -> MultiSourceResult:
    primary = SEED["stop-1"]
    return MultiSourceResult(
        query="stop",
        primary_result=primary,
        source_results=[
            SourceResult(
                source="local_dictionary",
                found=True,
                translation="tịre",
                confidence=95.0,
                metadata={"entry": primary, "reasoning": "Primary meaning: to cease, end, finish an action"},
            )
        ],
        final_confidence=95.0,
        consensus_score=100.0,
        validation_notes=["Primary meaning: to cease, end, finish an action"],
        source="local_dictionary",
        alternatives=[SEED["stop-2"]],
        sources=["local_dictionary"],
    )


class StubEngine:
    def __init__(self) -> None:
        self.resolver = DisambiguationResolver()
        self.cleared = False

    def search(self, text, force_online_search=False):
        assert text == "stop"
        return _sample_result()

    def search_fuzzy(self, text, limit=None):
        return [SearchResult(entry=SEED["god-1"], confidence=0.47, stage_scores={"primary_match": 1.0})][:limit]

    def suggest(self, prefix, limit=10):
        return ["god", "good"][:limit]

    def get_stats(self):
        return {"index_size": 10, "ready": True}

    def clear_cache(self):
        self.cleared = True


def test_cli_search_json_output() -> None:
    out = io.StringIO()
    with patch("ibibio_search.cli._load_engine_for_runtime", return_value=StubEngine()):
        with redirect_stdout(out):
            rc = main(["search", "stop", "--json"])

    assert rc == 0
    payload = json.loads(out.getvalue())
    assert payload["query"] == "stop"
    assert payload["found"] is True
    assert payload["result"]["ibibio"] == "tịre"
    assert payload["confidence"] == 95.0
    assert payload["alternatives"][0]["ibibio"] == "tịbe"
    assert payload["diagnostics"]["source_results"][0]["metadata"]["entry"]["id"] == "stop-1"


def test_cli_search_json_without_diagnostics() -> None:
    out = io.StringIO()
    with patch("ibibio_search.cli._load_engine_for_runtime", return_value=StubEngine()):
        with redirect_stdout(out):
            rc = main(["search", "stop", "--json", "--no-diagnostics", "--alternatives", "0"])

    assert rc == 0
    payload = json.loads(out.getvalue())
    assert "diagnostics" not in payload
    assert payload["alternatives"] == []


def test_cli_search_text_output() -> None:
    out = io.StringIO()
    with patch("ibibio_search.cli._load_engine_for_runtime", return_value=StubEngine()):
        with redirect_stdout(out):
            rc = main(["search", "stop"])

    assert rc == 0
    text = out.getvalue()
    assert "stop -> tịre" in text
    assert "1. tịbe" in text
    assert "[local_dictionary] tịre" in text


def test_cli_fuzzy_json_output() -> None:
    out = io.StringIO()
    with patch("ibibio_search.cli._load_engine_for_runtime", return_value=StubEngine()):
        with redirect_stdout(out):
            rc = main(["fuzzy", "god", "--json", "--limit", "3"])

    assert rc == 0
    payload = json.loads(out.getvalue())
    assert payload["count"] == 1
    assert payload["results"][0]["entry"]["ibibio"] == "abasi"


def test_cli_suggest_and_stats() -> None:
    out = io.StringIO()
    with patch("ibibio_search.cli._load_engine_for_runtime", return_value=StubEngine()):
        with redirect_stdout(out):
            rc = main(["suggest", "go"])
    assert rc == 0
    assert out.getvalue().split() == ["god", "good"]

    out = io.StringIO()
    with patch("ibibio_search.cli._load_engine_for_runtime", return_value=StubEngine()):
        with redirect_stdout(out):
            rc = main(["stats"])
    assert rc == 0
    assert json.loads(out.getvalue())["index_size"] == 10


def test_cli_rules_and_clear_cache() -> None:
    engine = StubEngine()
    out = io.StringIO()
    with patch("ibibio_search.cli._load_engine_for_runtime", return_value=engine):
        with redirect_stdout(out):
            assert main(["rules"]) == 0
            assert main(["clear-cache"]) == 0
    assert "stop\ttịre\ttịbe" in out.getvalue()
    assert "Cache cleared." in out.getvalue()
    assert engine.cleared is True


def test_cli_import_requires_dictionary(tmp_path) -> None:
    rows = tmp_path / "rows.json"
    rows.write_text("[]", encoding="utf-8")
    assert main(["import", str(rows)]) == 2


def test_cli_import_saves_dictionary(tmp_path) -> None:
    rows = tmp_path / "rows.json"
    rows.write_text(
        json.dumps([{"english": "water", "ibibio": "mmong"}, {"english": "", "ibibio": "x"}]),
        encoding="utf-8",
    )
    target = tmp_path / "dictionary.json"

    out = io.StringIO()
    with redirect_stdout(out):
        rc = main(["import", str(rows), "--dictionary", str(target)])

    assert rc == 0
    payload = json.loads(out.getvalue())
    assert payload["valid_entries"] == 1
    assert payload["skipped_entries"] == 1
    assert payload["saved_entries"] == 1
    assert json.loads(target.read_text(encoding="utf-8"))[0]["ibibio"] == "mmong"
