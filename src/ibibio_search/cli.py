from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence


def main(argv: Sequence[str] | None = None) -> int:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--dictionary", type=str, default=None, help="dictionary JSON file (list of records)")
    common.add_argument("--cache-dir", type=str, default=None, help="directory for the persistent result cache")
    common.add_argument("--env-file", type=str, default=None, help=".env file to read settings from")
    common.add_argument("--log-level", type=str, default="WARNING", help="log level for stderr output")

    parser = argparse.ArgumentParser(prog="ibibio-search", description="English to Ibibio dictionary lookup")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_search = sub.add_parser("search", parents=[common], help="Translate a word or sentence")
    p_search.add_argument("text", type=str)
    p_search.add_argument("--online", action="store_true", help="query external sources even on a local hit")
    p_search.add_argument("--json", action="store_true", help="print JSON payload")
    p_search.add_argument("--no-diagnostics", action="store_true", help="omit per-source diagnostics")
    p_search.add_argument("--alternatives", type=int, default=5)

    p_fuzzy = sub.add_parser("fuzzy", parents=[common], help="Ranked local dictionary matches")
    p_fuzzy.add_argument("text", type=str)
    p_fuzzy.add_argument("--limit", type=int, default=10)
    p_fuzzy.add_argument("--json", action="store_true")

    p_suggest = sub.add_parser("suggest", parents=[common], help="Headwords starting with a prefix")
    p_suggest.add_argument("prefix", type=str)
    p_suggest.add_argument("--limit", type=int, default=10)

    p_import = sub.add_parser("import", parents=[common], help="Load raw records and save them to --dictionary")
    p_import.add_argument("file", type=str)

    sub.add_parser("stats", parents=[common], help="Index, cache and source statistics")
    sub.add_parser("clear-cache", parents=[common], help="Drop all cached lookups")
    sub.add_parser("rules", parents=[common], help="List disambiguation rules")

    args = parser.parse_args(argv)

    from .logs import configure_logging

    configure_logging(args.log_level)

    if args.cmd == "search":
        from .result_payload import result_to_payload
        from .viewer import render_result_text

        engine = _load_engine_for_runtime(args)
        result = engine.search(args.text, force_online_search=bool(args.online))
        if args.json:
            payload = result_to_payload(
                result,
                max_alternatives=args.alternatives,
                include_diagnostics=not args.no_diagnostics,
            )
            _print_json(payload)
        else:
            print(
                render_result_text(
                    result,
                    max_alternatives=args.alternatives,
                    include_diagnostics=not args.no_diagnostics,
                )
            )
        return 0

    if args.cmd == "fuzzy":
        from .result_payload import fuzzy_results_to_payload
        from .viewer import render_fuzzy_text

        engine = _load_engine_for_runtime(args)
        results = engine.search_fuzzy(args.text, limit=args.limit)
        if args.json:
            _print_json(fuzzy_results_to_payload(args.text, results))
        else:
            print(render_fuzzy_text(args.text, results))
        return 0

    if args.cmd == "suggest":
        engine = _load_engine_for_runtime(args)
        for word in engine.suggest(args.prefix, limit=args.limit):
            print(word)
        return 0

    if args.cmd == "import":
        if not args.dictionary:
            print("import requires --dictionary to know where to save", file=sys.stderr)
            return 2
        rows = json.loads(Path(args.file).read_text(encoding="utf-8"))
        if not isinstance(rows, list):
            print(f"{args.file} does not contain a list of records", file=sys.stderr)
            return 2
        engine = _load_engine_for_runtime(args, initialize=False)
        stats = engine.load_entries(rows)
        saved = engine.save()
        payload = stats.as_dict()
        payload["saved_entries"] = saved
        _print_json(payload)
        return 0

    if args.cmd == "stats":
        engine = _load_engine_for_runtime(args)
        _print_json(engine.get_stats())
        return 0

    if args.cmd == "clear-cache":
        engine = _load_engine_for_runtime(args, initialize=False)
        engine.clear_cache()
        print("Cache cleared.")
        return 0

    if args.cmd == "rules":
        engine = _load_engine_for_runtime(args, initialize=False)
        for word, rule in sorted(engine.resolver.all_rules().items()):
            alts = ", ".join(alt.translation for alt in rule.alternatives) or "-"
            print(f"{word}\t{rule.primary_translation}\t{alts}\t{rule.context}")
        return 0

    return 2


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))


def _load_engine_for_runtime(args: argparse.Namespace, *, initialize: bool = True):
    from .config import load_config
    from .engine import DictionaryEngine

    overrides: dict[str, object] = {}
    if getattr(args, "dictionary", None):
        overrides["dictionary_path"] = str(args.dictionary)
    if getattr(args, "cache_dir", None):
        overrides["cache_dir"] = str(args.cache_dir)
    config = load_config(getattr(args, "env_file", None), **overrides)
    engine = DictionaryEngine.from_config(config)
    if initialize:
        engine.initialize()
    return engine


if __name__ == "__main__":
    raise SystemExit(main())
