from __future__ import annotations

import unicodedata
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import structlog

from .schema import DictionaryEntry, DisambiguationResult, DisambiguationRule, RuleAlternative


logger = structlog.get_logger(__name__)

UNRANKED_PRIORITY = 999


def _rule(primary: str, context: str, usage: str, *alternatives: RuleAlternative) -> DisambiguationRule:
    return DisambiguationRule(
        primary_translation=primary,
        priority=1,
        context=context,
        usage=usage,
        alternatives=tuple(alternatives),
    )


DEFAULT_RULES: Dict[str, DisambiguationRule] = {
    "stop": _rule(
        "tịre",
        "to cease, end, finish an action",
        "most common usage for stopping an action",
        RuleAlternative(
            translation="tịbe",
            priority=2,
            context="to halt, prevent, block something from happening",
            usage="used when preventing or blocking",
        ),
    ),
    "big": _rule(
        "akpa",
        "large in physical size or dimension",
        "primary meaning for physical size",
        RuleAlternative(
            translation="eket",
            priority=2,
            context="important, significant in status or influence",
            usage="used for abstract importance or social status",
        ),
    ),
    "good": _rule(
        "afiak",
        "of high quality, pleasant, satisfactory",
        "general goodness, quality, positive attributes",
        RuleAlternative(
            translation="emenere",
            priority=2,
            context="morally good, righteous, virtuous",
            usage="specifically for moral or ethical goodness",
        ),
    ),
    "water": _rule("mmong", "clear liquid essential for life", "primary and only common translation"),
    "love": _rule("uduak", "deep affection, care, emotional attachment", "primary translation for all forms of love"),
    "hello": _rule("nno", "greeting used throughout the day", "standard greeting in Ibibio"),
    "god": _rule("abasi", "supreme deity, creator", "the supreme deity in Ibibio tradition"),
    "family": _rule("ufok", "family unit, household, relatives", "primary translation for family"),
    "food": _rule("ndidia", "nourishment, meal, sustenance", "primary translation for food"),
    "house": _rule("ufok", "dwelling, home, building", "primary translation for house/home"),
}


def _key(text: str) -> str:
    return unicodedata.normalize("NFC", text).strip().casefold()


class DisambiguationResolver:
    """Picks the primary sense among entries sharing one headword."""

    def __init__(self, rules: Mapping[str, DisambiguationRule] | None = None) -> None:
        source = DEFAULT_RULES if rules is None else rules
        self._rules: Dict[str, DisambiguationRule] = {_key(word): rule for word, rule in source.items()}

    def disambiguate(
        self,
        query: str,
        candidates: Sequence[DictionaryEntry] | Iterable[DictionaryEntry],
    ) -> Optional[DisambiguationResult]:
        rows = list(candidates)
        if not rows:
            return None
        if len(rows) == 1:
            return DisambiguationResult(
                primary_entry=rows[0],
                alternatives=[],
                reasoning="Single match found",
                confidence=1.0,
            )

        rule = self._rules.get(_key(query))
        if rule is None:
            logger.debug("disambiguation_no_rule", query=query, candidates=len(rows))
            return DisambiguationResult(
                primary_entry=rows[0],
                alternatives=rows[1:],
                reasoning="No specific disambiguation rule available",
                confidence=0.7,
            )

        wanted = _key(rule.primary_translation)
        primary = next((entry for entry in rows if _key(entry.target_text) == wanted), None)
        if primary is None:
            logger.warning(
                "disambiguation_primary_missing",
                query=query,
                primary_translation=rule.primary_translation,
            )
            return DisambiguationResult(
                primary_entry=rows[0],
                alternatives=rows[1:],
                reasoning=f'Primary translation "{rule.primary_translation}" not available in dictionary',
                confidence=0.6,
            )

        priorities = {
            _key(alt.translation): UNRANKED_PRIORITY if alt.priority is None else alt.priority
            for alt in rule.alternatives
        }
        alternatives = [entry for entry in rows if entry.id != primary.id]
        alternatives.sort(key=lambda entry: priorities.get(_key(entry.target_text), UNRANKED_PRIORITY))
        return DisambiguationResult(
            primary_entry=primary,
            alternatives=alternatives,
            reasoning=f"Primary meaning: {rule.context}",
            confidence=0.95,
        )

    def has_rule(self, word: str) -> bool:
        return _key(word) in self._rules

    def get_rule(self, word: str) -> Optional[DisambiguationRule]:
        return self._rules.get(_key(word))

    def add_rule(self, word: str, rule: DisambiguationRule) -> None:
        self._rules[_key(word)] = rule
        logger.info("disambiguation_rule_added", word=word, primary_translation=rule.primary_translation)

    def all_rules(self) -> Dict[str, DisambiguationRule]:
        return dict(self._rules)

    def stats(self) -> Dict[str, object]:
        with_alternatives = sum(1 for rule in self._rules.values() if rule.alternatives)
        words: List[str] = sorted(self._rules)
        return {
            "total_rules": len(self._rules),
            "rules_with_alternatives": with_alternatives,
            "rules_without_alternatives": len(self._rules) - with_alternatives,
            "available_words": words,
        }
