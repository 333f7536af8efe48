"""Keyword classifier for common Portuguese form vocabulary.

Runs before the soft-match engine to catch patterns the network tends to
under-score. Substring matching for long patterns, whole-word matching for
short codes.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

from fieldsense.config.keywords import KEYWORD_RULES, KeywordRule
from fieldsense.inference.result import ClassifierResult
from fieldsense.preprocessing import build_signal_text

if TYPE_CHECKING:
    from fieldsense.contracts import FieldDescriptor


class KeywordClassifier:
    name = "keyword"

    def __init__(self, rules: Sequence[KeywordRule] = KEYWORD_RULES):
        self._rules = [(rule, self._compile(rule)) for rule in rules]

    @staticmethod
    def _compile(rule: KeywordRule) -> re.Pattern[str] | None:
        if not rule.whole_word:
            return None
        alternatives = "|".join(re.escape(p) for p in rule.patterns)
        return re.compile(rf"(?<![a-z0-9])(?:{alternatives})(?![a-z0-9])")

    def detect(self, field: FieldDescriptor) -> ClassifierResult | None:
        text = build_signal_text(field)
        if not text:
            return None

        for rule, pattern in self._rules:
            if pattern is not None:
                matched = pattern.search(text) is not None
            else:
                matched = any(p in text for p in rule.patterns)
            if matched:
                return ClassifierResult(rule.field_type, 1.0, self.name)
        return None
