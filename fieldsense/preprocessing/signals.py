"""Build classifier input text from field descriptors and rules."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from fieldsense.config.field_types import UNKNOWN

from .normalize import normalize_signals

if TYPE_CHECKING:
    from fieldsense.contracts import FieldDescriptor
    from fieldsense.data_models import FieldRule

# CSS punctuation: ids, classes, attribute selectors, combinators, pseudo-classes
_CSS_PUNCTUATION = re.compile(r"[#.\[\]'\"=:()>+~*,^$|]+")

# Selector tokens that say nothing about the field's meaning
_GENERIC_SELECTOR_TOKENS = frozenset(
    {
        "input",
        "select",
        "textarea",
        "name",
        "id",
        "type",
        "class",
        "form",
        "div",
        "span",
        "nth",
        "child",
        "of",
    }
)


def dedupe_normalized(values: Iterable[str | None]) -> list[str]:
    """Normalize each value and keep the first occurrence of each non-empty one."""
    seen: set[str] = set()
    output: list[str] = []
    for value in values:
        token = normalize_signals(value or "")
        if not token or token in seen:
            continue
        seen.add(token)
        output.append(token)
    return output


def build_signal_text(field: FieldDescriptor) -> str:
    """Join the field's descriptive attributes into one normalized signal string.

    Empty when the field carries no descriptive text.
    """
    parts = dedupe_normalized(
        [
            field.label,
            field.name,
            field.id,
            field.placeholder,
            field.autocomplete,
            field.context_signals,
        ]
    )
    return " ".join(parts)


def build_signals_from_rule(rule: FieldRule) -> str:
    """Derive signal text from a rule's type, field name and selector."""
    tokens: list[str] = []

    if rule.field_type and rule.field_type != UNKNOWN:
        tokens.append(rule.field_type.replace("-", " "))
    if rule.field_name:
        tokens.append(rule.field_name)

    selector = _CSS_PUNCTUATION.sub(" ", rule.field_selector or "")
    for token in normalize_signals(selector).split():
        if token not in _GENERIC_SELECTOR_TOKENS and not token.isdigit():
            tokens.append(token)

    words: list[str] = []
    for part in dedupe_normalized(tokens):
        words.extend(w for w in part.split() if w not in words)
    return " ".join(words)
