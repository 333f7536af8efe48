"""Signal text normalization."""

import re
import unicodedata

from fieldsense.config.field_types import category_of

_NON_ALNUM = re.compile(r"[^a-z0-9\s]+")
_WHITESPACE = re.compile(r"\s+")

# Language hints, checked in order; anything else counts as Portuguese
_SPANISH = re.compile(r"\b(el|la|correo|telefono|direccion|apellido)\b")
_ENGLISH = re.compile(r"\b(the|your|email|phone|address|name|zip|state)\b")


def strip_diacritics(text: str) -> str:
    """Decompose to NFD and drop combining marks ("número" -> "numero")."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def normalize_signals(text: str) -> str:
    """Normalize raw signal text to lowercase ASCII words separated by one space.

    Idempotent: normalizing an already normalized string returns it unchanged.
    """
    if not text:
        return ""
    normalized = strip_diacritics(text.lower())
    normalized = _NON_ALNUM.sub(" ", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def infer_language_from_signals(signals: str) -> str:
    normalized = normalize_signals(signals)
    if _SPANISH.search(normalized):
        return "es"
    if _ENGLISH.search(normalized):
        return "en"
    return "pt"


def infer_category_from_type(field_type: str) -> str:
    return category_of(field_type)
