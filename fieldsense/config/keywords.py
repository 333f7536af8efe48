"""Keyword rules for the deterministic keyword strategy.

Rules are evaluated in order: more specific patterns must come first so short
codes do not shadow compound ones. Patterns are already normalized (lowercase,
no diacritics).
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class KeywordRule:
    """Patterns mapping to a field type."""

    patterns: tuple[str, ...]
    field_type: str
    # Match patterns as complete words instead of substrings
    whole_word: bool = False


KEYWORD_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(
        patterns=(
            "observacao",
            "observacoes",
            "descricao",
            "mensagem",
            "message",
            "comentario",
            "comentarios",
            "anotacao",
            "anotacoes",
            "notas",
            "sugestao",
            "sugestoes",
            "feedback",
            "detalhe",
            "detalhes",
            "historico",
        ),
        field_type="text",
    ),
    KeywordRule(patterns=("obs",), field_type="text", whole_word=True),
)

# input[type] → field type, used as the last resort
HTML_FALLBACK_TYPES: dict[str, str] = {
    "email": "email",
    "tel": "phone",
    "password": "password",
    "number": "number",
    "date": "date",
    "url": "text",
}

# input[type] → field type for the deterministic html-type strategy
HTML_INPUT_TYPES: dict[str, str] = {
    "checkbox": "checkbox",
    "radio": "radio",
    "email": "email",
    "tel": "phone",
    "password": "password",
    "number": "number",
    "date": "date",
    "time": "date",
    "datetime-local": "date",
    "month": "date",
    "week": "date",
    "url": "website",
    "search": "text",
    "range": "number",
}
