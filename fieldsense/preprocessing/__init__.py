from .ngram import (
    NGRAM_SIZE,
    Vocabulary,
    build_vocabulary,
    char_ngrams,
    cosine_similarity,
    is_zero_vector,
    vectorize,
    vectorize_batch,
)
from .normalize import (
    infer_category_from_type,
    infer_language_from_signals,
    normalize_signals,
    strip_diacritics,
)
from .signals import build_signal_text, build_signals_from_rule, dedupe_normalized

__all__ = [
    "NGRAM_SIZE",
    "Vocabulary",
    "build_signal_text",
    "build_signals_from_rule",
    "build_vocabulary",
    "char_ngrams",
    "cosine_similarity",
    "dedupe_normalized",
    "infer_category_from_type",
    "infer_language_from_signals",
    "is_zero_vector",
    "normalize_signals",
    "strip_diacritics",
    "vectorize",
    "vectorize_batch",
]
