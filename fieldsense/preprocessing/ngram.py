"""Character n-gram features.

Texts are encoded as bag-of-trigram frequency vectors over a fixed vocabulary
and L2 normalized, so the dot product of two vectors is their cosine
similarity.
"""

import re
from collections.abc import Iterable

import numpy as np
from numpy.typing import NDArray

from .normalize import strip_diacritics

NGRAM_SIZE = 3

_SEPARATORS = re.compile(r"[_\-/.]+")
_WHITESPACE = re.compile(r"\s+")

Vocabulary = dict[str, int]


def char_ngrams(text: str) -> list[str]:
    """Extract overlapping character trigrams.

    "Email" -> "_email_" -> ["_em", "ema", "mai", "ail", "il_"]
    """
    normalized = strip_diacritics(text.lower())
    normalized = _SEPARATORS.sub(" ", normalized)
    normalized = _WHITESPACE.sub(" ", normalized).strip()

    padded = f"_{normalized}_"
    return [padded[i : i + NGRAM_SIZE] for i in range(len(padded) - NGRAM_SIZE + 1)]


def build_vocabulary(texts: Iterable[str]) -> Vocabulary:
    """Index every n-gram in first-seen order."""
    vocab: Vocabulary = {}
    for text in texts:
        for gram in char_ngrams(text):
            if gram not in vocab:
                vocab[gram] = len(vocab)
    return vocab


def vectorize(text: str, vocab: Vocabulary) -> NDArray[np.float32]:
    """Encode text as an L2-normalized n-gram frequency vector.

    N-grams missing from the vocabulary are ignored; a text with no overlap
    yields the zero vector.
    """
    vec = np.zeros(len(vocab), dtype=np.float32)
    for gram in char_ngrams(text):
        idx = vocab.get(gram)
        if idx is not None:
            vec[idx] += 1.0

    norm = float(np.linalg.norm(vec))
    if norm > 0:
        vec /= norm
    return vec


def vectorize_batch(texts: Iterable[str], vocab: Vocabulary) -> NDArray[np.float32]:
    rows = [vectorize(text, vocab) for text in texts]
    if not rows:
        return np.empty((0, len(vocab)), dtype=np.float32)
    return np.vstack(rows)


def cosine_similarity(a: NDArray[np.float32], b: NDArray[np.float32]) -> float:
    """Dot product of two L2-normalized vectors."""
    n = min(a.shape[0], b.shape[0])
    return float(np.dot(a[:n], b[:n]))


def is_zero_vector(vec: NDArray[np.float32]) -> bool:
    return not np.any(vec)
