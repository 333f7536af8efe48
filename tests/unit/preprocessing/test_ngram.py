"""Tests for character n-gram features."""

import numpy as np
import pytest

from fieldsense.preprocessing import (
    build_vocabulary,
    char_ngrams,
    cosine_similarity,
    is_zero_vector,
    vectorize,
    vectorize_batch,
)


class TestCharNgrams:
    def test_padded_trigrams(self) -> None:
        assert char_ngrams("Email") == ["_em", "ema", "mai", "ail", "il_"]

    def test_separators_become_spaces(self) -> None:
        assert char_ngrams("a_b") == char_ngrams("a b")

    def test_short_text(self) -> None:
        assert char_ngrams("") == []
        assert char_ngrams("a") == ["_a_"]


class TestVectorize:
    def test_vocabulary_in_first_seen_order(self) -> None:
        vocab = build_vocabulary(["abc", "abd"])

        assert vocab == {"_ab": 0, "abc": 1, "bc_": 2, "abd": 3, "bd_": 4}

    def test_vectors_are_unit_length(self) -> None:
        vocab = build_vocabulary(["cpf numero", "email"])
        vec = vectorize("cpf numero", vocab)

        assert vec.dtype == np.float32
        assert float(np.linalg.norm(vec)) == pytest.approx(1.0)

    def test_identical_texts_have_cosine_one(self) -> None:
        vocab = build_vocabulary(["telefone celular"])
        vec = vectorize("telefone celular", vocab)

        assert cosine_similarity(vec, vec) == pytest.approx(1.0)

    def test_disjoint_ngrams_have_cosine_zero(self) -> None:
        vocab = build_vocabulary(["abc", "xyz"])

        a = vectorize("abc", vocab)
        b = vectorize("xyz", vocab)

        assert cosine_similarity(a, b) == 0.0

    def test_no_overlap_yields_zero_vector(self) -> None:
        vocab = build_vocabulary(["abc"])

        assert is_zero_vector(vectorize("qqq", vocab))

    def test_batch_shape(self) -> None:
        vocab = build_vocabulary(["abc", "xyz"])

        assert vectorize_batch(["abc", "xyz", "abc"], vocab).shape == (3, len(vocab))
        assert vectorize_batch([], vocab).shape == (0, len(vocab))
