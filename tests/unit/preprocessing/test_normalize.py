"""Tests for signal normalization."""

import pytest

from fieldsense.preprocessing import (
    infer_category_from_type,
    infer_language_from_signals,
    normalize_signals,
    strip_diacritics,
)


class TestNormalizeSignals:
    def test_lowercases_and_strips_diacritics(self) -> None:
        assert normalize_signals("CPF Número") == "cpf numero"

    def test_punctuation_becomes_single_space(self) -> None:
        assert normalize_signals("  E-mail:  (obrigatório) ") == "e mail obrigatorio"

    def test_empty_input(self) -> None:
        assert normalize_signals("") == ""
        assert normalize_signals("  --  ") == ""

    @pytest.mark.parametrize(
        "text",
        [
            "CPF Número",
            "Endereço de E-mail",
            "data_de_nascimento",
            "Ação!!  ",
            "ñandú",
        ],
    )
    def test_idempotent(self, text: str) -> None:
        once = normalize_signals(text)
        assert normalize_signals(once) == once

    def test_strip_diacritics_keeps_case(self) -> None:
        assert strip_diacritics("Ação") == "Acao"


class TestInference:
    def test_language_defaults_to_portuguese(self) -> None:
        assert infer_language_from_signals("numero do cpf") == "pt"

    def test_language_english(self) -> None:
        assert infer_language_from_signals("Your email address") == "en"

    def test_language_spanish(self) -> None:
        assert infer_language_from_signals("Correo electrónico") == "es"

    def test_category_of_unknown_type(self) -> None:
        assert infer_category_from_type("not-a-type") == "unknown"
