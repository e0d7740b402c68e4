"""Prefilter short-circuit behaviour."""

import pytest

from cake_assistant.classification import Category, REASON_SHORT_CIRCUIT
from cake_assistant.prefilter import match_invalid_pattern, short_circuit


@pytest.mark.parametrize(
    "message, pattern",
    [
        ("hola", "greeting"),
        ("hey", "greeting"),
        ("adiós", "farewell"),
        ("gracias", "thanks"),
        ("sí", "yes_no"),
        ("no", "yes_no"),
        ("ok", "too_short"),
        ("12345", "digits_only"),
        ("???", "symbols_only"),
    ],
)
def test_patterns_are_named_by_first_match(message, pattern):
    assert match_invalid_pattern(message) == pattern


def test_short_circuit_result_carries_configured_confidence():
    result = short_circuit("hola", confidence=0.75)

    assert result is not None
    assert result.category is Category.INVALID
    assert result.confidence == 0.75
    assert result.reason == REASON_SHORT_CIRCUIT
    assert result.suggestions
    assert result.path == "prefilter"


def test_real_questions_pass_through():
    assert short_circuit("¿qué sabores de torta tienen?") is None
    assert short_circuit("hola, quiero una torta") is None
