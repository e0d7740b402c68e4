from __future__ import annotations

import re
from typing import Optional, Pattern, Tuple

from .classification import Category, ShortCircuitResult, REASON_SHORT_CIRCUIT

SHORT_CIRCUIT_SUGGESTION = (
    "Intenta hacer una pregunta más específica sobre productos, envíos o medios de pago"
)

# Order matters: the first pattern that matches names the short-circuit.
INVALID_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("greeting", re.compile(r"^(hola|hi|hello|hey)$", re.IGNORECASE)),
    ("farewell", re.compile(r"^(adiós|bye|chao)$", re.IGNORECASE)),
    ("thanks", re.compile(r"^(gracias|thanks)$", re.IGNORECASE)),
    ("yes_no", re.compile(r"^(sí|si|yes|no)$", re.IGNORECASE)),
    ("too_short", re.compile(r"^\w{1,2}$", re.IGNORECASE | re.ASCII)),
    ("digits_only", re.compile(r"^[0-9]+$")),
    ("symbols_only", re.compile(r'^[!@#$%^&*(),.?":{}|<>]+$')),
)


def match_invalid_pattern(clean_message: str) -> Optional[str]:
    """Return the name of the first prefilter pattern matching the message, if any."""
    for name, pattern in INVALID_PATTERNS:
        if pattern.search(clean_message):
            return name
    return None


def short_circuit(clean_message: str, confidence: float = 0.9) -> Optional[ShortCircuitResult]:
    """Purpose: Catch greetings and content-free input before keyword scoring.
    Inputs/Outputs: Input is the trimmed, lower-cased message and the configured
        confidence; returns a ShortCircuitResult or None when no pattern matches.
    Side Effects / State: None; patterns are compiled once at import.
    Dependencies: INVALID_PATTERNS.
    Failure Modes: None.
    If Removed: Greetings reach the keyword classifier and escalate to the model.
    Testing Notes: "hola" and "123" short-circuit; real questions pass through.
    """
    matched = match_invalid_pattern(clean_message)
    if matched is None:
        return None
    return ShortCircuitResult(
        category=Category.INVALID,
        confidence=confidence,
        reason=REASON_SHORT_CIRCUIT,
        suggestions=(SHORT_CIRCUIT_SUGGESTION,),
        pattern=matched,
    )
