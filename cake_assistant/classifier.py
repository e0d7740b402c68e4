"""Keyword scoring classifier with prefilter short-circuit and model escalation.

Scoring contract:
    - Every keyword found as a substring adds 1.2 when longer than 5 characters,
      otherwise 1.0, to its category.
    - Each category total is divided by the size of that category's keyword list,
      so large lists are diluted on purpose.
    - The best category is the highest normalized score; ties go to the category
      that comes first in KeywordTables.category_order.

Decision policy:
    - best == 0                        -> invalid, confidence 0.8
    - best < threshold, escalation on -> FallbackClassifier
    - otherwise                       -> keyword result, confidence min(best, 1.0)
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .classification import (
    Category,
    ClassificationResult,
    KeywordResult,
    REASON_KEYWORD_MATCH,
    REASON_NO_KEYWORD_MATCH,
)
from .fallback_classifier import FallbackClassifier
from .keyword_tables import DEFAULT_TABLES, KeywordTables
from .prefilter import INVALID_PATTERNS, short_circuit

logger = logging.getLogger("cake_assistant.classifier")

LONG_KEYWORD_LENGTH = 5
LONG_KEYWORD_WEIGHT = 1.2
SHORT_KEYWORD_WEIGHT = 1.0
NO_MATCH_CONFIDENCE = 0.8

NO_MATCH_SUGGESTIONS: Tuple[str, ...] = (
    'Pregunta sobre productos: "¿Qué sabores de torta tienen?"',
    'Pregunta sobre envíos: "¿Hacen delivery?"',
    'Pregunta sobre pagos: "¿Qué formas de pago aceptan?"',
    'Creación de torta: "Quiero una torta de cumpleaños"',
)


def clean_message(message: str) -> str:
    return (message or "").lower().strip()


def keyword_weight(keyword: str) -> float:
    return LONG_KEYWORD_WEIGHT if len(keyword) > LONG_KEYWORD_LENGTH else SHORT_KEYWORD_WEIGHT


class KeywordClassifier:
    """Deterministic keyword scorer over the static category tables."""

    def __init__(self, tables: KeywordTables = DEFAULT_TABLES) -> None:
        self._tables = tables

    @property
    def tables(self) -> KeywordTables:
        return self._tables

    def score(self, clean: str) -> Dict[Category, float]:
        """Return the normalized score per category, in table order."""
        scores: Dict[Category, float] = {}
        for category in self._tables.category_order:
            keywords = self._tables.keywords_for(category)
            total = sum(keyword_weight(keyword) for keyword in keywords if keyword in clean)
            scores[category] = total / len(keywords) if keywords else 0.0
        return scores

    def matched_keywords(self, clean: str, category: Category) -> List[str]:
        return [keyword for keyword in self._tables.keywords_for(category) if keyword in clean]

    def best(self, scores: Dict[Category, float]) -> Tuple[Category, float]:
        """Pick the top category; iteration order settles ties."""
        best_category = self._tables.category_order[0]
        best_score = scores.get(best_category, 0.0)
        for category in self._tables.category_order[1:]:
            value = scores.get(category, 0.0)
            if value > best_score:
                best_category, best_score = category, value
        return best_category, best_score

    def no_match(self, scores: Dict[Category, float]) -> KeywordResult:
        return KeywordResult(
            category=Category.INVALID,
            confidence=NO_MATCH_CONFIDENCE,
            reason=REASON_NO_KEYWORD_MATCH,
            suggestions=NO_MATCH_SUGGESTIONS,
            all_scores=scores,
        )

    def keyword_result(self, clean: str, scores: Dict[Category, float]) -> KeywordResult:
        category, best_score = self.best(scores)
        if best_score == 0:
            return self.no_match(scores)
        return KeywordResult(
            category=category,
            confidence=min(best_score, 1.0),
            reason=REASON_KEYWORD_MATCH,
            keyword_matches=tuple(self.matched_keywords(clean, category)),
            all_scores=scores,
        )

    def stats(self) -> Dict[str, object]:
        keywords_per_category = [
            {"category": category.value, "count": len(self._tables.keywords_for(category))}
            for category in self._tables.category_order
        ]
        return {
            "categories": [category.value for category in self._tables.category_order],
            "total_keywords": sum(item["count"] for item in keywords_per_category),
            "keywords_per_category": keywords_per_category,
            "invalid_patterns": len(INVALID_PATTERNS),
        }


class MessageClassifier:
    """Runs prefilter, keyword scoring, and optional escalation for one message."""

    def __init__(
        self,
        keyword_classifier: KeywordClassifier,
        fallback: Optional[FallbackClassifier] = None,
        escalation_threshold: float = 0.3,
        short_circuit_confidence: float = 0.9,
        escalation_enabled: bool = True,
    ) -> None:
        self._keywords = keyword_classifier
        self._fallback = fallback
        self._threshold = escalation_threshold
        self._short_circuit_confidence = short_circuit_confidence
        self._escalation_enabled = escalation_enabled and fallback is not None

    @property
    def keyword_classifier(self) -> KeywordClassifier:
        return self._keywords

    async def classify(self, message: str, use_ai: Optional[bool] = None) -> ClassificationResult:
        """Purpose: Produce a ClassificationResult for a single raw message.
        Inputs/Outputs: Input is the raw message and an optional per-call escalation
            override; output is a ShortCircuitResult, KeywordResult, or FallbackResult.
        Side Effects / State: Reads immutable tables; may await one model call.
        Dependencies: prefilter.short_circuit, KeywordClassifier, FallbackClassifier.
        Failure Modes: None raised; model failures are folded into the result.
        If Removed: The dispatcher has nothing to route on.
        Testing Notes: Disable escalation for keyword parity; inject a fake generator
            to exercise the fallback path.
        """
        clean = clean_message(message)
        shortcut = short_circuit(clean, self._short_circuit_confidence)
        if shortcut is not None:
            logger.info("classification short-circuit pattern=%s", shortcut.pattern)
            return shortcut

        scores = self._keywords.score(clean)
        category, best_score = self._keywords.best(scores)
        logger.debug(
            "keyword scores=%s best=%s score=%.4f",
            {key.value: round(value, 4) for key, value in scores.items()},
            category.value,
            best_score,
        )
        if best_score == 0:
            logger.info("classification no keyword match")
            return self._keywords.no_match(scores)

        escalate = self._escalation_enabled if use_ai is None else (use_ai and self._fallback is not None)
        if best_score < self._threshold and escalate:
            logger.info("classification escalating best=%s score=%.4f", category.value, best_score)
            return await self._fallback.classify(message)

        result = self._keywords.keyword_result(clean, scores)
        logger.info(
            "classification category=%s confidence=%.4f reason=%s",
            result.category.value,
            result.confidence,
            result.reason,
        )
        return result
