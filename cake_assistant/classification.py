"""Classification result variants produced by the prefilter, keyword, and fallback paths."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class Category(str, Enum):
    PRODUCTS = "products"
    SHIPPING = "shipping"
    PAYMENTS = "payments"
    CUSTOM_DESIGN = "custom_design"
    INVALID = "invalid"
    GENERAL = "general"


REASON_SHORT_CIRCUIT = "short-circuit"
REASON_KEYWORD_MATCH = "keyword-match"
REASON_NO_KEYWORD_MATCH = "no keyword match"
REASON_AI_FALLBACK = "ai-fallback"
REASON_AI_UNPARSEABLE = "ai-fallback-unparseable"
REASON_AI_ERROR = "ai-fallback-error"

GENERIC_SUGGESTIONS: Tuple[str, ...] = (
    "Intenta ser más específico sobre lo que necesitas",
    "Menciona si buscas información sobre productos, envíos o pagos",
    "Para tortas personalizadas, describe la ocasión y tus preferencias",
)


@dataclass(frozen=True)
class ClassificationResult:
    """Common interface shared by every classification path."""
    category: Category
    confidence: float
    reason: str
    suggestions: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.category, Category):
            raise ValueError(f"unknown category: {self.category!r}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence out of range: {self.confidence}")
        if self.category is Category.INVALID and not self.suggestions:
            raise ValueError("invalid results must carry reformulation suggestions")

    @property
    def path(self) -> str:
        return "base"

    @property
    def is_invalid(self) -> bool:
        return self.category is Category.INVALID

    @property
    def is_degraded(self) -> bool:
        """True when the result came from a low-confidence or failed fallback."""
        return False

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "category": self.category.value,
            "confidence": self.confidence,
            "reason": self.reason,
            "path": self.path,
        }
        if self.suggestions:
            payload["suggestions"] = list(self.suggestions)
        return payload


@dataclass(frozen=True)
class ShortCircuitResult(ClassificationResult):
    """Greeting, acknowledgement, or content-free input caught by the prefilter."""
    pattern: str = ""

    @property
    def path(self) -> str:
        return "prefilter"


@dataclass(frozen=True)
class KeywordResult(ClassificationResult):
    """Outcome of keyword scoring, with the evidence that produced it."""
    keyword_matches: Tuple[str, ...] = ()
    all_scores: Dict[Category, float] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return "keyword"

    def to_dict(self) -> Dict[str, object]:
        payload = super().to_dict()
        payload["keyword_matches"] = list(self.keyword_matches)
        payload["all_scores"] = {category.value: score for category, score in self.all_scores.items()}
        return payload


@dataclass(frozen=True)
class FallbackResult(ClassificationResult):
    """Outcome of escalating an ambiguous message to the text-generation model."""
    ai_response: Optional[str] = None
    error: Optional[str] = None

    @property
    def path(self) -> str:
        return "fallback"

    @property
    def is_degraded(self) -> bool:
        return self.reason in (REASON_AI_UNPARSEABLE, REASON_AI_ERROR)

    def to_dict(self) -> Dict[str, object]:
        payload = super().to_dict()
        if self.ai_response is not None:
            payload["ai_response"] = self.ai_response
        if self.error is not None:
            payload["error"] = self.error
        return payload
