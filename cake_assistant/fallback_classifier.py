from __future__ import annotations

import logging
from typing import Dict

from .classification import (
    Category,
    FallbackResult,
    GENERIC_SUGGESTIONS,
    REASON_AI_ERROR,
    REASON_AI_FALLBACK,
    REASON_AI_UNPARSEABLE,
)
from .interfaces import TextGenerator

logger = logging.getLogger("cake_assistant.fallback")

FALLBACK_CONFIDENCE = 0.7
UNPARSEABLE_CONFIDENCE = 0.6
ERROR_CONFIDENCE = 0.4

# Labels the model may answer with, in the order they are listed in the prompt.
LABEL_DESCRIPTIONS: Dict[str, str] = {
    Category.PRODUCTS.value: "preguntas sobre tortas, sabores, ingredientes, precios de productos",
    Category.SHIPPING.value: "preguntas sobre entregas, zonas, tiempos, costos de envío",
    Category.PAYMENTS.value: "preguntas sobre formas de pago, facturación, precios",
    Category.CUSTOM_DESIGN.value: "solicitudes para diseñar tortas personalizadas",
    Category.INVALID.value: "mensajes poco claros, saludos, o no relacionados con el negocio",
}


def build_fallback_prompt(message: str) -> str:
    """Render the closed-vocabulary instruction for a single-label answer."""
    lines = "\n".join(f"- {label}: {description}" for label, description in LABEL_DESCRIPTIONS.items())
    return (
        "Clasifica el siguiente mensaje de usuario en UNA de estas categorías exactas:\n"
        f"{lines}\n\n"
        f'Mensaje: "{message}"\n\n'
        "Responde SOLO con el nombre de la categoría, sin explicaciones adicionales."
    )


class FallbackClassifier:
    """Escalates ambiguous messages to the text-generation model with a fixed label set."""

    def __init__(self, generator: TextGenerator) -> None:
        self._generator = generator

    async def classify(self, message: str) -> FallbackResult:
        """Purpose: Ask the model for one of the closed labels and validate the answer.
        Inputs/Outputs: Input is the original (not lower-cased) message; returns a
            FallbackResult whose reason tells valid, unparseable, or failed calls apart.
        Side Effects / State: One outbound text-generation call, no retry.
        Dependencies: TextGenerator.generate and LABEL_DESCRIPTIONS.
        Failure Modes: Generator errors and raised exceptions become an invalid result
            with confidence 0.4 and the error detail attached.
        If Removed: Low-scoring messages can only be answered from keyword scores.
        Testing Notes: Fake generators returning a label, junk, and a failure.
        """
        prompt = build_fallback_prompt(message)
        try:
            result = await self._generator.generate(prompt)
        except Exception as exc:
            logger.exception("fallback classification call raised")
            return _error_result(str(exc) or exc.__class__.__name__)
        if not result.success:
            logger.warning("fallback classification failed error=%s", result.error)
            return _error_result(result.error or "text generation failed")

        label = (result.text or "").lower().strip()
        if label in LABEL_DESCRIPTIONS:
            category = Category(label)
            logger.info("fallback classification category=%s", category.value)
            return FallbackResult(
                category=category,
                confidence=FALLBACK_CONFIDENCE,
                reason=REASON_AI_FALLBACK,
                suggestions=GENERIC_SUGGESTIONS if category is Category.INVALID else (),
                ai_response=result.text,
            )

        logger.warning("fallback classification unparseable label=%r", result.text)
        return FallbackResult(
            category=Category.INVALID,
            confidence=UNPARSEABLE_CONFIDENCE,
            reason=REASON_AI_UNPARSEABLE,
            suggestions=GENERIC_SUGGESTIONS,
            ai_response=result.text,
        )


def _error_result(detail: str) -> FallbackResult:
    return FallbackResult(
        category=Category.INVALID,
        confidence=ERROR_CONFIDENCE,
        reason=REASON_AI_ERROR,
        suggestions=GENERIC_SUGGESTIONS,
        error=detail,
    )
