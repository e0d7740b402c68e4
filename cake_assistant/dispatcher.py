"""Routes a classified message to its category handler and builds the reply envelope.

Each handler gathers catalog data (or extracts cake attributes and prices them),
asks the text model to phrase an answer, and returns the pieces the client
renders. A failing handler never raises: it answers with an apology specific to
its category and keeps its service tag so callers can tell which branch ran.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from .attribute_extractor import AttributeExtractor
from .cake_design import build_specifications, design_suggestions
from .classification import Category, ClassificationResult, REASON_SHORT_CIRCUIT
from .classifier import MessageClassifier, NO_MATCH_SUGGESTIONS
from .context_builder import (
    build_payment_context,
    build_product_context,
    build_shipping_context,
    compose_prompt,
)
from .errors import ExternalServiceFailure
from .interfaces import ImageGenerator, ImageResult, LookupService, TextGenerator
from .pricing import PricingEngine, calculate_complexity
from .prompt_loader import PromptLibrary
from .query_analysis import analyze_payment_query, analyze_shipping_query, payment_requirements

logger = logging.getLogger("cake_assistant.dispatcher")

SERVICE_PRODUCTS = "products"
SERVICE_SHIPPING = "shipping"
SERVICE_PAYMENTS = "payments"
SERVICE_CUSTOM_DESIGN = "custom_design"
SERVICE_INVALID = "invalid_handler"
SERVICE_GENERAL = "general"

APOLOGIES: Dict[str, str] = {
    SERVICE_PRODUCTS: (
        "Disculpa, tengo problemas para acceder a la información de productos en este momento. "
        "¿Podrías intentar de nuevo?"
    ),
    SERVICE_SHIPPING: (
        "Disculpa, no puedo acceder a la información de envíos ahora. "
        "Te recomiendo contactarnos directamente para obtener detalles de entrega."
    ),
    SERVICE_PAYMENTS: (
        "Tengo dificultades para acceder a la información de medios de pago. "
        "Por favor, contáctanos directamente para conocer las opciones disponibles."
    ),
    SERVICE_CUSTOM_DESIGN: (
        "Me gustaría ayudarte a diseñar tu torta personalizada, pero tengo problemas técnicos "
        "en este momento. ¿Podrías describirme qué tipo de torta necesitas y te ayudo con ideas generales?"
    ),
    SERVICE_GENERAL: (
        "¡Hola! Soy tu asistente virtual especializado en tortas y repostería. Puedo ayudarte con "
        "información sobre productos, envíos, medios de pago y diseño de tortas personalizadas. "
        "¿En qué te gustaría que te ayude?"
    ),
}

GREETING_REPLY = "¡Hola! Soy tu asistente virtual para tortas y repostería. ¿En qué puedo ayudarte hoy?"
NOT_UNDERSTOOD_REPLY = "No logré entender tu pregunta. ¿Podrías ser más específico?"

PRODUCT_SUGGESTIONS = ("Pregunta por sabores, precios o disponibilidad de cualquier producto",)
HELP_CATEGORIES = (
    "Productos y sabores",
    "Envíos y entregas",
    "Medios de pago",
    "Tortas personalizadas",
)
CAN_HELP = (
    "Información sobre productos",
    "Detalles de envío",
    "Medios de pago",
    "Diseño de tortas personalizadas",
)

CAKE_DESCRIPTION_REQUEST = (
    "Crea una descripción detallada y atractiva de la torta personalizada, incluyendo:\n"
    "- Diseño y decoración\n"
    "- Colores sugeridos\n"
    "- Elementos decorativos\n"
    "- Tamaño recomendado\n"
    "- Ocasión específica\n\n"
    "Mantén un tono creativo pero profesional."
)
GENERAL_REQUEST = (
    "Responde de manera amigable y profesional, y si es posible, dirige la conversación hacia "
    "alguna de nuestras especialidades (productos, envíos, pagos, o tortas personalizadas)."
)


@dataclass
class HandlerReply:
    """Message, service tag, and extra payload returned by one category handler."""
    message: str
    service: str
    additional_info: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


@dataclass
class DispatchResult:
    """Reply envelope plus the classification that routed it."""
    category: Category
    confidence: float
    message: str
    service: str
    additional_info: Dict[str, Any]
    classification: ClassificationResult
    error: Optional[str] = None

    def envelope(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "confidence": self.confidence,
            "message": self.message,
            "additional_info": self.additional_info,
            "service": self.service,
        }

    def debug(self) -> Dict[str, Any]:
        return {
            "classification": self.classification.to_dict(),
            "path": self.classification.path,
            "service_used": self.service,
            "error": self.error,
        }


class IntentDispatcher:
    """Classifies a message and runs the handler for its category."""

    def __init__(
        self,
        classifier: MessageClassifier,
        lookup: LookupService,
        text_generator: TextGenerator,
        image_generator: ImageGenerator,
        prompts: PromptLibrary,
        placeholder_image_url: str,
        extractor: Optional[AttributeExtractor] = None,
        pricing: Optional[PricingEngine] = None,
        max_context_length: int = 1500,
    ) -> None:
        self._classifier = classifier
        self._lookup = lookup
        self._text = text_generator
        self._images = image_generator
        self._prompts = prompts
        self._placeholder_image_url = placeholder_image_url
        self._extractor = extractor or AttributeExtractor()
        self._pricing = pricing or PricingEngine()
        self._max_context_length = max_context_length
        self._handlers: Dict[Category, Callable[[str], Awaitable[HandlerReply]]] = {
            Category.PRODUCTS: self._handle_products,
            Category.SHIPPING: self._handle_shipping,
            Category.PAYMENTS: self._handle_payments,
            Category.CUSTOM_DESIGN: self._handle_custom_design,
        }
        self._services: Dict[Category, str] = {
            Category.PRODUCTS: SERVICE_PRODUCTS,
            Category.SHIPPING: SERVICE_SHIPPING,
            Category.PAYMENTS: SERVICE_PAYMENTS,
            Category.CUSTOM_DESIGN: SERVICE_CUSTOM_DESIGN,
        }

    @property
    def classifier(self) -> MessageClassifier:
        return self._classifier

    async def handle(self, message: str, context: Optional[Dict[str, Any]] = None) -> DispatchResult:
        """Purpose: Classify one message and produce the reply envelope.
        Inputs/Outputs: Input is the raw message and an optional caller context (accepted,
            not interpreted); output is a DispatchResult.
        Side Effects / State: Awaits classification, lookups, and generation calls in order.
        Dependencies: MessageClassifier plus the injected lookup, text, and image services.
        Failure Modes: Handler failures are converted to apologies; nothing propagates.
        If Removed: The chat endpoint has no way to answer customers.
        Testing Notes: Drive every branch with fake collaborators and failing fakes.
        """
        classification = await self._classifier.classify(message)
        category = classification.category
        logger.info(
            "dispatch category=%s confidence=%.4f path=%s",
            category.value,
            classification.confidence,
            classification.path,
        )

        if category is Category.INVALID:
            reply = self._handle_invalid(classification)
        elif category in self._handlers:
            reply = await self._run(self._services[category], self._handlers[category], message)
        else:
            reply = await self._run(SERVICE_GENERAL, self._handle_general, message)

        return DispatchResult(
            category=category,
            confidence=classification.confidence,
            message=reply.message,
            service=reply.service,
            additional_info=reply.additional_info,
            classification=classification,
            error=reply.error,
        )

    async def _run(
        self,
        service: str,
        handler: Callable[[str], Awaitable[HandlerReply]],
        message: str,
    ) -> HandlerReply:
        try:
            return await handler(message)
        except ExternalServiceFailure as exc:
            logger.warning("handler degraded service=%s dependency=%s detail=%s", service, exc.service, exc.detail)
            return HandlerReply(message=APOLOGIES[service], service=service, error=str(exc))
        except Exception as exc:
            logger.exception("handler failed service=%s", service)
            return HandlerReply(message=APOLOGIES[service], service=service, error=str(exc))

    async def _phrase(self, prompt: str) -> str:
        result = await self._text.generate(prompt)
        if not result.success:
            raise ExternalServiceFailure("text_generation", result.error)
        return result.text

    async def _fetch(self, call: Awaitable[Any]) -> Any:
        try:
            return await call
        except ExternalServiceFailure:
            raise
        except Exception as exc:
            raise ExternalServiceFailure("lookup", str(exc)) from exc

    async def _handle_products(self, message: str) -> HandlerReply:
        products = await self._fetch(self._lookup.lookup_products())
        context = build_product_context(products)
        text = await self._phrase(
            compose_prompt(self._prompts.get("products"), context, message, self._max_context_length)
        )
        return HandlerReply(
            message=text,
            service=SERVICE_PRODUCTS,
            additional_info={"products": products, "suggestions": list(PRODUCT_SUGGESTIONS)},
        )

    async def _handle_shipping(self, message: str) -> HandlerReply:
        query = analyze_shipping_query(message)
        zones = await self._fetch(self._lookup.lookup_shipping_zones())
        costs: Dict[str, Any] = {}
        time_estimates: Dict[str, Any] = {}
        if query.needs_costs or query.needs_time_estimates:
            matching = await self._fetch(self._lookup.lookup_shipping_zones(query.zone))
            for zone in matching:
                if query.needs_costs:
                    costs[zone["name"]] = {
                        "standard": zone.get("cost"),
                        "express": zone.get("express_cost"),
                        "scheduled": zone.get("scheduled_cost"),
                    }
                if query.needs_time_estimates:
                    time_estimates[zone["name"]] = {
                        "standard": zone.get("time"),
                        "express": zone.get("express_time"),
                    }
        policies = await self._fetch(self._lookup.shipping_policies())
        context = build_shipping_context(zones, policies, time_estimates)
        text = await self._phrase(
            compose_prompt(self._prompts.get("shipping"), context, message, self._max_context_length)
        )
        return HandlerReply(
            message=text,
            service=SERVICE_SHIPPING,
            additional_info={"zones": zones, "costs": costs, "time_estimates": time_estimates},
        )

    async def _handle_payments(self, message: str) -> HandlerReply:
        query = analyze_payment_query(message)
        methods = await self._fetch(self._lookup.lookup_payment_methods(query.specific_method))
        policies = await self._fetch(self._lookup.payment_policies())
        requirements = payment_requirements(query.kind) if query.needs_requirements else []
        context = build_payment_context(methods, policies, requirements)
        text = await self._phrase(
            compose_prompt(self._prompts.get("payments"), context, message, self._max_context_length)
        )
        return HandlerReply(
            message=text,
            service=SERVICE_PAYMENTS,
            additional_info={"methods": methods, "policies": policies, "requirements": requirements},
        )

    async def _handle_custom_design(self, message: str) -> HandlerReply:
        attributes = self._extractor.extract(message)
        complexity = calculate_complexity(attributes)
        description = await self._phrase(
            f"{self._prompts.get('cakes')}\n\nSolicitud del cliente: {message}\n\n{CAKE_DESCRIPTION_REQUEST}"
        )
        specifications = build_specifications(attributes, complexity)
        price = self._pricing.estimate(attributes, complexity)

        try:
            image = await self._images.generate(message)
        except Exception as exc:
            logger.warning("image generation raised error=%s", exc)
            image = ImageResult(success=False, error=str(exc))
        image_url = image.url if image.success and image.url else self._placeholder_image_url
        if not image.success:
            logger.warning("image generation degraded error=%s", image.error)

        return HandlerReply(
            message=description,
            service=SERVICE_CUSTOM_DESIGN,
            additional_info={
                "design": attributes.to_dict(),
                "image_url": image_url,
                "specifications": specifications.to_dict(),
                "estimated_price": price.to_dict(),
                "suggestions": design_suggestions(attributes),
            },
        )

    def _handle_invalid(self, classification: ClassificationResult) -> HandlerReply:
        suggestions = list(classification.suggestions or NO_MATCH_SUGGESTIONS)
        if classification.reason == REASON_SHORT_CIRCUIT:
            text = GREETING_REPLY
        else:
            text = NOT_UNDERSTOOD_REPLY
        return HandlerReply(
            message=text,
            service=SERVICE_INVALID,
            additional_info={"suggestions": suggestions, "categories": list(HELP_CATEGORIES)},
        )

    async def _handle_general(self, message: str) -> HandlerReply:
        text = await self._phrase(
            f"{self._prompts.get('general')}\n\nMensaje del usuario: {message}\n\n{GENERAL_REQUEST}"
        )
        return HandlerReply(
            message=text,
            service=SERVICE_GENERAL,
            additional_info={"can_help": list(CAN_HELP)},
        )
