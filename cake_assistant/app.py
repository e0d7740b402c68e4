from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI

from .catalog_store import CatalogStore
from .classifier import KeywordClassifier, MessageClassifier
from .config import Settings, load_settings
from .dispatcher import IntentDispatcher
from .fallback_classifier import FallbackClassifier
from .gemini_client import GeminiClient
from .image_client import DalleImageClient
from .models import CategoriesResponse, CategoryInfo, ChatRequest, ChatResponse, ClassifyRequest
from .prompt_loader import PromptLibrary

BASE_DIR = Path(__file__).resolve().parent

log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
log_level = getattr(logging, log_level_name, logging.INFO)
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

logging.getLogger("cake_assistant").setLevel(log_level)
logger = logging.getLogger("cake_assistant.app")

ENV_PATH = BASE_DIR / ".env"

CATEGORIES = [
    CategoryInfo(
        id="products",
        name="Productos",
        description="Información sobre tortas, pasteles, ingredientes, sabores y precios",
        examples=[
            "¿Qué sabores de torta tienen disponibles?",
            "¿Cuál es el precio de una torta de chocolate?",
            "¿Tienen tortas sin gluten?",
            "¿Qué ingredientes usa la torta de vainilla?",
        ],
    ),
    CategoryInfo(
        id="shipping",
        name="Envíos",
        description="Información sobre entregas, zonas de cobertura, tiempos y costos",
        examples=[
            "¿Hacen entregas a domicilio?",
            "¿Cuánto cuesta el envío?",
            "¿A qué zonas entregan?",
            "¿Cuál es el tiempo de entrega?",
        ],
    ),
    CategoryInfo(
        id="payments",
        name="Medios de Pago",
        description="Formas de pago, facturación, anticipos y reembolsos",
        examples=[
            "¿Qué formas de pago aceptan?",
            "¿Puedo pagar con tarjeta?",
            "¿Aceptan transferencias bancarias?",
            "¿Emiten facturas?",
        ],
    ),
    CategoryInfo(
        id="custom_design",
        name="Creación de Tortas",
        description="Diseño de tortas personalizadas con inteligencia artificial",
        examples=[
            "Quiero una torta de cumpleaños para niña",
            "Diseña una torta de boda elegante",
            "Torta temática de superhéroes",
            "Torta con decoración floral",
        ],
    ),
]


def build_dispatcher(settings: Settings) -> IntentDispatcher:
    """Purpose: Wire the production collaborators into an IntentDispatcher.
    Inputs/Outputs: Input is Settings; returns a ready dispatcher.
    Side Effects / State: Reads the catalog and prompt files; configures SDK clients.
    Dependencies: CatalogStore, GeminiClient, DalleImageClient, PromptLibrary.
    Failure Modes: Missing catalog/prompt files or GEMINI_API_KEY raise at startup.
    If Removed: The app cannot be started without hand-built collaborators.
    Testing Notes: Tests inject a dispatcher built from fakes instead.
    """
    gemini = GeminiClient(settings)
    classifier = MessageClassifier(
        KeywordClassifier(),
        fallback=FallbackClassifier(gemini),
        escalation_threshold=settings.escalation_threshold,
        short_circuit_confidence=settings.short_circuit_confidence,
        escalation_enabled=settings.ai_fallback_enabled,
    )
    return IntentDispatcher(
        classifier=classifier,
        lookup=CatalogStore.from_file(settings.catalog_path),
        text_generator=gemini,
        image_generator=DalleImageClient(settings),
        prompts=PromptLibrary.from_dir(settings.prompts_dir),
        placeholder_image_url=settings.placeholder_image_url,
        max_context_length=settings.max_context_length,
    )


def create_app(dispatcher: Optional[IntentDispatcher] = None) -> FastAPI:
    """Purpose: Build the FastAPI application around a dispatcher.
    Inputs/Outputs: Optional prebuilt dispatcher; returns the FastAPI app.
    Side Effects / State: Loads .env (when present) and settings if no dispatcher given.
    Dependencies: FastAPI, python-dotenv, build_dispatcher.
    Failure Modes: Configuration errors propagate and stop startup.
    If Removed: No HTTP surface; run with `uvicorn cake_assistant.app:create_app --factory`.
    Testing Notes: Pass a dispatcher built from fakes and use TestClient.
    """
    if dispatcher is None:
        if ENV_PATH.exists():
            load_dotenv(ENV_PATH, override=True)
        dispatcher = build_dispatcher(load_settings())

    app = FastAPI(title="Cake Shop Assistant")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.post("/api/chat", response_model=ChatResponse)
    async def chat(request: ChatRequest) -> ChatResponse:
        """Purpose: Classify a customer message and return the category reply envelope.
        Inputs/Outputs: Input is ChatRequest; output is ChatResponse with debug block.
        Side Effects / State: None beyond logging; the dispatcher is stateless.
        Dependencies: IntentDispatcher.handle.
        Failure Modes: Validation errors return 422; handler failures become apologies.
        If Removed: Core chat functionality is unavailable.
        Testing Notes: Send a greeting and a product question through fakes.
        """
        started = time.perf_counter()
        result = await dispatcher.handle(request.message, request.context)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "chat handled category=%s service=%s elapsed_ms=%s",
            result.category.value,
            result.service,
            elapsed_ms,
        )
        return ChatResponse(
            **result.envelope(),
            metadata={
                "processing_time_ms": elapsed_ms,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
            debug=result.debug(),
        )

    @app.post("/api/classify")
    async def classify(request: ClassifyRequest) -> dict:
        result = await dispatcher.classifier.classify(request.message, use_ai=request.use_ai)
        return result.to_dict()

    @app.get("/api/chat/categories", response_model=CategoriesResponse)
    async def categories() -> CategoriesResponse:
        return CategoriesResponse(categories=CATEGORIES)

    @app.get("/api/classifier/stats")
    async def classifier_stats() -> dict:
        return dispatcher.classifier.keyword_classifier.stats()

    return app
