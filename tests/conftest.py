"""Shared fakes for the assistant tests; nothing here touches the network."""

from typing import List, Optional

import pytest

from cake_assistant.catalog_store import CatalogStore, parse_catalog
from cake_assistant.classifier import KeywordClassifier, MessageClassifier
from cake_assistant.config import BASE_DIR
from cake_assistant.dispatcher import IntentDispatcher
from cake_assistant.fallback_classifier import FallbackClassifier
from cake_assistant.interfaces import GenerationResult, ImageResult
from cake_assistant.prompt_loader import PromptLibrary

PLACEHOLDER_URL = "https://example.test/placeholder.png"

CATALOG = {
    "productos": [
        {"nombre": "Torta de Chocolate", "descripcion": "Ganache belga", "precio": 1500, "orden": 1},
        {"nombre": "Torta de Vainilla", "descripcion": "Crema chantilly", "precio": 1200, "orden": 2},
        {"nombre": "Selva Negra", "precio": 1900, "activo": 0},
    ],
    "zonas_entrega": [
        {"nombre": "Centro", "costo_base": 300, "costo_express": 500, "tiempo_estimado": "2-3 horas", "orden": 1},
        {"nombre": "Palermo", "costo_base": 350, "costo_express": 550, "tiempo_estimado": "2-3 horas", "orden": 2},
    ],
    "medios_pago": [
        {"nombre": "Efectivo", "tipo": "efectivo", "orden": 1},
        {"nombre": "Tarjeta de crédito", "tipo": "tarjeta", "orden": 2},
        {"nombre": "Tarjeta de débito", "tipo": "tarjeta", "orden": 3},
        {"nombre": "Mercado Pago", "tipo": "digital", "orden": 4},
    ],
}


class FakeTextGenerator:
    """Returns canned replies in order and records every prompt it receives."""

    def __init__(self, replies: Optional[List[GenerationResult]] = None, default: str = "Respuesta generada"):
        self.replies = list(replies or [])
        self.default = default
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> GenerationResult:
        self.prompts.append(prompt)
        if self.replies:
            return self.replies.pop(0)
        return GenerationResult(success=True, text=self.default)


class RaisingTextGenerator:
    def __init__(self):
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> GenerationResult:
        self.prompts.append(prompt)
        raise RuntimeError("connection reset")


class FakeImageGenerator:
    def __init__(self, result: Optional[ImageResult] = None):
        self.result = result or ImageResult(success=True, url="https://example.test/cake.png")
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> ImageResult:
        self.prompts.append(prompt)
        return self.result


class RaisingImageGenerator:
    def __init__(self):
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> ImageResult:
        self.prompts.append(prompt)
        raise TimeoutError("image service timed out")


class BrokenLookup:
    async def lookup_products(self):
        raise ConnectionError("catalog unavailable")

    async def lookup_shipping_zones(self, zone=None):
        raise ConnectionError("catalog unavailable")

    async def lookup_payment_methods(self, method=None):
        raise ConnectionError("catalog unavailable")

    async def shipping_policies(self):
        return {}

    async def payment_policies(self):
        return {}


def make_dispatcher(text=None, images=None, lookup=None, classifier=None, escalation_enabled=False, max_context_length=1500):
    text = text or FakeTextGenerator()
    classifier = classifier or MessageClassifier(
        KeywordClassifier(),
        fallback=FallbackClassifier(text),
        escalation_enabled=escalation_enabled,
    )
    return IntentDispatcher(
        classifier=classifier,
        lookup=lookup or CatalogStore(parse_catalog(CATALOG)),
        text_generator=text,
        image_generator=images or FakeImageGenerator(),
        prompts=PromptLibrary.from_dir(BASE_DIR / "prompts"),
        placeholder_image_url=PLACEHOLDER_URL,
        max_context_length=max_context_length,
    )


@pytest.fixture
def catalog_store():
    return CatalogStore(parse_catalog(CATALOG))
