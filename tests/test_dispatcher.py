"""Category branches of the intent dispatcher, driven with fake collaborators."""

import asyncio

from cake_assistant.classification import Category, ClassificationResult
from cake_assistant.dispatcher import APOLOGIES, GREETING_REPLY, NOT_UNDERSTOOD_REPLY
from cake_assistant.interfaces import GenerationResult, ImageResult

from conftest import (
    PLACEHOLDER_URL,
    BrokenLookup,
    FakeImageGenerator,
    FakeTextGenerator,
    RaisingImageGenerator,
    make_dispatcher,
)


def handle(dispatcher, message):
    return asyncio.run(dispatcher.handle(message))


def test_products_branch_uses_catalog_context():
    text = FakeTextGenerator(default="Tenemos chocolate y vainilla")
    result = handle(make_dispatcher(text=text), "¿Qué sabores de torta tienen disponibles?")

    assert result.category is Category.PRODUCTS
    assert result.service == "products"
    assert result.message == "Tenemos chocolate y vainilla"
    assert [item["name"] for item in result.additional_info["products"]] == [
        "Torta de Chocolate",
        "Torta de Vainilla",
    ]
    assert "Torta de Chocolate" in text.prompts[0]
    assert "Pregunta del usuario: ¿Qué sabores de torta tienen disponibles?" in text.prompts[0]


def test_shipping_branch_reports_zone_costs_and_times():
    result = handle(make_dispatcher(), "¿Cuánto cuesta el envío a Palermo?")

    assert result.category is Category.SHIPPING
    info = result.additional_info
    assert [zone["name"] for zone in info["zones"]] == ["Centro", "Palermo"]
    assert info["costs"] == {"Palermo": {"standard": 350, "express": 550, "scheduled": None}}
    assert info["time_estimates"] == {"Palermo": {"standard": "2-3 horas", "express": None}}


def test_payments_branch_filters_methods_and_lists_requirements():
    result = handle(make_dispatcher(), "¿Puedo pagar con tarjeta de crédito?")

    assert result.category is Category.PAYMENTS
    info = result.additional_info
    assert [method["name"] for method in info["methods"]] == ["Tarjeta de crédito", "Tarjeta de débito"]
    assert "anticipo_requerido" in info["policies"]
    assert [item["requirement"] for item in info["requirements"]][0] == "Tarjeta válida"


def test_custom_design_branch_prices_and_illustrates():
    images = FakeImageGenerator()
    text = FakeTextGenerator(default="Una torta rosa con flores de azúcar")
    result = handle(
        make_dispatcher(text=text, images=images),
        "Quiero una torta de cumpleaños rosa con flores de azúcar para 20 personas",
    )

    assert result.category is Category.CUSTOM_DESIGN
    assert result.service == "custom_design"
    info = result.additional_info
    assert info["design"]["occasion"] == "birthday"
    assert info["estimated_price"]["total_estimated"] == 7053
    assert info["estimated_price"]["price_range"] == {"min": 5642, "max": 8463}
    assert info["specifications"]["portions"] == "20-25 personas"
    assert info["image_url"] == "https://example.test/cake.png"
    assert info["suggestions"]
    assert result.message == "Una torta rosa con flores de azúcar"
    assert images.prompts == ["Quiero una torta de cumpleaños rosa con flores de azúcar para 20 personas"]


def test_custom_design_uses_placeholder_when_image_fails():
    images = FakeImageGenerator(ImageResult(success=False, error="rate limit"))
    result = handle(make_dispatcher(images=images), "Quiero diseñar una torta personalizada de cumpleaños con fondant")

    assert result.additional_info["image_url"] == PLACEHOLDER_URL
    assert result.additional_info["estimated_price"]["total_estimated"] != "consult"


def test_custom_design_survives_image_client_exception():
    """A raising image client still yields the design, the quote, and the placeholder image."""
    images = RaisingImageGenerator()
    result = handle(
        make_dispatcher(images=images),
        "Quiero una torta de cumpleaños rosa con flores de azúcar para 20 personas",
    )

    assert result.service == "custom_design"
    assert result.message != APOLOGIES["custom_design"]
    info = result.additional_info
    assert info["image_url"] == PLACEHOLDER_URL
    assert info["estimated_price"]["total_estimated"] == 7053
    assert info["design"]["occasion"] == "birthday"
    assert len(images.prompts) == 1

def test_greeting_gets_welcome_reply():
    text = FakeTextGenerator()
    result = handle(make_dispatcher(text=text), "hola")

    assert result.category is Category.INVALID
    assert result.service == "invalid_handler"
    assert result.message == GREETING_REPLY
    assert result.additional_info["categories"]
    assert text.prompts == []


def test_unmatched_message_asks_for_clarification():
    result = handle(make_dispatcher(), "xyzzy plugh")

    assert result.message == NOT_UNDERSTOOD_REPLY
    assert len(result.additional_info["suggestions"]) == 4
    assert result.confidence == 0.8


def test_out_of_vocabulary_fallback_label_is_invalid():
    text = FakeTextGenerator([GenerationResult(success=True, text="general")])
    result = handle(make_dispatcher(text=text, escalation_enabled=True), "¿Qué sabores de torta tienen disponibles?")

    assert result.category is Category.INVALID
    assert result.classification.path == "fallback"
    assert result.message == NOT_UNDERSTOOD_REPLY


class GeneralClassifier:
    async def classify(self, message, use_ai=None):
        return ClassificationResult(category=Category.GENERAL, confidence=0.5, reason="manual")


def test_general_branch_steers_toward_specialities():
    text = FakeTextGenerator(default="¡Hola! ¿Buscas una torta?")
    result = handle(make_dispatcher(text=text, classifier=GeneralClassifier()), "cuéntame algo")

    assert result.service == "general"
    assert result.message == "¡Hola! ¿Buscas una torta?"
    assert len(result.additional_info["can_help"]) == 4
    assert "Mensaje del usuario: cuéntame algo" in text.prompts[0]


def test_text_generation_failure_returns_category_apology():
    text = FakeTextGenerator([GenerationResult(success=False, error="quota exceeded")])
    result = handle(make_dispatcher(text=text), "¿Qué sabores de torta tienen disponibles?")

    assert result.category is Category.PRODUCTS
    assert result.service == "products"
    assert result.message == APOLOGIES["products"]
    assert "quota exceeded" in result.error


def test_lookup_failure_returns_category_apology():
    result = handle(make_dispatcher(lookup=BrokenLookup()), "¿Cuánto cuesta el envío a Palermo?")

    assert result.service == "shipping"
    assert result.message == APOLOGIES["shipping"]
    assert "catalog unavailable" in result.error


def test_custom_design_failure_keeps_service_tag():
    text = FakeTextGenerator([GenerationResult(success=False, error="content blocked by safety filters")])
    result = handle(make_dispatcher(text=text), "Quiero diseñar una torta personalizada de cumpleaños con fondant")

    assert result.service == "custom_design"
    assert result.message == APOLOGIES["custom_design"]


def test_envelope_shape():
    result = handle(make_dispatcher(), "hola")

    assert set(result.envelope()) == {"category", "confidence", "message", "additional_info", "service"}
    assert result.debug()["path"] == "prefilter"
