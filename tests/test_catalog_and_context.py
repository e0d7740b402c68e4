"""Catalog normalization, lookups, query analysis, and prompt context."""

import asyncio
import json

from cake_assistant.catalog_store import DEFAULT_PAYMENT_POLICIES, DEFAULT_SHIPPING_POLICIES, CatalogStore
from cake_assistant.context_builder import build_product_context, compose_prompt
from cake_assistant.query_analysis import analyze_payment_query, analyze_shipping_query, payment_requirements
from cake_assistant.utils import first_value, normalize_text, sanitize_message


def test_normalize_text_strips_accents():
    assert normalize_text("  Envío  Rápido ") == "envio rapido"


def test_first_value_matches_spanish_synonyms():
    record = {"Descripción": "Bizcocho", "precio": ""}

    assert first_value(record, ["description", "descripcion"]) == "Bizcocho"
    assert first_value(record, ["price", "precio"]) is None


def test_inactive_rows_are_dropped_and_order_respected(catalog_store):
    products = asyncio.run(catalog_store.lookup_products())

    assert [item["name"] for item in products] == ["Torta de Chocolate", "Torta de Vainilla"]
    assert products[0]["price"] == 1500


def test_zone_and_method_filters(catalog_store):
    palermo = asyncio.run(catalog_store.lookup_shipping_zones("palermo"))
    cards = asyncio.run(catalog_store.lookup_payment_methods("tarjeta"))
    everything = asyncio.run(catalog_store.lookup_payment_methods())

    assert [zone["name"] for zone in palermo] == ["Palermo"]
    assert palermo[0]["cost"] == 350
    assert [method["name"] for method in cards] == ["Tarjeta de crédito", "Tarjeta de débito"]
    assert len(everything) == 4


def test_unknown_zone_is_an_empty_result(catalog_store):
    assert asyncio.run(catalog_store.lookup_shipping_zones("marte")) == []


def test_policies_fall_back_to_defaults(catalog_store):
    assert asyncio.run(catalog_store.shipping_policies()) == DEFAULT_SHIPPING_POLICIES
    assert asyncio.run(catalog_store.payment_policies()) == DEFAULT_PAYMENT_POLICIES


def test_from_file_reads_bom_prefixed_json(tmp_path):
    path = tmp_path / "catalog.json"
    document = {
        "products": [{"name": "Lemon Pie", "price": 1100}],
        "policies": {"shipping": {"horario_entrega": "10 a 18"}},
    }
    path.write_text(json.dumps(document), encoding="utf-8-sig")

    store = CatalogStore.from_file(path)

    assert store.meta.file_name == "catalog.json"
    assert asyncio.run(store.lookup_products())[0]["name"] == "Lemon Pie"
    assert asyncio.run(store.shipping_policies()) == {"horario_entrega": {"value": "10 a 18", "description": ""}}


def test_shipping_query_named_zone_needs_costs_and_times():
    query = analyze_shipping_query("¿Llegan a palermo o recoleta?")

    assert query.zone == "palermo"
    assert query.needs_costs and query.needs_time_estimates


def test_shipping_query_kinds():
    assert analyze_shipping_query("cuanto sale el envío").kind == "cost"
    assert analyze_shipping_query("cuando llega mi pedido").kind == "time"
    assert analyze_shipping_query("¿hasta qué hora entregan?").kind == "zones"


def test_payment_query_detects_method_and_requirements():
    card = analyze_payment_query("¿Aceptan Visa?")
    cash = analyze_payment_query("pago en efectivo")
    invoice = analyze_payment_query("necesito factura A")

    assert (card.kind, card.specific_method, card.needs_requirements) == ("card", "tarjeta", True)
    assert (cash.kind, cash.needs_requirements) == ("cash", False)
    assert invoice.kind == "invoice"
    assert len(payment_requirements("invoice")) == 3
    assert payment_requirements("cash") == []


def test_payment_query_does_not_read_mp_inside_words():
    assert analyze_payment_query("¿cuánto tiempo tarda?").specific_method is None


def test_product_context_lists_prices():
    context = build_product_context([{"name": "Chocotorta", "price": None, "description": ""}])

    assert "- Chocotorta: $Consultar (Sin descripción)" in context


def test_compose_prompt_truncates_context_and_adds_reminders():
    prompt = compose_prompt("INSTRUCCIONES", "x" * 50, "¿precio disponible?", max_context_length=10)

    assert prompt.startswith("INSTRUCCIONES\n\n" + "x" * 10 + "...\n[INFORMACIÓN TRUNCADA]")
    assert "pueden variar" in prompt
    assert "puede cambiar" in prompt
    assert prompt.rstrip().endswith("máximo 3 párrafos.")


def test_sanitize_message_removes_scripts_and_control_characters():
    raw = "hola\x00 <script>alert(1)</script>torta onclick=x javascript:void"

    assert sanitize_message(raw) == "hola torta x void"
