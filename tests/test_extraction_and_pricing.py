"""Attribute extraction, complexity bands, and price estimates."""

from types import MappingProxyType

import pytest

from cake_assistant.attribute_extractor import AttributeExtractor, AttributeSet
from cake_assistant.cake_design import build_specifications, design_suggestions
from cake_assistant.keyword_tables import DEFAULT_TABLES
from cake_assistant.pricing import (
    CONSULT,
    DEFAULT_PRICING,
    PricingEngine,
    PricingTables,
    calculate_complexity,
    complexity_band,
    complexity_score,
    round_half_up,
)

BIRTHDAY_REQUEST = "Quiero una torta de cumpleaños rosa con flores de azúcar para 20 personas"


def test_birthday_request_attributes():
    attributes = AttributeExtractor().extract(BIRTHDAY_REQUEST)

    assert attributes.occasion == "birthday"
    assert attributes.theme == "flowers"
    assert attributes.colors == ["pink"]
    assert attributes.decorations == ["sugar_flowers"]
    assert attributes.size == "large"
    assert attributes.flavors == []
    assert attributes.age_group is None


def test_birthday_request_price():
    attributes = AttributeExtractor().extract(BIRTHDAY_REQUEST)

    assert complexity_score(attributes) == 3.5
    assert calculate_complexity(attributes) == "medium"

    result = PricingEngine().estimate(attributes)

    # 1800 x 1.2 x 1.4 x 2.2 + 400 = 7052.8
    assert result.base_price == 1800
    assert result.total_estimated == 7053
    assert result.price_range == {"min": 5642, "max": 8463}
    assert result.factors["decorations"] == 1
    assert not result.degraded


def test_single_value_domains_keep_last_dictionary_match():
    attributes = AttributeExtractor().extract("Torta de boda y aniversario con princesa y unicornio")

    # aniversario comes after boda in the occasion table, unicornio after princesa
    assert attributes.occasion == "anniversary"
    assert attributes.theme == "unicorn"


@pytest.mark.parametrize(
    "message, domain, expected",
    [
        ("Torta para niña y niño", "gender", "male"),
        ("Torta para niño y niña", "gender", "male"),
        ("Torta para adulto y niño", "age_group", "adult"),
        ("Algo sencillo pero elegante", "style", "simple"),
        ("Elegante y divertido", "style", "fun"),
    ],
)
def test_gender_age_and_style_keep_last_table_match(message, domain, expected):
    """Table order decides between competing triggers, not their position in the text."""
    attributes = AttributeExtractor().extract(message)

    assert getattr(attributes, domain) == expected


def test_list_domains_are_deduplicated_in_table_order():
    attributes = AttributeExtractor().extract("Torta azul, rosa y azul con flores de azúcar y flores de azucar")

    assert attributes.colors == ["pink", "blue"]
    assert attributes.decorations == ["sugar_flowers"]


def test_size_first_branch_wins():
    extractor = AttributeExtractor()

    assert extractor.detect_size("torta chica para un evento") == "small"
    assert extractor.detect_size("torta extra grande") == "large"
    assert extractor.detect_size("para 30 personas") == "extra_large"
    assert extractor.detect_size("sin tamaño") is None


def test_extracted_tags_come_from_closed_vocabularies():
    attributes = AttributeExtractor().extract(
        "Torta elegante de boda para niña, dorada y blanca, con perlas, fondant y chocolate"
    )

    assert attributes.occasion in DEFAULT_TABLES.vocabulary(DEFAULT_TABLES.occasions)
    assert set(attributes.colors) <= DEFAULT_TABLES.vocabulary(DEFAULT_TABLES.colors)
    assert set(attributes.decorations) <= DEFAULT_TABLES.vocabulary(DEFAULT_TABLES.decorations)
    assert attributes.style == "elegant"
    assert attributes.gender == "female"


def test_empty_message_extracts_nothing():
    assert AttributeExtractor().extract("") == AttributeSet()


@pytest.mark.parametrize(
    "score, band",
    [(0, "low"), (2, "low"), (2.5, "medium"), (4, "medium"), (6, "high"), (6.5, "very_high")],
)
def test_complexity_band_boundaries(score, band):
    assert complexity_band(score) == band


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(1000.5) == 1001


def test_unset_attributes_use_default_base_price():
    result = PricingEngine().estimate(AttributeSet())

    assert result.total_estimated == 1000
    assert result.complexity == "low"


def test_price_range_brackets_estimate():
    attributes = AttributeSet(
        occasion="wedding",
        theme="elegant",
        size="extra_large",
        colors=["white", "gold"],
        decorations=["natural_flowers", "pearls", "fondant", "lace"],
    )
    result = PricingEngine().estimate(attributes)

    assert result.complexity == "very_high"
    assert result.price_range["min"] <= result.total_estimated <= result.price_range["max"]


@pytest.mark.parametrize("size", [None, "small", "medium", "large", "extra_large"])
@pytest.mark.parametrize(
    "occasion", [None] + sorted(DEFAULT_TABLES.vocabulary(DEFAULT_TABLES.occasions))
)
def test_estimate_never_below_base_and_inside_range(size, occasion):
    engine = PricingEngine()
    for decorations in ([], sorted(DEFAULT_PRICING.decoration_surcharges)):
        attributes = AttributeSet(occasion=occasion, size=size, decorations=list(decorations))
        result = engine.estimate(attributes)

        assert not result.degraded
        assert result.total_estimated >= result.base_price == engine.base_price(size)
        assert result.price_range["min"] <= result.total_estimated <= result.price_range["max"]


def test_broken_tables_degrade_instead_of_raising():
    tables = PricingTables(
        base_prices=MappingProxyType({"large": "n/a"}),
        default_base_price=DEFAULT_PRICING.default_base_price,
        occasion_factors=DEFAULT_PRICING.occasion_factors,
        complexity_factors=DEFAULT_PRICING.complexity_factors,
        size_factors=DEFAULT_PRICING.size_factors,
        decoration_surcharges=DEFAULT_PRICING.decoration_surcharges,
    )

    result = PricingEngine(tables).estimate(AttributeSet(size="large"))

    assert result.degraded
    assert result.total_estimated == CONSULT
    assert "price_range" not in result.to_dict()


def test_non_finite_total_degrades():
    tables = PricingTables(
        base_prices=DEFAULT_PRICING.base_prices,
        default_base_price=DEFAULT_PRICING.default_base_price,
        occasion_factors=DEFAULT_PRICING.occasion_factors,
        complexity_factors=DEFAULT_PRICING.complexity_factors,
        size_factors=MappingProxyType({"small": float("inf")}),
        decoration_surcharges=DEFAULT_PRICING.decoration_surcharges,
    )

    assert PricingEngine(tables).estimate(AttributeSet(size="small")).total_estimated == CONSULT


def test_specifications_extend_preparation_for_weddings():
    wedding = build_specifications(AttributeSet(occasion="wedding", size="medium"), "high")
    birthday = build_specifications(AttributeSet(occasion="birthday", size="small"), "low")

    assert wedding.preparation_time == "48-72 horas"
    assert wedding.portions == "12-15 personas"
    assert birthday.preparation_time == "24-48 horas"
    assert birthday.advance_notice == "48 horas"


def test_design_suggestions_ask_for_missing_details():
    suggestions = design_suggestions(AttributeSet(occasion="birthday"))

    assert "Considera agregar velas personalizadas" in suggestions
    assert any("cantidad aproximada de personas" in item for item in suggestions)
    assert any("sabor favorito" in item for item in suggestions)
