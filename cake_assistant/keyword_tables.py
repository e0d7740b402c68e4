"""Static keyword and attribute dictionaries shared by the classifier and extractor.

Tables are built once at import time into immutable containers and handed to the
classifier and extractor by reference. Iteration order is part of the behaviour:
category order breaks scoring ties, and attribute dictionary order decides which
single-value tag survives when several triggers match.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from .classification import Category

TriggerTable = Tuple[Tuple[str, str], ...]

# Scoring order for the keyword classifier; ties go to the earliest entry.
CATEGORY_ORDER: Tuple[Category, ...] = (
    Category.PRODUCTS,
    Category.SHIPPING,
    Category.PAYMENTS,
    Category.CUSTOM_DESIGN,
)

CATEGORY_KEYWORDS = {
    Category.PRODUCTS: (
        "torta", "pastel", "tortas", "pasteles", "sabor", "sabores", "precio", "precios",
        "ingredientes", "chocolate", "vainilla", "fresa", "red velvet", "zanahoria",
        "sin gluten", "vegano", "dulce", "amargo", "tamaño", "porciones", "disponible",
        "stock", "catálogo", "menu", "opciones", "variedades", "especialidad",
        "recomendación", "popular", "mejor", "nuevo", "temporada",
    ),
    Category.SHIPPING: (
        "envío", "envio", "entrega", "delivery", "domicilio", "enviar", "entregar",
        "zona", "zonas", "cobertura", "área", "tiempo", "horario", "cuando",
        "rápido", "urgente", "costo", "precio envío", "gratis", "distancia",
        "ubicación", "dirección", "barrio", "ciudad", "llevar", "recoger",
        "pickup", "logística", "transporte",
    ),
    Category.PAYMENTS: (
        "pagar", "pago", "pagos", "precio", "costo", "tarjeta", "efectivo",
        "transferencia", "débito", "crédito", "mercado pago", "paypal", "visa",
        "mastercard", "factura", "facturación", "recibo", "comprobante",
        "descuento", "promoción", "oferta", "anticipo", "seña", "cuotas",
        "financiación", "método", "forma", "modalidad",
    ),
    Category.CUSTOM_DESIGN: (
        "diseñar", "crear", "personalizada", "personalizado", "custom", "especial",
        "cumpleaños", "boda", "matrimonio", "aniversario", "graduación", "bautizo",
        "comunión", "quinceaños", "sweet 16", "baby shower", "género reveal",
        "temática", "tema", "decoración", "adorno", "figura", "muñeco",
        "floral", "flores", "rosas", "mariposas", "princesa", "superhéroe",
        "unicornio", "dinosaurio", "futbol", "deportes", "música", "arte",
        "colores", "rosa", "azul", "dorado", "plateado", "elegante", "moderno",
    ),
}

OCCASION_TRIGGERS: TriggerTable = (
    ("cumpleaños", "birthday"),
    ("boda", "wedding"),
    ("matrimonio", "wedding"),
    ("aniversario", "anniversary"),
    ("graduación", "graduation"),
    ("graduacion", "graduation"),
    ("bautizo", "christening"),
    ("comunión", "communion"),
    ("comunion", "communion"),
    ("quinceaños", "quinceanera"),
    ("sweet 16", "sweet_16"),
    ("baby shower", "baby_shower"),
    ("gender reveal", "gender_reveal"),
    ("despedida", "farewell"),
)

THEME_TRIGGERS: TriggerTable = (
    ("princesa", "princess"),
    ("superhéroe", "superhero"),
    ("unicornio", "unicorn"),
    ("dinosaurio", "dinosaur"),
    ("futbol", "football"),
    ("deportes", "sports"),
    ("música", "music"),
    ("arte", "art"),
    ("flores", "flowers"),
    ("mariposas", "butterflies"),
    ("corazones", "hearts"),
    ("estrellas", "stars"),
    ("arco iris", "rainbow"),
    ("frozen", "frozen"),
    ("disney", "disney"),
    ("marvel", "marvel"),
    ("pokemon", "pokemon"),
    ("minecraft", "minecraft"),
    ("fortnite", "fortnite"),
    ("unicornios", "unicorn"),
    ("sirena", "mermaid"),
    ("pirata", "pirate"),
    ("carreras", "racing"),
    ("construcción", "construction"),
    ("jardín", "garden"),
    ("vintage", "vintage"),
    ("moderno", "modern"),
    ("elegante", "elegant"),
    ("rustico", "rustic"),
    ("tropical", "tropical"),
    ("navidad", "christmas"),
    ("halloween", "halloween"),
)

COLOR_TRIGGERS: TriggerTable = (
    ("rosa", "pink"),
    ("azul", "blue"),
    ("verde", "green"),
    ("amarillo", "yellow"),
    ("rojo", "red"),
    ("morado", "purple"),
    ("violeta", "violet"),
    ("naranja", "orange"),
    ("blanco", "white"),
    ("negro", "black"),
    ("dorado", "gold"),
    ("plateado", "silver"),
    ("celeste", "light_blue"),
    ("fucsia", "fuchsia"),
    ("turquesa", "turquoise"),
    ("coral", "coral"),
    ("lavanda", "lavender"),
    ("mint", "mint"),
    ("beige", "beige"),
)

DECORATION_TRIGGERS: TriggerTable = (
    ("figuras", "figurines"),
    ("muñecos", "dolls"),
    ("flores naturales", "natural_flowers"),
    ("flores de azúcar", "sugar_flowers"),
    ("flores de azucar", "sugar_flowers"),
    ("mariposas", "butterflies"),
    ("perlas", "pearls"),
    ("brillos", "sparkles"),
    ("glitter", "glitter"),
    ("fondant", "fondant"),
    ("buttercream", "buttercream"),
    ("merengue", "meringue"),
    ("chocolate", "chocolate"),
    ("frutas", "fruit"),
    ("velas", "candles"),
    ("topper", "topper"),
    ("banderines", "bunting"),
    ("globos", "balloons"),
    ("encaje", "lace"),
    ("lazos", "bows"),
)

FLAVOR_TRIGGERS: TriggerTable = (
    ("chocolate", "chocolate"),
    ("vainilla", "vanilla"),
    ("fresa", "strawberry"),
    ("red velvet", "red_velvet"),
    ("zanahoria", "carrot"),
    ("limón", "lemon"),
    ("limon", "lemon"),
    ("café", "coffee"),
    ("dulce de leche", "dulce_de_leche"),
    ("tres leches", "tres_leches"),
    ("coco", "coconut"),
    ("banana", "banana"),
    ("manzana", "apple"),
    ("naranja", "orange"),
    ("maracuyá", "passion_fruit"),
    ("cheesecake", "cheesecake"),
)

# Size branches are checked in this order and the first branch with a hit wins.
SIZE_PHRASES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("small", ("chica", "pequeña", "6 personas", "personal")),
    ("medium", ("mediana", "12 personas", "familia")),
    ("large", ("grande", "20 personas", "fiesta")),
    ("extra_large", ("extra grande", "30 personas", "evento")),
)

AGE_GROUP_TRIGGERS: TriggerTable = (
    ("niña", "child"),
    ("niño", "child"),
    ("infantil", "child"),
    ("bebé", "child"),
    ("adolescente", "teen"),
    ("teen", "teen"),
    ("adulto", "adult"),
    ("adulta", "adult"),
)

GENDER_TRIGGERS: TriggerTable = (
    ("niña", "female"),
    ("mujer", "female"),
    ("femenino", "female"),
    ("niño", "male"),
    ("hombre", "male"),
    ("masculino", "male"),
)

STYLE_TRIGGERS: TriggerTable = (
    ("elegante", "elegant"),
    ("sofisticado", "elegant"),
    ("divertido", "fun"),
    ("colorido", "fun"),
    ("sencillo", "simple"),
    ("minimalista", "simple"),
    ("rustico", "rustic"),
    ("campestre", "rustic"),
)


@dataclass(frozen=True)
class KeywordTables:
    """Read-only bundle of every dictionary the classifier and extractor consult."""
    category_order: Tuple[Category, ...]
    category_keywords: Mapping[Category, Tuple[str, ...]]
    occasions: TriggerTable
    themes: TriggerTable
    colors: TriggerTable
    decorations: TriggerTable
    flavors: TriggerTable
    sizes: Tuple[Tuple[str, Tuple[str, ...]], ...]
    age_groups: TriggerTable
    genders: TriggerTable
    styles: TriggerTable

    def keywords_for(self, category: Category) -> Tuple[str, ...]:
        return self.category_keywords.get(category, ())

    def vocabulary(self, table: TriggerTable) -> frozenset:
        """Return the closed set of tags a trigger table can emit."""
        return frozenset(tag for _, tag in table)


def build_keyword_tables() -> KeywordTables:
    """Purpose: Assemble the immutable keyword and attribute tables.
    Inputs/Outputs: No inputs; returns a KeywordTables instance.
    Side Effects / State: None; wraps module constants in read-only views.
    Dependencies: Module-level keyword and trigger constants.
    Failure Modes: Raises ValueError if CATEGORY_ORDER and CATEGORY_KEYWORDS disagree.
    If Removed: Classifier and extractor have no vocabulary and cannot run.
    Testing Notes: Ensure the category order is preserved and tables are read-only.
    """
    if set(CATEGORY_ORDER) != set(CATEGORY_KEYWORDS):
        raise ValueError("CATEGORY_ORDER must list exactly the categories with keywords")
    keywords = {category: tuple(CATEGORY_KEYWORDS[category]) for category in CATEGORY_ORDER}
    return KeywordTables(
        category_order=CATEGORY_ORDER,
        category_keywords=MappingProxyType(keywords),
        occasions=OCCASION_TRIGGERS,
        themes=THEME_TRIGGERS,
        colors=COLOR_TRIGGERS,
        decorations=DECORATION_TRIGGERS,
        flavors=FLAVOR_TRIGGERS,
        sizes=SIZE_PHRASES,
        age_groups=AGE_GROUP_TRIGGERS,
        genders=GENDER_TRIGGERS,
        styles=STYLE_TRIGGERS,
    )


DEFAULT_TABLES = build_keyword_tables()
