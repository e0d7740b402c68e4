from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .attribute_extractor import AttributeSet

STANDARD_PREPARATION = "24-48 horas"
STANDARD_NOTICE = "48 horas"
EXTENDED_PREPARATION = "48-72 horas"
EXTENDED_NOTICE = "72 horas"
PORTIONS_UNKNOWN = "A consultar"

PORTIONS_BY_SIZE: Dict[str, str] = {
    "small": "6-8 personas",
    "medium": "12-15 personas",
    "large": "20-25 personas",
    "extra_large": "30-40 personas",
}

BASE_INGREDIENTS = ("Harina premium", "Huevos frescos", "Mantequilla", "Azúcar")
FLAVOR_INGREDIENTS: Dict[str, tuple] = {
    "chocolate": ("Cacao premium", "Chocolate belga"),
    "vanilla": ("Esencia de vainilla natural",),
    "strawberry": ("Fresas frescas", "Mermelada artesanal"),
}
DECORATION_INGREDIENTS: Dict[str, tuple] = {
    "fondant": ("Fondant premium",),
    "sugar_flowers": ("Azúcar glas", "Colorantes naturales"),
}


@dataclass
class DesignSpecifications:
    """Preparation window, portions, and ingredients proposed for a custom cake."""
    preparation_time: str
    advance_notice: str
    portions: str
    complexity: str
    ingredients: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "preparation_time": self.preparation_time,
            "advance_notice": self.advance_notice,
            "portions": self.portions,
            "complexity": self.complexity,
            "ingredients": list(self.ingredients),
        }


def suggested_ingredients(attributes: AttributeSet) -> List[str]:
    ingredients = list(BASE_INGREDIENTS)
    for flavor, extra in FLAVOR_INGREDIENTS.items():
        if flavor in attributes.flavors:
            ingredients.extend(extra)
    for decoration, extra in DECORATION_INGREDIENTS.items():
        if decoration in attributes.decorations:
            ingredients.extend(extra)
    return ingredients


def build_specifications(attributes: AttributeSet, complexity: str) -> DesignSpecifications:
    """Preparation window, portions, and ingredients for an extracted design."""
    elaborate = (
        len(attributes.decorations) > 3
        or attributes.occasion == "wedding"
        or attributes.size == "extra_large"
    )
    return DesignSpecifications(
        preparation_time=EXTENDED_PREPARATION if elaborate else STANDARD_PREPARATION,
        advance_notice=EXTENDED_NOTICE if elaborate else STANDARD_NOTICE,
        portions=PORTIONS_BY_SIZE.get(attributes.size or "", PORTIONS_UNKNOWN),
        complexity=complexity,
        ingredients=suggested_ingredients(attributes),
    )


def design_suggestions(attributes: AttributeSet) -> List[str]:
    suggestions: List[str] = []

    if attributes.occasion == "birthday":
        suggestions.append("Considera agregar velas personalizadas")
        suggestions.append("¿Te gustaría incluir el nombre del festejado?")
    if attributes.occasion == "wedding":
        suggestions.append("Podemos crear un topper personalizado con los nombres")
        suggestions.append("Las flores naturales dan un toque muy elegante")

    if not attributes.colors:
        suggestions.append("Considera colores que combinen con la decoración del evento")
    elif len(attributes.colors) == 1:
        suggestions.append("Podríamos agregar un color complementario para más contraste")

    if attributes.theme == "princess":
        suggestions.append("Podemos incluir una corona comestible como decoración")
        suggestions.append("Los tonos rosa y dorado quedan perfectos con este tema")
    if attributes.theme == "superhero":
        suggestions.append("Podemos crear el logo del superhéroe favorito")
        suggestions.append("Los colores vibrantes son ideales para este tema")

    if not attributes.size:
        suggestions.append("Especifica la cantidad aproximada de personas para sugerir el tamaño ideal")
    if not attributes.flavors:
        suggestions.append("¿Tienes algún sabor favorito? Podemos sugerirte las mejores combinaciones")
    return suggestions
