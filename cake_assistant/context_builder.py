"""Plain-text context blocks fed to the text model alongside each question."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from .interfaces import Record
from .utils import truncate

PRICE_REMINDER = "\nSi mencionas precios, siempre indica que pueden variar y se recomienda confirmar."
AVAILABILITY_REMINDER = "\nSi mencionas disponibilidad, indica que puede cambiar y se recomienda confirmar."
ANSWER_STYLE = "Responde de manera concisa pero completa, máximo 3 párrafos."


def _display(value: Any, default: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return str(value)


def _policy_lines(policies: Mapping[str, Record]) -> List[str]:
    lines = []
    for name, policy in policies.items():
        value = policy.get("value") if isinstance(policy, Mapping) else policy
        description = policy.get("description") if isinstance(policy, Mapping) else ""
        line = f"- {name}: {value}"
        if description:
            line += f" ({description})"
        lines.append(line)
    return lines


def build_product_context(products: Iterable[Record]) -> str:
    products = list(products)
    if not products:
        return (
            "INFORMACIÓN DE PRODUCTOS:\n"
            "No se pudo obtener información específica del catálogo.\n"
            "Por favor, proporciona información general sobre productos de repostería."
        )
    lines = ["INFORMACIÓN DE PRODUCTOS DISPONIBLES:", "", "PRODUCTOS:"]
    for product in products:
        lines.append(
            f"- {product.get('name')}: ${_display(product.get('price'), 'Consultar')} "
            f"({_display(product.get('description'), 'Sin descripción')})"
        )
    return "\n".join(lines)


def build_shipping_context(
    zones: Iterable[Record],
    policies: Mapping[str, Record],
    time_estimates: Optional[Mapping[str, Any]] = None,
) -> str:
    zones = list(zones)
    if not zones and not policies:
        return (
            "INFORMACIÓN DE ENVÍOS:\n"
            "No se pudo obtener información específica de envíos.\n"
            "Por favor, proporciona información general sobre entregas."
        )
    lines = ["INFORMACIÓN DE ENVÍOS Y ENTREGAS:"]
    if zones:
        lines += ["", "ZONAS DE ENTREGA:"]
        for zone in zones:
            lines.append(
                f"- {zone.get('name')}: ${_display(zone.get('cost'), 'Consultar')} "
                f"({_display(zone.get('time'), 'Tiempo a consultar')})"
            )
    if policies:
        lines += ["", "POLÍTICAS DE ENVÍO:"] + _policy_lines(policies)
    if time_estimates:
        lines += ["", "TIEMPOS ESTIMADOS:"]
        lines += [f"- {zone}: {estimate}" for zone, estimate in time_estimates.items()]
    return "\n".join(lines)


def build_payment_context(
    methods: Iterable[Record],
    policies: Mapping[str, Record],
    requirements: Iterable[Dict[str, str]] = (),
) -> str:
    methods = list(methods)
    requirements = list(requirements)
    if not methods and not policies:
        return (
            "INFORMACIÓN DE MEDIOS DE PAGO:\n"
            "No se pudo obtener información específica de medios de pago.\n"
            "Por favor, proporciona información general sobre formas de pago."
        )
    lines = ["INFORMACIÓN DE MEDIOS DE PAGO:"]
    if methods:
        lines += ["", "MÉTODOS DE PAGO DISPONIBLES:"]
        for method in methods:
            line = f"- {method.get('name')}"
            if method.get("description"):
                line += f": {method['description']}"
            lines.append(line)
    if policies:
        lines += ["", "POLÍTICAS DE PAGO:"] + _policy_lines(policies)
    if requirements:
        lines += ["", "REQUISITOS:"]
        lines += [f"- {item['requirement']}: {item['description']}" for item in requirements]
    return "\n".join(lines)


def compose_prompt(instructions: str, context: str, message: str, max_context_length: int) -> str:
    """Purpose: Assemble the final prompt sent for a catalog-backed answer.
    Inputs/Outputs: Inputs are the category instructions, the context block, the
        customer message, and the context limit; output is the prompt string.
    Side Effects / State: None.
    Dependencies: utils.truncate.
    Failure Modes: None; oversized context is cut and marked as truncated.
    If Removed: Products, shipping, and payments branches lose their grounding data.
    Testing Notes: Context longer than the limit ends with the truncation marker.
    """
    lowered = message.lower()
    reminders = ""
    if "precio" in lowered:
        reminders += PRICE_REMINDER
    if "disponible" in lowered:
        reminders += AVAILABILITY_REMINDER
    context = truncate(context, max_context_length)
    return f"{instructions}\n\n{context}{reminders}\n\nPregunta del usuario: {message}\n\n{ANSWER_STYLE}"
