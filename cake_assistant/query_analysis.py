from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

KNOWN_ZONES = (
    "centro", "microcentro", "puerto madero", "san telmo", "la boca",
    "barracas", "constitución", "monserrat", "retiro", "recoleta",
    "palermo", "villa crespo", "almagro", "caballito", "flores",
    "once", "balvanera", "boedo", "parque chacabuco", "nueva pompeya",
)

DEFAULT_PAYMENT_REQUIREMENTS: Dict[str, List[Dict[str, str]]] = {
    "card": [
        {"requirement": "Tarjeta válida", "description": "Tarjeta de crédito o débito vigente"},
        {"requirement": "DNI del titular", "description": "Documento de identidad del titular de la tarjeta"},
        {"requirement": "Código de seguridad", "description": "CVV de la tarjeta"},
    ],
    "transfer": [
        {"requirement": "Datos bancarios", "description": "CBU y datos de la cuenta bancaria"},
        {"requirement": "Comprobante", "description": "Enviar comprobante de transferencia"},
        {"requirement": "Referencia", "description": "Indicar número de pedido en la transferencia"},
    ],
    "financing": [
        {"requirement": "Monto mínimo", "description": "Pedidos superiores a $2000 para financiación"},
        {"requirement": "Aprobación crediticia", "description": "Sujeto a aprobación de la entidad financiera"},
        {"requirement": "Anticipo 30%", "description": "Se requiere anticipo del 30%"},
    ],
    "invoice": [
        {"requirement": "CUIT/CUIL", "description": "Número de CUIT o CUIL para facturación"},
        {"requirement": "Razón social", "description": "Nombre o razón social completa"},
        {"requirement": "Domicilio fiscal", "description": "Dirección fiscal registrada"},
    ],
}


@dataclass
class ShippingQuery:
    """What a shipping question asks for: costs, times, and an optional zone."""
    kind: str = "general"
    needs_costs: bool = False
    needs_time_estimates: bool = False
    zone: Optional[str] = None


@dataclass
class PaymentQuery:
    """Payment question kind, the method it names, and whether requirements apply."""
    kind: str = "general"
    specific_method: Optional[str] = None
    needs_requirements: bool = False


def _has_any(text: str, terms) -> bool:
    return any(term in text for term in terms)


def analyze_shipping_query(message: str) -> ShippingQuery:
    """Work out whether a shipping question asks for costs, times, zones, or hours."""
    lowered = (message or "").lower()
    query = ShippingQuery()

    if _has_any(lowered, ("costo", "precio", "vale", "cuanto")):
        query.kind = "cost"
        query.needs_costs = True
    elif _has_any(lowered, ("tiempo", "cuando", "demora", "tardan")):
        query.kind = "time"
        query.needs_time_estimates = True
    elif _has_any(lowered, ("zona", "área", "cobertura", "entregan")):
        query.kind = "zones"
    elif _has_any(lowered, ("horario", "hora")):
        query.kind = "schedule"

    # A named zone always asks for both costs and times; the last zone listed wins.
    for zone in KNOWN_ZONES:
        if zone in lowered:
            query.zone = zone
            query.needs_costs = True
            query.needs_time_estimates = True
    return query


def analyze_payment_query(message: str) -> PaymentQuery:
    lowered = (message or "").lower()
    query = PaymentQuery()

    if _has_any(lowered, ("tarjeta", "credito", "crédito", "debito", "débito", "visa", "mastercard")):
        query.kind, query.specific_method, query.needs_requirements = "card", "tarjeta", True
    elif _has_any(lowered, ("efectivo", "cash")):
        query.kind, query.specific_method = "cash", "efectivo"
    elif _has_any(lowered, ("transferencia", "banco")):
        query.kind, query.specific_method, query.needs_requirements = "transfer", "transferencia", True
    elif _has_any(lowered, ("mercado pago", "mercadopago")):
        query.kind, query.specific_method = "digital", "mercado pago"
    elif "paypal" in lowered:
        query.kind, query.specific_method = "digital", "paypal"
    elif _has_any(lowered, ("cuota", "financiacion", "financiación", "planes")):
        query.kind, query.needs_requirements = "financing", True
    elif _has_any(lowered, ("factura", "recibo", "comprobante")):
        query.kind, query.needs_requirements = "invoice", True
    elif _has_any(lowered, ("descuento", "promocion", "promoción", "oferta")):
        query.kind = "discounts"
    return query


def payment_requirements(kind: str) -> List[Dict[str, str]]:
    return [dict(item) for item in DEFAULT_PAYMENT_REQUIREMENTS.get(kind, [])]
