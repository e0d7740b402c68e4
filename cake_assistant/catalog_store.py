"""JSON-backed catalog implementing the read-only lookup contract.

The catalog file holds products, delivery zones, payment methods, and store
policies. It is parsed once into normalized records; lookups are coroutines so
the dispatcher can await them like any other external service.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .interfaces import Record
from .utils import first_value, normalize_text

logger = logging.getLogger("cake_assistant.catalog")

NAME_KEYS = ["name", "nombre"]
DESC_KEYS = ["description", "descripcion"]
PRICE_KEYS = ["price", "precio"]
FLAVOR_KEYS = ["flavor", "sabor"]
AVAILABLE_KEYS = ["available", "disponible"]
INGREDIENT_KEYS = ["ingredients", "ingredientes"]
ACTIVE_KEYS = ["active", "activo"]
ORDER_KEYS = ["order", "orden"]
COST_KEYS = ["cost", "costo", "costo base", "base cost"]
EXPRESS_COST_KEYS = ["express cost", "costo express"]
SCHEDULED_COST_KEYS = ["scheduled cost", "costo programado"]
TIME_KEYS = ["time", "tiempo", "tiempo estimado"]
EXPRESS_TIME_KEYS = ["express time", "tiempo express"]
TYPE_KEYS = ["type", "tipo"]
FEE_KEYS = ["fee", "comision"]

DEFAULT_SHIPPING_POLICIES: Dict[str, Record] = {
    "horario_entrega": {"value": "9:00 AM - 8:00 PM", "description": "Horario de entregas de lunes a domingo"},
    "tiempo_preparacion": {"value": "2-4 horas", "description": "Tiempo mínimo para preparar el pedido"},
    "pedido_minimo": {"value": "$500", "description": "Monto mínimo para entregas a domicilio"},
    "envio_gratis": {"value": "$1500", "description": "Envío gratis en pedidos superiores a este monto"},
    "areas_cobertura": {"value": "CABA y Gran Buenos Aires", "description": "Áreas donde realizamos entregas"},
}

DEFAULT_PAYMENT_POLICIES: Dict[str, Record] = {
    "anticipo_requerido": {"value": "50%", "description": "Anticipo requerido para pedidos superiores a $1000"},
    "tiempo_reserva": {"value": "24 horas", "description": "Tiempo máximo para confirmar pago y mantener reserva"},
    "reembolsos": {"value": "48 horas antes", "description": "Política de reembolsos hasta 48 horas antes de la entrega"},
    "facturacion": {"value": "A y B disponible", "description": "Emitimos facturas A y B"},
    "comisiones": {"value": "Incluidas en precio", "description": "Las comisiones están incluidas en el precio final"},
}


@dataclass
class CatalogMeta:
    """Metadata describing the catalog file version for logging."""
    file_name: str
    updated_at: str
    sha256: str


@dataclass
class CatalogData:
    """Normalized catalog sections held in memory by CatalogStore."""
    products: List[Record] = field(default_factory=list)
    shipping_zones: List[Record] = field(default_factory=list)
    payment_methods: List[Record] = field(default_factory=list)
    shipping_policies: Dict[str, Record] = field(default_factory=dict)
    payment_policies: Dict[str, Record] = field(default_factory=dict)


def _is_active(record: Dict[str, Any]) -> bool:
    value = first_value(record, ACTIVE_KEYS)
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in {"0", "false", "no"}
    return bool(value)


def _sort_key(record: Dict[str, Any]) -> tuple:
    order = first_value(record, ORDER_KEYS)
    try:
        order_value = float(order) if order is not None else float("inf")
    except (TypeError, ValueError):
        order_value = float("inf")
    return (order_value, normalize_text(str(first_value(record, NAME_KEYS) or "")))


def _normalize_product(raw: Dict[str, Any]) -> Record:
    return {
        "name": str(first_value(raw, NAME_KEYS) or "").strip(),
        "description": str(first_value(raw, DESC_KEYS) or "").strip(),
        "price": first_value(raw, PRICE_KEYS),
        "flavor": first_value(raw, FLAVOR_KEYS),
        "available": first_value(raw, AVAILABLE_KEYS),
        "ingredients": first_value(raw, INGREDIENT_KEYS),
    }


def _normalize_zone(raw: Dict[str, Any]) -> Record:
    return {
        "name": str(first_value(raw, NAME_KEYS) or "").strip(),
        "description": str(first_value(raw, DESC_KEYS) or "").strip(),
        "cost": first_value(raw, COST_KEYS),
        "express_cost": first_value(raw, EXPRESS_COST_KEYS),
        "scheduled_cost": first_value(raw, SCHEDULED_COST_KEYS),
        "time": first_value(raw, TIME_KEYS),
        "express_time": first_value(raw, EXPRESS_TIME_KEYS),
    }


def _normalize_method(raw: Dict[str, Any]) -> Record:
    return {
        "name": str(first_value(raw, NAME_KEYS) or "").strip(),
        "description": str(first_value(raw, DESC_KEYS) or "").strip(),
        "type": str(first_value(raw, TYPE_KEYS) or "").strip(),
        "fee": first_value(raw, FEE_KEYS),
    }


def _normalize_section(items: Any, normalizer) -> List[Record]:
    if not isinstance(items, list):
        return []
    active = [item for item in items if isinstance(item, dict) and _is_active(item)]
    return [normalizer(item) for item in sorted(active, key=_sort_key)]


def _normalize_policies(section: Any) -> Dict[str, Record]:
    if not isinstance(section, dict):
        return {}
    policies: Dict[str, Record] = {}
    for name, value in section.items():
        if isinstance(value, dict):
            policies[str(name)] = {"value": value.get("value"), "description": value.get("description", "")}
        else:
            policies[str(name)] = {"value": value, "description": ""}
    return policies


def parse_catalog(data: Any) -> CatalogData:
    """Purpose: Convert a decoded catalog document into normalized record lists.
    Inputs/Outputs: Input is the decoded JSON value; output is CatalogData.
    Side Effects / State: None.
    Dependencies: first_value for Spanish/English key synonyms.
    Failure Modes: Non-dict documents yield an empty catalog; inactive rows are dropped.
    If Removed: Lookups cannot read catalog files.
    Testing Notes: Mixed "nombre"/"name" keys and "activo": 0 rows.
    """
    if not isinstance(data, dict):
        return CatalogData()
    policies = data.get("policies") or data.get("politicas") or {}
    if not isinstance(policies, dict):
        policies = {}
    return CatalogData(
        products=_normalize_section(data.get("products") or data.get("productos"), _normalize_product),
        shipping_zones=_normalize_section(
            data.get("shipping_zones") or data.get("zonas_entrega"), _normalize_zone
        ),
        payment_methods=_normalize_section(
            data.get("payment_methods") or data.get("medios_pago"), _normalize_method
        ),
        shipping_policies=_normalize_policies(policies.get("shipping") or policies.get("envios")),
        payment_policies=_normalize_policies(policies.get("payments") or policies.get("pagos")),
    )


class CatalogStore:
    """Read-only lookup service over an in-memory catalog."""

    def __init__(self, data: CatalogData, meta: Optional[CatalogMeta] = None) -> None:
        self._data = data
        self._meta = meta

    @classmethod
    def from_file(cls, path: Path) -> "CatalogStore":
        """Purpose: Load and normalize catalog data from a JSON file.
        Inputs/Outputs: Input is a Path; returns a CatalogStore.
        Side Effects / State: Reads file contents and computes hash/mtime.
        Dependencies: Uses json, hashlib, and parse_catalog.
        Failure Modes: Missing files raise FileNotFoundError; JSON decode errors raise
            to the caller.
        If Removed: The app cannot answer product, shipping, or payment questions.
        Testing Notes: Load a temp catalog file and check counts and meta.
        """
        raw_bytes = path.read_bytes()
        meta = CatalogMeta(
            file_name=path.name,
            updated_at=datetime.fromtimestamp(path.stat().st_mtime).isoformat(),
            sha256=hashlib.sha256(raw_bytes).hexdigest(),
        )
        data = parse_catalog(json.loads(raw_bytes.decode("utf-8-sig")))
        logger.info(
            "catalog loaded file=%s sha256=%s products=%s zones=%s methods=%s",
            meta.file_name,
            meta.sha256[:12],
            len(data.products),
            len(data.shipping_zones),
            len(data.payment_methods),
        )
        return cls(data, meta)

    @property
    def meta(self) -> Optional[CatalogMeta]:
        return self._meta

    async def lookup_products(self) -> List[Record]:
        return [dict(product) for product in self._data.products]

    async def lookup_shipping_zones(self, zone: Optional[str] = None) -> List[Record]:
        zones = self._data.shipping_zones
        if zone:
            needle = normalize_text(zone)
            zones = [item for item in zones if needle in normalize_text(item["name"])]
        return [dict(item) for item in zones]

    async def lookup_payment_methods(self, method: Optional[str] = None) -> List[Record]:
        methods = self._data.payment_methods
        if method:
            needle = normalize_text(method)
            methods = [
                item
                for item in methods
                if needle in normalize_text(item["name"]) or needle in normalize_text(item["type"])
            ]
        return [dict(item) for item in methods]

    async def shipping_policies(self) -> Dict[str, Record]:
        return dict(self._data.shipping_policies or DEFAULT_SHIPPING_POLICIES)

    async def payment_policies(self) -> Dict[str, Record]:
        return dict(self._data.payment_policies or DEFAULT_PAYMENT_POLICIES)
