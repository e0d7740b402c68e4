"""Price estimation for custom cake designs.

Estimate = base price by size, multiplied by the occasion, complexity, and size
factors, plus a flat surcharge per recognised decoration. The range is the
estimate scaled by 0.8 and 1.2. Any failure produces a degraded quote that asks
the customer to get in touch instead of raising.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from .attribute_extractor import AttributeSet
from .errors import PricingDegraded

logger = logging.getLogger("cake_assistant.pricing")

CONSULT = "consult"
ESTIMATE_NOTE = "Precio estimado. El costo final puede variar según especificaciones exactas."
DEGRADED_NOTE = "Contáctanos para un presupuesto detallado"
RANGE_LOW = 0.8
RANGE_HIGH = 1.2


@dataclass(frozen=True)
class PricingTables:
    """Immutable base prices, multipliers, and surcharges used by PricingEngine."""
    base_prices: Mapping[str, float]
    default_base_price: float
    occasion_factors: Mapping[str, float]
    complexity_factors: Mapping[str, float]
    size_factors: Mapping[str, float]
    decoration_surcharges: Mapping[str, float]


DEFAULT_PRICING = PricingTables(
    base_prices=MappingProxyType({"small": 800, "medium": 1200, "large": 1800, "extra_large": 2500}),
    default_base_price=1000,
    occasion_factors=MappingProxyType(
        {"wedding": 2.0, "quinceanera": 1.8, "graduation": 1.5, "birthday": 1.2, "christening": 1.3}
    ),
    complexity_factors=MappingProxyType({"low": 1.0, "medium": 1.4, "high": 2.0, "very_high": 2.5}),
    size_factors=MappingProxyType({"small": 1.0, "medium": 1.5, "large": 2.2, "extra_large": 3.0}),
    decoration_surcharges=MappingProxyType(
        {"figurines": 300, "natural_flowers": 200, "sugar_flowers": 400, "fondant": 250, "chocolate": 150}
    ),
)


@dataclass
class PricingResult:
    """Estimate, range, and factors for one design; degraded quotes carry "consult"."""
    complexity: str
    total_estimated: Union[int, str]
    base_price: Optional[float] = None
    price_range: Optional[Dict[str, int]] = None
    factors: Dict[str, object] = field(default_factory=dict)
    note: str = ESTIMATE_NOTE
    degraded: bool = False

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "total_estimated": self.total_estimated,
            "complexity": self.complexity,
            "note": self.note,
        }
        if not self.degraded:
            payload["base_price"] = self.base_price
            payload["price_range"] = dict(self.price_range or {})
            payload["factors"] = dict(self.factors)
        return payload


def round_half_up(value: float) -> int:
    """Round halves away from zero for positive values (2.5 -> 3), unlike banker's round()."""
    return int(math.floor(value + 0.5))


def complexity_score(attributes: AttributeSet) -> float:
    """Purpose: Score how much decoration work a design needs.
    Inputs/Outputs: Input is an AttributeSet; output is a non-negative float.
    Side Effects / State: None.
    Dependencies: None.
    Failure Modes: None; missing attributes contribute zero.
    If Removed: calculate_complexity has nothing to band.
    Testing Notes: Wedding with two decorations and one color scores 4.5.
    """
    score = 0.0
    if attributes.theme:
        score += 1
    if attributes.occasion == "wedding":
        score += 2
    score += len(attributes.decorations)
    score += len(attributes.colors) * 0.5
    if attributes.size == "extra_large":
        score += 2
    if attributes.size == "large":
        score += 1
    return score


def complexity_band(score: float) -> str:
    """Map a complexity score onto low, medium, high, or very_high."""
    if score <= 2:
        return "low"
    if score <= 4:
        return "medium"
    if score <= 6:
        return "high"
    return "very_high"


def calculate_complexity(attributes: AttributeSet) -> str:
    return complexity_band(complexity_score(attributes))


class PricingEngine:
    """Multiplicative price estimator over an immutable PricingTables bundle."""

    def __init__(self, tables: PricingTables = DEFAULT_PRICING) -> None:
        self._tables = tables

    def base_price(self, size: Optional[str]) -> float:
        if size is None:
            return self._tables.default_base_price
        return self._tables.base_prices.get(size, self._tables.default_base_price)

    def _compute(self, attributes: AttributeSet, complexity: str) -> PricingResult:
        tables = self._tables
        try:
            base = self.base_price(attributes.size)
            total = float(base)
            if attributes.occasion in tables.occasion_factors:
                total *= tables.occasion_factors[attributes.occasion]
            if complexity in tables.complexity_factors:
                total *= tables.complexity_factors[complexity]
            if attributes.size in tables.size_factors:
                total *= tables.size_factors[attributes.size]
            for decoration in attributes.decorations:
                if decoration in tables.decoration_surcharges:
                    total += tables.decoration_surcharges[decoration]
            if not math.isfinite(total):
                raise PricingDegraded(f"non-finite total {total!r}")
        except PricingDegraded:
            raise
        except (TypeError, ValueError, KeyError, ArithmeticError) as exc:
            raise PricingDegraded(str(exc)) from exc

        return PricingResult(
            complexity=complexity,
            base_price=base,
            total_estimated=round_half_up(total),
            price_range={"min": round_half_up(total * RANGE_LOW), "max": round_half_up(total * RANGE_HIGH)},
            factors={
                "occasion": attributes.occasion,
                "size": attributes.size,
                "complexity": complexity,
                "decorations": len(attributes.decorations),
            },
        )

    def estimate(self, attributes: AttributeSet, complexity: Optional[str] = None) -> PricingResult:
        """Purpose: Estimate the price of a custom cake from its attributes.
        Inputs/Outputs: Inputs are an AttributeSet and an optional precomputed complexity
            band; returns a PricingResult (degraded when estimation fails).
        Side Effects / State: None.
        Dependencies: PricingTables, complexity_score, complexity_band.
        Failure Modes: Lookup or arithmetic errors yield total_estimated="consult";
            nothing propagates to the caller.
        If Removed: Custom designs are quoted without a price.
        Testing Notes: Birthday + large + sugar flowers, and a malformed table.
        """
        band = complexity or calculate_complexity(attributes)
        try:
            result = self._compute(attributes, band)
        except PricingDegraded as exc:
            logger.warning("pricing degraded error=%s", exc)
            return PricingResult(
                complexity=band,
                total_estimated=CONSULT,
                note=DEGRADED_NOTE,
                degraded=True,
            )
        logger.info(
            "pricing base=%s total=%s complexity=%s",
            result.base_price,
            result.total_estimated,
            result.complexity,
        )
        return result
