"""Contribution fallback resolution.

Anti-nutrient and enzyme magnitudes are not stored on the material itself:
they come from per-catalog contribution tables of varying precision. Values
are resolved by trying an ordered list of strategies and keeping the first
that yields data:

  1. nested "all values" object on the contribution record
  2. flat numeric fields on the contribution record
  3. the material's own values (qualitative ratings mapped through
     ANTI_NUTRIENT_RATING_VALUES, enzymatic composition for enzymes)
  4. zeros
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from flourmix.domain.Contribution import ANTI_NUTRIENTS, ENZYMES, KIND_FIELDS, ContributionRecord
from flourmix.domain.Material import Material
from flourmix.utilities.constants import ANTI_NUTRIENT_RATING_VALUES

logger = logging.getLogger(__name__)

Values = Dict[str, float]
Strategy = Callable[[str, Optional[Material], Optional[ContributionRecord]], Optional[Values]]

__all__ = [
    "rating_to_value", "from_nested_contribution", "from_flat_contribution",
    "from_material_ratings", "zero_values", "STRATEGIES", "resolve_contribution",
    "resolve_with_source"
]


def rating_to_value(rating: Any) -> Optional[float]:
    """Map a qualitative rating (low/medium/high) or a raw or numeric-string number to a magnitude."""
    if isinstance(rating, bool) or rating is None:
        return None
    if isinstance(rating, (int, float)):
        return float(rating)
    if isinstance(rating, str):
        key = rating.strip().lower()
        if key in ANTI_NUTRIENT_RATING_VALUES:
            return ANTI_NUTRIENT_RATING_VALUES[key]
        try:
            return float(key)
        except ValueError:
            return None
    return None


def from_nested_contribution(kind: str, material: Optional[Material],
                             record: Optional[ContributionRecord]) -> Optional[Values]:
    if record is None:
        return None
    return record.nested_values()


def from_flat_contribution(kind: str, material: Optional[Material],
                           record: Optional[ContributionRecord]) -> Optional[Values]:
    if record is None:
        return None
    return record.flat_values()


def from_material_ratings(kind: str, material: Optional[Material],
                          record: Optional[ContributionRecord]) -> Optional[Values]:
    if material is None:
        return None
    if kind == ENZYMES:
        return dict(material.enzymatic_composition)
    values: Values = {}
    found = False
    for field in KIND_FIELDS[ANTI_NUTRIENTS]:
        v = rating_to_value(material.anti_nutrients.get(field))
        if v is not None:
            found = True
        values[field] = v or 0.0
    return values if found else None


def zero_values(kind: str, material: Optional[Material],
                record: Optional[ContributionRecord]) -> Optional[Values]:
    return {field: 0.0 for field in KIND_FIELDS[kind]}


# Order matters: the first strategy returning values wins
STRATEGIES: List[Tuple[str, Strategy]] = [
    ("nested", from_nested_contribution),
    ("flat", from_flat_contribution),
    ("material", from_material_ratings),
    ("zero", zero_values),
]


def resolve_with_source(kind: str, material: Optional[Material] = None,
                        record: Optional[ContributionRecord] = None,
                        strategies: Optional[List[Tuple[str, Strategy]]] = None) -> Tuple[str, Values]:
    """Resolve values for one material and return (strategy name, values)."""
    if kind not in KIND_FIELDS:
        raise ValueError(f"Unknown contribution kind: {kind}")
    if record is not None and record.kind != kind:
        raise ValueError(f"Contribution record of kind '{record.kind}' used to resolve '{kind}'")
    for name, strategy in strategies or STRATEGIES:
        values = strategy(kind, material, record)
        if values is not None:
            if name != "nested":
                material_id = material.id if material else (record.material_id if record else "?")
                logger.debug(f"{kind} for material {material_id} resolved from '{name}' values")
            return name, values
    return "zero", zero_values(kind, material, record)


def resolve_contribution(kind: str, material: Optional[Material] = None,
                         record: Optional[ContributionRecord] = None) -> Values:
    """Resolve anti-nutrient or enzyme values for one material (never fails)."""
    return resolve_with_source(kind, material, record)[1]
