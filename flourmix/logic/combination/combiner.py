"""Blend combination.

Folds several saved blends, each with its own weight, into one new blend whose
percentages again sum to 100.

Provides combine_blends(requests) and suggest_combined_name(names).
"""
from __future__ import annotations
import logging
import math
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

from flourmix.domain.Blend import Blend
from flourmix.domain.MixComponent import MixComponent
from flourmix.utilities.constants import (
    ANTI_NUTRIENT_FIELDS, ANTI_NUTRIENTS_NESTED_KEY, ANTI_NUTRIENTS_TOTAL_KEY, DEFAULT_COMBINE_WEIGHT,
    ENZYME_FIELDS, ENZYMES_NESTED_KEY, ENZYMES_TOTAL_KEY, MAX_COMBINE_WEIGHT, MIN_COMBINE_WEIGHT, PERCENTAGE_TOTAL
)
from flourmix.utilities.errors import EmptyCombinationError

logger = logging.getLogger(__name__)

__all__ = ["CombinationRequest", "combine_blends", "clamp_weight", "suggest_combined_name"]

# Snapshot fields that are scaled and summed when blends are merged
SCALED_FIELDS = frozenset(ANTI_NUTRIENT_FIELDS + ENZYME_FIELDS + (ANTI_NUTRIENTS_TOTAL_KEY, ENZYMES_TOTAL_KEY))


class CombinationRequest(NamedTuple):
    blend: Blend
    weight: float = DEFAULT_COMBINE_WEIGHT


def clamp_weight(weight: Optional[float]) -> float:
    """Clamp an interactive weight into [0.1, 10]; missing weights default to 1."""
    if weight is None:
        return DEFAULT_COMBINE_WEIGHT
    return max(MIN_COMBINE_WEIGHT, min(MAX_COMBINE_WEIGHT, float(weight)))


def _flattened(snapshot: dict) -> dict:
    """Numeric contribution fields of a snapshot; nested all-values objects override flat fields."""
    values = {k: v for k, v in snapshot.items() if k in SCALED_FIELDS and _is_number(v)}
    for key in (ANTI_NUTRIENTS_NESTED_KEY, ENZYMES_NESTED_KEY):
        nested = snapshot.get(key)
        if isinstance(nested, dict):
            values.update({k: v for k, v in nested.items() if k in SCALED_FIELDS and _is_number(v)})
    return values


def _scaled(snapshot: Optional[dict], factor: float) -> Optional[dict]:
    if not snapshot:
        return None
    return {k: v * factor for k, v in _flattened(snapshot).items()}


def _add_into(target: dict, snapshot: dict, factor: float):
    for k, v in _flattened(snapshot).items():
        target[k] = target.get(k, 0) + v * factor


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def combine_blends(requests: Sequence[CombinationRequest]) -> Blend:
    """Merge weighted blends into one normalized blend.

    Percentages are scaled by weight / total weight and summed per material,
    then rescaled so the result sums to 100. Attached anti-nutrient and enzyme
    contribution snapshots are flattened, scaled by the raw weight and summed
    field by field; a snapshot is only merged into an entry that already carries one.
    When a material arrives under different catalog tags the last one seen
    is kept. Components are returned by descending percentage, ties keeping
    first-seen order.
    """
    requests = list(requests)
    if not requests:
        raise EmptyCombinationError("At least one blend is required to build a combination")
    for r in requests:
        if r.weight is None or not math.isfinite(r.weight) or r.weight <= 0:
            raise ValueError(f"Combination weights must be positive and finite (got {r.weight})")

    total_weight = sum(r.weight for r in requests)
    merged: Dict[str, MixComponent] = {}

    for r in requests:
        normalized_weight = r.weight / total_weight
        for item in r.blend.components:
            adjusted = item.percentage * normalized_weight
            entry = merged.get(item.material_id)
            if entry is None:
                merged[item.material_id] = MixComponent(
                    material_id=item.material_id,
                    material_name=item.material_name,
                    percentage=adjusted,
                    source=item.source,
                    nutritional_values=item.nutritional_values,
                    protein_composition=item.protein_composition,
                    mechanical_properties=item.mechanical_properties,
                    solubility=item.solubility,
                    anti_nutrients=item.anti_nutrients,
                    anti_nutrient_contribution=_scaled(item.anti_nutrient_contribution, r.weight),
                    enzyme_contribution=_scaled(item.enzyme_contribution, r.weight),
                )
                continue
            entry.percentage += adjusted
            if item.source != entry.source:
                logger.warning(
                    f"Material {item.material_id} combined from catalogs '{entry.source}' "
                    f"and '{item.source}'; keeping '{item.source}'"
                )
                entry.source = item.source
            if item.anti_nutrient_contribution and entry.anti_nutrient_contribution:
                _add_into(entry.anti_nutrient_contribution, item.anti_nutrient_contribution, r.weight)
            if item.enzyme_contribution and entry.enzyme_contribution:
                _add_into(entry.enzyme_contribution, item.enzyme_contribution, r.weight)

    items: List[MixComponent] = list(merged.values())
    grand_total = sum(c.percentage for c in items)
    if grand_total > 0:
        for c in items:
            c.percentage = c.percentage * PERCENTAGE_TOTAL / grand_total
    else:
        logger.warning("Combined blends carry no percentage; skipping renormalization")

    # sorted() is stable, so equal percentages keep insertion order
    return Blend(sorted(items, key=lambda c: -c.percentage))


def suggest_combined_name(names: Iterable[str]) -> str:
    """Default name for a combination: 'A + B' for two blends, a count otherwise."""
    names = [n for n in names]
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} + {names[1]}"
    return f"Combined Mix ({len(names)} mixes)"
