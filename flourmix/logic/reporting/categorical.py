"""Categorical property aggregation (mechanical properties, solubility).

Categories are scored low=1, medium=2, high=3, averaged with percentage/100
weights, rounded to six decimals and bucketed back: <=1.67 low, <=2.33 medium,
above that high.
Components whose category is missing or unknown add nothing to the sum.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Optional

from flourmix.domain.MixComponent import MixComponent
from flourmix.logic.reporting.aggregators import MaterialIndex
from flourmix.utilities.constants import (
    CATEGORY_LOW_MAX, CATEGORY_MEDIUM_MAX, CATEGORY_SCORE_DIGITS, CATEGORY_SCORES, MECHANICAL_FIELDS
)

__all__ = [
    "category_score", "bucket_score", "weighted_score", "aggregate_mechanical_properties",
    "aggregate_solubility"
]


def category_score(category: Optional[str]) -> float:
    if not isinstance(category, str):
        return 0.0
    return float(CATEGORY_SCORES.get(category.strip().lower(), 0))


def bucket_score(score: float) -> str:
    if score <= CATEGORY_LOW_MAX:
        return 'low'
    if score <= CATEGORY_MEDIUM_MAX:
        return 'medium'
    return 'high'


def weighted_score(components: Iterable[MixComponent], categories: Iterable[Optional[str]]) -> float:
    """Weighted average score of parallel component/category sequences."""
    score = sum(category_score(cat) * c.percentage / 100 for c, cat in zip(components, categories))
    return round(score, CATEGORY_SCORE_DIGITS)


def _mechanical(component: MixComponent, materials: Optional[MaterialIndex]) -> Dict[str, str]:
    if component.mechanical_properties:
        return component.mechanical_properties
    if materials and component.material_id in materials:
        return materials[component.material_id].mechanical_properties
    return {}


def _solubility(component: MixComponent, materials: Optional[MaterialIndex]) -> Optional[str]:
    if component.solubility:
        return component.solubility
    if materials and component.material_id in materials:
        return materials[component.material_id].solubility
    return None


def aggregate_mechanical_properties(components: Iterable[MixComponent],
                                    materials: Optional[MaterialIndex] = None) -> Dict[str, str]:
    comps: List[MixComponent] = list(components)
    props = [_mechanical(c, materials) for c in comps]
    return {
        field: bucket_score(weighted_score(comps, [p.get(field) for p in props]))
        for field in MECHANICAL_FIELDS
    }


def aggregate_solubility(components: Iterable[MixComponent],
                         materials: Optional[MaterialIndex] = None) -> str:
    comps = list(components)
    return bucket_score(weighted_score(comps, [_solubility(c, materials) for c in comps]))
