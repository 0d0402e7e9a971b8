"""Weighted-sum aggregation of blend properties.

Every numeric aggregator has the same shape: for each component the weight is
percentage / 100 and each field total accumulates value * weight. Enzyme and
anti-nutrient values are resolved per component through the contribution
fallback chain before weighting.
"""
from __future__ import annotations
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from flourmix.domain.Contribution import ANTI_NUTRIENTS, ENZYMES, ContributionRecord
from flourmix.domain.Material import Material
from flourmix.domain.MixComponent import MixComponent
from flourmix.logic.contributions.fallback import resolve_contribution
from flourmix.utilities.constants import (
    ANTI_NUTRIENT_FIELDS, ANTI_NUTRIENT_LOW_MAX, ANTI_NUTRIENT_MEDIUM_MAX, ENZYME_FIELDS,
    NUTRITIONAL_FIELDS, PROTEIN_FIELDS
)

Totals = Dict[str, float]
Selector = Callable[[MixComponent], Optional[Mapping[str, float]]]
MaterialIndex = Mapping[str, Material]
ContributionIndex = Mapping[str, ContributionRecord]

__all__ = [
    "aggregate", "material_for", "aggregate_nutrients", "aggregate_proteins",
    "aggregate_proteins_by_protein_mass", "aggregate_enzymes", "aggregate_anti_nutrients",
    "grand_total", "anti_nutrient_level", "to_chart_series"
]


def _num(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def aggregate(components: Iterable[MixComponent], selector: Selector, fields: Sequence[str]) -> Totals:
    """Weighted linear combination of `fields` over the components."""
    totals: Totals = {f: 0.0 for f in fields}
    for component in components:
        weight = component.percentage / 100
        values = selector(component) or {}
        for f in fields:
            totals[f] += _num(values.get(f)) * weight
    return totals


def material_for(component: MixComponent, materials: Optional[MaterialIndex] = None) -> Material:
    """Catalog material for the component, or one rebuilt from the component's cached snapshots."""
    if materials and component.material_id in materials:
        return materials[component.material_id]
    return Material(
        id=component.material_id,
        name=component.material_name,
        catalog=component.source,
        nutritional_values=component.nutritional_values,
        protein_composition=component.protein_composition,
        anti_nutrients=component.anti_nutrients,
        mechanical_properties=component.mechanical_properties,
        solubility=component.solubility or "",
    )


def _cached_or_material(attr: str, materials: Optional[MaterialIndex]) -> Selector:
    def select(component: MixComponent):
        cached = getattr(component, attr)
        if cached:
            return cached
        if materials and component.material_id in materials:
            return getattr(materials[component.material_id], attr)
        return None
    return select


def aggregate_nutrients(components: Iterable[MixComponent],
                        materials: Optional[MaterialIndex] = None) -> Totals:
    return aggregate(components, _cached_or_material("nutritional_values", materials), NUTRITIONAL_FIELDS)


def aggregate_proteins(components: Iterable[MixComponent],
                       materials: Optional[MaterialIndex] = None) -> Totals:
    return aggregate(components, _cached_or_material("protein_composition", materials), PROTEIN_FIELDS)


def aggregate_proteins_by_protein_mass(components: Iterable[MixComponent],
                                       materials: Optional[MaterialIndex] = None) -> Totals:
    """Protein sub-composition relative to total protein, for combined blends.

    Each material's sub-composition is weighted by its protein contribution
    (proteins% * percentage%), then the four totals are renormalized so they
    sum to 100% of protein. All zeros when the blend carries no protein.
    """
    nutrients = _cached_or_material("nutritional_values", materials)
    composition = _cached_or_material("protein_composition", materials)
    totals: Totals = {f: 0.0 for f in PROTEIN_FIELDS}
    total_protein = 0.0
    for component in components:
        nv = nutrients(component)
        pc = composition(component)
        if not nv or not pc:
            continue
        protein_contribution = _num(nv.get("proteins")) * component.percentage / 100
        total_protein += protein_contribution
        for f in PROTEIN_FIELDS:
            totals[f] += _num(pc.get(f)) / 100 * protein_contribution
    if total_protein > 0:
        for f in PROTEIN_FIELDS:
            totals[f] = totals[f] / total_protein * 100
    return totals


def _resolved(kind: str, materials: Optional[MaterialIndex],
              contributions: Optional[ContributionIndex]) -> Selector:
    def select(component: MixComponent):
        record = None
        if contributions:
            record = contributions.get(component.material_id)
        if record is None:
            record = component.contribution_record(kind)
        return resolve_contribution(kind, material_for(component, materials), record)
    return select


def aggregate_enzymes(components: Iterable[MixComponent],
                      materials: Optional[MaterialIndex] = None,
                      contributions: Optional[ContributionIndex] = None) -> Totals:
    return aggregate(components, _resolved(ENZYMES, materials, contributions), ENZYME_FIELDS)


def aggregate_anti_nutrients(components: Iterable[MixComponent],
                             materials: Optional[MaterialIndex] = None,
                             contributions: Optional[ContributionIndex] = None) -> Totals:
    return aggregate(components, _resolved(ANTI_NUTRIENTS, materials, contributions), ANTI_NUTRIENT_FIELDS)


def grand_total(totals: Mapping[str, float]) -> float:
    return sum(totals.values())


def anti_nutrient_level(total: float) -> str:
    """Bucket an anti-nutrient grand total: <=5 low, <=10 medium, >10 high."""
    if total <= ANTI_NUTRIENT_LOW_MAX:
        return 'low'
    if total <= ANTI_NUTRIENT_MEDIUM_MAX:
        return 'medium'
    return 'high'


def to_chart_series(totals: Mapping[str, float], labels: Optional[Mapping[str, str]] = None) -> List[dict]:
    """[{name, value}] rows rounded to two decimals, in the totals' order."""
    labels = labels or {}
    return [
        {'name': labels.get(k, k), 'value': round(v, 2)}
        for k, v in totals.items()
    ]
