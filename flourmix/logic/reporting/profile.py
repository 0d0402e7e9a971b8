"""Aggregated blend profile.

Pure function of a blend's components plus the catalog data that was fetched
for them; recomputed on demand and never stored.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, Optional

from flourmix.domain.MixComponent import MixComponent
from flourmix.logic.reporting.aggregators import (
    ContributionIndex, MaterialIndex, aggregate_anti_nutrients, aggregate_enzymes,
    aggregate_nutrients, aggregate_proteins, aggregate_proteins_by_protein_mass,
    anti_nutrient_level, grand_total
)
from flourmix.logic.reporting.categorical import aggregate_mechanical_properties, aggregate_solubility
from flourmix.logic.validation.percentages import validate_percentages


def compute_profile(components: Iterable[MixComponent],
                    materials: Optional[MaterialIndex] = None,
                    anti_nutrient_contributions: Optional[ContributionIndex] = None,
                    enzyme_contributions: Optional[ContributionIndex] = None,
                    *, combined: bool = False) -> Dict[str, Any]:
    """Compute the aggregated profile of a blend.

    Args:
        components: Blend components (a Blend is accepted too).
        materials: Catalog materials by id; cached component snapshots take precedence.
        anti_nutrient_contributions: Contribution records by material id.
        enzyme_contributions: Contribution records by material id.
        combined: Use the combination-path protein rule (sub-composition
            weighted by protein mass and normalized to 100% of protein).

    Returns structure:
    {
      'nutritional': {proteins, lipids, carbs, fiber, moisture, ash},
      'protein_composition': {albumins, globulins, prolamins, glutelins},
      'enzymes': {amylases, proteases, lipases, phytases}, 'enzymes_total': float,
      'anti_nutrients': {lectins, ...}, 'anti_nutrients_total': float,
      'anti_nutrients_level': 'low' | 'medium' | 'high',
      'mechanical_properties': {binding, stickiness, water_absorption},
      'solubility': 'low' | 'medium' | 'high',
      'total_percentage': float, 'is_valid': bool
    }
    """
    comps = list(components)
    check = validate_percentages(comps)
    protein_composition = (aggregate_proteins_by_protein_mass(comps, materials) if combined
                           else aggregate_proteins(comps, materials))
    enzymes = aggregate_enzymes(comps, materials, enzyme_contributions)
    anti_nutrients = aggregate_anti_nutrients(comps, materials, anti_nutrient_contributions)
    anti_total = grand_total(anti_nutrients)
    return {
        'nutritional': aggregate_nutrients(comps, materials),
        'protein_composition': protein_composition,
        'enzymes': enzymes,
        'enzymes_total': grand_total(enzymes),
        'anti_nutrients': anti_nutrients,
        'anti_nutrients_total': anti_total,
        'anti_nutrients_level': anti_nutrient_level(anti_total),
        'mechanical_properties': aggregate_mechanical_properties(comps, materials),
        'solubility': aggregate_solubility(comps, materials),
        'total_percentage': check.total_percentage,
        'is_valid': check.ok,
    }


__all__ = ["compute_profile"]
