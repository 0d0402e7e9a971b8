"""MixComponent: one material inside a blend, with its percentage and cached snapshots."""
from typing import Any, Dict, Optional

from flourmix.domain.Contribution import ANTI_NUTRIENTS, ENZYMES, ContributionRecord
from flourmix.domain.Material import Material
from flourmix.utilities.constants import DEFAULT_CATALOG

# Saved-mix JSON keys -> attribute names
_WIRE_KEYS = {
    "nutritionalValues": "nutritional_values",
    "proteinComposition": "protein_composition",
    "mechanicalProperties": "mechanical_properties",
    "solubility": "solubility",
    "antiNutrients": "anti_nutrients",
    "antiNutrientContribution": "anti_nutrient_contribution",
    "enzymeContribution": "enzyme_contribution",
}


class MixComponent:
    def __init__(self, material_id: str, material_name: str = "", percentage: float = 0.0,
                 source: str = DEFAULT_CATALOG,
                 nutritional_values: Optional[Dict[str, float]] = None,
                 protein_composition: Optional[Dict[str, float]] = None,
                 mechanical_properties: Optional[Dict[str, str]] = None,
                 solubility: Optional[str] = None,
                 anti_nutrients: Optional[Dict[str, Any]] = None,
                 anti_nutrient_contribution: Optional[Dict[str, Any]] = None,
                 enzyme_contribution: Optional[Dict[str, Any]] = None):
        self.material_id = material_id
        self.material_name = material_name
        self.percentage = float(percentage or 0)
        self.source = source or DEFAULT_CATALOG
        self.nutritional_values = dict(nutritional_values) if nutritional_values else None
        self.protein_composition = dict(protein_composition) if protein_composition else None
        self.mechanical_properties = dict(mechanical_properties) if mechanical_properties else None
        self.solubility = solubility
        self.anti_nutrients = dict(anti_nutrients) if anti_nutrients else None
        self.anti_nutrient_contribution = dict(anti_nutrient_contribution) if anti_nutrient_contribution else None
        self.enzyme_contribution = dict(enzyme_contribution) if enzyme_contribution else None

    def __str__(self) -> str:
        return f"{self.material_name or self.material_id}: {self.percentage:.1f}% ({self.source})"

    __repr__ = __str__

    @classmethod
    def from_material(cls, material: Material, percentage: float = 0.0,
                      anti_nutrient_contribution: Optional[ContributionRecord] = None,
                      enzyme_contribution: Optional[ContributionRecord] = None):
        '''Builds a component caching the material's properties, as when a flour is added to a working blend.'''
        return cls(
            material_id=material.id,
            material_name=material.name,
            percentage=percentage,
            source=material.catalog,
            nutritional_values=material.nutritional_values,
            protein_composition=material.protein_composition,
            mechanical_properties=material.mechanical_properties,
            solubility=material.solubility,
            anti_nutrients=material.anti_nutrients,
            anti_nutrient_contribution=anti_nutrient_contribution.to_dict() if anti_nutrient_contribution else None,
            enzyme_contribution=enzyme_contribution.to_dict() if enzyme_contribution else None,
        )

    def contribution_record(self, kind: str) -> Optional[ContributionRecord]:
        '''Rebuilds the cached contribution snapshot of the given kind, if any.'''
        snapshot = self.anti_nutrient_contribution if kind == ANTI_NUTRIENTS else \
            self.enzyme_contribution if kind == ENZYMES else None
        if not snapshot:
            return None
        row = dict(snapshot)
        row.setdefault("flour_id", self.material_id)
        return ContributionRecord.from_dict(row, self.source, kind)

    def copy(self):
        return MixComponent.from_dict(self.to_dict())

    @staticmethod
    def from_dict(data):
        '''Creates a component from a saved-mix composition entry. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        kwargs = {attr: d.get(key) for key, attr in _WIRE_KEYS.items() if d.get(key) is not None}
        return MixComponent(
            material_id=str(d.get("flourId", "")),
            material_name=d.get("flourName", "") or "",
            percentage=d.get("percentage", 0) or 0,
            source=d.get("source") or DEFAULT_CATALOG,
            **kwargs
        )

    def to_dict(self):
        d = {
            "flourId": self.material_id,
            "flourName": self.material_name,
            "percentage": self.percentage,
            "source": self.source,
        }
        for key, attr in _WIRE_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                d[key] = dict(value) if isinstance(value, dict) else value
        return d
