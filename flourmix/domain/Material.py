"""Material (flour) domain entity: catalog reference data read by the blending engine."""
from typing import Any, Dict, List, Optional, Union

from flourmix.utilities.constants import (
    ANTI_NUTRIENT_FIELDS, DEFAULT_CATALOG, ENZYME_FIELDS, MECHANICAL_FIELDS,
    NUTRITIONAL_FIELDS, PROTEIN_FIELDS
)

Rating = Union[str, float, int]


def _numeric_block(raw: Any, fields) -> Dict[str, float]:
    d = raw if isinstance(raw, dict) else {}
    block = {}
    for f in fields:
        try:
            block[f] = float(d.get(f) or 0)
        except (TypeError, ValueError):
            block[f] = 0.0
    return block


class Material:
    def __init__(self, id: str = "", name: str = "", catalog: str = DEFAULT_CATALOG,
                 owner_id: Optional[str] = None, category: str = "",
                 nutritional_values: Optional[Dict[str, float]] = None,
                 protein_composition: Optional[Dict[str, float]] = None,
                 enzymatic_composition: Optional[Dict[str, float]] = None,
                 anti_nutrients: Optional[Dict[str, Rating]] = None,
                 mechanical_properties: Optional[Dict[str, str]] = None,
                 solubility: str = "", description: str = "",
                 recommended_ratio: Optional[Dict[str, float]] = None,
                 tips: Optional[List[str]] = None, price_per_kg: Optional[float] = None):
        self.id = id
        self.name = name
        self.catalog = catalog
        self.owner_id = owner_id
        self.category = category
        self.nutritional_values = _numeric_block(nutritional_values, NUTRITIONAL_FIELDS)
        self.protein_composition = _numeric_block(protein_composition, PROTEIN_FIELDS)
        self.enzymatic_composition = _numeric_block(enzymatic_composition, ENZYME_FIELDS)
        # Ratings stay as given: category strings or raw numbers
        an = anti_nutrients or {}
        self.anti_nutrients = {f: an.get(f) for f in ANTI_NUTRIENT_FIELDS}
        mp = mechanical_properties or {}
        self.mechanical_properties = {f: mp.get(f, "") or "" for f in MECHANICAL_FIELDS}
        self.solubility = solubility or ""
        self.description = description or ""
        self.recommended_ratio = dict(recommended_ratio) if recommended_ratio else {"min": 0, "max": 100}
        self.tips = tips[:] if tips else []
        self.price_per_kg = price_per_kg

    def __str__(self) -> str:
        return f"{self.name} [{self.catalog}] - Proteins: {self.nutritional_values['proteins']}%"

    __repr__ = __str__

    @staticmethod
    def from_dict(data, catalog: Optional[str] = None):
        '''Creates a Material from a catalog row. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        # Private catalog rows carry their owner under a table-specific column
        owner = d.get("owner_id") or d.get("user_id_private_flours")
        return Material(
            id=str(d.get("id", "")),
            name=d.get("name", ""),
            catalog=catalog or d.get("catalog") or DEFAULT_CATALOG,
            owner_id=owner,
            category=d.get("category", "") or "",
            nutritional_values=d.get("nutritional_values"),
            protein_composition=d.get("protein_composition"),
            enzymatic_composition=d.get("enzymatic_composition"),
            anti_nutrients=d.get("anti_nutrients"),
            mechanical_properties=d.get("mechanical_properties"),
            solubility=d.get("solubility", ""),
            description=d.get("description", ""),
            recommended_ratio=d.get("recommended_ratio"),
            tips=d.get("tips"),
            price_per_kg=d.get("price_per_kg"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "catalog": self.catalog,
            "owner_id": self.owner_id,
            "category": self.category,
            "nutritional_values": dict(self.nutritional_values),
            "protein_composition": dict(self.protein_composition),
            "enzymatic_composition": dict(self.enzymatic_composition),
            "anti_nutrients": dict(self.anti_nutrients),
            "mechanical_properties": dict(self.mechanical_properties),
            "solubility": self.solubility,
            "description": self.description,
            "recommended_ratio": dict(self.recommended_ratio),
            "tips": self.tips,
            "price_per_kg": self.price_per_kg,
        }
