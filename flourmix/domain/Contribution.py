"""Contribution record: precomputed anti-nutrient or enzyme values for one material in one catalog."""
from typing import Any, Dict, Optional

from flourmix.utilities.constants import (
    ANTI_NUTRIENT_FIELDS, ANTI_NUTRIENTS_NESTED_KEY, ANTI_NUTRIENTS_TOTAL_KEY,
    ENZYME_FIELDS, ENZYMES_NESTED_KEY, ENZYMES_TOTAL_KEY
)

ANTI_NUTRIENTS = "anti_nutrients"
ENZYMES = "enzymes"

KIND_FIELDS = {ANTI_NUTRIENTS: ANTI_NUTRIENT_FIELDS, ENZYMES: ENZYME_FIELDS}
KIND_NESTED_KEYS = {ANTI_NUTRIENTS: ANTI_NUTRIENTS_NESTED_KEY, ENZYMES: ENZYMES_NESTED_KEY}
KIND_TOTAL_KEYS = {ANTI_NUTRIENTS: ANTI_NUTRIENTS_TOTAL_KEY, ENZYMES: ENZYMES_TOTAL_KEY}


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class ContributionRecord:
    def __init__(self, material_id: str, catalog: str, kind: str,
                 nested: Optional[Dict[str, Any]] = None,
                 flat: Optional[Dict[str, Any]] = None,
                 total: Optional[float] = None):
        if kind not in KIND_FIELDS:
            raise ValueError(f"Unknown contribution kind: {kind}")
        self.material_id = material_id
        self.catalog = catalog
        self.kind = kind
        self.nested = dict(nested) if isinstance(nested, dict) else None
        self.flat = {k: v for k, v in (flat or {}).items() if k in KIND_FIELDS[kind]}
        self.total = total

    @property
    def fields(self):
        return KIND_FIELDS[self.kind]

    def nested_values(self) -> Optional[Dict[str, float]]:
        if not self.nested:
            return None
        return {f: _to_float(self.nested.get(f)) or 0.0 for f in self.fields}

    def flat_values(self) -> Optional[Dict[str, float]]:
        return {f: _to_float(self.flat.get(f)) or 0.0 for f in self.fields}

    def __repr__(self) -> str:
        source = "nested" if self.nested else "flat"
        return f"ContributionRecord({self.kind}, {self.material_id}, {self.catalog}, {source})"

    @staticmethod
    def from_dict(data, catalog: str, kind: str):
        '''Creates a record from a contribution table row keyed by flour_id.'''
        d = dict(data) if isinstance(data, dict) else {}
        return ContributionRecord(
            material_id=str(d.get("flour_id") or d.get("material_id") or ""),
            catalog=catalog,
            kind=kind,
            nested=d.get(KIND_NESTED_KEYS[kind]),
            flat={f: d[f] for f in KIND_FIELDS[kind] if f in d},
            total=_to_float(d.get(KIND_TOTAL_KEYS[kind])),
        )

    def to_dict(self):
        d = {"flour_id": self.material_id}
        d.update(self.flat)
        if self.nested is not None:
            d[KIND_NESTED_KEYS[self.kind]] = dict(self.nested)
        if self.total is not None:
            d[KIND_TOTAL_KEYS[self.kind]] = self.total
        return d
