"""Catalog selection passed explicitly to data lookups."""
from typing import Optional

from flourmix.utilities.constants import CATALOGS


class CatalogContext:
    def __init__(self, catalog: str, owner_id: Optional[str] = None):
        if catalog not in CATALOGS:
            raise ValueError(f"Unknown catalog '{catalog}'. Expected one of: {', '.join(CATALOGS)}")
        self.catalog = catalog
        self.owner_id = owner_id

    def __eq__(self, other):
        if not isinstance(other, CatalogContext):
            return NotImplemented
        return (self.catalog, self.owner_id) == (other.catalog, other.owner_id)

    def __hash__(self):
        return hash((self.catalog, self.owner_id))

    def __repr__(self) -> str:
        if self.owner_id:
            return f"CatalogContext({self.catalog}, owner={self.owner_id})"
        return f"CatalogContext({self.catalog})"
