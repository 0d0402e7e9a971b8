"""Catalog -> table lookup.

Each catalog keeps its own material table and one contribution table per
property class. Unknown catalogs fail loudly: querying the wrong table would
silently yield zero contributions.
"""
from __future__ import annotations
from typing import Dict, NamedTuple, Optional

from flourmix.domain.Catalog import CatalogContext
from flourmix.domain.Contribution import ANTI_NUTRIENTS, ENZYMES

__all__ = ["CatalogSources", "CATALOG_TABLES", "resolve_sources"]


class CatalogSources(NamedTuple):
    materials_table: str
    anti_nutrients_table: str
    enzymes_table: str
    owner_filter: Optional[str] = None

    def contribution_table(self, kind: str) -> str:
        if kind == ANTI_NUTRIENTS:
            return self.anti_nutrients_table
        if kind == ENZYMES:
            return self.enzymes_table
        raise ValueError(f"Unknown contribution kind: {kind}")


CATALOG_TABLES: Dict[str, Dict[str, str]] = {
    'public': {
        'materials': 'flours',
        ANTI_NUTRIENTS: 'publiccontributionanti_nutrients',
        ENZYMES: 'publiccontributionenzymes',
    },
    'enterprise': {
        'materials': 'flours_template',
        ANTI_NUTRIENTS: 'contributionanti_nutrients',
        ENZYMES: 'contributionenzymes',
    },
    'private': {
        'materials': 'private_flours',
        ANTI_NUTRIENTS: 'contributionanti_nutrients_private',
        ENZYMES: 'contributionenzymes_private',
    },
}


def resolve_sources(context: CatalogContext) -> CatalogSources:
    """Return the tables to query for the catalog in `context`.

    The private catalog is per user, so its lookups carry the owner id as a filter.
    """
    tables = CATALOG_TABLES.get(context.catalog)
    if tables is None:
        raise ValueError(f"Unknown catalog '{context.catalog}'")
    owner_filter = None
    if context.catalog == 'private':
        if not context.owner_id:
            raise ValueError("The private catalog requires an owner id")
        owner_filter = context.owner_id
    return CatalogSources(
        materials_table=tables['materials'],
        anti_nutrients_table=tables[ANTI_NUTRIENTS],
        enzymes_table=tables[ENZYMES],
        owner_filter=owner_filter,
    )
