"""Catalog repository: materials and contribution records read from per-table JSON files."""
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from flourmix.domain.Catalog import CatalogContext
from flourmix.domain.Contribution import ANTI_NUTRIENTS, ENZYMES, ContributionRecord
from flourmix.domain.Material import Material
from flourmix.infra.paths import DATA_DIR, table_file
from flourmix.logic.catalog.sources import resolve_sources
from flourmix.utilities.retry import retry_on_failure

logger = logging.getLogger(__name__)


class CatalogRepository:
    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR

    @retry_on_failure()
    def _read_table(self, table: str) -> List[dict]:
        path = table_file(table, self.data_dir)
        if not path.exists():
            logger.warning(f"Table file not found: {path}. Returning empty list.")
            return []
        with open(path, 'r', encoding='utf-8') as f:
            try:
                rows = json.load(f)
            except json.JSONDecodeError as e:
                logger.error(f"Invalid JSON in table {table}: {e}")
                return []
        return rows if isinstance(rows, list) else []

    def get_materials(self, context: CatalogContext) -> List[Material]:
        """Materials of the catalog, sorted by name; private rows filtered by owner."""
        sources = resolve_sources(context)
        rows = self._read_table(sources.materials_table)
        materials = [Material.from_dict(row, catalog=context.catalog) for row in rows]
        if sources.owner_filter:
            materials = [m for m in materials if m.owner_id == sources.owner_filter]
        materials.sort(key=lambda m: m.name.lower())
        return materials

    def get_contributions(self, context: CatalogContext, kind: str,
                          material_ids: Optional[List[str]] = None) -> Dict[str, ContributionRecord]:
        """Contribution records of one kind keyed by material id."""
        sources = resolve_sources(context)
        rows = self._read_table(sources.contribution_table(kind))
        wanted = set(material_ids) if material_ids is not None else None
        records: Dict[str, ContributionRecord] = {}
        for row in rows:
            record = ContributionRecord.from_dict(row, context.catalog, kind)
            if not record.material_id:
                continue
            if wanted is not None and record.material_id not in wanted:
                continue
            records[record.material_id] = record
        logger.info(f"Loaded {len(records)} {kind} contributions from {sources.contribution_table(kind)}")
        return records

    def get_all_contributions(self, context: CatalogContext,
                              material_ids: Optional[List[str]] = None):
        """(anti-nutrient records, enzyme records) for the catalog."""
        return (self.get_contributions(context, ANTI_NUTRIENTS, material_ids),
                self.get_contributions(context, ENZYMES, material_ids))

    def load_for_components(self, components, owner_id: Optional[str] = None):
        """(materials, anti-nutrient records, enzyme records) for a blend's components.

        Each component is looked up in its own source catalog. Private
        components are skipped without an owner id and fall back to their
        cached snapshots.
        """
        by_catalog: Dict[str, List[str]] = {}
        for c in components:
            by_catalog.setdefault(c.source, []).append(c.material_id)
        materials: Dict[str, Material] = {}
        anti_nutrients: Dict[str, ContributionRecord] = {}
        enzymes: Dict[str, ContributionRecord] = {}
        for catalog, ids in by_catalog.items():
            if catalog == 'private' and not owner_id:
                logger.debug(f"No owner id; private flours {ids} use cached snapshots")
                continue
            context = CatalogContext(catalog, owner_id if catalog == 'private' else None)
            wanted = set(ids)
            materials.update({m.id: m for m in self.get_materials(context) if m.id in wanted})
            anti, enz = self.get_all_contributions(context, ids)
            anti_nutrients.update(anti)
            enzymes.update(enz)
        return materials, anti_nutrients, enzymes


__all__ = ['CatalogRepository']
