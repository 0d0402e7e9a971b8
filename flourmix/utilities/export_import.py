"""
Export and import functionality for saved blends and catalog materials.
"""
import csv
import io
import json
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional
import logging

from flourmix.domain.Blend import SavedBlend
from flourmix.domain.Material import Material
from flourmix.utilities.constants import (
    EXPORT_TIMESTAMP_FORMAT, MECHANICAL_FIELDS, NUTRITIONAL_FIELDS, PROTEIN_FIELDS
)

logger = logging.getLogger(__name__)

BLEND_CSV_COLUMNS = ['id', 'user_id', 'name', 'description', 'composition', 'created_at', 'updated_at', 'tags']
MATERIAL_CSV_COLUMNS = (['name', 'category'] + list(NUTRITIONAL_FIELDS) + list(PROTEIN_FIELDS)
                        + list(MECHANICAL_FIELDS) + ['solubility'])


def blends_to_csv(blends: Iterable[SavedBlend]) -> str:
    """Semicolon-separated CSV; composition and tags are JSON-encoded cells."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=BLEND_CSV_COLUMNS, delimiter=';', lineterminator='\n')
    writer.writeheader()
    for blend in blends:
        row = blend.to_dict()
        writer.writerow({
            'id': row['id'],
            'user_id': row['user_id'],
            'name': row['name'],
            'description': row['description'] or '',
            'composition': json.dumps(row['composition'], ensure_ascii=False),
            'created_at': row['created_at'],
            'updated_at': row['updated_at'],
            'tags': json.dumps(row['tags'], ensure_ascii=False),
        })
    return buf.getvalue()


def blends_from_csv(text: str) -> List[SavedBlend]:
    """Parse a CSV produced by blends_to_csv."""
    blends = []
    for row in csv.DictReader(io.StringIO(text), delimiter=';'):
        data = dict(row)
        data['composition'] = json.loads(row.get('composition') or '[]')
        data['tags'] = json.loads(row.get('tags') or '[]')
        blends.append(SavedBlend.from_dict(data))
    return blends


def blends_to_json(blends: Iterable[SavedBlend]) -> str:
    return json.dumps([b.to_dict() for b in blends], indent=2, ensure_ascii=False)


def blends_from_json(text: str) -> List[SavedBlend]:
    """Parse a JSON export; raises ValueError unless it holds a list of blends."""
    rows = json.loads(text)
    if not isinstance(rows, list):
        raise ValueError("Invalid format: expected a list of blends")
    return [SavedBlend.from_dict(r) for r in rows]


def materials_to_csv(materials: Iterable[Material]) -> str:
    """Comma-separated catalog listing with nutritional, protein and functional columns."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=MATERIAL_CSV_COLUMNS, lineterminator='\n')
    writer.writeheader()
    for m in materials:
        row = {'name': m.name, 'category': m.category, 'solubility': m.solubility}
        row.update(m.nutritional_values)
        row.update(m.protein_composition)
        row.update(m.mechanical_properties)
        writer.writerow(row)
    return buf.getvalue()


class DataExporter:
    """Export saved blends and catalog data to files."""

    def __init__(self, output_dir: Path = Path('.')):
        self.output_dir = Path(output_dir)

    def _target(self, prefix: str, suffix: str, output_path: Optional[Path]) -> Path:
        if output_path is not None:
            return Path(output_path)
        timestamp = datetime.now().strftime(EXPORT_TIMESTAMP_FORMAT)
        return self.output_dir / f"{prefix}_{timestamp}.{suffix}"

    def export_blends_csv(self, blends: List[SavedBlend], output_path: Path = None) -> Optional[Path]:
        """Export saved blends to CSV."""
        output_path = self._target('saved_mixes_export', 'csv', output_path)
        try:
            output_path.write_text(blends_to_csv(blends), encoding='utf-8')
            logger.info(f"Exported {len(blends)} blends to {output_path}")
            return output_path
        except OSError as e:
            logger.error(f"Export failed: {e}")
            return None

    def export_blends_json(self, blends: List[SavedBlend], output_path: Path = None) -> Optional[Path]:
        """Export saved blends to a JSON file."""
        output_path = self._target('saved_mixes_export', 'json', output_path)
        try:
            output_path.write_text(blends_to_json(blends), encoding='utf-8')
            logger.info(f"Exported {len(blends)} blends to {output_path}")
            return output_path
        except OSError as e:
            logger.error(f"Export failed: {e}")
            return None

    def export_materials_csv(self, materials: List[Material], output_path: Path = None) -> Optional[Path]:
        """Export a catalog's materials to CSV for spreadsheet use."""
        output_path = self._target('flours_export', 'csv', output_path)
        try:
            output_path.write_text(materials_to_csv(materials), encoding='utf-8')
            logger.info(f"Exported {len(materials)} flours to {output_path}")
            return output_path
        except OSError as e:
            logger.error(f"Export failed: {e}")
            return None


class DataImporter:
    """Import saved blends exported by DataExporter."""

    def import_blends(self, input_path: Path) -> List[SavedBlend]:
        """Read blends from a JSON or CSV export; invalid files yield an empty list."""
        input_path = Path(input_path)
        try:
            text = input_path.read_text(encoding='utf-8')
            if input_path.suffix.lower() == '.csv':
                blends = blends_from_csv(text)
            else:
                blends = blends_from_json(text)
        except (OSError, ValueError) as e:
            logger.error(f"Import failed: {e}")
            return []
        logger.info(f"Imported {len(blends)} blends from {input_path}")
        return blends


__all__ = [
    'DataExporter', 'DataImporter', 'blends_to_csv', 'blends_from_csv', 'blends_to_json',
    'blends_from_json', 'materials_to_csv'
]
