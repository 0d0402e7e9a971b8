"""Saved blend repository (file persistence) with the save-path checks."""
import json
import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from flourmix.domain.Blend import SavedBlend
from flourmix.events.event_helpers import publish_blend_saved, publish_sum_invalid
from flourmix.infra.paths import DATA_DIR, SAVED_MIXES_TABLE, table_file
from flourmix.logic.validation.percentages import validate_percentages
from flourmix.utilities.config import MIX_LIMITS
from flourmix.utilities.errors import BlendNotFoundError, InvalidPercentageSumError, MixLimitExceededError
from flourmix.utilities.retry import retry_on_failure

logger = logging.getLogger(__name__)


def mix_limit_for(tier: Optional[str], bonus_slots: int = 0) -> int:
    """Saved-mix limit for a subscription tier plus bonus slots; 0 means unlimited."""
    return MIX_LIMITS.get((tier or '').lower(), 0) + max(0, bonus_slots)


class BlendRepository:
    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR
        self.path = table_file(SAVED_MIXES_TABLE, self.data_dir)

    @retry_on_failure()
    def _load(self) -> List[dict]:
        if not self.path.exists():
            return []
        with open(self.path, 'r', encoding='utf-8') as f:
            try:
                rows = json.load(f) or []
            except json.JSONDecodeError as e:
                logger.error(f"Invalid JSON in saved mixes file: {e}")
                return []
        return rows if isinstance(rows, list) else []

    def _atomic_write(self, rows: List[dict]):
        os.makedirs(self.path.parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".saved_mixes_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(rows, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def list_blends(self, owner_id: Optional[str] = None) -> List[SavedBlend]:
        """Saved blends, newest first; restricted to one owner when given."""
        blends = [SavedBlend.from_dict(row) for row in self._load()]
        if owner_id is not None:
            blends = [b for b in blends if b.owner_id == owner_id]
        blends.sort(key=lambda b: b.created_at, reverse=True)
        return blends

    def list_shared(self) -> List[SavedBlend]:
        return [b for b in self.list_blends() if b.shared]

    def get_blend(self, blend_id: str) -> SavedBlend:
        for row in self._load():
            if str(row.get('id')) == blend_id:
                return SavedBlend.from_dict(row)
        raise BlendNotFoundError(blend_id)

    def save_blend(self, blend: SavedBlend, tier: Optional[str] = None, bonus_slots: int = 0) -> SavedBlend:
        """Insert or update a saved blend.

        New blends are checked against the owner's tier limit; every save
        requires percentages summing to 100 within tolerance.
        """
        check = validate_percentages(blend.components)
        if not check.ok:
            publish_sum_invalid(blend, check.total_percentage)
            raise InvalidPercentageSumError(check.total_percentage)

        rows = self._load()
        is_edit = bool(blend.id) and any(str(r.get('id')) == blend.id for r in rows)
        if not is_edit:
            limit = mix_limit_for(tier, bonus_slots)
            count = sum(1 for r in rows if r.get('user_id') == blend.owner_id)
            if limit > 0 and count >= limit:
                raise MixLimitExceededError(tier or '', limit)
            blend.id = blend.id or str(uuid4())
            rows.append(blend.to_dict())
        else:
            blend.updated_at = datetime.now().isoformat()
            rows = [blend.to_dict() if str(r.get('id')) == blend.id else r for r in rows]

        self._atomic_write(rows)
        logger.info(f"Saved blend '{blend.name}' ({blend.id}) for owner {blend.owner_id}")
        publish_blend_saved(blend, created=not is_edit)
        return blend

    def delete_blend(self, blend_id: str, owner_id: Optional[str] = None):
        rows = self._load()
        remaining = [r for r in rows
                     if not (str(r.get('id')) == blend_id and (owner_id is None or r.get('user_id') == owner_id))]
        if len(remaining) == len(rows):
            raise BlendNotFoundError(blend_id)
        self._atomic_write(remaining)
        logger.info(f"Deleted blend {blend_id}")


__all__ = ['BlendRepository', 'mix_limit_for']
