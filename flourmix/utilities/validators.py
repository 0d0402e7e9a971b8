"""
Input validation schemas using Pydantic for the blending API.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Literal, Optional

from flourmix.domain.MixComponent import MixComponent
from flourmix.logic.combination.combiner import clamp_weight
from flourmix.utilities.constants import DEFAULT_COMBINE_WEIGHT

CatalogName = Literal['public', 'enterprise', 'private']


class MixComponentInput(BaseModel):
    """Schema for one blend component."""
    flourId: str = Field(..., min_length=1)
    flourName: str = ""
    percentage: float = Field(..., ge=0, le=100)
    source: Optional[CatalogName] = None
    nutritionalValues: Optional[Dict[str, float]] = None
    proteinComposition: Optional[Dict[str, float]] = None
    mechanicalProperties: Optional[Dict[str, str]] = None
    solubility: Optional[str] = None
    antiNutrients: Optional[Dict[str, Any]] = None
    antiNutrientContribution: Optional[Dict[str, Any]] = None
    enzymeContribution: Optional[Dict[str, Any]] = None

    @field_validator('flourId', 'flourName')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        return v.strip() if isinstance(v, str) else v

    def to_component(self, catalog: str = 'public') -> MixComponent:
        """Domain component; an omitted source falls back to the given catalog."""
        data = self.model_dump(exclude_none=True)
        data.setdefault('source', catalog)
        return MixComponent.from_dict(data)


def _no_duplicates(components: List[MixComponentInput]) -> List[MixComponentInput]:
    ids = [c.flourId for c in components]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValueError(f"Duplicate flours in composition: {', '.join(duplicates)}")
    return components


class CompositionInput(BaseModel):
    """Schema for an ad-hoc composition evaluated against a catalog."""
    composition: List[MixComponentInput] = Field(default_factory=list)
    catalog: CatalogName = 'public'
    owner_id: Optional[str] = None

    @field_validator('composition')
    @classmethod
    def validate_composition(cls, v):
        return _no_duplicates(v)


class BlendInput(BaseModel):
    """Schema for saving a blend."""
    id: Optional[str] = None
    owner_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    composition: List[MixComponentInput]
    tags: List[str] = Field(default_factory=list)
    shared: bool = False
    tier: Optional[str] = None
    bonus_slots: int = Field(0, ge=0)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate blend name."""
        if not v.strip():
            raise ValueError('Blend name cannot be empty')
        return v.strip()

    @field_validator('composition')
    @classmethod
    def validate_composition(cls, v):
        """Ensure the blend has at least one flour and no duplicates."""
        if not v:
            raise ValueError('Blend must have at least one flour')
        return _no_duplicates(v)

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        """Ensure tags are non-empty strings."""
        return [tag.strip() for tag in v if tag and tag.strip()]


class CombineItemInput(BaseModel):
    """Schema for one saved blend taking part in a combination."""
    blend_id: str = Field(..., min_length=1)
    weight: float = DEFAULT_COMBINE_WEIGHT

    @field_validator('weight')
    @classmethod
    def clamp_to_slider(cls, v):
        """Clamp weight into the slider range."""
        return clamp_weight(v)


class CombineInput(BaseModel):
    """Schema for a combination request."""
    items: List[CombineItemInput] = Field(default_factory=list)
    owner_id: Optional[str] = None

    @field_validator('items')
    @classmethod
    def validate_items(cls, v):
        """Ensure each blend is selected once."""
        ids = [i.blend_id for i in v]
        if len(ids) != len(set(ids)):
            raise ValueError('Each blend can be selected only once')
        return v
