"""Blend aggregate: ordered MixComponents without duplicate materials; SavedBlend adds ownership metadata."""
from datetime import datetime
from typing import Iterable, List, Optional

from flourmix.domain.MixComponent import MixComponent


class Blend:
    def __init__(self, components: Optional[Iterable[MixComponent]] = None):
        self.components: List[MixComponent] = []
        for component in components or []:
            self.add_component(component)

    def add_component(self, component: MixComponent):
        '''
        Adds a component to the blend. A material can appear only once.
        '''
        if self.has_material(component.material_id):
            raise ValueError(f"Material '{component.material_id}' is already in the blend.")
        self.components.append(component)
        return component

    def remove_component(self, material_id: str):
        '''
        Removes the component for material_id from the blend.
        '''
        for component in self.components:
            if component.material_id == material_id:
                self.components.remove(component)
                return component
        raise ValueError(f"Material '{material_id}' not found in blend.")

    def set_percentage(self, material_id: str, percentage: float):
        '''
        Updates the percentage of one component (0-100).
        '''
        if percentage < 0 or percentage > 100:
            raise ValueError(f"Percentage must be between 0 and 100: {percentage}")
        self.get_component(material_id).percentage = float(percentage)

    def get_component(self, material_id: str) -> MixComponent:
        for component in self.components:
            if component.material_id == material_id:
                return component
        raise ValueError(f"Material '{material_id}' not found in blend.")

    def has_material(self, material_id: str) -> bool:
        return any(c.material_id == material_id for c in self.components)

    def clear(self):
        self.components = []
        return self

    @property
    def total_percentage(self) -> float:
        return sum(c.percentage for c in self.components)

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self):
        return iter(self.components)

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(c) for c in self.components)
        return f"Components:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    @staticmethod
    def from_dict(data):
        '''Builds a blend from a list of composition entries.'''
        return Blend(MixComponent.from_dict(entry) for entry in (data or []))

    def to_dict(self):
        return [c.to_dict() for c in self.components]


class SavedBlend(Blend):
    def __init__(self, id: str = "", owner_id: str = "", name: str = "",
                 components: Optional[Iterable[MixComponent]] = None,
                 description: Optional[str] = None, tags: Optional[List[str]] = None,
                 shared: bool = False, created_at: Optional[str] = None,
                 updated_at: Optional[str] = None):
        super().__init__(components)
        self.id = id
        self.owner_id = owner_id
        self.name = name
        self.description = description
        self.tags = tags[:] if tags else []
        self.shared = shared
        now = datetime.now().isoformat()
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at

    def __str__(self) -> str:
        return f"{self.name} ({self.id}) - {len(self.components)} flours - Tags: {', '.join(self.tags)}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return SavedBlend(
            id=str(d.get("id", "")),
            owner_id=d.get("user_id", "") or "",
            name=d.get("name", "") or "",
            components=[MixComponent.from_dict(entry) for entry in d.get("composition", []) or []],
            description=d.get("description"),
            tags=d.get("tags") or [],
            shared=bool(d.get("shared", False)),
            created_at=d.get("created_at"),
            updated_at=d.get("updated_at"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.owner_id,
            "name": self.name,
            "description": self.description,
            "composition": [c.to_dict() for c in self.components],
            "tags": self.tags,
            "shared": self.shared,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
