"""Change tracking for entities registered with a unit of work.

Each identity lives in at most one of four collections (new, dirty, deleted, clean). The
collections preserve registration order, which is the order changes are applied in.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from wellbook.domain.model import EntityKind
    from wellbook.domain.ports.persistence import Versioned


class Lifecycle(StrEnum):
    NEW = "new"
    DIRTY = "dirty"
    DELETED = "deleted"
    CLEAN = "clean"


@dataclass(frozen=True, slots=True)
class EntityKey:
    """Composite identity of a tracked entity."""

    kind: EntityKind
    entity_id: UUID

    @classmethod
    def of(cls, entity: Versioned) -> EntityKey:
        return cls(kind=entity.entity_kind, entity_id=entity.id)

    def __str__(self) -> str:
        return f"{self.kind}:{self.entity_id}"


class ChangeTracker:
    """Owns the identity -> lifecycle mapping for one unit of work."""

    def __init__(self) -> None:
        self._new: dict[EntityKey, Versioned] = {}
        self._dirty: dict[EntityKey, Versioned] = {}
        self._deleted: dict[EntityKey, Versioned] = {}
        self._clean: dict[EntityKey, Versioned] = {}

    def register_new(self, entity: Versioned) -> None:
        key = EntityKey.of(entity)
        if key in self._deleted:
            # deleted then re-added under the same identity: the row still exists
            del self._deleted[key]
            self._dirty[key] = entity
        elif key not in self._dirty and key not in self._clean:
            self._new[key] = entity

    def register_dirty(self, entity: Versioned) -> None:
        key = EntityKey.of(entity)
        if key in self._new or key in self._deleted:
            return
        self._clean.pop(key, None)
        self._dirty[key] = entity

    def register_deleted(self, entity: Versioned) -> None:
        key = EntityKey.of(entity)
        if key in self._new:
            # never reached storage
            del self._new[key]
            return
        self._dirty.pop(key, None)
        self._clean.pop(key, None)
        self._deleted[key] = entity

    def register_clean(self, entity: Versioned) -> None:
        key = EntityKey.of(entity)
        if key in self._new or key in self._dirty or key in self._deleted:
            return
        self._clean[key] = entity

    def lifecycle_of(self, entity: Versioned) -> Lifecycle | None:
        key = EntityKey.of(entity)
        for lifecycle, collection in self._collections():
            if key in collection:
                return lifecycle
        return None

    @property
    def new(self) -> tuple[tuple[EntityKey, Versioned], ...]:
        return tuple(self._new.items())

    @property
    def dirty(self) -> tuple[tuple[EntityKey, Versioned], ...]:
        return tuple(self._dirty.items())

    @property
    def deleted(self) -> tuple[tuple[EntityKey, Versioned], ...]:
        return tuple(self._deleted.items())

    @property
    def clean(self) -> tuple[EntityKey, ...]:
        return tuple(self._clean)

    @property
    def is_empty(self) -> bool:
        return not (self._new or self._dirty or self._deleted or self._clean)

    def clear(self) -> None:
        self._new.clear()
        self._dirty.clear()
        self._deleted.clear()
        self._clean.clear()

    def _collections(self) -> tuple[tuple[Lifecycle, dict[EntityKey, Versioned]], ...]:
        return (
            (Lifecycle.NEW, self._new),
            (Lifecycle.DIRTY, self._dirty),
            (Lifecycle.DELETED, self._deleted),
            (Lifecycle.CLEAN, self._clean),
        )
