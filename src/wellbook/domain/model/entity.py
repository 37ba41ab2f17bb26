"""
Base building blocks:
identity, version counter and recorded domain events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from wellbook.domain.model.enums import EntityKind


def new_id() -> UUID:
    return uuid4()


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Something that happened to an entity, published after a successful commit."""

    name: str
    entity_kind: EntityKind
    entity_id: UUID
    organization_id: UUID
    payload: dict[str, object] = field(default_factory=dict[str, object])
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


@dataclass(eq=False, kw_only=True)
class VersionedEntity:
    """Identity plus an optimistic-concurrency version counter."""

    id: UUID = field(default_factory=new_id)
    organization_id: UUID
    version: int = 0

    # class-level discriminator; subclasses must override
    ENTITY_KIND: ClassVar[EntityKind]

    _events: list[DomainEvent] = field(
        default_factory=list[DomainEvent], init=False, repr=False
    )

    @property
    def entity_kind(self) -> EntityKind:
        return self.ENTITY_KIND

    def increment_version(self) -> None:
        self.version += 1

    def record_event(self, name: str, **payload: object) -> DomainEvent:
        event = DomainEvent(
            name=name,
            entity_kind=self.entity_kind,
            entity_id=self.id,
            organization_id=self.organization_id,
            payload=payload,
        )
        self._events.append(event)
        return event

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._events)

    def pull_events(self) -> list[DomainEvent]:
        """Return and forget the events recorded since the last pull."""
        events = list(self._events)
        self._events.clear()
        return events
