"""Port for publishing domain events once their changes are durable."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from wellbook.domain.model import DomainEvent


@runtime_checkable
class DomainEventPublisher(Protocol):
    def publish(self, event: DomainEvent) -> None: ...


@runtime_checkable
class EventSource(Protocol):
    """Entities that buffer domain events until they are committed."""

    def pull_events(self) -> list[DomainEvent]: ...
