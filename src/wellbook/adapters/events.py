"""Domain event publishers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wellbook.domain.model import DomainEvent


class LoggingEventPublisher:
    """Write committed domain events to a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("wellbook.events")

    def publish(self, event: DomainEvent) -> None:
        self.logger.info(
            "%s %s:%s org=%s %s",
            event.name,
            event.entity_kind,
            event.entity_id,
            event.organization_id,
            event.payload,
        )


class InMemoryEventPublisher:
    """Collect published events in order."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self.events.append(event)


if TYPE_CHECKING:
    from wellbook.domain.ports.events import DomainEventPublisher

    _logging_check: DomainEventPublisher = LoggingEventPublisher()
    _memory_check: DomainEventPublisher = InMemoryEventPublisher()
