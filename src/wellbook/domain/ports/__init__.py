"""Domain port definitions for adapters."""

from __future__ import annotations

from .events import DomainEventPublisher, EventSource
from .persistence import (
    AfeRepository,
    LeaseRepository,
    PermitRepository,
    RepositoryFactory,
    Versioned,
    VersionedRepository,
    WellRepository,
)
from .unit_of_work import OperationsRepositories, TransactionManager, UnitOfWork

__all__ = [
    "AfeRepository",
    "DomainEventPublisher",
    "EventSource",
    "LeaseRepository",
    "OperationsRepositories",
    "PermitRepository",
    "RepositoryFactory",
    "TransactionManager",
    "UnitOfWork",
    "Versioned",
    "VersionedRepository",
    "WellRepository",
]
