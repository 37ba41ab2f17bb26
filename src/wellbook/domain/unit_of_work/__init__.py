"""Change tracking, optimistic concurrency and atomic commits."""

from __future__ import annotations

from .concurrency import OptimisticConcurrencyChecker
from .coordinator import UnitOfWork
from .errors import (
    ConcurrentModificationError,
    InvalidStateError,
    RepositoryNotFoundError,
    UnitOfWorkError,
)
from .registry import RepositoryRegistry
from .tracker import ChangeTracker, EntityKey, Lifecycle

__all__ = [
    "ChangeTracker",
    "ConcurrentModificationError",
    "EntityKey",
    "InvalidStateError",
    "Lifecycle",
    "OptimisticConcurrencyChecker",
    "RepositoryNotFoundError",
    "RepositoryRegistry",
    "UnitOfWork",
    "UnitOfWorkError",
]
