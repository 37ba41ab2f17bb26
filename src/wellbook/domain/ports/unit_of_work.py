"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contextlib import AbstractContextManager
    from types import TracebackType

    from wellbook.domain.model import EntityKind
    from wellbook.domain.ports.persistence import (
        AfeRepository,
        LeaseRepository,
        PermitRepository,
        Versioned,
        VersionedRepository,
        WellRepository,
    )


@dataclass(frozen=True, slots=True)
class OperationsRepositories:
    """Typed view of the repositories for the operations slice."""

    wells: WellRepository
    leases: LeaseRepository
    afes: AfeRepository
    permits: PermitRepository


@runtime_checkable
class TransactionManager[TTransaction](Protocol):
    """Backing-store primitive: run a block atomically, roll back when it raises."""

    def transaction(self) -> AbstractContextManager[TTransaction]: ...

    def read_handle(self) -> TTransaction: ...


@runtime_checkable
class UnitOfWork(Protocol):
    """Change-tracking unit of work applied as one atomic commit."""

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def is_active(self) -> bool: ...

    def register_new(self, entity: Versioned) -> None: ...

    def register_dirty(self, entity: Versioned) -> None: ...

    def register_deleted(self, entity: Versioned) -> None: ...

    def register_clean(self, entity: Versioned) -> None: ...

    def get_repository(self, kind: EntityKind) -> VersionedRepository[Versioned]: ...
