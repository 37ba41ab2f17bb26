"""Ports for persisting versioned domain entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from wellbook.domain.model import Afe, Lease, Permit, Well

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from wellbook.domain.model import EntityKind


@runtime_checkable
class Versioned(Protocol):
    """Shape every entity tracked by a unit of work must expose."""

    version: int

    @property
    def entity_kind(self) -> EntityKind: ...

    @property
    def id(self) -> UUID: ...

    def increment_version(self) -> None: ...


@runtime_checkable
class VersionedRepository[TEntity: Versioned](Protocol):
    """Minimal repository contract used by the unit of work to apply changes."""

    def save(self, entity: TEntity) -> None: ...

    def find_by_id(self, entity_id: UUID) -> TEntity | None: ...

    def delete(self, entity_id: UUID) -> None: ...


type RepositoryFactory[TTransaction, TEntity: Versioned] = Callable[
    [TTransaction], VersionedRepository[TEntity]
]


@runtime_checkable
class WellRepository(VersionedRepository[Well], Protocol):
    """Persistence contract for wells."""

    def list_by_operator(self, organization_id: UUID) -> Sequence[Well]: ...


@runtime_checkable
class LeaseRepository(VersionedRepository[Lease], Protocol):
    """Persistence contract for leases."""


@runtime_checkable
class AfeRepository(VersionedRepository[Afe], Protocol):
    """Persistence contract for AFEs."""

    def list_for_well(self, well_id: UUID) -> Sequence[Afe]: ...


@runtime_checkable
class PermitRepository(VersionedRepository[Permit], Protocol):
    """Persistence contract for permits."""
