"""Resolve entity kinds to repositories bound to a transaction handle."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wellbook.domain.unit_of_work.errors import RepositoryNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wellbook.domain.model import EntityKind
    from wellbook.domain.ports.persistence import (
        RepositoryFactory,
        Versioned,
        VersionedRepository,
    )


class RepositoryRegistry[TTransaction]:
    """Factories keyed by entity kind, each taking the active transaction handle."""

    def __init__(self) -> None:
        self._factories: dict[EntityKind, RepositoryFactory[TTransaction, Versioned]] = {}

    def register_repository(
        self,
        kind: EntityKind,
        factory: RepositoryFactory[TTransaction, Versioned],
    ) -> None:
        self._factories[kind] = factory

    def get_repository(
        self, kind: EntityKind, transaction: TTransaction
    ) -> VersionedRepository[Versioned]:
        factory = self._factories.get(kind)
        if factory is None:
            raise RepositoryNotFoundError([kind])
        return factory(transaction)

    def is_registered(self, kind: EntityKind) -> bool:
        return kind in self._factories

    def registered_kinds(self) -> frozenset[EntityKind]:
        return frozenset(self._factories)

    def validate(self, kinds: Iterable[EntityKind]) -> None:
        """Fail fast when any of ``kinds`` lacks a factory."""

        missing = [kind for kind in kinds if kind not in self._factories]
        if missing:
            raise RepositoryNotFoundError(missing)
