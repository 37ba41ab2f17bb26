"""Unit of work: tracked changes applied in one physical transaction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal, Self

from wellbook.domain.ports.events import EventSource
from wellbook.domain.unit_of_work.concurrency import OptimisticConcurrencyChecker
from wellbook.domain.unit_of_work.errors import InvalidStateError, RepositoryNotFoundError
from wellbook.domain.unit_of_work.tracker import ChangeTracker

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from types import TracebackType

    from wellbook.domain.model import EntityKind
    from wellbook.domain.ports.events import DomainEventPublisher
    from wellbook.domain.ports.persistence import Versioned, VersionedRepository
    from wellbook.domain.ports.unit_of_work import TransactionManager
    from wellbook.domain.unit_of_work.registry import RepositoryRegistry
    from wellbook.domain.unit_of_work.tracker import EntityKey

log = logging.getLogger(__name__)


class UnitOfWork[TTransaction]:
    """Track new, dirty and deleted entities and commit them atomically.

    ``commit`` opens exactly one transaction through ``transactions`` and applies inserts,
    then updates (each guarded by an optimistic version check), then deletes. Any failure
    aborts the transaction and is re-raised unchanged after the tracked changes are cleared.
    Versions bumped during the failed attempt are put back to their previous values.
    Units of work do not nest.
    """

    def __init__(
        self,
        transactions: TransactionManager[TTransaction],
        registry: RepositoryRegistry[TTransaction],
        *,
        publisher: DomainEventPublisher | None = None,
        checker: OptimisticConcurrencyChecker | None = None,
    ) -> None:
        self._transactions = transactions
        self._registry = registry
        self._publisher = publisher
        self._checker = checker or OptimisticConcurrencyChecker()
        self._tracker = ChangeTracker()
        self._active = False
        self._transaction: TTransaction | None = None

    @property
    def tracker(self) -> ChangeTracker:
        return self._tracker

    @property
    def registry(self) -> RepositoryRegistry[TTransaction]:
        return self._registry

    # lifecycle ---------------------------------------------------------------

    def __enter__(self) -> Self:
        self.begin()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None or self._active:
            # uncommitted changes are discarded
            self.rollback()
        return False

    def begin(self) -> None:
        if self._active:
            raise InvalidStateError("Unit of work already in progress")
        self._active = True
        log.debug("Unit of work started")

    def is_active(self) -> bool:
        return self._active

    def commit(self) -> None:
        if not self._active:
            raise InvalidStateError("No active unit of work to commit")

        new = self._tracker.new
        dirty = self._tracker.dirty
        deleted = self._tracker.deleted
        bumped: list[tuple[Versioned, int]] = []
        try:
            with self._transactions.transaction() as transaction:
                self._transaction = transaction
                repositories = _RepositoryCache(self._registry, transaction)
                self._apply_new(new, repositories)
                self._apply_dirty(dirty, repositories, bumped)
                self._apply_deleted(deleted, repositories)
        except BaseException:
            log.info("Commit failed, rolling back unit of work")
            _restore_versions(bumped)
            self.rollback()
            raise
        finally:
            self._transaction = None

        self._tracker.clear()
        self._active = False
        log.info(
            "Committed unit of work: inserted=%s, updated=%s, deleted=%s",
            len(new),
            len(dirty),
            len(deleted),
        )
        self._publish_events(entity for _, entity in (*new, *dirty))

    def rollback(self) -> None:
        self._tracker.clear()
        if self._active:
            log.debug("Unit of work rolled back")
        self._active = False

    def run[TResult](self, operation: Callable[[Self], TResult]) -> TResult:
        """Begin, run ``operation`` against this unit of work, then commit."""

        self.begin()
        try:
            result = operation(self)
            self.commit()
        except BaseException:
            self.rollback()
            raise
        return result

    # change registration -----------------------------------------------------

    def register_new(self, entity: Versioned) -> None:
        self._tracker.register_new(entity)

    def register_dirty(self, entity: Versioned) -> None:
        self._tracker.register_dirty(entity)

    def register_deleted(self, entity: Versioned) -> None:
        self._tracker.register_deleted(entity)

    def register_clean(self, entity: Versioned) -> None:
        self._tracker.register_clean(entity)

    # repositories ------------------------------------------------------------

    def get_repository(self, kind: EntityKind) -> VersionedRepository[Versioned]:
        """Return the repository for ``kind``.

        During a commit it is bound to the open transaction; otherwise to the read handle.
        """

        if not self._registry.is_registered(kind):
            raise RepositoryNotFoundError([kind])
        if self._transaction is not None:
            return self._registry.get_repository(kind, self._transaction)
        return self._registry.get_repository(kind, self._transactions.read_handle())

    # commit phases -----------------------------------------------------------

    def _apply_new(
        self,
        changes: tuple[tuple[EntityKey, Versioned], ...],
        repositories: _RepositoryCache[TTransaction],
    ) -> None:
        for key, entity in changes:
            log.debug("Inserting %s (version %s)", key, entity.version)
            repositories.get(key.kind).save(entity)

    def _apply_dirty(
        self,
        changes: tuple[tuple[EntityKey, Versioned], ...],
        repositories: _RepositoryCache[TTransaction],
        bumped: list[tuple[Versioned, int]],
    ) -> None:
        for key, entity in changes:
            repository = repositories.get(key.kind)
            self._checker.check(entity, repository, key)
            bumped.append((entity, entity.version))
            entity.increment_version()
            log.debug("Updating %s to version %s", key, entity.version)
            repository.save(entity)

    def _apply_deleted(
        self,
        changes: tuple[tuple[EntityKey, Versioned], ...],
        repositories: _RepositoryCache[TTransaction],
    ) -> None:
        for key, _entity in changes:
            log.debug("Deleting %s", key)
            # identity captured at registration time
            repositories.get(key.kind).delete(key.entity_id)

    def _publish_events(self, entities: Iterable[Versioned]) -> None:
        if self._publisher is None:
            return
        for entity in entities:
            if not isinstance(entity, EventSource):
                continue
            for event in entity.pull_events():
                self._publisher.publish(event)


def _restore_versions(bumped: list[tuple[Versioned, int]]) -> None:
    # the store rolled back, so in-memory versions must match it again
    for entity, version in bumped:
        entity.version = version

class _RepositoryCache[TTransaction]:
    """One repository per kind for the lifetime of a single transaction."""

    def __init__(
        self, registry: RepositoryRegistry[TTransaction], transaction: TTransaction
    ) -> None:
        self._registry = registry
        self._transaction = transaction
        self._repositories: dict[EntityKind, VersionedRepository[Versioned]] = {}

    def get(self, kind: EntityKind) -> VersionedRepository[Versioned]:
        repository = self._repositories.get(kind)
        if repository is None:
            repository = self._registry.get_repository(kind, self._transaction)
            self._repositories[kind] = repository
        return repository
