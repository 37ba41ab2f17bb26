"""SQLAlchemy-backed unit of work and adapter lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, cast

from sqlalchemy.orm import Session, sessionmaker

from wellbook.adapters.sqlalchemy.engine import create_database_engine
from wellbook.adapters.sqlalchemy.migrations import upgrade_head
from wellbook.adapters.sqlalchemy.repositories import (
    SqlAlchemyAfeRepository,
    SqlAlchemyLeaseRepository,
    SqlAlchemyPermitRepository,
    SqlAlchemyWellRepository,
)
from wellbook.adapters.sqlalchemy.transaction import (
    SqlAlchemyTransaction,
    SqlAlchemyTransactionManager,
)
from wellbook.config import get_database_config
from wellbook.domain.model import EntityKind
from wellbook.domain.ports.unit_of_work import OperationsRepositories
from wellbook.domain.unit_of_work import RepositoryRegistry, UnitOfWork

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from wellbook.domain.ports.events import DomainEventPublisher
    from wellbook.domain.ports.persistence import (
        AfeRepository,
        LeaseRepository,
        PermitRepository,
        WellRepository,
    )

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call wellbook.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, schema, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        config = get_database_config()
        engine = create_database_engine(database_uri or config.uri, echo=config.echo)
    upgrade_head(engine=engine)
    log.info(
        "SQLAlchemy adapter started on %s", engine.url.render_as_string(hide_password=True)
    )

    _STATE.engine = engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


def build_registry() -> RepositoryRegistry[SqlAlchemyTransaction]:
    """Register a repository factory for every entity kind."""

    registry = RepositoryRegistry[SqlAlchemyTransaction]()
    registry.register_repository(EntityKind.WELL, SqlAlchemyWellRepository)
    registry.register_repository(EntityKind.LEASE, SqlAlchemyLeaseRepository)
    registry.register_repository(EntityKind.AFE, SqlAlchemyAfeRepository)
    registry.register_repository(EntityKind.PERMIT, SqlAlchemyPermitRepository)
    return registry


class SqlAlchemyUnitOfWork(UnitOfWork[SqlAlchemyTransaction]):
    """Unit of work whose commits run inside one SQLAlchemy session transaction."""

    def __init__(
        self,
        *,
        registry: RepositoryRegistry[SqlAlchemyTransaction] | None = None,
        publisher: DomainEventPublisher | None = None,
    ) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._sessions = SqlAlchemyTransactionManager(self.session_factory)
        super().__init__(
            self._sessions,
            registry if registry is not None else build_registry(),
            publisher=publisher,
        )

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            return super().__exit__(exc_type, exc_value, traceback)
        finally:
            self._sessions.close()

    def commit(self) -> None:
        try:
            super().commit()
        finally:
            self._sessions.close()

    def rollback(self) -> None:
        try:
            super().rollback()
        finally:
            self._sessions.close()

    def close(self) -> None:
        """Release the read session without touching tracked changes."""

        self._sessions.close()

    @property
    def has_open_read_session(self) -> bool:
        return self._sessions.has_read_session

    @property
    def repositories(self) -> OperationsRepositories:
        return OperationsRepositories(
            wells=cast("WellRepository", self.get_repository(EntityKind.WELL)),
            leases=cast("LeaseRepository", self.get_repository(EntityKind.LEASE)),
            afes=cast("AfeRepository", self.get_repository(EntityKind.AFE)),
            permits=cast("PermitRepository", self.get_repository(EntityKind.PERMIT)),
        )


if TYPE_CHECKING:
    from wellbook.domain.ports.unit_of_work import UnitOfWork as UnitOfWorkPort

    _uow_check: UnitOfWorkPort = SqlAlchemyUnitOfWork()
