"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from wellbook.adapters.events import LoggingEventPublisher
from wellbook.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    build_registry,
    configured_engine,
    is_started,
    startup,
)
from wellbook.domain.model import EntityKind

if TYPE_CHECKING:
    from wellbook.adapters.sqlalchemy.transaction import SqlAlchemyTransaction
    from wellbook.domain.ports.events import DomainEventPublisher
    from wellbook.domain.unit_of_work import RepositoryRegistry

log = getLogger(__name__)


def init_database(*, database_uri: str | None = None) -> str:
    """Start the SQLAlchemy adapter and bring the schema to the latest revision."""

    if not is_started():
        startup(database_uri=database_uri)
    engine = configured_engine()
    if engine is None:
        raise StartupError("SQLAlchemy adapter did not start")
    url = engine.url.render_as_string(hide_password=True)
    log.info("Database ready at %s", url)
    return url


def get_unit_of_work(
    *, publisher: DomainEventPublisher | None = None
) -> SqlAlchemyUnitOfWork:
    """Get a new unit of work; committed domain events go to the log by default."""

    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork(publisher=publisher or LoggingEventPublisher())


def check_repositories(
    registry: RepositoryRegistry[SqlAlchemyTransaction] | None = None,
) -> frozenset[EntityKind]:
    """Verify every entity kind has a repository; return the registered kinds."""

    effective = registry if registry is not None else build_registry()
    effective.validate(EntityKind)
    kinds = effective.registered_kinds()
    log.info("Repositories registered for: %s", ", ".join(sorted(kinds)))
    return kinds
