"""SQLAlchemy adapter package for wellbook."""

from __future__ import annotations

from .engine import create_database_engine
from .repositories import (
    SqlAlchemyAfeRepository,
    SqlAlchemyLeaseRepository,
    SqlAlchemyPermitRepository,
    SqlAlchemyVersionedRepository,
    SqlAlchemyWellRepository,
)
from .tables import TABLE_BY_KIND, metadata
from .transaction import SqlAlchemyTransaction, SqlAlchemyTransactionManager
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    build_registry,
    shutdown,
    startup,
)

__all__ = [
    "TABLE_BY_KIND",
    "SqlAlchemyAfeRepository",
    "SqlAlchemyLeaseRepository",
    "SqlAlchemyPermitRepository",
    "SqlAlchemyTransaction",
    "SqlAlchemyTransactionManager",
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyVersionedRepository",
    "SqlAlchemyWellRepository",
    "StartupError",
    "build_registry",
    "create_database_engine",
    "metadata",
    "shutdown",
    "startup",
]
