from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from wellbook.adapters.sqlalchemy.engine import create_database_engine
from wellbook.adapters.sqlalchemy.migrations import upgrade_head
from wellbook.adapters.sqlalchemy.transaction import SqlAlchemyTransaction
from wellbook.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup
from wellbook.domain.unit_of_work import UnitOfWork
from tests.helpers.operations import (
    InMemoryStore,
    InMemoryTransaction,
    InMemoryTransactionManager,
    in_memory_registry,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def memory_uow(store: InMemoryStore) -> UnitOfWork[InMemoryTransaction]:
    return UnitOfWork(InMemoryTransactionManager(store), in_memory_registry())


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[Engine]:
    # file-backed so separate sessions see each other's commits
    engine = create_database_engine(f"sqlite+pysqlite:///{tmp_path / 'wellbook.db'}")
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_transaction(sqlite_session: Session) -> SqlAlchemyTransaction:
    return SqlAlchemyTransaction(sqlite_session)


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
