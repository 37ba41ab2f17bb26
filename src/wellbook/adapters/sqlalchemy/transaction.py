"""Typed transaction handle and the session-backed transaction primitive."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.orm import Session, sessionmaker

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SqlAlchemyTransaction:
    """Handle passed to every repository factory; repositories only talk to ``session``."""

    session: Session


class SqlAlchemyTransactionManager:
    """Open sessions for atomic blocks and keep one lazily created session for reads."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self._read_session: Session | None = None

    @contextmanager
    def transaction(self) -> Iterator[SqlAlchemyTransaction]:
        # an open read session would keep its SQLite lock and block this commit
        self.close()
        # Session.begin() commits on normal exit and rolls back when the block raises
        with self.session_factory() as session, session.begin():
            log.debug("Opened transaction on session %s", id(session))
            yield SqlAlchemyTransaction(session)

    def read_handle(self) -> SqlAlchemyTransaction:
        if self._read_session is None:
            self._read_session = self.session_factory()
        return SqlAlchemyTransaction(self._read_session)

    @property
    def has_read_session(self) -> bool:
        return self._read_session is not None

    def close(self) -> None:
        if self._read_session is not None:
            self._read_session.close()
            self._read_session = None


if TYPE_CHECKING:
    from wellbook.domain.ports.unit_of_work import TransactionManager

    def _check(factory: sessionmaker[Session]) -> TransactionManager[SqlAlchemyTransaction]:
        return SqlAlchemyTransactionManager(factory)
