"""Errors raised by the unit of work."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wellbook.domain.model import EntityKind
    from wellbook.domain.unit_of_work.tracker import EntityKey


class UnitOfWorkError(RuntimeError):
    """Base class for unit-of-work failures."""


class InvalidStateError(UnitOfWorkError):
    """Raised when begin/commit is called in the wrong lifecycle state."""


class ConcurrentModificationError(UnitOfWorkError):
    """Raised when a dirty entity's persisted version differs from the expected one."""

    def __init__(self, key: EntityKey, *, expected: int, found: int) -> None:
        super().__init__(
            f"Concurrent modification detected for entity {key}. "
            f"Expected version {expected}, found {found}"
        )
        self.key = key
        self.expected = expected
        self.found = found


class RepositoryNotFoundError(UnitOfWorkError):
    """Raised when no repository factory is registered for an entity kind."""

    def __init__(self, kinds: Iterable[EntityKind]) -> None:
        self.kinds = tuple(kinds)
        names = ", ".join(str(kind) for kind in self.kinds)
        super().__init__(f"No repository factory registered for: {names}")
