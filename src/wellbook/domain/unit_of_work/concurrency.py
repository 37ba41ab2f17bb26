"""Optimistic concurrency check for dirty entities."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wellbook.domain.unit_of_work.errors import ConcurrentModificationError

if TYPE_CHECKING:
    from wellbook.domain.ports.persistence import Versioned, VersionedRepository
    from wellbook.domain.unit_of_work.tracker import EntityKey

log = logging.getLogger(__name__)

MISSING_VERSION = 0


class OptimisticConcurrencyChecker:
    """Compare an entity's expected version with the one currently persisted.

    The repository passed in must be bound to the transaction the update will run in, so the
    read and the following write see the same snapshot.
    """

    def persisted_version(
        self, repository: VersionedRepository[Versioned], key: EntityKey
    ) -> int:
        current = repository.find_by_id(key.entity_id)
        if current is None:
            # removed by someone else in the meantime
            return MISSING_VERSION
        return current.version

    def check(
        self,
        entity: Versioned,
        repository: VersionedRepository[Versioned],
        key: EntityKey,
    ) -> None:
        found = self.persisted_version(repository, key)
        expected = entity.version
        if found != expected:
            log.warning(
                "Version conflict for %s: expected %s, found %s", key, expected, found
            )
            raise ConcurrentModificationError(key, expected=expected, found=found)
