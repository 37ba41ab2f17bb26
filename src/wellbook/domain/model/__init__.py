"""Public domain model surface."""

from __future__ import annotations

from wellbook.domain.model.entity import DomainEvent, VersionedEntity, new_id
from wellbook.domain.model.enums import AfeStatus, EntityKind, PermitStatus, WellStatus
from wellbook.domain.model.operations import Afe, Lease, Permit, Well

__all__ = [  # noqa: RUF022
    # base
    "VersionedEntity",
    "DomainEvent",
    "new_id",
    # operations
    "Well",
    "Lease",
    "Afe",
    "Permit",
    # enums
    "EntityKind",
    "WellStatus",
    "AfeStatus",
    "PermitStatus",
]
