"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Discriminator for every entity the unit of work can persist."""

    WELL = "well"
    LEASE = "lease"
    AFE = "afe"
    PERMIT = "permit"


class WellStatus(StrEnum):
    PLANNED = "planned"
    PERMITTED = "permitted"
    DRILLING = "drilling"
    COMPLETED = "completed"
    PRODUCING = "producing"
    SHUT_IN = "shut_in"
    PLUGGED = "plugged"


class AfeStatus(StrEnum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    CLOSED = "closed"


class PermitStatus(StrEnum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    EXPIRED = "expired"
