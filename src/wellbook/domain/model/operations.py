"""Operational entities: wells, leases, AFEs and permits."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Final

from wellbook.domain.model.entity import VersionedEntity
from wellbook.domain.model.enums import AfeStatus, EntityKind, PermitStatus, WellStatus

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

# state(2)-county(3)-unique(5), optionally followed by -sidetrack(2)-event(2)
API_NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d{2}-\d{3}-\d{5}(-\d{2}){0,2}$")


def _require_text(value: str, label: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"{label} must not be blank")
    return cleaned


@dataclass(eq=False, kw_only=True)
class Well(VersionedEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.WELL

    api_number: str
    name: str
    status: WellStatus = WellStatus.PLANNED
    lease_id: UUID | None = None

    def __post_init__(self) -> None:
        self.name = _require_text(self.name, "well name")
        if not API_NUMBER_PATTERN.match(self.api_number):
            raise ValueError(f"invalid API number: {self.api_number!r}")

    def change_status(self, status: WellStatus) -> None:
        if status == self.status:
            return
        if self.status is WellStatus.PLUGGED:
            raise ValueError("plugged wells cannot change status")
        previous = self.status
        self.status = status
        self.record_event("well.status_changed", previous=previous, current=status)

    def rename(self, name: str) -> None:
        self.name = _require_text(name, "well name")


@dataclass(eq=False, kw_only=True)
class Lease(VersionedEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.LEASE

    name: str
    lessor: str
    state: str
    effective_date: date | None = None
    expiration_date: date | None = None

    def __post_init__(self) -> None:
        self.name = _require_text(self.name, "lease name")
        self.lessor = _require_text(self.lessor, "lessor")
        if len(self.state) != 2:  # noqa: PLR2004
            raise ValueError("state must be a two-letter code")
        self.state = self.state.upper()
        if (
            self.effective_date is not None
            and self.expiration_date is not None
            and self.expiration_date < self.effective_date
        ):
            raise ValueError("lease expires before it becomes effective")


@dataclass(eq=False, kw_only=True)
class Afe(VersionedEntity):
    """Authorization for expenditure against a single well."""

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.AFE

    afe_number: str
    well_id: UUID
    estimated_cost: Decimal
    status: AfeStatus = AfeStatus.DRAFT

    def __post_init__(self) -> None:
        self.afe_number = _require_text(self.afe_number, "AFE number")
        if self.estimated_cost < 0:
            raise ValueError("estimated cost must not be negative")

    def submit(self) -> None:
        if self.status is not AfeStatus.DRAFT:
            raise ValueError(f"cannot submit AFE in status {self.status}")
        self.status = AfeStatus.SUBMITTED
        self.record_event("afe.submitted", afe_number=self.afe_number)

    def approve(self) -> None:
        if self.status is not AfeStatus.SUBMITTED:
            raise ValueError(f"cannot approve AFE in status {self.status}")
        self.status = AfeStatus.APPROVED
        self.record_event("afe.approved", afe_number=self.afe_number)

    def revise_estimate(self, amount: Decimal) -> None:
        if amount < 0:
            raise ValueError("estimated cost must not be negative")
        self.estimated_cost = amount


@dataclass(eq=False, kw_only=True)
class Permit(VersionedEntity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.PERMIT

    permit_number: str
    well_id: UUID
    issuing_agency: str
    status: PermitStatus = PermitStatus.DRAFT
    expiration_date: date | None = None

    def __post_init__(self) -> None:
        self.permit_number = _require_text(self.permit_number, "permit number")
        self.issuing_agency = _require_text(self.issuing_agency, "issuing agency")

    def renew(self, expiration_date: date) -> None:
        if self.expiration_date is not None and expiration_date <= self.expiration_date:
            raise ValueError("renewal must extend the expiration date")
        self.expiration_date = expiration_date
        self.status = PermitStatus.APPROVED
        self.record_event("permit.renewed", expiration_date=expiration_date.isoformat())
