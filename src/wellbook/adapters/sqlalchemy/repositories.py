"""Repository implementations translating entities to and from table rows."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, cast

from sqlalchemy import delete, insert, select, update

from wellbook.adapters.sqlalchemy.tables import (
    afe_table,
    lease_table,
    permit_table,
    well_table,
)
from wellbook.domain.model import Afe, Lease, Permit, VersionedEntity, Well

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy import ColumnElement, CursorResult, RowMapping, Table
    from sqlalchemy.orm import Session

    from wellbook.adapters.sqlalchemy.transaction import SqlAlchemyTransaction


class SqlAlchemyVersionedRepository[TEntity: VersionedEntity](ABC):
    """Shared save/find/delete over a single table with ``id`` and ``version`` columns."""

    table: ClassVar[Table]

    def __init__(self, transaction: SqlAlchemyTransaction) -> None:
        self.transaction = transaction

    @property
    def session(self) -> Session:
        return self.transaction.session

    def save(self, entity: TEntity) -> None:
        """Update the row for ``entity`` or insert it when none exists yet."""

        values = self._base_values(entity) | self._to_row(entity)
        stmt = update(self.table).where(self.table.c.id == entity.id).values(**values)
        result = cast("CursorResult[object]", self.session.execute(stmt))
        if result.rowcount == 0:
            self.session.execute(insert(self.table).values(id=entity.id, **values))

    def find_by_id(self, entity_id: UUID) -> TEntity | None:
        stmt = select(self.table).where(self.table.c.id == entity_id)
        row = self.session.execute(stmt).mappings().one_or_none()
        if row is None:
            return None
        return self._from_row(row)

    def delete(self, entity_id: UUID) -> None:
        self.session.execute(delete(self.table).where(self.table.c.id == entity_id))

    def _find_where(self, *criteria: ColumnElement[bool]) -> list[TEntity]:
        stmt = select(self.table).where(*criteria).order_by(self.table.c.id)
        return [self._from_row(row) for row in self.session.execute(stmt).mappings()]

    @staticmethod
    def _base_values(entity: TEntity) -> dict[str, object]:
        return {"organization_id": entity.organization_id, "version": entity.version}

    @abstractmethod
    def _to_row(self, entity: TEntity) -> dict[str, object]: ...

    @abstractmethod
    def _from_row(self, row: RowMapping) -> TEntity: ...


class SqlAlchemyWellRepository(SqlAlchemyVersionedRepository[Well]):
    table = well_table

    def list_by_operator(self, organization_id: UUID) -> Sequence[Well]:
        return self._find_where(self.table.c.organization_id == organization_id)

    def _to_row(self, entity: Well) -> dict[str, object]:
        return {
            "api_number": entity.api_number,
            "name": entity.name,
            "status": entity.status,
            "lease_id": entity.lease_id,
        }

    def _from_row(self, row: RowMapping) -> Well:
        return Well(
            id=row["id"],
            organization_id=row["organization_id"],
            version=row["version"],
            api_number=row["api_number"],
            name=row["name"],
            status=row["status"],
            lease_id=row["lease_id"],
        )


class SqlAlchemyLeaseRepository(SqlAlchemyVersionedRepository[Lease]):
    table = lease_table

    def _to_row(self, entity: Lease) -> dict[str, object]:
        return {
            "name": entity.name,
            "lessor": entity.lessor,
            "state": entity.state,
            "effective_date": entity.effective_date,
            "expiration_date": entity.expiration_date,
        }

    def _from_row(self, row: RowMapping) -> Lease:
        return Lease(
            id=row["id"],
            organization_id=row["organization_id"],
            version=row["version"],
            name=row["name"],
            lessor=row["lessor"],
            state=row["state"],
            effective_date=row["effective_date"],
            expiration_date=row["expiration_date"],
        )


class SqlAlchemyAfeRepository(SqlAlchemyVersionedRepository[Afe]):
    table = afe_table

    def list_for_well(self, well_id: UUID) -> Sequence[Afe]:
        return self._find_where(self.table.c.well_id == well_id)

    def _to_row(self, entity: Afe) -> dict[str, object]:
        return {
            "afe_number": entity.afe_number,
            "well_id": entity.well_id,
            "estimated_cost": entity.estimated_cost,
            "status": entity.status,
        }

    def _from_row(self, row: RowMapping) -> Afe:
        return Afe(
            id=row["id"],
            organization_id=row["organization_id"],
            version=row["version"],
            afe_number=row["afe_number"],
            well_id=row["well_id"],
            estimated_cost=row["estimated_cost"],
            status=row["status"],
        )


class SqlAlchemyPermitRepository(SqlAlchemyVersionedRepository[Permit]):
    table = permit_table

    def _to_row(self, entity: Permit) -> dict[str, object]:
        return {
            "permit_number": entity.permit_number,
            "well_id": entity.well_id,
            "issuing_agency": entity.issuing_agency,
            "status": entity.status,
            "expiration_date": entity.expiration_date,
        }

    def _from_row(self, row: RowMapping) -> Permit:
        return Permit(
            id=row["id"],
            organization_id=row["organization_id"],
            version=row["version"],
            permit_number=row["permit_number"],
            well_id=row["well_id"],
            issuing_agency=row["issuing_agency"],
            status=row["status"],
            expiration_date=row["expiration_date"],
        )


if TYPE_CHECKING:
    from wellbook.domain.ports.persistence import (
        AfeRepository,
        LeaseRepository,
        PermitRepository,
        WellRepository,
    )

    _transaction_stub = cast("SqlAlchemyTransaction", object())
    _well_repo: WellRepository = SqlAlchemyWellRepository(_transaction_stub)
    _lease_repo: LeaseRepository = SqlAlchemyLeaseRepository(_transaction_stub)
    _afe_repo: AfeRepository = SqlAlchemyAfeRepository(_transaction_stub)
    _permit_repo: PermitRepository = SqlAlchemyPermitRepository(_transaction_stub)
