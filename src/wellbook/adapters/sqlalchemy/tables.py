"""SQLAlchemy table metadata for the wellbook domain slice."""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import (
    Column,
    Date,
    Dialect,
    Enum,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
)

from wellbook.domain.model import AfeStatus, EntityKind, PermitStatus, WellStatus

UUIDColumnType = Uuid[uuid.UUID]


class MoneyType(TypeDecorator[Decimal]):
    """Exact decimal amounts stored as text so SQLite keeps every digit."""

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> Decimal | None:
        _ = dialect
        if value is None:
            return None
        return Decimal(value)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)


def _versioned_columns() -> tuple[Column[object], ...]:
    return (
        Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
        Column("organization_id", UUIDColumnType, nullable=False, index=True),
        Column("version", Integer, nullable=False, default=0),
    )


lease_table = Table(
    "lease",
    metadata,
    *_versioned_columns(),
    Column("name", String, nullable=False),
    Column("lessor", String, nullable=False),
    Column("state", String(2), nullable=False),
    Column("effective_date", Date, nullable=True),
    Column("expiration_date", Date, nullable=True),
)

well_table = Table(
    "well",
    metadata,
    *_versioned_columns(),
    Column("api_number", String(20), nullable=False),
    Column("name", String, nullable=False),
    Column(
        "status",
        Enum(WellStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    ),
    Column("lease_id", UUIDColumnType, ForeignKey("lease.id"), nullable=True),
    UniqueConstraint("api_number"),
)

afe_table = Table(
    "afe",
    metadata,
    *_versioned_columns(),
    Column("afe_number", String, nullable=False),
    Column("well_id", UUIDColumnType, ForeignKey("well.id"), nullable=False),
    Column("estimated_cost", MoneyType, nullable=False),
    Column(
        "status",
        Enum(AfeStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    ),
    UniqueConstraint("organization_id", "afe_number"),
)

permit_table = Table(
    "permit",
    metadata,
    *_versioned_columns(),
    Column("permit_number", String, nullable=False),
    Column("well_id", UUIDColumnType, ForeignKey("well.id"), nullable=False),
    Column("issuing_agency", String, nullable=False),
    Column(
        "status",
        Enum(PermitStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    ),
    Column("expiration_date", Date, nullable=True),
)

TABLE_BY_KIND: dict[EntityKind, Table] = {
    EntityKind.WELL: well_table,
    EntityKind.LEASE: lease_table,
    EntityKind.AFE: afe_table,
    EntityKind.PERMIT: permit_table,
}
