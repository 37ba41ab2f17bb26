"""initial operations schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-09-28 10:12:44.301517

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

WELL_STATUSES = (
    "planned",
    "permitted",
    "drilling",
    "completed",
    "producing",
    "shut_in",
    "plugged",
)
AFE_STATUSES = ("draft", "submitted", "approved", "rejected", "closed")
PERMIT_STATUSES = ("draft", "submitted", "approved", "expired")


def _versioned_columns() -> list[sa.Column[object]]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("organization_id", sa.Uuid(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "lease",
        *_versioned_columns(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("lessor", sa.String(), nullable=False),
        sa.Column("state", sa.String(length=2), nullable=False),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lease")),
    )
    op.create_index(op.f("ix_lease_organization_id"), "lease", ["organization_id"])

    op.create_table(
        "well",
        *_versioned_columns(),
        sa.Column("api_number", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*WELL_STATUSES, name="wellstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("lease_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(
            ["lease_id"], ["lease.id"], name=op.f("fk_well_lease_id_lease")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_well")),
        sa.UniqueConstraint("api_number", name=op.f("uq_well_api_number")),
    )
    op.create_index(op.f("ix_well_organization_id"), "well", ["organization_id"])

    op.create_table(
        "afe",
        *_versioned_columns(),
        sa.Column("afe_number", sa.String(), nullable=False),
        sa.Column("well_id", sa.Uuid(), nullable=False),
        sa.Column("estimated_cost", sa.String(length=32), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*AFE_STATUSES, name="afestatus", native_enum=False),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["well_id"], ["well.id"], name=op.f("fk_afe_well_id_well")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_afe")),
        sa.UniqueConstraint(
            "organization_id", "afe_number", name=op.f("uq_afe_organization_id_afe_number")
        ),
    )
    op.create_index(op.f("ix_afe_organization_id"), "afe", ["organization_id"])

    op.create_table(
        "permit",
        *_versioned_columns(),
        sa.Column("permit_number", sa.String(), nullable=False),
        sa.Column("well_id", sa.Uuid(), nullable=False),
        sa.Column("issuing_agency", sa.String(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*PERMIT_STATUSES, name="permitstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(
            ["well_id"], ["well.id"], name=op.f("fk_permit_well_id_well")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_permit")),
    )
    op.create_index(op.f("ix_permit_organization_id"), "permit", ["organization_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_permit_organization_id"), table_name="permit")
    op.drop_table("permit")
    op.drop_index(op.f("ix_afe_organization_id"), table_name="afe")
    op.drop_table("afe")
    op.drop_index(op.f("ix_well_organization_id"), table_name="well")
    op.drop_table("well")
    op.drop_index(op.f("ix_lease_organization_id"), table_name="lease")
    op.drop_table("lease")
