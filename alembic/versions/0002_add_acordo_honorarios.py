"""Add legal costs and fees for compensation and payment-in-kind agreements.

Revision ID: 0002_add_acordo_honorarios
Revises: 0001_initial_schema
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0002_add_acordo_honorarios"
down_revision: str | None = "0001_initial_schema"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "acordo_honorarios",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("acordo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("custas_advocaticias", sa.Numeric(14, 2), nullable=True),
        sa.Column("custas_data_vencimento", sa.Date(), nullable=True),
        sa.Column("honorarios_valor", sa.Numeric(14, 2), nullable=True),
        sa.Column("honorarios_data_vencimento", sa.Date(), nullable=True),
        sa.Column("honorarios_data_pagamento", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["acordo_id"], ["acordos.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("acordo_id", name="uq_acordo_honorarios_acordo"),
    )
    op.create_index(
        "ix_acordos_created_at",
        "acordos",
        ["created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_acordos_created_at", table_name="acordos")
    op.drop_table("acordo_honorarios")
