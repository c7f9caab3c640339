"""init tariffs schema

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20261019_000001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tariffs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("customer_type", sa.String(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("tiers", sa.Text(), nullable=True),
        sa.Column("meter_rent_prices", sa.Text(), nullable=True),
        sa.Column("sewerage_rate", sa.Float(), nullable=True),
        sa.Column("maintenance_percentage", sa.Float(), nullable=True),
        sa.Column("sanitation_percentage", sa.Float(), nullable=True),
        sa.Column("vat_rate", sa.Float(), nullable=True),
        sa.Column("domestic_vat_threshold_m3", sa.Float(), nullable=True),
        sa.Column("created_at", sa.String(), nullable=True),
        sa.Column("updated_at", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("customer_type", "year", name="uq_tariffs_type_year"),
    )
    op.create_index("idx_tariffs_year", "tariffs", ["year"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_tariffs_year", table_name="tariffs")
    op.drop_table("tariffs")
