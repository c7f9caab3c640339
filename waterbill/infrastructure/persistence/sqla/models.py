from __future__ import annotations

from sqlalchemy import (
    Column,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

# JSON columns are kept as text: rows are edited by hand and may not parse.
tariffs = Table(
    "tariffs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("customer_type", String, nullable=False),
    Column("year", Integer, nullable=False),
    Column("tiers", Text),
    Column("meter_rent_prices", Text),
    Column("sewerage_rate", Float),
    Column("maintenance_percentage", Float),
    Column("sanitation_percentage", Float),
    Column("vat_rate", Float),
    Column("domestic_vat_threshold_m3", Float),
    Column("created_at", String),
    Column("updated_at", String),
    UniqueConstraint("customer_type", "year", name="uq_tariffs_type_year"),
)

Index("idx_tariffs_year", tariffs.c.year)
