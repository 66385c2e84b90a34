"""SQLAlchemy table metadata for staking and voting gauges."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    MetaData,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
)

from gaugesync.domain.model import Chain, GaugeStatus

ADDRESS_LENGTH = 42


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

ChainColumnType = Enum(Chain, name="chain", native_enum=False, length=16)

# Staking gauges are owned by the pool sync; this package only reads them.
staking_gauge_table = Table(
    "staking_gauge",
    metadata,
    Column("id", String, primary_key=True),
    Column("chain", ChainColumnType, nullable=False),
    Column("gauge_address", String(ADDRESS_LENGTH), nullable=False),
    Column("pool_id", String, nullable=True),
    UniqueConstraint("chain", "gauge_address"),
)

voting_gauge_table = Table(
    "voting_gauge",
    metadata,
    Column("address", String(ADDRESS_LENGTH), primary_key=True),
    Column("chain", ChainColumnType, primary_key=True),
    Column(
        "status",
        Enum(GaugeStatus, name="gauge_status", native_enum=False, length=16),
        nullable=False,
    ),
    Column("relative_weight", Float, nullable=False),
    Column("relative_weight_cap", Float, nullable=True),
    Column("recipient", String(ADDRESS_LENGTH), nullable=True),
    Column(
        "staking_gauge_id",
        String,
        ForeignKey("staking_gauge.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("added_timestamp", UTCDateTime, nullable=True),
    Column("in_index", Boolean, nullable=False, default=False),
)

