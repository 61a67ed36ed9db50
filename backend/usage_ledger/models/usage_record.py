from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)

from usage_ledger.core.database import Base
from usage_ledger.models.customer import UUIDType, generate_uuid, utc_now

REQUEST_ID_CONSTRAINT = "uq_usage_records_request_id"
# Largest value the INTEGER column holds on PostgreSQL.
MAX_UNITS_CONSUMED = 2_147_483_647


class UsageRecord(Base):
    """Append-only usage ledger row.

    ``request_id`` holds the idempotency key derived from the submission and
    is unique across the whole table.
    """

    __tablename__ = "usage_records"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    customer_id = Column(
        UUIDType,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
    )
    service = Column(String(255), nullable=False)
    service_code = Column(String(255), nullable=False)
    units_consumed = Column(Integer, nullable=False)
    price_per_unit = Column(Numeric(10, 4), nullable=False)
    request_id = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        UniqueConstraint("request_id", name=REQUEST_ID_CONSTRAINT),
        CheckConstraint("units_consumed > 0", name="ck_usage_records_units_consumed_positive"),
        CheckConstraint("price_per_unit > 0", name="ck_usage_records_price_per_unit_positive"),
        Index("ix_usage_records_customer_id", "customer_id"),
    )
