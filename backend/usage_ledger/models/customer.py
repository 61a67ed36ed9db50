import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Column, DateTime, String, TypeDecorator
from sqlalchemy.engine import Dialect

from usage_ledger.core.database import Base


class UUIDType(TypeDecorator[uuid.UUID]):
    """Platform-independent UUID type.

    Stored as String(36) on every backend and returned as ``uuid.UUID``.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(value))

    def process_result_value(self, value: Any, dialect: Dialect) -> uuid.UUID | None:
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


def generate_uuid() -> uuid.UUID:
    """Generate a new UUID."""
    return uuid.uuid4()


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
