import re
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field, field_serializer, field_validator

from usage_ledger.models.usage_record import MAX_UNITS_CONSUMED
from usage_ledger.schemas.base import CamelModel

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


class UsageRecordCreate(CamelModel):
    # Kept as the submitted string: the idempotency key is derived from it verbatim.
    customer_id: str
    service: str = Field(..., min_length=1, max_length=255)
    units_consumed: int = Field(..., gt=0, le=MAX_UNITS_CONSUMED, strict=True)
    price_per_unit: Decimal = Field(..., gt=0, max_digits=10, decimal_places=4)

    @field_validator("customer_id")
    @classmethod
    def validate_customer_id(cls, v: str) -> str:
        if not UUID_PATTERN.match(v):
            raise ValueError("Invalid uuid")
        return v

    @field_validator("price_per_unit", mode="before")
    @classmethod
    def reject_string_price(cls, v: object) -> object:
        if isinstance(v, str):
            raise ValueError("Input should be a number")
        return v


class UsageRecordResponse(CamelModel):
    id: UUID
    customer_id: UUID
    service: str
    service_code: str
    units_consumed: int
    price_per_unit: Decimal
    request_id: str
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("price_per_unit", when_used="json")
    def serialize_price(self, value: Decimal) -> float:
        return float(value)
