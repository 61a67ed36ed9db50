from datetime import datetime
from uuid import UUID

from pydantic import Field

from usage_ledger.schemas.base import CamelModel


class CustomerCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)


class CustomerResponse(CamelModel):
    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
