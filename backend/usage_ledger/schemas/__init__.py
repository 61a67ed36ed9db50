from usage_ledger.schemas.base import ApiResponse, MessageResponse
from usage_ledger.schemas.customer import CustomerCreate, CustomerResponse
from usage_ledger.schemas.usage_record import UsageRecordCreate, UsageRecordResponse

__all__ = [
    "ApiResponse",
    "CustomerCreate",
    "CustomerResponse",
    "MessageResponse",
    "UsageRecordCreate",
    "UsageRecordResponse",
]
