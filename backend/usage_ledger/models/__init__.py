from usage_ledger.models.customer import Customer
from usage_ledger.models.usage_record import UsageRecord

__all__ = [
    "Customer",
    "UsageRecord",
]
