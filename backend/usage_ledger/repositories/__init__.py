from usage_ledger.repositories.customer_repository import CustomerRepository
from usage_ledger.repositories.usage_record_repository import UsageRecordRepository

__all__ = [
    "CustomerRepository",
    "UsageRecordRepository",
]
