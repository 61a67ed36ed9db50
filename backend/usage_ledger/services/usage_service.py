"""Usage submission pipeline.

validate -> resolve customer -> normalize service -> derive key -> persist.
Each step either hands over to the next or ends the request with one typed
error. Nothing here retries: a repeated insert is exactly the duplicate the
idempotency key exists to reject.
"""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from usage_ledger.core.errors import NotFoundError, ValidationError
from usage_ledger.core.idempotency import generate_request_id, to_service_code
from usage_ledger.models.customer import Customer
from usage_ledger.models.usage_record import UsageRecord
from usage_ledger.repositories.customer_repository import CustomerRepository
from usage_ledger.repositories.usage_record_repository import UsageRecordRepository
from usage_ledger.schemas.customer import CustomerCreate
from usage_ledger.schemas.usage_record import UUID_PATTERN, UsageRecordCreate

logger = logging.getLogger(__name__)


def field_errors(exc: PydanticValidationError) -> list[dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


class CustomerService:
    def __init__(self, db: Session):
        self.db = db
        self.customer_repo = CustomerRepository(db)

    def create_customer(self, data: CustomerCreate) -> Customer:
        customer = self.customer_repo.create(data)
        logger.info("Created customer %s", customer.id)
        return customer

    def get_customer(self, customer_id: str) -> Customer:
        if not UUID_PATTERN.match(customer_id):
            raise ValidationError(
                "Invalid request data",
                {"details": [{"field": "customerId", "message": "Invalid uuid"}]},
            )
        customer = self.customer_repo.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError(f"Customer with ID {customer_id} does not exist")
        return customer


class UsageService:
    def __init__(self, db: Session):
        self.db = db
        self.customer_repo = CustomerRepository(db)
        self.usage_repo = UsageRecordRepository(db)

    @staticmethod
    def validate(data: UsageRecordCreate | dict[str, Any]) -> UsageRecordCreate:
        if isinstance(data, UsageRecordCreate):
            return data
        try:
            return UsageRecordCreate.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError("Invalid request data", {"details": field_errors(exc)}) from exc

    def record_usage(self, data: UsageRecordCreate | dict[str, Any]) -> UsageRecord:
        """Record one usage submission.

        Raises:
            ValidationError: The submission is malformed. Storage is not touched.
            NotFoundError: The referenced customer does not exist.
            DuplicateRecordError: An identical submission was already recorded.
            DatabaseError: Any other storage failure.
        """
        submission = self.validate(data)

        customer = self.customer_repo.get_by_id(submission.customer_id)
        if customer is None:
            raise NotFoundError(f"Customer with ID {submission.customer_id} does not exist")

        service_code = to_service_code(submission.service)
        request_id = generate_request_id(
            customer_id=submission.customer_id,
            service=submission.service,
            service_code=service_code,
            units_consumed=submission.units_consumed,
            price_per_unit=submission.price_per_unit,
        )

        record = self.usage_repo.create(
            customer_id=submission.customer_id,
            service=submission.service,
            service_code=service_code,
            units_consumed=submission.units_consumed,
            price_per_unit=submission.price_per_unit,
            request_id=request_id,
        )
        logger.info(
            "Recorded usage %s for customer %s (%s x %s)",
            request_id,
            submission.customer_id,
            submission.units_consumed,
            service_code,
        )
        return record
