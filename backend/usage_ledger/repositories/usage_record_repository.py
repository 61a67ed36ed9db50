import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from usage_ledger.core.errors import DatabaseError, DuplicateRecordError
from usage_ledger.models.usage_record import REQUEST_ID_CONSTRAINT, UsageRecord

logger = logging.getLogger(__name__)

PG_UNIQUE_VIOLATION = "23505"
SQLITE_REQUEST_ID_VIOLATION = "UNIQUE constraint failed: usage_records.request_id"


def is_request_id_violation(exc: IntegrityError) -> bool:
    """Tell whether an IntegrityError is the unique index on ``request_id``.

    Unique violations on any other column must not be reported as a
    duplicate usage record.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        if sqlstate != PG_UNIQUE_VIOLATION:
            return False
        diag = getattr(orig, "diag", None)
        constraint_name = getattr(diag, "constraint_name", None)
        if constraint_name is not None:
            return constraint_name == REQUEST_ID_CONSTRAINT
        return REQUEST_ID_CONSTRAINT in str(orig)
    message = str(orig)
    return SQLITE_REQUEST_ID_VIOLATION in message or REQUEST_ID_CONSTRAINT in message


class UsageRecordRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        customer_id: UUID | str,
        service: str,
        service_code: str,
        units_consumed: int,
        price_per_unit: Decimal,
        request_id: str,
    ) -> UsageRecord:
        """Insert a usage record in a single attempt.

        There is no existence check beforehand; the unique constraint on
        ``request_id`` decides which of several concurrent inserts wins.

        Raises:
            DuplicateRecordError: A record with ``request_id`` already exists.
            DatabaseError: Any other storage failure.
        """
        record = UsageRecord(
            customer_id=UUID(str(customer_id)),
            service=service,
            service_code=service_code,
            units_consumed=units_consumed,
            price_per_unit=price_per_unit,
            request_id=request_id,
        )
        try:
            self.db.add(record)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_request_id_violation(exc):
                logger.info("Duplicate usage record rejected for request_id %s", request_id)
                raise DuplicateRecordError(
                    "Usage record already exists", {"requestId": request_id}
                ) from exc
            logger.exception("Integrity error creating usage record %s", request_id)
            raise DatabaseError("Failed to create usage record") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to create usage record %s", request_id)
            raise DatabaseError("Failed to create usage record") from exc
        self.db.refresh(record)
        return record

    def get_by_request_id(self, request_id: str) -> UsageRecord | None:
        return self.db.query(UsageRecord).filter(UsageRecord.request_id == request_id).first()

    def count_for_customer(self, customer_id: UUID | str) -> int:
        return (
            self.db.query(func.count(UsageRecord.id))
            .filter(UsageRecord.customer_id == UUID(str(customer_id)))
            .scalar()
            or 0
        )
