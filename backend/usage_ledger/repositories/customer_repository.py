import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from usage_ledger.core.errors import DatabaseError
from usage_ledger.models.customer import Customer
from usage_ledger.schemas.customer import CustomerCreate

logger = logging.getLogger(__name__)


class CustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, customer_id: UUID | str) -> Customer | None:
        """Return the customer, or ``None`` when no row matches."""
        try:
            return self.db.query(Customer).filter(Customer.id == UUID(str(customer_id))).first()
        except SQLAlchemyError as exc:
            logger.exception("Failed to get customer %s", customer_id)
            raise DatabaseError("Failed to get customer") from exc

    def create(self, data: CustomerCreate) -> Customer:
        customer = Customer(name=data.name)
        try:
            self.db.add(customer)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to create customer")
            raise DatabaseError("Failed to create customer") from exc
        self.db.refresh(customer)
        return customer
