from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from usage_ledger.core.database import get_db
from usage_ledger.schemas.base import ApiResponse
from usage_ledger.schemas.customer import CustomerCreate, CustomerResponse
from usage_ledger.services.usage_service import CustomerService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[CustomerResponse],
    status_code=201,
    summary="Create customer",
    responses={
        400: {"description": "Invalid request data"},
        500: {"description": "Database error"},
    },
)
async def create_customer(
    data: CustomerCreate,
    db: Session = Depends(get_db),
) -> ApiResponse[CustomerResponse]:
    """Create a new customer."""
    customer = CustomerService(db).create_customer(data)
    return ApiResponse.created(CustomerResponse.model_validate(customer))


@router.get(
    "/{customer_id}",
    response_model=ApiResponse[CustomerResponse],
    summary="Get customer",
    responses={404: {"description": "Customer not found"}},
)
async def get_customer(
    customer_id: str,
    db: Session = Depends(get_db),
) -> ApiResponse[CustomerResponse]:
    """Get a customer by ID."""
    customer = CustomerService(db).get_customer(customer_id)
    return ApiResponse.success(CustomerResponse.model_validate(customer))
