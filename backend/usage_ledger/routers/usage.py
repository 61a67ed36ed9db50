from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from usage_ledger.core.database import get_db
from usage_ledger.schemas.base import ApiResponse
from usage_ledger.schemas.usage_record import UsageRecordCreate, UsageRecordResponse
from usage_ledger.services.usage_service import UsageService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[UsageRecordResponse],
    status_code=201,
    summary="Record usage",
    responses={
        400: {"description": "Invalid request data"},
        404: {"description": "Customer not found"},
        409: {"description": "Usage record with the same request ID already exists"},
        500: {"description": "Database error"},
    },
)
async def record_usage(
    data: UsageRecordCreate,
    db: Session = Depends(get_db),
) -> ApiResponse[UsageRecordResponse]:
    """Record usage for a customer.

    The request ID is derived from the submitted fields, so posting the same
    body twice stores one record and answers the second call with 409.
    """
    record = UsageService(db).record_usage(data)
    return ApiResponse.created(UsageRecordResponse.model_validate(record))
