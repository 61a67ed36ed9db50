"""HTTP client for the billing API with retry and error classification.

Transport failures and server-side errors are turned into the same error
classes the API raises, so callers branch on ``DuplicateRecordError`` or
``NotFoundError`` regardless of which side produced it.
"""

import logging
from decimal import Decimal
from typing import Any

import httpx
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from usage_ledger.core.config import settings
from usage_ledger.core.errors import (
    AppError,
    InvalidServerResponseError,
    NetworkError,
    RequestTimeoutError,
    UnclassifiedError,
    error_from_body,
)
from usage_ledger.schemas.customer import CustomerResponse
from usage_ledger.schemas.usage_record import UsageRecordResponse

logger = logging.getLogger(__name__)

# 408 Request Timeout and 429 Too Many Requests are retried alongside 5xx.
RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})


class RetryableStatusError(AppError):
    """A 408 or 429 answer; retried, then surfaced as its own status."""

    @property
    def retryable(self) -> bool:
        return True


def is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, AppError) and exc.retryable


def classify_transport_error(exc: httpx.TransportError) -> AppError:
    """Classify a request that got no response at all."""
    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeoutError("Request timed out", {"reason": str(exc)})
    return NetworkError("Network error", {"reason": str(exc)})


def classify_response(response: httpx.Response) -> AppError:
    """Classify a non-2xx response."""
    status = response.status_code
    if status >= 500:
        return InvalidServerResponseError(f"Server error ({status})")

    try:
        body = response.json()
    except ValueError:
        body = None
    error = body.get("error") if isinstance(body, dict) else None

    if isinstance(error, dict):
        classified = error_from_body(status, error)
        if status in RETRYABLE_CLIENT_STATUSES:
            return RetryableStatusError(
                classified.message, classified.details, status_code=status, code=classified.code
            )
        return classified

    if status in RETRYABLE_CLIENT_STATUSES:
        return RetryableStatusError(f"Request failed with status {status}", status_code=status)
    return UnclassifiedError(f"Request failed with status {status}", status_code=status)


class BillingClient:
    """Client for the billing API.

    Each call is attempted once plus up to ``max_retries`` more times with
    exponential backoff, but only while the failure is transient: timeouts,
    connection errors, 408, 429 and 5xx. Validation, not-found and duplicate
    outcomes are raised immediately.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_multiplier: float | None = None,
        backoff_max: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url or settings.API_BASE_URL
        self.max_retries = settings.CLIENT_MAX_RETRIES if max_retries is None else max_retries
        self.backoff_multiplier = (
            settings.CLIENT_BACKOFF_MULTIPLIER if backoff_multiplier is None else backoff_multiplier
        )
        self.backoff_max = settings.CLIENT_BACKOFF_MAX if backoff_max is None else backoff_max
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=settings.CLIENT_TIMEOUT_SECONDS if timeout is None else timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def __enter__(self) -> "BillingClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, endpoint: str, payload: dict[str, Any] | None) -> Any:
        try:
            response = self._client.request(method, endpoint, json=payload)
        except httpx.TransportError as exc:
            raise classify_transport_error(exc) from exc

        if response.is_success:
            try:
                return response.json()["data"]
            except (ValueError, KeyError, TypeError) as exc:
                raise InvalidServerResponseError("Malformed success response") from exc
        raise classify_response(response)

    def _call_api(self, method: str, endpoint: str, payload: dict[str, Any] | None = None) -> Any:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.backoff_multiplier, max=self.backoff_max),
            retry=retry_if_exception(is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                return self._send(method, endpoint, payload)

    def create_customer(self, name: str) -> CustomerResponse:
        data = self._call_api("POST", "/customers", {"name": name})
        return CustomerResponse.model_validate(data)

    def get_customer(self, customer_id: str) -> CustomerResponse:
        return CustomerResponse.model_validate(self._call_api("GET", f"/customers/{customer_id}"))

    def record_usage(
        self,
        customer_id: str,
        service: str,
        units_consumed: int,
        price_per_unit: Decimal | float | int,
    ) -> UsageRecordResponse:
        """Record usage for a customer.

        Input is validated by the API, so bad values come back as
        ``ValidationError`` with the server's field list.

        Raises:
            DuplicateRecordError: The same usage was already recorded.
            NotFoundError: The customer does not exist.
            ValidationError: The API rejected the input.
            RequestTimeoutError, NetworkError, InvalidServerResponseError:
                Still failing after the retry budget.
        """
        payload = {
            "customerId": customer_id,
            "service": service,
            "unitsConsumed": units_consumed,
            "pricePerUnit": float(price_per_unit)
            if isinstance(price_per_unit, Decimal)
            else price_per_unit,
        }
        return UsageRecordResponse.model_validate(self._call_api("POST", "/usage", payload))
