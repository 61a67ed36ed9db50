"""Deterministic idempotency keys for usage submissions.

A usage submission is fingerprinted from its business fields only. The time
of the request is deliberately not part of the key, so a client that retries
or resubmits the same payload always produces the same ``request_id`` and the
unique index on ``usage_records.request_id`` rejects the second insert.
"""

import hashlib
import re
from decimal import Decimal

_NON_ALPHANUMERIC = re.compile(r"[^A-Z0-9]+")

REQUEST_ID_SEPARATOR = ":"


def to_service_code(service: str) -> str:
    """Convert a service label to its service code.

    ``"Database Hosting"`` and ``" !Database Hosting! "`` both become
    ``"DATABASE_HOSTING"``.
    """
    if not service:
        return ""
    return _NON_ALPHANUMERIC.sub("_", service.upper()).strip("_")


def format_price(price_per_unit: Decimal | int | float | str) -> str:
    """Render a price in plain decimal notation without trailing zeros."""
    value = Decimal(str(price_per_unit))
    if value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return format(value.normalize(), "f")


def generate_request_id(
    customer_id: str,
    service: str,
    service_code: str,
    units_consumed: int,
    price_per_unit: Decimal | int | float | str,
) -> str:
    """Return the SHA-256 hex digest identifying a usage submission."""
    data = REQUEST_ID_SEPARATOR.join(
        [
            str(customer_id),
            service,
            service_code,
            str(int(units_consumed)),
            format_price(price_per_unit),
        ]
    )
    return hashlib.sha256(data.encode("utf-8")).hexdigest()
