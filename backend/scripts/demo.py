"""Exercise a running billing API through BillingClient.

Usage: python -m scripts.demo [BASE_URL]
"""

import logging
import sys

from usage_ledger.client.billing_client import BillingClient
from usage_ledger.core.config import settings
from usage_ledger.core.errors import AppError, DuplicateRecordError, NotFoundError, ValidationError

logger = logging.getLogger("demo")


def run_demo(client: BillingClient) -> dict[str, bool]:
    """Run the four demo scenarios and return pass/fail per scenario."""
    results: dict[str, bool] = {}
    customer = client.create_customer("Test Customer")
    logger.info("Created customer: %s", customer.model_dump_json(by_alias=True))

    usage = {"service": "Database Hosting", "units_consumed": 100, "price_per_unit": 0.5}

    # New usage is stored.
    try:
        record = client.record_usage(str(customer.id), **usage)
        logger.info("Recorded usage: %s", record.request_id)
        results["new_usage"] = True
    except AppError as exc:
        logger.error("Recording new usage failed: %s", exc)
        results["new_usage"] = False

    # Same payload again is rejected as a duplicate.
    try:
        client.record_usage(str(customer.id), **usage)
        results["duplicate_usage"] = False
    except DuplicateRecordError as exc:
        logger.info("Duplicate rejected: %s (requestId=%s)", exc, exc.request_id)
        results["duplicate_usage"] = True

    # Unknown customer: malformed ids fail validation, well-formed ones are not found.
    try:
        client.record_usage("invalid-customer-id", **usage)
        results["invalid_customer"] = False
    except (ValidationError, NotFoundError) as exc:
        logger.info("Invalid customer rejected: %s", exc)
        results["invalid_customer"] = True

    # Negative values fail validation.
    try:
        client.record_usage(
            str(customer.id), service="Database Hosting", units_consumed=-100, price_per_unit=-0.5
        )
        results["invalid_input"] = False
    except ValidationError as exc:
        logger.info("Invalid input rejected: %s %s", exc, exc.details)
        results["invalid_input"] = True

    return results


def main(argv: list[str]) -> int:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(message)s")
    base_url = argv[1] if len(argv) > 1 else settings.API_BASE_URL
    with BillingClient(base_url) as client:
        try:
            results = run_demo(client)
        except AppError as exc:
            logger.error("Demo aborted: %r", exc)
            return 1
    for name, passed in results.items():
        logger.info("%-18s %s", name, "passed" if passed else "FAILED")
    return 0 if all(results.values()) else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv))
