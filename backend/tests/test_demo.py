"""Tests for the client demo script."""

import httpx

from scripts.demo import run_demo
from usage_ledger.client.billing_client import BillingClient


def test_demo_scenarios_pass(app_handler):
    with BillingClient(
        "http://billing.test", transport=httpx.MockTransport(app_handler), backoff_multiplier=0
    ) as client:
        results = run_demo(client)

    assert results == {
        "new_usage": True,
        "duplicate_usage": True,
        "invalid_customer": True,
        "invalid_input": True,
    }
