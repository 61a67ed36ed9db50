"""HTTP contract tests for the billing API."""

import json
import re
import uuid
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from usage_ledger.core.database import Database
from usage_ledger.core.errors import DatabaseError
from usage_ledger.main import create_app
from usage_ledger.repositories.customer_repository import CustomerRepository
from usage_ledger.repositories.usage_record_repository import UsageRecordRepository


@pytest.fixture
def customer_id(client):
    response = client.post("/customers", json={"name": "Alice"})
    assert response.status_code == 201
    return response.json()["data"]["id"]


def _usage(customer_id, **overrides):
    body = {
        "customerId": customer_id,
        "service": "CDN Storage",
        "unitsConsumed": 15,
        "pricePerUnit": 0.02,
    }
    body.update(overrides)
    return body


class TestRoot:
    def test_liveness(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "statusCode": 200,
            "data": {"message": "Billing System API is working!"},
        }

    def test_app_is_fastapi(self, app):
        assert isinstance(app, FastAPI)

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        body = response.json()
        assert body["status"] == "error"
        assert body["error"]["code"] == "NOT_FOUND"

    def test_lifespan_disposes_database(self):
        database = Database("sqlite://")
        app = create_app(database)
        with patch.object(database, "dispose") as dispose, TestClient(app) as client:
            assert client.get("/").status_code == 200
            dispose.assert_not_called()
        dispose.assert_called_once()


class TestCustomers:
    def test_create_customer(self, client):
        response = client.post("/customers", json={"name": "Alice"})
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        assert body["statusCode"] == 201
        data = body["data"]
        assert uuid.UUID(data["id"])
        assert data["name"] == "Alice"
        assert set(data) == {"id", "name", "createdAt", "updatedAt"}

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "x" * 256}, {"name": 42}])
    def test_create_customer_invalid(self, client, body):
        response = client.post("/customers", json=body)
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "BAD_REQUEST"
        assert error["details"]["details"][0]["field"] == "name"

    def test_get_customer(self, client, customer_id):
        response = client.get(f"/customers/{customer_id}")
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Alice"

    def test_get_customer_not_found(self, client):
        response = client.get(f"/customers/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_get_customer_malformed_id(self, client):
        response = client.get("/customers/not-a-uuid")
        assert response.status_code == 400


class TestRecordUsage:
    def test_created(self, client, customer_id):
        response = client.post("/usage", json=_usage(customer_id))
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        assert body["statusCode"] == 201
        data = body["data"]
        assert data["customerId"] == customer_id
        assert data["service"] == "CDN Storage"
        assert data["serviceCode"] == "CDN_STORAGE"
        assert data["unitsConsumed"] == 15
        assert data["pricePerUnit"] == 0.02
        assert re.fullmatch(r"[0-9a-f]{64}", data["requestId"])
        assert "createdAt" in data

    def test_duplicate_submission(self, client, customer_id, db_session):
        first = client.post("/usage", json=_usage(customer_id))
        second = client.post("/usage", json=_usage(customer_id))

        assert first.status_code == 201
        assert second.status_code == 409
        body = second.json()
        assert body["status"] == "error"
        assert body["statusCode"] == 409
        assert body["error"]["code"] == "DUPLICATE_RECORD"
        assert body["error"]["details"]["requestId"] == first.json()["data"]["requestId"]
        assert UsageRecordRepository(db_session).count_for_customer(customer_id) == 1

    def test_equal_price_spelling_is_duplicate(self, client, customer_id):
        assert client.post("/usage", json=_usage(customer_id, pricePerUnit=0.5)).status_code == 201
        body = json.dumps(_usage(customer_id)).replace("0.02", "0.50")
        response = client.post(
            "/usage", content=body, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 409

    def test_unknown_customer(self, client):
        response = client.post("/usage", json=_usage(str(uuid.uuid4())))
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"unitsConsumed": 0}, "unitsConsumed"),
            ({"unitsConsumed": -100}, "unitsConsumed"),
            ({"unitsConsumed": 2**31}, "unitsConsumed"),
            ({"unitsConsumed": 2**63}, "unitsConsumed"),
            ({"pricePerUnit": 0}, "pricePerUnit"),
            ({"pricePerUnit": "0.02"}, "pricePerUnit"),
            ({"pricePerUnit": -0.5}, "pricePerUnit"),
            ({"customerId": "invalid-customer-id"}, "customerId"),
        ],
    )
    def test_validation_before_storage(self, client, overrides, field):
        with patch.object(CustomerRepository, "get_by_id") as get_by_id:
            response = client.post("/usage", json=_usage(str(uuid.uuid4()), **overrides))

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "BAD_REQUEST"
        assert error["message"] == "Invalid request data"
        assert field in [d["field"] for d in error["details"]["details"]]
        get_by_id.assert_not_called()

    def test_storage_failure(self, client, customer_id):
        with patch.object(
            UsageRecordRepository, "create", side_effect=DatabaseError("Failed to create usage record")
        ):
            response = client.post("/usage", json=_usage(customer_id))

        assert response.status_code == 500
        assert response.json() == {
            "status": "error",
            "statusCode": 500,
            "error": {"code": "DATABASE_ERROR", "message": "Failed to create usage record"},
        }

    def test_unexpected_error(self, app, customer_id):
        client = TestClient(app, raise_server_exceptions=False)
        with patch.object(UsageRecordRepository, "create", side_effect=RuntimeError("boom")):
            response = client.post("/usage", json=_usage(customer_id))

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "INTERNAL_SERVER_ERROR"
        assert "boom" not in error["message"]
