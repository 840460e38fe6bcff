"""Tests for the FastAPI request boundary and the demo service."""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from fieldtree.boundaries import ValidatedInput, ValidationOutcome, validated
from fieldtree.core.errors import ConfigurationError, DeclarationError, register_error_handlers
from fieldtree.engine import Engine
from fieldtree.main import create_app

VALID_SIGNUP = {
    "first_name": " Jo ",
    "password": "secret1",
    "email": "ana@example.com",
    "phone": "",
}


@pytest.fixture
def client(engine: Engine):
    with TestClient(create_app(engine)) as test_client:
        yield test_client


class TestSignup:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_accepts_valid_body(self, client: TestClient) -> None:
        response = client.post("/signup", json={**VALID_SIGNUP, "newsletter": "1"})
        assert response.status_code == 200
        assert response.json()["accepted"] == {
            "first_name": "Jo",
            "password": "secret1",
            "dob": None,
            "newsletter": 1,
            "email": "ana@example.com",
            "phone": "",
        }

    def test_rejects_with_structured_failure(self, client: TestClient) -> None:
        response = client.post("/signup", json={"first_name": "J", "password": "x"})
        assert response.status_code == 400
        body = response.json()
        assert body["statusCode"] == 400
        assert body["key"] == "validation"
        assert body["errors"] == {
            "first_name": {"range": [2, 35]},
            "password": {"range": [6, 50]},
            "contact": {"validMin": [1]},
            "email": {"optional": []},
            "phone": {"optional": []},
        }
        assert body["values"]["first_name"] == "J"

    def test_one_contact_is_enough(self, client: TestClient) -> None:
        response = client.post("/signup", json={**VALID_SIGNUP, "email": "not-an-email"})
        assert response.status_code == 200

    def test_invalid_json(self, client: TestClient) -> None:
        response = client.post("/signup", content=b"{", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "E2021_INVALID_PAYLOAD"

    def test_non_object_body(self, client: TestClient) -> None:
        response = client.post("/signup", json=[VALID_SIGNUP])
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "E2021_INVALID_PAYLOAD"

    def test_correlation_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Correlation-ID": "abc123"})
        assert response.headers["X-Correlation-ID"] == "abc123"


class TestPreview:
    def test_reports_without_rejecting(self, client: TestClient) -> None:
        response = client.get("/signup/preview", params={"first_name": "J", "email": "ana@example.com"})
        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is False
        assert body["errors"]["first_name"] == {"range": [2, 35]}
        assert body["values"]["email"] == "ana@example.com"


class TestValidatedInput:
    def test_unknown_location(self) -> None:
        with pytest.raises(ConfigurationError):
            ValidatedInput({"keys": {}}, "session")  # type: ignore[arg-type]

    def test_declaration_checked_up_front(self) -> None:
        with pytest.raises(DeclarationError):
            ValidatedInput({"keys": {"a": {"validators": [["range", 2]]}}})

    def test_outcome_stored_on_request_state(self, engine: Engine) -> None:
        app = FastAPI()
        register_error_handlers(app)
        declaration = {"keys": {"item_id": {"validators": ["isNumberPositive"], "sanitizations": ["toInt"]}}}

        @app.get("/items/{item_id}")
        async def read_item(
            request: Request,
            outcome: ValidationOutcome = validated(declaration, "path", throw_on_error=False, engine=engine),
        ):
            return {"same": request.state.validation is outcome, "valid": outcome.valid, "values": outcome.values}

        with TestClient(app) as test_client:
            assert test_client.get("/items/12").json() == {"same": True, "valid": True, "values": {"item_id": 12}}
            assert test_client.get("/items/0").json()["valid"] is False

    def test_unknown_rule_is_a_server_error(self, engine: Engine) -> None:
        app = FastAPI()
        register_error_handlers(app)

        @app.get("/broken")
        async def broken(outcome: ValidationOutcome = validated({"keys": {"q": {"validators": ["nope"]}}}, "query", engine=engine)):
            return {}

        with TestClient(app) as test_client:
            response = test_client.get("/broken", params={"q": "x"})
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "E7001_UNKNOWN_RULE"
