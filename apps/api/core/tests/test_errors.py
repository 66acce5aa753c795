"""Tests for RFC 7807 error handling."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from apps.api.core.errors import (
    AuthenticationError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
    register_error_handlers,
)


class Payload(BaseModel):
    amount: float


@pytest.fixture
def error_app():
    """Create a test app with error handlers registered."""
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/test/bad-request")
    async def raise_bad_request():
        raise BadRequestError("No transactions found in text")

    @app.get("/test/not-found")
    async def raise_not_found():
        raise NotFoundError("Transaction xyz not found")

    @app.get("/test/forbidden")
    async def raise_forbidden():
        raise ForbiddenError()

    @app.get("/test/too-large")
    async def raise_too_large():
        raise PayloadTooLargeError("Text exceeds 20000 characters")

    @app.get("/test/validation")
    async def raise_validation():
        raise ValidationError("Invalid amount")

    @app.get("/test/auth")
    async def raise_auth():
        raise AuthenticationError()

    @app.post("/test/body")
    async def needs_body(payload: Payload):
        return payload

    @app.get("/test/unhandled")
    async def raise_unhandled():
        raise RuntimeError("Unexpected crash")

    return app


@pytest.fixture
def client(error_app):
    return TestClient(error_app, raise_server_exceptions=False)


class TestRFC7807ErrorFormat:
    """All errors should return RFC 7807 Problem Details format."""

    def test_not_found_returns_rfc7807(self, client):
        response = client.get("/test/not-found")
        assert response.status_code == 404
        body = response.json()
        assert body["type"] == "about:blank"
        assert body["title"] == "Not Found"
        assert body["status"] == 404
        assert body["detail"] == "Transaction xyz not found"
        assert body["instance"] == "/test/not-found"

    def test_bad_request_returns_rfc7807(self, client):
        response = client.get("/test/bad-request")
        assert response.status_code == 400
        body = response.json()
        assert body["title"] == "Bad Request"
        assert body["detail"] == "No transactions found in text"

    def test_forbidden_returns_rfc7807(self, client):
        response = client.get("/test/forbidden")
        assert response.status_code == 403
        assert response.json()["title"] == "Forbidden"

    def test_payload_too_large_returns_rfc7807(self, client):
        response = client.get("/test/too-large")
        assert response.status_code == 413
        assert response.json()["title"] == "Payload Too Large"

    def test_validation_error_returns_rfc7807(self, client):
        response = client.get("/test/validation")
        assert response.status_code == 422
        body = response.json()
        assert body["title"] == "Unprocessable Entity"
        assert body["detail"] == "Invalid amount"

    def test_request_body_validation_returns_rfc7807(self, client):
        response = client.post("/test/body", json={"amount": "lots"})
        assert response.status_code == 422
        body = response.json()
        assert body["status"] == 422
        assert "amount" in body["detail"]

    def test_auth_error_returns_rfc7807(self, client):
        response = client.get("/test/auth")
        assert response.status_code == 401
        body = response.json()
        assert body["title"] == "Unauthorized"

    def test_unhandled_error_returns_rfc7807(self, client):
        response = client.get("/test/unhandled")
        assert response.status_code == 500
        body = response.json()
        assert body["title"] == "Internal Server Error"
        assert body["detail"] == "An unexpected error occurred"

    def test_problem_media_type(self, client):
        response = client.get("/test/not-found")
        assert response.headers["content-type"] == "application/problem+json"

    def test_unknown_route_uses_problem_details(self, client):
        response = client.get("/nowhere")
        assert response.status_code == 404
        body = response.json()
        assert body["title"] == "Not Found"
        assert body["instance"] == "/nowhere"
