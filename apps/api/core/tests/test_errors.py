"""Tests for RFC 7807 error handling."""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel

from apps.api.core.errors import (
    PayloadTooLargeError,
    UnsupportedFileError,
    ValidationError,
    register_error_handlers,
)


class Body(BaseModel):
    amount: float


@pytest.fixture
def error_app():
    """Create a test app with error handlers registered."""
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/test/too-large")
    async def raise_too_large():
        raise PayloadTooLargeError("File too large (max 10 MB)")

    @app.get("/test/validation")
    async def raise_validation():
        raise ValidationError("categories is not valid JSON")

    @app.get("/test/unsupported")
    async def raise_unsupported():
        raise UnsupportedFileError()

    @app.get("/test/http")
    async def raise_http():
        raise HTTPException(status_code=400, detail="No descriptions provided")

    @app.post("/test/body")
    async def needs_body(body: Body):
        return body

    @app.get("/test/unhandled")
    async def raise_unhandled():
        raise RuntimeError("Unexpected crash")

    return app


@pytest.fixture
def client(error_app):
    return TestClient(error_app, raise_server_exceptions=False)


class TestRFC7807ErrorFormat:
    """All errors should return RFC 7807 Problem Details format."""

    def test_payload_too_large_returns_rfc7807(self, client):
        response = client.get("/test/too-large")
        assert response.status_code == 413
        body = response.json()
        assert body["type"] == "about:blank"
        assert body["title"] == "Payload Too Large"
        assert body["status"] == 413
        assert body["detail"] == "File too large (max 10 MB)"
        assert body["instance"] == "/test/too-large"

    def test_validation_error_returns_rfc7807(self, client):
        response = client.get("/test/validation")
        assert response.status_code == 422
        body = response.json()
        assert body["title"] == "Unprocessable Entity"
        assert body["detail"] == "categories is not valid JSON"

    def test_unsupported_file_returns_400(self, client):
        response = client.get("/test/unsupported")
        assert response.status_code == 400
        assert response.json()["title"] == "Bad Request"

    def test_http_exception_returns_rfc7807(self, client):
        response = client.get("/test/http")
        assert response.status_code == 400
        assert response.json()["detail"] == "No descriptions provided"

    def test_request_validation_lists_errors(self, client):
        response = client.post("/test/body", json={"amount": "not a number"})
        assert response.status_code == 422
        body = response.json()
        assert body["detail"] == "Request validation failed"
        assert body["errors"][0]["loc"] == ["body", "amount"]

    def test_unknown_route_returns_rfc7807(self, client):
        response = client.get("/test/nope")
        assert response.status_code == 404
        assert response.json()["title"] == "Not Found"

    def test_unhandled_error_returns_rfc7807(self, client):
        response = client.get("/test/unhandled")
        assert response.status_code == 500
        body = response.json()
        assert body["title"] == "Internal Server Error"
        assert body["detail"] == "An unexpected error occurred"
