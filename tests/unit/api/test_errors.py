"""Tests for error handlers."""

from __future__ import annotations

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel

from src.api.error_handlers import ErrorResponse, register_error_handlers
from src.core.exceptions import (
    AllParticipantsFailedError,
    ConsensusInputError,
    ParticipantConfigError,
)


class _Payload(BaseModel):
    count: int


@pytest.fixture
def client() -> TestClient:
    """App with routes that raise each kind of error."""
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/missing")
    async def missing() -> None:
        raise HTTPException(status_code=404, detail="Nothing here")

    @app.post("/payload")
    async def payload(body: _Payload) -> dict[str, int]:
        return {"count": body.count}

    @app.get("/config")
    async def config() -> None:
        raise ParticipantConfigError("No participants registered")

    @app.get("/failed")
    async def failed() -> None:
        raise AllParticipantsFailedError("All participants failed to respond")

    @app.get("/consensus")
    async def consensus() -> None:
        raise ConsensusInputError("No responses to reconcile")

    @app.get("/crash")
    async def crash() -> None:
        raise RuntimeError("secret internals")

    return TestClient(app, raise_server_exceptions=False)


class TestErrorResponseModel:
    """ErrorResponse schema."""

    def test_optional_fields_default_to_none(self) -> None:
        response = ErrorResponse(error="NotFound", detail="Resource not found")

        assert response.code is None
        assert response.path is None


class TestErrorHandlers:
    """Registered handlers produce ErrorResponse bodies."""

    def test_http_exception(self, client: TestClient) -> None:
        response = client.get("/missing")

        assert response.status_code == 404
        assert response.json() == {
            "error": "NotFound",
            "detail": "Nothing here",
            "code": None,
            "path": "/missing",
        }

    def test_validation_error_lists_fields(self, client: TestClient) -> None:
        response = client.post("/payload", json={"count": "many"})

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert "body.count" in response.json()["detail"]

    @pytest.mark.parametrize(
        ("path", "status_code", "code"),
        [
            ("/config", 400, "PARTICIPANT_CONFIG_ERROR"),
            ("/failed", 503, "ALL_PARTICIPANTS_FAILED"),
            ("/consensus", 500, "RECONCILIATION_ERROR"),
        ],
    )
    def test_reconciliation_errors(
        self,
        client: TestClient,
        path: str,
        status_code: int,
        code: str,
    ) -> None:
        response = client.get(path)

        assert response.status_code == status_code
        assert response.json()["code"] == code

    def test_reconciliation_error_type_and_detail(self, client: TestClient) -> None:
        body = client.get("/config").json()

        assert body["error"] == "ParticipantConfigError"
        assert body["detail"] == "No participants registered"

    def test_unhandled_exception_hides_details(self, client: TestClient) -> None:
        response = client.get("/crash")

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"
        assert "secret" not in response.json()["detail"]
