# tests/unit/routes/test_api_v1_swagger_contract.py
"""API v1 OpenAPI contract tests."""

import pytest


@pytest.mark.unit
def test_api_v1_openapi_lists_every_namespace(client):
    response = client.get("/api/v1/openapi.json")

    assert response.status_code == 200
    paths = response.get_json()["paths"]
    for expected in (
        "/health/ping",
        "/auth/password-reset-requests",
        "/auth/reset-password",
        "/academic/{category_params}",
        "/academic/{category_params}/{record_id}",
        "/announcements/{category_params}",
        "/gallery/photos",
        "/gallery/photos/{record_id}",
        "/files/{file_id}",
    ):
        assert expected in paths


@pytest.mark.unit
def test_api_v1_swagger_json_renders(client) -> None:
    response = client.get("/api/v1/swagger.json")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload.get("swagger") == "2.0"
    assert "ErrorEnvelope" in payload["definitions"]
