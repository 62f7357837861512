import pytest

from campus_portal.utils.logging.context_vars import request_id_var


@pytest.mark.unit
def test_request_id_header_is_echoed(client) -> None:
    response = client.get("/api/v1/health/ping", headers={"X-Request-ID": "edge-1234"})

    assert response.headers["X-Request-ID"] == "edge-1234"


@pytest.mark.unit
@pytest.mark.parametrize("incoming", ["", "bad id with spaces", "x" * 200, "<script>"])
def test_invalid_request_id_is_replaced(client, incoming) -> None:
    response = client.get("/api/v1/health/ping", headers={"X-Request-ID": incoming})

    request_id = response.headers["X-Request-ID"]
    assert request_id != incoming
    assert request_id.startswith("req_")


@pytest.mark.unit
def test_error_envelope_carries_request_id(client) -> None:
    response = client.post(
        "/api/v1/academic/routine",
        json={"title": "Class routine"},
        headers={"X-Request-ID": "edge-5678"},
    )

    assert response.status_code == 415
    assert response.headers["X-Request-ID"] == "edge-5678"
    assert response.get_json()["context"]["request_id"] == "edge-5678"


@pytest.mark.unit
def test_request_id_context_is_reset_after_request(client) -> None:
    client.get("/api/v1/health/ping", headers={"X-Request-ID": "edge-9999"})

    assert request_id_var.get() is None
