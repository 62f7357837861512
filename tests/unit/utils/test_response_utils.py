import pytest

from campus_portal.core.exceptions import NotFoundError, ValidationError
from campus_portal.utils.response_utils import (
    jsonify_unified_success,
    unified_error_response,
    unified_success_response,
)


@pytest.mark.unit
def test_unified_success_response_defaults() -> None:
    payload, status = unified_success_response()

    assert status == 200
    assert payload["success"] is True
    assert payload["error"] is False
    assert payload["message"] == "操作成功"
    assert "data" not in payload
    assert "meta" not in payload


@pytest.mark.unit
def test_unified_success_response_carries_data_and_meta() -> None:
    payload, status = unified_success_response({"id": 1}, "已创建", status=201, meta={"total": 1})

    assert status == 201
    assert payload["data"] == {"id": 1}
    assert payload["message"] == "已创建"
    assert payload["meta"] == {"total": 1}


@pytest.mark.unit
def test_jsonify_unified_success_returns_response(app) -> None:
    with app.test_request_context():
        response, status = jsonify_unified_success({"ok": True})

    assert status == 200
    assert response.get_json()["data"] == {"ok": True}


@pytest.mark.unit
def test_unified_error_response_maps_validation_error(app) -> None:
    with app.test_request_context("/api/v1/academic/routine", method="POST"):
        payload, status = unified_error_response(ValidationError("标题不能为空"))

    assert status == 400
    assert payload["success"] is False
    assert payload["error"] is True
    assert payload["category"] == "validation"
    assert payload["message_code"] == "VALIDATION_ERROR"
    assert payload["message"] == "标题不能为空"
    assert payload["context"]["method"] == "POST"


@pytest.mark.unit
def test_unified_error_response_merges_extra(app) -> None:
    with app.test_request_context():
        payload, status = unified_error_response(
            NotFoundError("记录不存在"),
            extra={"record_id": "abc"},
        )

    assert status == 404
    assert payload["extra"] == {"record_id": "abc"}


@pytest.mark.unit
def test_unified_error_response_honours_explicit_status(app) -> None:
    with app.test_request_context():
        _, status = unified_error_response(ValidationError("坏请求"), status_code=422)

    assert status == 422
