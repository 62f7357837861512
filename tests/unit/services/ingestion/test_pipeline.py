import io
from datetime import date
from typing import Annotated

import pytest
from flask import request

from campus_portal.constants import IMAGE_MIME_TYPES, RequestMode
from campus_portal.core.exceptions import (
    EmptyUploadError,
    MalformedRequestError,
    SchemaValidationError,
    UnsupportedMediaTypeError,
)
from campus_portal.schemas.academic import ACADEMIC_CREATE_SCHEMAS, ACADEMIC_UPDATE_SCHEMAS, AcademicCategory
from campus_portal.schemas.base import PayloadSchema
from campus_portal.schemas.fields import FileArray, bounded_text
from campus_portal.services.ingestion import parse_and_validate
from campus_portal.services.uploads import get_file_storage, open_upload_session
from campus_portal.types.uploads import UploadDescriptor

RECORD_ID = "a" * 24


class NoticeSchema(PayloadSchema):
    title: bounded_text(50)
    file: Annotated[list[UploadDescriptor], FileArray(IMAGE_MIME_TYPES)]


def _stored_files(upload_root):
    return sorted(path.name for path in upload_root.iterdir()) if upload_root.exists() else []


@pytest.mark.unit
def test_create_stores_file_and_returns_reference(app, upload_root) -> None:
    data = {"title": "Notice A", "file": (io.BytesIO(b"png-bytes"), "notice a.png", "image/png")}
    with app.test_request_context("/", method="POST", data=data, content_type="multipart/form-data"):
        command = parse_and_validate(request, None, RequestMode.CREATE, NoticeSchema)

    assert set(command) == {"title", "file"}
    assert command["title"] == "Notice A"
    reference = command["file"]
    assert set(reference) == {"file_id", "file"}
    assert reference["file_id"].endswith("_notice_a.png")
    assert reference["file"] == f"http://localhost/assets/{reference['file_id']}"
    assert (upload_root / reference["file_id"]).read_bytes() == b"png-bytes"


@pytest.mark.unit
def test_schema_failure_reports_field_and_stores_nothing(app, upload_root) -> None:
    data = {"title": "", "file": (io.BytesIO(b"png-bytes"), "notice.png", "image/png")}
    with app.test_request_context("/", method="POST", data=data, content_type="multipart/form-data"):
        with pytest.raises(SchemaValidationError) as exc_info:
            parse_and_validate(request, None, RequestMode.CREATE, NoticeSchema)

    assert exc_info.value.fields == ("title",)
    assert _stored_files(upload_root) == []


@pytest.mark.unit
def test_schema_failure_collects_every_field_error(app) -> None:
    data = {"title": "x" * 51, "file": (io.BytesIO(b"%PDF"), "doc.pdf", "application/pdf"), "extra": "1"}
    with app.test_request_context("/", method="POST", data=data, content_type="multipart/form-data"):
        with pytest.raises(SchemaValidationError) as exc_info:
            parse_and_validate(request, None, RequestMode.CREATE, NoticeSchema)

    assert set(exc_info.value.fields) == {"title", "file", "extra"}


@pytest.mark.unit
def test_create_rejects_undefined_value_in_json_body(app) -> None:
    with app.test_request_context("/", method="POST", json={"title": None}):
        with pytest.raises(MalformedRequestError) as exc_info:
            parse_and_validate(request, None, RequestMode.CREATE, NoticeSchema)

    assert exc_info.value.message_key == "UNDEFINED_FIELD_VALUE"


@pytest.mark.unit
def test_content_type_allow_list_is_checked_first(app) -> None:
    with app.test_request_context("/", method="POST", json={"title": "Notice A"}):
        with pytest.raises(UnsupportedMediaTypeError):
            parse_and_validate(
                request,
                None,
                RequestMode.CREATE,
                NoticeSchema,
                content_types=("multipart/form-data",),
            )


@pytest.mark.unit
def test_category_table_dispatch_injects_normalized_category(app) -> None:
    data = {
        "title": "Admission 2025",
        "description": "Form for new students",
        "publish_date": "01/02/2025",
        "badge": "new",
        "file": (io.BytesIO(b"%PDF-1.4"), "form.pdf", "application/pdf"),
    }
    with app.test_request_context("/", method="POST", data=data, content_type="multipart/form-data"):
        command = parse_and_validate(
            request,
            {"category_params": "admission_form"},
            RequestMode.CREATE,
            ACADEMIC_CREATE_SCHEMAS,
        )

    assert command["category_params"] == AcademicCategory.ADMISSION_FORM.value
    assert command["publish_date"] == date(2025, 2, 1)
    assert set(command["file"]) == {"file_id", "file"}


@pytest.mark.unit
def test_category_specific_schema_rejects_image_for_admission_form(app, upload_root) -> None:
    data = {
        "title": "Admission 2025",
        "description": "Form",
        "publish_date": "2025-02-01",
        "badge": "new",
        "file": (io.BytesIO(b"png"), "form.png", "image/png"),
    }
    with app.test_request_context("/", method="POST", data=data, content_type="multipart/form-data"):
        with pytest.raises(SchemaValidationError) as exc_info:
            parse_and_validate(
                request, {"category_params": "admission_form"}, RequestMode.CREATE, ACADEMIC_CREATE_SCHEMAS
            )

    assert exc_info.value.message_key == "INVALID_FILE_TYPE"
    assert _stored_files(upload_root) == []


@pytest.mark.unit
def test_unknown_category_is_a_validation_error(app) -> None:
    with app.test_request_context("/", method="GET"):
        with pytest.raises(SchemaValidationError) as exc_info:
            parse_and_validate(request, {"category_params": "timetable"}, RequestMode.QUERY, ACADEMIC_CREATE_SCHEMAS)

    assert exc_info.value.message_key == "CATEGORY_NOT_SUPPORTED"
    assert exc_info.value.fields == ("category_params",)


@pytest.mark.unit
def test_update_with_only_identity_fields_is_rejected(app) -> None:
    with app.test_request_context("/", method="PATCH", data={"id": RECORD_ID}, content_type="multipart/form-data"):
        with pytest.raises(SchemaValidationError) as exc_info:
            parse_and_validate(
                request,
                {"category_params": "routine", "id": RECORD_ID},
                RequestMode.UPDATE,
                ACADEMIC_UPDATE_SCHEMAS,
            )

    assert exc_info.value.message_key == "UPDATE_FIELDS_REQUIRED"


@pytest.mark.unit
def test_update_returns_only_submitted_fields(app) -> None:
    data = {"title": "Routine v2"}
    with app.test_request_context("/", method="PATCH", data=data, content_type="multipart/form-data"):
        command = parse_and_validate(
            request,
            {"category_params": "routine", "id": RECORD_ID.upper()},
            RequestMode.UPDATE,
            ACADEMIC_UPDATE_SCHEMAS,
        )

    assert command == {"id": RECORD_ID, "title": "Routine v2", "category_params": "Routine"}


@pytest.mark.unit
def test_update_rejects_unknown_fields(app) -> None:
    data = {"title": "Routine v2", "subtitle": "nope"}
    with app.test_request_context("/", method="PATCH", data=data, content_type="multipart/form-data"):
        with pytest.raises(SchemaValidationError) as exc_info:
            parse_and_validate(
                request, {"category_params": "routine", "id": RECORD_ID}, RequestMode.UPDATE, ACADEMIC_UPDATE_SCHEMAS
            )

    assert exc_info.value.fields == ("subtitle",)


@pytest.mark.unit
def test_empty_named_file_raises_empty_upload(app, upload_root) -> None:
    data = {"title": "Notice A", "file": (io.BytesIO(b""), "empty.png", "image/png")}
    with app.test_request_context("/", method="POST", data=data, content_type="multipart/form-data"):
        with pytest.raises(EmptyUploadError):
            parse_and_validate(request, None, RequestMode.CREATE, NoticeSchema)

    assert _stored_files(upload_root) == []


@pytest.mark.unit
def test_caller_session_records_stored_files(app) -> None:
    data = {"title": "Notice A", "file": (io.BytesIO(b"png"), "a.png", "image/png")}
    with app.test_request_context("/", method="POST", data=data, content_type="multipart/form-data"):
        session = open_upload_session(request)
        command = parse_and_validate(request, None, RequestMode.CREATE, NoticeSchema, session=session)
        stored_ids = [item.file_id for item in session.stored]
        assert stored_ids == [command["file"]["file_id"]]
        assert get_file_storage().exists(stored_ids[0])
