from datetime import date
from typing import Annotated

import pytest
from pydantic import BaseModel

from campus_portal.constants import IMAGE_MIME_TYPES, MEGABYTE
from campus_portal.core.exceptions import SchemaValidationError
from campus_portal.schemas.academic import AcademicCategory
from campus_portal.schemas.base import PayloadSchema
from campus_portal.schemas.fields import (
    BooleanString,
    EmailAddress,
    EncryptedPassword,
    FileArray,
    FlexibleDate,
    HttpsUrl,
    RecordId,
    enum_choice,
)
from campus_portal.schemas.validation import validate_or_raise
from campus_portal.types.uploads import UploadDescriptor
from campus_portal.utils.password_crypto_utils import get_password_manager


class _Flags(BaseModel):
    flag: BooleanString


class _Dates(BaseModel):
    day: FlexibleDate


class _Identity(BaseModel):
    id: RecordId
    email: EmailAddress


class _Links(BaseModel):
    url: HttpsUrl


class _Categories(BaseModel):
    category: enum_choice(AcademicCategory)


class _Gallery(PayloadSchema):
    images: Annotated[list[UploadDescriptor], FileArray(IMAGE_MIME_TYPES, max_size=MEGABYTE, max_files=2)]


class _Password(BaseModel):
    password: EncryptedPassword


@pytest.mark.unit
@pytest.mark.parametrize(("raw", "expected"), [("true", True), (" FALSE ", False), (True, True)])
def test_boolean_string_accepts_literals(raw, expected) -> None:
    assert validate_or_raise(_Flags, {"flag": raw}).flag is expected


@pytest.mark.unit
@pytest.mark.parametrize("raw", ["yes", "1", 1])
def test_boolean_string_rejects_other_values(raw) -> None:
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_or_raise(_Flags, {"flag": raw})

    assert exc_info.value.fields == ("flag",)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("05/03/2025", date(2025, 3, 5)),
        ("2025-03-05", date(2025, 3, 5)),
        ("2025-03-05T10:00:00Z", date(2025, 3, 5)),
    ],
)
def test_flexible_date_accepts_day_first_and_iso(raw, expected) -> None:
    assert validate_or_raise(_Dates, {"day": raw}).day == expected


@pytest.mark.unit
def test_flexible_date_rejects_unknown_format() -> None:
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_or_raise(_Dates, {"day": "March 5th"})

    assert "DD/MM/YYYY" in exc_info.value.errors[0].message


@pytest.mark.unit
def test_record_id_and_email_are_lowercased() -> None:
    result = validate_or_raise(_Identity, {"id": "ABCDEF0123456789ABCDEF01", "email": "Admin@School.EDU"})

    assert result.id == "abcdef0123456789abcdef01"
    assert result.email == "admin@school.edu"


@pytest.mark.unit
def test_record_id_and_email_report_both_errors() -> None:
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_or_raise(_Identity, {"id": "123", "email": "not-an-email"})

    assert exc_info.value.fields == ("id", "email")


@pytest.mark.unit
def test_https_url_rejects_plain_http() -> None:
    with pytest.raises(SchemaValidationError):
        validate_or_raise(_Links, {"url": "http://example.edu/file.pdf"})
    assert validate_or_raise(_Links, {"url": "https://example.edu/file.pdf"}).url.startswith("https://")


@pytest.mark.unit
def test_enum_choice_lists_allowed_values() -> None:
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_or_raise(_Categories, {"category": "Timetable"})

    assert "Admission form" in exc_info.value.errors[0].message
    assert validate_or_raise(_Categories, {"category": "Result"}).category is AcademicCategory.RESULT


@pytest.mark.unit
def test_file_array_accepts_single_descriptor(make_upload) -> None:
    upload = make_upload()

    assert validate_or_raise(_Gallery, {"images": upload}).images == [upload]


@pytest.mark.unit
def test_file_array_rejects_wrong_type(make_upload) -> None:
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_or_raise(_Gallery, {"images": [make_upload("doc.pdf", b"%PDF", "application/pdf")]})

    assert exc_info.value.message_key == "INVALID_FILE_TYPE"


@pytest.mark.unit
def test_file_array_rejects_oversized_file(make_upload) -> None:
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_or_raise(_Gallery, {"images": [make_upload(data=b"x" * (MEGABYTE + 1))]})

    assert exc_info.value.message_key == "FILE_TOO_LARGE"


@pytest.mark.unit
def test_file_array_enforces_file_count(make_upload) -> None:
    with pytest.raises(SchemaValidationError) as too_many:
        validate_or_raise(_Gallery, {"images": [make_upload() for _ in range(3)]})
    with pytest.raises(SchemaValidationError) as too_few:
        validate_or_raise(_Gallery, {"images": []})

    assert "最多" in too_many.value.errors[0].message
    assert "至少" in too_few.value.errors[0].message


@pytest.mark.unit
def test_file_array_rejects_plain_text() -> None:
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_or_raise(_Gallery, {"images": "photo.png"})

    assert exc_info.value.errors[0].message == "必须以文件形式上传"


@pytest.mark.unit
def test_encrypted_password_is_decrypted(app) -> None:
    with app.app_context():
        encrypted = get_password_manager().encrypt_password("Secret#2024")
        result = validate_or_raise(_Password, {"password": encrypted})

    assert result.password == "Secret#2024"


@pytest.mark.unit
def test_encrypted_password_rejects_invalid_ciphertext(app) -> None:
    with app.app_context(), pytest.raises(SchemaValidationError) as exc_info:
        validate_or_raise(_Password, {"password": "not-a-ciphertext"})

    assert exc_info.value.message_key == "PASSWORD_DECRYPT_FAILED"


@pytest.mark.unit
def test_encrypted_password_accepts_minimum_length(app) -> None:
    with app.app_context():
        encrypted = get_password_manager().encrypt_password("Short#A1")
        result = validate_or_raise(_Password, {"password": encrypted})

    assert result.password == "Short#A1"


@pytest.mark.unit
@pytest.mark.parametrize("plaintext", ["alllowercase#1", "NoSpecialChar1", "Sh#1", "Spaces are #1 Bad"])
def test_encrypted_password_rejects_weak_password(app, plaintext) -> None:
    with app.app_context():
        encrypted = get_password_manager().encrypt_password(plaintext)
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_or_raise(_Password, {"password": encrypted})

    assert exc_info.value.message_key == "PASSWORD_INVALID"
