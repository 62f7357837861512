import pytest
from flask import request

from campus_portal.core.exceptions import EmptyUploadError
from campus_portal.services.uploads.upload_service import (
    delete_file,
    delete_files,
    upload_file,
    upload_files,
)


@pytest.mark.unit
def test_upload_file_returns_id_and_public_link(app, upload_root, make_upload) -> None:
    with app.test_request_context("/", base_url="http://portal.example.edu"):
        result = upload_file(request, make_upload("Sports Day.png"))

    assert result["file_id"].endswith("_Sports_Day.png")
    assert result["file_link"] == f"https://portal.example.edu/assets/{result['file_id']}"
    assert (upload_root / result["file_id"]).is_file()


@pytest.mark.unit
def test_upload_files_keeps_order_and_delete_files_removes_them(app, upload_root, make_upload) -> None:
    with app.test_request_context("/", base_url="http://localhost:5000"):
        results = upload_files(request, [make_upload("a.png"), make_upload("b.png")])

    assert [item["file_id"].split("_", 1)[1] for item in results] == ["a.png", "b.png"]
    assert all(item["file_link"].startswith("http://localhost:5000/assets/") for item in results)

    with app.app_context():
        delete_files([item["file_id"] for item in results])

    assert not any((upload_root / item["file_id"]).exists() for item in results)


@pytest.mark.unit
def test_delete_file_is_safe_for_missing_file(app) -> None:
    with app.app_context():
        delete_file("0123456789abcdef_missing.png")


@pytest.mark.unit
def test_upload_files_rejects_empty_batch(app) -> None:
    with app.test_request_context("/"), pytest.raises(EmptyUploadError):
        upload_files(request, [])
