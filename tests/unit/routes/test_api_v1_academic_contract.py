# tests/unit/routes/test_api_v1_academic_contract.py
"""API v1 academic contract tests."""

import pytest

BASE = "/api/v1/academic"


def _create(client, pdf_part, category="routine", **fields):
    data = {
        "title": "Class routine",
        "description": "Spring term",
        "publish_date": "01/02/2025",
        "badge": "new",
        "file": pdf_part(),
    }
    data.update(fields)
    return client.post(f"{BASE}/{category}", data=data, content_type="multipart/form-data")


@pytest.mark.unit
def test_api_v1_academic_create_stores_record_and_file(client, pdf_part, upload_root):
    response = _create(client, pdf_part)

    assert response.status_code == 201
    payload = response.get_json()
    assert payload["success"] is True
    record = payload["data"]["record"]
    assert record["category"] == "Routine"
    assert record["publish_date"] == "2025-02-01"
    assert record["file"]["file"].startswith("http://localhost/assets/")
    assert (upload_root / record["file"]["file_id"]).is_file()


@pytest.mark.unit
def test_api_v1_academic_create_reports_all_field_errors(client, upload_root):
    response = client.post(
        f"{BASE}/routine",
        data={"title": "", "publish_date": "someday"},
        content_type="multipart/form-data",
    )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] is True
    fields = {item["field"] for item in payload["extra"]["errors"]}
    assert {"title", "description", "file", "publish_date", "badge"} <= fields
    assert not upload_root.exists() or not any(upload_root.iterdir())


@pytest.mark.unit
def test_api_v1_academic_create_rejects_json_body(client):
    response = client.post(f"{BASE}/routine", json={"title": "Class routine"})

    assert response.status_code == 415
    assert response.get_json()["message_code"] == "UNSUPPORTED_CONTENT_TYPE"


@pytest.mark.unit
def test_api_v1_academic_unknown_category_is_rejected(client, pdf_part):
    response = _create(client, pdf_part, category="timetable")

    assert response.status_code == 400
    assert response.get_json()["message_code"] == "CATEGORY_NOT_SUPPORTED"


@pytest.mark.unit
def test_api_v1_academic_duplicate_title_conflicts_and_cleans_up(client, pdf_part, upload_root):
    assert _create(client, pdf_part).status_code == 201

    response = _create(client, pdf_part)

    assert response.status_code == 409
    assert len(list(upload_root.iterdir())) == 1


@pytest.mark.unit
def test_api_v1_academic_list_get_patch_delete(client, pdf_part, upload_root):
    record = _create(client, pdf_part).get_json()["data"]["record"]
    detail_url = f"{BASE}/routine/{record['id']}"

    listing = client.get(f"{BASE}/routine?limit=5").get_json()["data"]
    assert listing["total"] == 1
    assert listing["items"][0]["id"] == record["id"]

    assert client.get(detail_url).get_json()["data"]["record"]["title"] == "Class routine"
    assert client.get(f"{BASE}/result/{record['id']}").status_code == 404

    patched = client.patch(
        detail_url,
        data={"title": "Class routine v2", "file": pdf_part("routine-v2.pdf")},
        content_type="multipart/form-data",
    )
    assert patched.status_code == 200
    updated = patched.get_json()["data"]["record"]
    assert updated["title"] == "Class routine v2"
    assert not (upload_root / record["file"]["file_id"]).exists()
    assert (upload_root / updated["file"]["file_id"]).is_file()

    deleted = client.delete(detail_url)
    assert deleted.status_code == 200
    assert not (upload_root / updated["file"]["file_id"]).exists()
    assert client.get(detail_url).status_code == 404


@pytest.mark.unit
def test_api_v1_academic_patch_accepts_urlencoded_body(client, pdf_part):
    record = _create(client, pdf_part).get_json()["data"]["record"]

    response = client.patch(f"{BASE}/routine/{record['id']}", data={"badge": "updated"})

    assert response.status_code == 200
    assert response.get_json()["data"]["record"]["badge"] == "updated"


@pytest.mark.unit
def test_api_v1_academic_patch_requires_a_field(client, pdf_part):
    record = _create(client, pdf_part).get_json()["data"]["record"]

    response = client.patch(
        f"{BASE}/routine/{record['id']}",
        data={"id": record["id"]},
        content_type="multipart/form-data",
    )

    assert response.status_code == 400
    assert response.get_json()["message_code"] == "UPDATE_FIELDS_REQUIRED"


@pytest.mark.unit
def test_api_v1_academic_invalid_record_id(client):
    response = client.get(f"{BASE}/routine/not-an-id")

    assert response.status_code == 400
    assert response.get_json()["extra"]["errors"][0]["field"] == "id"
