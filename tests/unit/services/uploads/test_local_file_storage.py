from concurrent.futures import ThreadPoolExecutor

import pytest

from campus_portal.core.exceptions import EmptyUploadError, MalformedRequestError, StorageError
from campus_portal.services.uploads import LocalFileStorage

BASE_URL = "https://portal.example.edu"


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(tmp_path / "assets", url_prefix="/assets/", max_workers=4)


@pytest.mark.unit
def test_store_writes_file_and_builds_link(storage, make_upload) -> None:
    stored = storage.store(make_upload("Annual Report 2025.pdf", b"%PDF-1.4", "application/pdf"), base_url=BASE_URL)

    assert stored.file_id.endswith("_Annual_Report_2025.pdf")
    assert stored.link == f"{BASE_URL}/assets/{stored.file_id}"
    assert stored.original_name == "Annual Report 2025.pdf"
    assert (storage.root / stored.file_id).read_bytes() == b"%PDF-1.4"


@pytest.mark.unit
def test_store_rejects_empty_file(storage, make_upload) -> None:
    with pytest.raises(EmptyUploadError):
        storage.store(make_upload("empty.png", b""), base_url=BASE_URL)

    assert not storage.root.exists() or not any(storage.root.iterdir())


@pytest.mark.unit
def test_build_file_id_sanitizes_name() -> None:
    file_id = LocalFileStorage.build_file_id("../../etc/pass wd.p-n g")

    assert "/" not in file_id
    assert file_id.endswith("_pass_wd.png")


@pytest.mark.unit
def test_build_file_id_falls_back_when_name_is_unusable() -> None:
    assert LocalFileStorage.build_file_id("...").endswith("_file")


@pytest.mark.unit
def test_concurrent_uploads_with_same_name_get_distinct_ids(storage, make_upload) -> None:
    with ThreadPoolExecutor(max_workers=5) as executor:
        futures = [
            executor.submit(storage.store, make_upload("photo.png", f"image-{index}".encode()), base_url=BASE_URL)
            for index in range(5)
        ]
        stored = [future.result() for future in futures]

    file_ids = {item.file_id for item in stored}
    assert len(file_ids) == 5
    assert sorted(path.name for path in storage.root.iterdir()) == sorted(file_ids)


@pytest.mark.unit
def test_store_many_keeps_input_order(storage, make_upload) -> None:
    descriptors = [make_upload(f"photo-{index}.png", f"image-{index}".encode()) for index in range(3)]

    stored = storage.store_many(descriptors, base_url=BASE_URL)

    assert [item.original_name for item in stored] == ["photo-0.png", "photo-1.png", "photo-2.png"]


@pytest.mark.unit
def test_store_many_removes_written_files_when_one_fails(storage, make_upload) -> None:
    descriptors = [make_upload("a.png", b"a"), make_upload("empty.png", b""), make_upload("c.png", b"c")]

    with pytest.raises(EmptyUploadError):
        storage.store_many(descriptors, base_url=BASE_URL)

    assert list(storage.root.iterdir()) == []


@pytest.mark.unit
def test_store_many_rejects_empty_list(storage) -> None:
    with pytest.raises(EmptyUploadError):
        storage.store_many([], base_url=BASE_URL)


@pytest.mark.unit
def test_remove_is_idempotent(storage, make_upload) -> None:
    stored = storage.store(make_upload(), base_url=BASE_URL)

    assert storage.remove(stored.file_id) is True
    assert storage.remove(stored.file_id) is False
    assert not storage.exists(stored.file_id)


@pytest.mark.unit
def test_remove_many_reports_each_result(storage, make_upload) -> None:
    stored = storage.store(make_upload(), base_url=BASE_URL)

    assert storage.remove_many([stored.file_id, "missing.png"]) == [True, False]


@pytest.mark.unit
@pytest.mark.parametrize("file_id", ["../secret.txt", "nested/file.png", "..", ".hidden", "a\\b.png", ""])
def test_path_for_rejects_ids_outside_root(storage, file_id) -> None:
    with pytest.raises(MalformedRequestError) as exc_info:
        storage.remove(file_id)

    assert exc_info.value.message_key == "INVALID_FILE_ID"


@pytest.mark.unit
def test_remove_many_validates_every_id_before_deleting(storage, make_upload) -> None:
    stored = storage.store(make_upload(), base_url=BASE_URL)

    with pytest.raises(MalformedRequestError):
        storage.remove_many([stored.file_id, "../escape.png"])

    assert storage.exists(stored.file_id)


@pytest.mark.unit
def test_remove_wraps_os_errors_as_storage_error(storage) -> None:
    (storage.root / "locked_dir").mkdir(parents=True)

    with pytest.raises(StorageError) as exc_info:
        storage.remove("locked_dir")

    assert exc_info.value.message_key == "FILE_DELETE_ERROR"
    assert exc_info.value.extra == {"file_id": "locked_dir"}


@pytest.mark.unit
def test_store_many_rolls_back_on_unexpected_worker_error(storage, make_upload) -> None:
    broken = make_upload("broken.png", b"b")
    broken.stream.close()

    with pytest.raises(ValueError):
        storage.store_many([make_upload("a.png", b"a"), broken], base_url=BASE_URL)

    assert list(storage.root.iterdir()) == []


@pytest.mark.unit
def test_store_many_keeps_original_error_when_rollback_fails(storage, make_upload, monkeypatch) -> None:
    def _failing_remove_many(file_ids):
        raise StorageError(message_key="FILE_DELETE_ERROR")

    monkeypatch.setattr(storage, "remove_many", _failing_remove_many)

    with pytest.raises(EmptyUploadError):
        storage.store_many([make_upload("a.png", b"a"), make_upload("empty.png", b"")], base_url=BASE_URL)
