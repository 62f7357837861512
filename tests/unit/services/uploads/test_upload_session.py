import pytest

from campus_portal.core.exceptions import ConflictError
from campus_portal.services.uploads import LocalFileStorage, UploadSession

BASE_URL = "http://localhost:5000"


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(tmp_path / "assets", url_prefix="assets")


@pytest.mark.unit
def test_session_keeps_files_when_block_succeeds(storage, make_upload) -> None:
    with UploadSession(storage, BASE_URL) as session:
        stored = session.store(make_upload())

    assert storage.exists(stored.file_id)
    assert stored.link.startswith("http://localhost:5000/assets/")


@pytest.mark.unit
def test_session_removes_files_when_block_raises(storage, make_upload) -> None:
    with pytest.raises(ConflictError):
        with UploadSession(storage, BASE_URL) as session:
            stored = session.store_many([make_upload("a.png"), make_upload("b.png")])
            raise ConflictError("标题重复")

    assert all(not storage.exists(item.file_id) for item in stored)


@pytest.mark.unit
def test_discarded_files_are_removed_only_after_success(storage, make_upload) -> None:
    old = storage.store(make_upload("old.png"), base_url=BASE_URL)

    with UploadSession(storage, BASE_URL) as session:
        session.discard_on_success([old.file_id, old.file_id])
        assert storage.exists(old.file_id)

    assert not storage.exists(old.file_id)


@pytest.mark.unit
def test_discarded_files_survive_failed_block(storage, make_upload) -> None:
    old = storage.store(make_upload("old.png"), base_url=BASE_URL)

    with pytest.raises(RuntimeError):
        with UploadSession(storage, BASE_URL) as session:
            replacement = session.store(make_upload("new.png"))
            session.discard_on_success([old.file_id])
            raise RuntimeError("persist failed")

    assert storage.exists(old.file_id)
    assert not storage.exists(replacement.file_id)


@pytest.mark.unit
def test_adopted_files_take_part_in_rollback(storage, make_upload) -> None:
    stored = storage.store(make_upload(), base_url=BASE_URL)
    session = UploadSession(storage, BASE_URL)
    session.adopt([stored])

    session.rollback()

    assert not storage.exists(stored.file_id)
    assert session.stored == ()


@pytest.mark.unit
def test_discard_cleanup_failure_does_not_fail_completed_block(storage, make_upload) -> None:
    (storage.root / "locked_dir").mkdir(parents=True)

    with UploadSession(storage, BASE_URL) as session:
        stored = session.store(make_upload("new.png"))
        session.discard_on_success(["locked_dir"])

    assert storage.exists(stored.file_id)
    assert (storage.root / "locked_dir").is_dir()
