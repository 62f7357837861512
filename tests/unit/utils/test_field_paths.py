import pytest

from campus_portal.core.exceptions import MalformedRequestError
from campus_portal.utils.field_paths import parse_field_name, reconstruct_fields


@pytest.mark.unit
@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("title", ("title",)),
        ("meta.author.name", ("meta", "author", "name")),
        ("items[0]", ("items", 0)),
        ("items[3][name]", ("items", 3, "name")),
        ("items[3].name", ("items", 3, "name")),
    ],
)
def test_parse_field_name_supported_shapes(name, expected) -> None:
    assert parse_field_name(name) == expected


@pytest.mark.unit
@pytest.mark.parametrize("name", ["a.b[0]", "a[0][b][1]", "a[0].b.c", "[0]", "a..b", "a[", "a[0]x", "1a.b"])
def test_parse_field_name_rejects_mixed_or_malformed_paths(name) -> None:
    with pytest.raises(MalformedRequestError) as exc_info:
        parse_field_name(name)

    assert exc_info.value.message_key == "INVALID_FIELD_NAME"
    assert exc_info.value.extra["field"] == name


@pytest.mark.unit
def test_reconstruct_fields_groups_bracketed_elements() -> None:
    record = reconstruct_fields(
        [
            ("items[0][name]", "x"),
            ("items[0][qty]", "2"),
            ("items[1][name]", "y"),
        ],
    )

    assert record == {"items": [{"name": "x", "qty": "2"}, {"name": "y"}]}


@pytest.mark.unit
def test_reconstruct_fields_orders_elements_by_first_encounter() -> None:
    record = reconstruct_fields([("items[5][name]", "late"), ("items[1][name]", "early")])

    assert record == {"items": [{"name": "late"}, {"name": "early"}]}


@pytest.mark.unit
def test_reconstruct_fields_collects_repeated_scalar_into_list() -> None:
    record = reconstruct_fields([("tag", "a"), ("tag", "b"), ("title", "Notice A")])

    assert record == {"tag": ["a", "b"], "title": "Notice A"}


@pytest.mark.unit
def test_reconstruct_fields_builds_dotted_objects() -> None:
    record = reconstruct_fields([("meta.author.name", "Ann"), ("meta.author.role", "editor"), ("meta.lang", "en")])

    assert record == {"meta": {"author": {"name": "Ann", "role": "editor"}, "lang": "en"}}


@pytest.mark.unit
def test_reconstruct_fields_rejects_scalar_and_object_on_same_path() -> None:
    with pytest.raises(MalformedRequestError) as exc_info:
        reconstruct_fields([("meta", "plain"), ("meta.lang", "en")])

    assert exc_info.value.extra["reason"] == "path_conflict"


@pytest.mark.unit
def test_reconstruct_fields_files_are_always_lists_keyed_by_base_name() -> None:
    single = object()
    first, second = object(), object()

    record = reconstruct_fields(
        [("title", "Notice A")],
        [("file", single), ("images[0]", first), ("images[1]", second)],
    )

    assert record == {"title": "Notice A", "file": [single], "images": [first, second]}


@pytest.mark.unit
def test_reconstruct_fields_places_indexed_file_on_its_element() -> None:
    photo = object()

    record = reconstruct_fields(
        [("members[0][name]", "A"), ("members[1][name]", "B")],
        [("members[0][photo]", photo)],
    )

    assert record == {"members": [{"name": "A", "photo": [photo]}, {"name": "B"}]}
