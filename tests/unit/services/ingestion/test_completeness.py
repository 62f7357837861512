import pytest

from campus_portal.constants import RequestMode
from campus_portal.core.exceptions import MalformedRequestError
from campus_portal.services.ingestion.completeness import enforce_completeness


@pytest.mark.unit
def test_create_rejects_undefined_value() -> None:
    with pytest.raises(MalformedRequestError) as exc_info:
        enforce_completeness({"title": "Notice A", "description": None}, RequestMode.CREATE)

    assert exc_info.value.message_key == "UNDEFINED_FIELD_VALUE"
    assert exc_info.value.extra == {"field": "description"}


@pytest.mark.unit
def test_create_keeps_empty_strings_for_schema_to_judge() -> None:
    record = enforce_completeness({"title": ""}, RequestMode.CREATE)

    assert record == {"title": ""}


@pytest.mark.unit
@pytest.mark.parametrize("mode", [RequestMode.UPDATE, RequestMode.QUERY, RequestMode.DELETE, "update"])
def test_other_modes_drop_undefined_values(mode) -> None:
    record = enforce_completeness({"id": "abc", "title": None, "badge": "new"}, mode)

    assert record == {"id": "abc", "badge": "new"}
