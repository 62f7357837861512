import pytest
from werkzeug.datastructures import MultiDict

from campus_portal.services.ingestion.source_merger import merge_sources, query_params_to_dict


@pytest.mark.unit
def test_merge_sources_body_overrides_route_and_query() -> None:
    merged = merge_sources({"title": "body"}, {"title": "route"}, {"title": "query", "page": "2"})

    assert merged == {"title": "body", "page": "2"}


@pytest.mark.unit
def test_merge_sources_route_identity_wins_over_body() -> None:
    merged = merge_sources(
        {"id": "body-id", "category_params": "result"},
        {"id": "route-id", "category_params": "notice"},
        None,
    )

    assert merged["id"] == "route-id"
    assert merged["category_params"] == "notice"


@pytest.mark.unit
def test_merge_sources_identity_falls_back_to_body_then_query() -> None:
    merged = merge_sources({"email": "a@example.com"}, {"email": ""}, {"email": "q@example.com", "id": "q-id"})

    assert merged["email"] == "a@example.com"
    assert merged["id"] == "q-id"


@pytest.mark.unit
def test_merge_sources_keeps_undefined_values_for_completeness_step() -> None:
    merged = merge_sources({"title": None}, {}, {})

    assert merged == {"title": None}


@pytest.mark.unit
def test_query_params_to_dict_preserves_repeated_values() -> None:
    params = MultiDict([("tag", " a "), ("tag", "b"), ("page", "1")])

    assert query_params_to_dict(params) == {"tag": ["a", "b"], "page": "1"}
