"""合并请求体、路由参数与 query 参数."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from campus_portal.constants import IDENTITY_FIELDS
from campus_portal.utils.request_payload import sanitize_value


def query_params_to_dict(query_params: Mapping[str, Any] | None) -> dict[str, Any]:
    """把 query 参数转为普通字典: 单值为标量, 多值为列表."""
    if not query_params:
        return {}
    if hasattr(query_params, "getlist"):
        result: dict[str, Any] = {}
        for key in query_params:
            values = [sanitize_value(item, field_name=key) for item in query_params.getlist(key)]
            result[key] = values[0] if len(values) == 1 else values
        return result
    return {str(key): sanitize_value(value, field_name=str(key)) for key, value in query_params.items()}


def merge_sources(
    body: Mapping[str, Any],
    route_params: Mapping[str, Any] | None,
    query_params: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """合并三类参数来源.

    优先级从低到高: query < route < body. 标识字段(id/email/category_params)例外,
    按 route -> body -> query 取第一个非空值, 保证路由中的资源标识不会被请求体覆盖.
    本函数不做任何类型校验.

    Example:
        >>> merge_sources({"title": "A", "id": "x"}, {"id": "y"}, {"page": "2"})
        {'page': '2', 'id': 'y', 'title': 'A'}

    """
    route = dict(route_params or {})
    query = query_params_to_dict(query_params)
    merged: dict[str, Any] = {**query, **route, **body}

    for field in IDENTITY_FIELDS:
        for source in (route, body, query):
            value = source.get(field)
            if value is not None and value != "":
                merged[field] = value
                break
    return merged


__all__ = ["merge_sources", "query_params_to_dict"]
