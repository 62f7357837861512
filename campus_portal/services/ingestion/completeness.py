"""按请求模式处理未定义(None)字段."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from campus_portal.constants import RequestMode
from campus_portal.core.exceptions import MalformedRequestError


def enforce_completeness(record: Mapping[str, Any], mode: RequestMode) -> dict[str, Any]:
    """按模式处理值为 None 的字段.

    - create: 任一字段为 None 直接拒绝.
    - update/query/delete: 丢弃值为 None 的字段, 其余原样透传(包括 id/email/category_params 等标识字段).

    Raises:
        MalformedRequestError: create 模式下存在未定义的字段值.

    """
    mode = RequestMode(mode)
    if mode is RequestMode.CREATE:
        for key, value in record.items():
            if value is None:
                raise MalformedRequestError(
                    f"字段 {key} 的值未定义",
                    message_key="UNDEFINED_FIELD_VALUE",
                    extra={"field": key},
                )
        return dict(record)

    return {key: value for key, value in record.items() if value is not None}


__all__ = ["enforce_completeness"]
