"""更新场景下的字段差异计算."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def changed_values(existing: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    """返回 ``incoming`` 中与 ``existing`` 取值不同的字段.

    ``existing`` 中不存在的字段视为变更. 嵌套对象/列表按整体比较.

    Example:
        >>> changed_values({"title": "A", "body": "x"}, {"title": "B", "body": "x"})
        {'title': 'B'}

    """
    return {
        key: value
        for key, value in incoming.items()
        if key not in existing or existing[key] != value
    }


__all__ = ["changed_values"]
