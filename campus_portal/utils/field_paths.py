"""表单字段名解析与嵌套结构重建.

multipart/urlencoded 只能提交扁平的 ``name=value`` 对, 前端通过字段名约定表达嵌套结构:

    name := identifier ( "." identifier | "[" index "]" | "[" identifier "]" )*

支持的形状:
- ``title``: 普通字段, 重复出现时收集为列表.
- ``meta.author.name``: 点号路径, 逐级创建对象.
- ``items[0]``: 数组 ``items`` 中索引为 0 的元素值.
- ``items[0][name]`` / ``items[0].name``: 数组 ``items`` 中索引为 0 的元素的 ``name`` 属性.

数组元素按索引分组, 并按索引第一次出现的顺序排列(不按数值排序).
其余点号与方括号混用的形状(如 ``a.b[0]``、``a[0][b][1]``)一律拒绝.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from campus_portal.core.exceptions import MalformedRequestError

FieldSegment = str | int
FieldPath = tuple[FieldSegment, ...]

_IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"
_HEAD_PATTERN = re.compile(rf"^({_IDENTIFIER})")
_TOKEN_PATTERN = re.compile(rf"\.({_IDENTIFIER})|\[(\d+)\]|\[({_IDENTIFIER})\]")


class _IndexedGroup(dict):
    """构建期的数组占位: 键为索引, 插入顺序即首次出现顺序."""


def parse_field_name(name: str) -> FieldPath:
    """把表单字段名解析为路径.

    不含 ``.``/``[`` 的字段名原样作为单段路径返回, 不做标识符校验.

    Raises:
        MalformedRequestError: 字段名不符合语法或属于不支持的混合形状.

    """
    if "." not in name and "[" not in name and "]" not in name:
        return (name,)

    head = _HEAD_PATTERN.match(name)
    if head is None:
        raise _invalid_field_name(name)

    segments: list[FieldSegment] = [head.group(1)]
    position = head.end()
    while position < len(name):
        token = _TOKEN_PATTERN.match(name, position)
        if token is None:
            raise _invalid_field_name(name)
        dotted, index, bracketed = token.groups()
        if index is not None:
            segments.append(int(index))
        else:
            segments.append(dotted or bracketed)
        position = token.end()

    path = tuple(segments)
    if not _is_supported_shape(path):
        raise _invalid_field_name(name)
    return path


def _is_supported_shape(path: FieldPath) -> bool:
    indexes = [position for position, segment in enumerate(path) if isinstance(segment, int)]
    if not indexes:
        return True
    # 仅允许 base[i] 与 base[i][prop] 两种带索引的形状.
    if indexes != [1]:
        return False
    return len(path) in (2, 3)


def _invalid_field_name(name: str) -> MalformedRequestError:
    return MalformedRequestError(
        f"字段名格式无效: {name}",
        message_key="INVALID_FIELD_NAME",
        extra={"field": name},
    )


def _path_conflict(name: str) -> MalformedRequestError:
    return MalformedRequestError(
        f"字段路径冲突: {name}",
        message_key="INVALID_FIELD_NAME",
        extra={"field": name, "reason": "path_conflict"},
    )


def _descend(container: dict, key: FieldSegment, next_segment: FieldSegment, name: str) -> dict:
    factory = _IndexedGroup if isinstance(next_segment, int) else dict
    if key not in container:
        child = factory()
        container[key] = child
        return child
    existing = container[key]
    if type(existing) is not factory:
        raise _path_conflict(name)
    return existing


def _assign(container: dict, key: FieldSegment, value: Any, name: str, *, as_list: bool) -> None:
    if key not in container:
        container[key] = [value] if as_list else value
        return
    existing = container[key]
    if isinstance(existing, dict):
        raise _path_conflict(name)
    if isinstance(existing, list):
        existing.append(value)
    else:
        container[key] = [existing, value]


def _insert(root: dict, path: FieldPath, value: Any, name: str, *, as_list: bool = False) -> None:
    container = root
    for position, segment in enumerate(path[:-1]):
        container = _descend(container, segment, path[position + 1], name)
    _assign(container, path[-1], value, name, as_list=as_list)


def _finalize(value: Any) -> Any:
    if isinstance(value, _IndexedGroup):
        return [_finalize(item) for item in value.values()]
    if isinstance(value, dict):
        return {key: _finalize(item) for key, item in value.items()}
    return value


def reconstruct_fields(
    fields: Iterable[tuple[str, Any]],
    files: Iterable[tuple[str, Any]] = (),
) -> dict[str, Any]:
    """把扁平的 (字段名, 值) 对重建为嵌套记录.

    Args:
        fields: 文本字段, 保持提交顺序.
        files: 文件字段. ``base[i]`` 形状按基础字段名归集, ``base[i][prop]`` 归入对应元素;
            文件值总是收集为列表.

    Returns:
        重建后的记录.

    Raises:
        MalformedRequestError: 字段名不合法或路径冲突(例如同时提交 ``a=1`` 与 ``a.b=2``).

    Example:
        >>> reconstruct_fields([("items[0][name]", "x"), ("items[0][qty]", "2")])
        {'items': [{'name': 'x', 'qty': '2'}]}

    """
    record: dict[str, Any] = {}
    for name, value in fields:
        _insert(record, parse_field_name(name), value, name)

    for name, value in files:
        path = parse_field_name(name)
        # files[0] 归集到 files; members[0][photo] 挂在对应元素的 photo 属性上.
        if isinstance(path[-1], int):
            path = (path[0],)
        _insert(record, path, value, name, as_list=True)

    return _finalize(record)


__all__ = ["FieldPath", "parse_field_name", "reconstruct_fields"]
