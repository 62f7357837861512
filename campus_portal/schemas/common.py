"""多个资源共用的 schema 片段."""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator, BeforeValidator

from campus_portal.schemas.base import PayloadSchema
from campus_portal.schemas.fields import RecordId

_FILE_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,254}$")


def _ensure_list(value: object) -> object:
    # 表单里单个值不会被收集为列表.
    if isinstance(value, str):
        return [value]
    return value


def _check_file_ids(value: list[str]) -> list[str]:
    if not value:
        raise ValueError("至少需要提供一个文件 ID")
    for item in value:
        if not _FILE_ID_PATTERN.match(item):
            raise ValueError(f"文件 ID 无效: {item}")
    return list(dict.fromkeys(value))


FileIdList = Annotated[list[str], BeforeValidator(_ensure_list), AfterValidator(_check_file_ids)]


class RecordLookupSchema(PayloadSchema):
    """按 ID 定位单条记录(查询详情/删除)."""

    id: RecordId


__all__ = ["FileIdList", "RecordLookupSchema"]
