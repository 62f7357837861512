"""记录中的文件引用字段."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from campus_portal.schemas.fields import FileArray
from campus_portal.services.ingestion.file_fields import find_file_fields


@dataclass(frozen=True, slots=True)
class AttachmentField:
    """记录里保存文件引用的字段.

    Attributes:
        name: 记录中的字段名.
        spec: 该字段的上传约束.
        delete_field: 更新请求中列出待删除文件 ID 的字段名, 仅多文件字段使用.

    """

    name: str
    spec: FileArray
    delete_field: str | None = None

    @property
    def id_key(self) -> str:
        return f"{self.spec.reference_key or self.name}_id"

    def references(self, record: Mapping[str, Any]) -> list[dict[str, Any]]:
        value = record.get(self.name)
        if isinstance(value, Mapping):
            return [dict(value)]
        if isinstance(value, list):
            return [dict(item) for item in value if isinstance(item, Mapping)]
        return []

    def file_ids(self, record: Mapping[str, Any]) -> list[str]:
        return [ref[self.id_key] for ref in self.references(record) if ref.get(self.id_key)]


def attachment_fields(
    model: type[BaseModel],
    delete_fields: Mapping[str, str] | None = None,
) -> tuple[AttachmentField, ...]:
    """从 schema 的文件字段推导附件字段定义."""
    delete_fields = delete_fields or {}
    return tuple(
        AttachmentField(name=name, spec=spec, delete_field=delete_fields.get(name))
        for name, spec in find_file_fields(model).items()
    )


__all__ = ["AttachmentField", "attachment_fields"]
