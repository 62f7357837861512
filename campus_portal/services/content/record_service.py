"""内容记录(教务/公告/相册)的读写服务.

职责:
- 接收 `parse_and_validate` 产出的命令对象, 完成唯一性检查与持久化
- 维护记录中的文件引用: 更新时合并新旧附件, 被替换或删除的旧文件登记到
  `UploadSession.discard_on_success`, 持久化成功后才真正删除
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import date
from enum import Enum
from typing import Any

from campus_portal.core.exceptions import ConflictError, FieldError, NotFoundError, SchemaValidationError
from campus_portal.repositories.registry import get_repository
from campus_portal.schemas.registry import CATEGORY_FIELD
from campus_portal.services.content.attachments import AttachmentField
from campus_portal.services.uploads.upload_session import UploadSession
from campus_portal.types import RecordRepository
from campus_portal.utils.payload_diff import changed_values
from campus_portal.utils.structlog_config import log_info

PAGINATION_FIELDS = frozenset({"page", "limit"})


class ContentRecordService:
    """单一内容集合的读写编排.

    Args:
        collection: Repository 名称.
        attachments: 记录中的文件引用字段.
        scope_field: 分类字段名; 为 None 时资源不分类.
        unique_field: 同一分类内必须唯一的字段.

    """

    def __init__(
        self,
        collection: str,
        *,
        attachments: Sequence[AttachmentField] = (),
        scope_field: str | None = "category",
        unique_field: str | None = "title",
    ) -> None:
        self.collection = collection
        self.attachments = tuple(attachments)
        self.scope_field = scope_field
        self.unique_field = unique_field

    @property
    def repository(self) -> RecordRepository:
        return get_repository(self.collection)

    def list_records(self, query: Mapping[str, Any]) -> dict[str, Any]:
        """按查询条件过滤并分页."""
        page = int(query.get("page") or 1)
        limit = int(query.get("limit") or 20)
        criteria = self._normalize(
            {key: value for key, value in query.items() if key not in PAGINATION_FIELDS and value is not None},
        )
        records = self.repository.list(**criteria)
        total = len(records)
        start = (page - 1) * limit
        return {
            "items": records[start : start + limit],
            "total": total,
            "page": page,
            "pages": math.ceil(total / limit) if total else 0,
            "limit": limit,
        }

    def get_record(self, record_id: str, *, scope: str | None = None) -> dict[str, Any]:
        """返回记录; 指定分类时记录必须属于该分类.

        Raises:
            NotFoundError: 记录不存在或不属于该分类.

        """
        record = self.repository.get(record_id)
        if record is None or (scope is not None and self.scope_field and record.get(self.scope_field) != scope):
            raise NotFoundError(extra={"collection": self.collection, "id": record_id, "scope": scope})
        return record

    def create_record(self, command: Mapping[str, Any]) -> dict[str, Any]:
        """保存新记录.

        Raises:
            ConflictError: 同一分类下已存在相同唯一字段.

        """
        data = self._normalize(command)
        self._ensure_unique(data, scope=data.get(self.scope_field) if self.scope_field else None)
        record = self.repository.create(data)
        log_info(
            "内容记录已创建",
            module="content",
            collection=self.collection,
            record_id=record["id"],
        )
        return record

    def update_record(self, command: Mapping[str, Any], session: UploadSession) -> dict[str, Any]:
        """只保存与现有记录不同的字段.

        多文件字段: 保留未被删除的旧文件并追加新上传的文件.
        单文件字段: 新文件替换旧文件.

        Raises:
            NotFoundError: 记录不存在, 或待删除的文件不属于该记录.
            SchemaValidationError: 合并后的文件数量超出约束.
            ConflictError: 修改后的唯一字段与其他记录冲突.

        """
        incoming = dict(command)
        record_id = incoming.pop("id")
        scope = incoming.pop(CATEGORY_FIELD, None)
        existing = self.get_record(record_id, scope=scope)

        data = self._normalize(incoming)
        discarded: list[str] = []
        for field in self.attachments:
            discarded.extend(self._merge_attachment(field, existing, data))

        changes = changed_values(existing, data)
        if not changes:
            return existing

        if self.unique_field in changes or (self.scope_field and self.scope_field in changes):
            merged = {**existing, **changes}
            self._ensure_unique(
                merged,
                scope=merged.get(self.scope_field) if self.scope_field else None,
                exclude_id=record_id,
            )

        updated = self.repository.update(record_id, changes)
        if updated is None:
            raise NotFoundError(extra={"collection": self.collection, "id": record_id})
        session.discard_on_success(discarded)
        log_info(
            "内容记录已更新",
            module="content",
            collection=self.collection,
            record_id=record_id,
            changed_fields=sorted(changes),
            discarded_files=discarded,
        )
        return updated

    def delete_record(self, record_id: str, session: UploadSession, *, scope: str | None = None) -> dict[str, Any]:
        """删除记录; 记录引用的文件在删除成功后清理."""
        existing = self.get_record(record_id, scope=scope)
        file_ids = [file_id for field in self.attachments for file_id in field.file_ids(existing)]
        self.repository.delete(record_id)
        session.discard_on_success(file_ids)
        log_info(
            "内容记录已删除",
            module="content",
            collection=self.collection,
            record_id=record_id,
            file_count=len(file_ids),
        )
        return existing

    def _merge_attachment(
        self,
        field: AttachmentField,
        existing: Mapping[str, Any],
        data: dict[str, Any],
    ) -> list[str]:
        current_ids = field.file_ids(existing)
        to_delete: list[str] = list(data.pop(field.delete_field, None) or []) if field.delete_field else []
        missing = [file_id for file_id in to_delete if file_id not in current_ids]
        if missing:
            raise NotFoundError(message_key="FILE_NOT_FOUND", extra={"field": field.delete_field, "file_ids": missing})

        if field.spec.single:
            return current_ids if field.name in data else []
        if field.name not in data and not to_delete:
            return []

        kept = [ref for ref in field.references(existing) if ref.get(field.id_key) not in to_delete]
        merged = kept + list(data.get(field.name) or [])
        if len(merged) < field.spec.min_files:
            message = f"至少需要保留 {field.spec.min_files} 个文件"
            raise SchemaValidationError([FieldError(field=field.delete_field or field.name, message=message)])
        if len(merged) > field.spec.max_files:
            raise SchemaValidationError(
                [FieldError(field=field.name, message=f"最多只能上传 {field.spec.max_files} 个文件")],
            )
        data[field.name] = merged
        return to_delete

    def _ensure_unique(
        self,
        data: Mapping[str, Any],
        *,
        scope: str | None,
        exclude_id: str | None = None,
    ) -> None:
        if not self.unique_field or data.get(self.unique_field) is None:
            return
        criteria: dict[str, Any] = {self.unique_field: data[self.unique_field]}
        if self.scope_field:
            criteria[self.scope_field] = scope
        duplicate = self.repository.find_one(**criteria)
        if duplicate is not None and duplicate["id"] != exclude_id:
            raise ConflictError(
                f"已存在相同的{self.unique_field}: {data[self.unique_field]}",
                extra={"collection": self.collection, "field": self.unique_field},
            )

    def _normalize(self, command: Mapping[str, Any]) -> dict[str, Any]:
        data = {key: _to_storable(value) for key, value in command.items()}
        if self.scope_field and CATEGORY_FIELD in data:
            data[self.scope_field] = data.pop(CATEGORY_FIELD)
        return data


def _to_storable(value: Any) -> Any:
    # 记录中只保存 JSON 友好的取值.
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


__all__ = ["PAGINATION_FIELDS", "ContentRecordService"]
