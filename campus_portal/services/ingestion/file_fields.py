"""识别 schema 中的文件字段, 并在校验通过后把文件落盘替换为引用."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from campus_portal.schemas.fields import FileArray
from campus_portal.services.uploads.upload_session import UploadSession


def find_file_fields(model: type[BaseModel]) -> dict[str, FileArray]:
    """返回 ``{字段名: FileArray}``, 按字段声明顺序."""
    found: dict[str, FileArray] = {}
    for name, field in model.model_fields.items():
        for meta in field.metadata:
            if isinstance(meta, FileArray):
                found[name] = meta
                break
    return found


def store_file_fields(
    command: dict[str, Any],
    file_fields: dict[str, FileArray],
    session: UploadSession,
) -> dict[str, Any]:
    """把命令对象中的文件字段写入存储, 替换为 ``{"<key>_id", "<key>"}`` 引用.

    单文件字段(max_files=1)替换为单个引用, 其余为引用列表.
    """
    for name, spec in file_fields.items():
        uploads = command.get(name)
        if not uploads:
            continue
        stored = session.store_many(uploads)
        reference_key = spec.reference_key or name
        references = [item.to_reference(reference_key) for item in stored]
        command[name] = references[0] if spec.single else references
    return command


__all__ = ["find_file_fields", "store_file_fields"]
