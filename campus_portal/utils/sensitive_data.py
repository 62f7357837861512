"""敏感字段脱敏工具.

提供通用的 `scrub_sensitive_fields` 方法,用于在写日志前统一替换密码、令牌等敏感内容,
并把上传文件摘要为文件名/大小/类型, 避免把二进制内容写入日志.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from campus_portal.types.uploads import StoredFile, UploadDescriptor

DEFAULT_SENSITIVE_KEYS = {
    "password",
    "confirm_password",
    "current_password",
    "new_password",
    "old_password",
    "token",
    "api_key",
    "secret",
    "private_key",
}


def summarize_upload(value: UploadDescriptor) -> dict[str, Any]:
    """上传文件的日志摘要."""
    return {"filename": value.filename, "size": value.size, "content_type": value.content_type}


def scrub_sensitive_fields(
    payload: Mapping[str, Any] | None,
    *,
    extra_keys: Sequence[str] | None = None,
    mask: str = "***",
) -> dict[str, Any]:
    """脱敏敏感字段,返回新的字典副本.

    Args:
        payload: 原始数据.
        extra_keys: 额外需要脱敏的字段名集合.
        mask: 替换后的掩码字符串.

    Returns:
        已脱敏的字典,不会修改原始对象.

    """
    if not isinstance(payload, Mapping):
        return {}

    normalized_keys = set(DEFAULT_SENSITIVE_KEYS)
    if extra_keys:
        normalized_keys.update(str(key).lower() for key in extra_keys)

    def _scrub(value: Any, *, field_name: str | None = None) -> Any:
        if field_name and field_name.lower() in normalized_keys:
            return mask
        if isinstance(value, UploadDescriptor):
            return summarize_upload(value)
        if isinstance(value, StoredFile):
            return {"file_id": value.file_id, "original_name": value.original_name}
        if isinstance(value, Mapping):
            return {k: _scrub(v, field_name=str(k)) for k, v in value.items()}
        if isinstance(value, list):
            return [_scrub(item, field_name=field_name) for item in value]
        if isinstance(value, tuple):
            return tuple(_scrub(item, field_name=field_name) for item in value)
        if isinstance(value, (bytes, bytearray)):
            return f"<{len(value)} bytes>"
        return value

    return {str(key): _scrub(value, field_name=str(key)) for key, value in payload.items()}


__all__ = ["DEFAULT_SENSITIVE_KEYS", "scrub_sensitive_fields", "summarize_upload"]
