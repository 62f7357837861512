"""请求体解析与规范化.

目标:
- 统一处理 JSON 请求体与 Werkzeug MultiDict(form/files).
- 提供最小的输入规范化(字符串 strip/NUL 清理),对字段名包含 ``password`` 的字段保留 raw 值.
- multipart/urlencoded 字段名中的嵌套约定交由 `campus_portal.utils.field_paths` 重建.

注意:
- 本模块只负责 "取参形状" 与 "基础规范化",不做业务校验.
- 业务字段校验应交由 schema 层(pydantic)完成.
"""

from __future__ import annotations

from collections.abc import Collection, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from campus_portal.constants import ContentType, RequestMode
from campus_portal.core.exceptions import MalformedRequestError, UnsupportedMediaTypeError
from campus_portal.types.uploads import UploadDescriptor
from campus_portal.utils.field_paths import reconstruct_fields

if TYPE_CHECKING:
    from flask import Request
    from werkzeug.datastructures import FileStorage, MultiDict

_FORM_CONTENT_TYPES = (ContentType.FORM_DATA, ContentType.FORM_URLENCODED)
_NON_EMPTY_BODY_MODES = (RequestMode.CREATE, RequestMode.UPDATE)


def read_request_body(request: Request, mode: RequestMode) -> dict[str, Any]:
    """按 Content-Type 解析请求体.

    - ``application/json``: 必须是 JSON 对象; create/update 模式下不得为空对象.
    - ``multipart/form-data`` / ``application/x-www-form-urlencoded``: 重建嵌套字段, 文件转为 UploadDescriptor.
    - 无 Content-Type: 视为空请求体.

    Raises:
        MalformedRequestError: JSON 无法解析、不是对象、为空, 或 Content-Type 不受支持.

    """
    mimetype = (request.mimetype or "").lower()
    if not mimetype:
        return {}

    if mimetype == ContentType.JSON:
        return _read_json_body(request, mode)

    if mimetype in _FORM_CONTENT_TYPES:
        return reconstruct_fields(_iter_form_fields(request.form), _iter_file_fields(request.files))

    raise MalformedRequestError(
        message_key="UNSUPPORTED_CONTENT_TYPE",
        extra={"content_type": mimetype},
    )


def ensure_supported_content_type(request: Request, allowed: Collection[str]) -> None:
    """限制资源可接受的 Content-Type.

    Raises:
        UnsupportedMediaTypeError: 请求的 Content-Type 不在 ``allowed`` 中.

    """
    mimetype = (request.mimetype or "").lower()
    if mimetype in allowed:
        return
    raise UnsupportedMediaTypeError(
        extra={"content_type": mimetype or None, "allowed": sorted(allowed)},
    )


def _read_json_body(request: Request, mode: RequestMode) -> dict[str, Any]:
    raw = request.get_data(cache=True)
    payload = request.get_json(silent=True) if raw.strip() else {}
    if payload is None:
        raise MalformedRequestError(message_key="INVALID_JSON_BODY")
    if not isinstance(payload, Mapping):
        raise MalformedRequestError(message_key="INVALID_JSON_BODY", extra={"body_type": type(payload).__name__})
    if not payload and mode in _NON_EMPTY_BODY_MODES:
        raise MalformedRequestError(message_key="REQUEST_DATA_EMPTY", extra={"mode": mode.value})
    return {str(key): sanitize_value(value, field_name=str(key)) for key, value in payload.items()}


def _iter_form_fields(form: MultiDict[str, str]) -> Iterator[tuple[str, Any]]:
    for name, value in form.items(multi=True):
        yield name, sanitize_value(value, field_name=name)


def _iter_file_fields(files: MultiDict[str, FileStorage]) -> Iterator[tuple[str, UploadDescriptor]]:
    for name, storage in files.items(multi=True):
        # 浏览器对未选择文件的 file input 也会提交一个空 part, 不视为上传.
        if not storage.filename:
            continue
        yield name, UploadDescriptor.from_file_storage(storage)


def sanitize_value(value: object, *, field_name: str) -> Any:
    """递归规范化字符串值, 保持容器形状不变."""
    if isinstance(value, Mapping):
        return {str(key): sanitize_value(item, field_name=str(key)) for key, item in value.items()}
    if isinstance(value, list):
        return [sanitize_value(item, field_name=field_name) for item in value]
    if isinstance(value, (bytes, bytearray)):
        value = value.decode(errors="ignore")
    if isinstance(value, str):
        return value if _should_preserve_raw(field_name) else _strip_nul(value)
    return value


def _strip_nul(value: str) -> str:
    return value.replace("\x00", "").strip()


def _should_preserve_raw(field_name: str) -> bool:
    return "password" in field_name.lower()


__all__ = ["ensure_supported_content_type", "read_request_body", "sanitize_value"]
