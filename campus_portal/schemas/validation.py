"""Schema 校验与错误映射.

`validate_payload` 返回显式的 `ValidationResult`, 只有 `validate_or_raise`
在边界处把失败转换为 `SchemaValidationError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError
from pydantic_core import ErrorDetails

from campus_portal.core.exceptions import FieldError, SchemaValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_DEFAULT_ERROR_MESSAGE = "参数校验失败"
# pydantic 内置错误类型的中文文案, 未列出的沿用 pydantic 原文.
_ERROR_TYPE_MESSAGES = {
    "missing": "字段为必填项",
    "extra_forbidden": "不允许的字段",
    "string_type": "必须为字符串",
    "int_parsing": "必须为整数",
    "int_type": "必须为整数",
    "list_type": "必须为列表",
    "dict_type": "必须为对象",
    "model_type": "必须为对象",
    "greater_than_equal": "取值过小",
    "less_than_equal": "取值过大",
}


class SchemaMessageKeyError(ValueError):
    """用于从 schema validator 透传 message_key 的错误类型."""

    def __init__(self, message: str, *, message_key: str) -> None:
        """构造错误并携带 message_key."""
        super().__init__(message)
        self.message_key = message_key


@dataclass(frozen=True, slots=True)
class ValidationResult(Generic[ModelT]):
    """一次 schema 校验的结果, ``value`` 与 ``errors`` 二者只有其一有效."""

    value: ModelT | None = None
    errors: tuple[FieldError, ...] = ()
    message_key: str | None = None

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_payload(model: type[ModelT], payload: object) -> ValidationResult[ModelT]:
    """执行 schema 校验并收集全部字段错误."""
    try:
        return ValidationResult(value=model.model_validate(payload))
    except PydanticValidationError as exc:
        errors: list[FieldError] = []
        message_key: str | None = None
        for detail in exc.errors():
            field_error, detail_key = _to_field_error(detail)
            errors.append(field_error)
            message_key = message_key or detail_key
        if not errors:
            errors.append(FieldError(field="", message=_DEFAULT_ERROR_MESSAGE))
        return ValidationResult(errors=tuple(errors), message_key=message_key)


def validate_or_raise(
    model: type[ModelT],
    payload: object,
    *,
    message_key: str | None = None,
    message_key_by_field: Mapping[str, str] | None = None,
) -> ModelT:
    """执行 schema 校验并在失败时抛出 SchemaValidationError.

    Args:
        model: pydantic model.
        payload: 待校验的 payload(通常来自请求解析流水线).
        message_key: 默认 message_key, 当 validator 未指定时使用.
        message_key_by_field: 按首个出错字段映射 message_key 的字典.

    Raises:
        SchemaValidationError: 携带本次校验的全部字段错误.

    """
    result = validate_payload(model, payload)
    if result.ok and result.value is not None:
        return result.value

    resolved_key = result.message_key or message_key
    first_field = result.errors[0].field if result.errors else ""
    if first_field and message_key_by_field:
        resolved_key = message_key_by_field.get(first_field, resolved_key)
    raise SchemaValidationError(result.errors, message_key=resolved_key)


def _to_field_error(detail: ErrorDetails) -> tuple[FieldError, str | None]:
    loc = detail.get("loc") or ()
    field = ".".join(str(part) for part in loc)

    ctx: Any = detail.get("ctx")
    if isinstance(ctx, dict) and "error" in ctx:
        raw_error = ctx.get("error")
        if isinstance(raw_error, SchemaMessageKeyError):
            return FieldError(field=field, message=str(raw_error)), raw_error.message_key
        if isinstance(raw_error, BaseException):
            return FieldError(field=field, message=str(raw_error)), None

    translated = _ERROR_TYPE_MESSAGES.get(detail.get("type", ""))
    if translated:
        return FieldError(field=field, message=translated), None

    msg = detail.get("msg")
    if isinstance(msg, str) and msg.strip():
        return FieldError(field=field, message=msg), None
    return FieldError(field=field, message=_DEFAULT_ERROR_MESSAGE), None


__all__ = [
    "SchemaMessageKeyError",
    "ValidationResult",
    "validate_or_raise",
    "validate_payload",
]
