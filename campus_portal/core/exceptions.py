"""校园门户 - 统一异常定义(Shared Kernel).

说明:
- 本模块只负责定义异常类型与语义字段,不包含 HTTP/Flask/Werkzeug 等框架细节.
- 异常到 HTTP status 的映射应在 API/HTTP 边界完成(见 `campus_portal/api/error_mapping.py`).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from campus_portal.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

if TYPE_CHECKING:
    from campus_portal.types.structures import JsonDict, LoggerExtra


@dataclass(frozen=True, slots=True)
class ExceptionMetadata:
    """异常的元信息(不包含传输层信息)."""

    category: ErrorCategory
    severity: ErrorSeverity
    default_message_key: str


@dataclass(frozen=True, slots=True)
class FieldError:
    """单个字段的校验失败信息.

    Attributes:
        field: 字段路径, 嵌套字段使用点号连接(例如 ``items.0.name``), 整体规则为空串.
        message: 可展示的错误文案.

    """

    field: str
    message: str

    def to_dict(self) -> JsonDict:
        """转换为可序列化的字典."""
        return {"field": self.field, "message": self.message}


class AppError(Exception):
    """统一的基础业务异常.

    Args:
        message: 自定义错误文案,若为空则根据 ``message_key`` 推导.
        message_key: 自定义消息键.
        extra: 结构化日志附加字段.
        severity: 错误严重度.
        category: 错误分类.
    """

    metadata = ExceptionMetadata(
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        default_message_key="INTERNAL_ERROR",
    )

    def __init__(
        self,
        message: str | None = None,
        *,
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
        severity: ErrorSeverity | None = None,
        category: ErrorCategory | None = None,
    ) -> None:
        """初始化基础业务异常.

        Args:
            message: 直接使用的错误提示,缺省时会根据 message_key 推导.
            message_key: 覆盖默认 message_key 的可选值.
            extra: 结构化日志附加字段.
            severity: 错误严重度.
            category: 错误分类.
        """
        self.message_key = message_key or self.metadata.default_message_key
        self.message = message or getattr(ErrorMessages, self.message_key, ErrorMessages.INTERNAL_ERROR)
        self.extra = dict(extra or {})
        self.severity = severity or self.metadata.severity
        self.category = category or self.metadata.category
        super().__init__(self.message)

    @property
    def recoverable(self) -> bool:
        """表示该异常是否可恢复."""

        return self.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM)


class ValidationError(AppError):
    """表示输入参数或请求体验证失败."""

    metadata = ExceptionMetadata(
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        default_message_key="VALIDATION_ERROR",
    )


class MalformedRequestError(ValidationError):
    """请求体无法解析、Content-Type 不受支持或 create 模式下出现未定义字段值."""

    metadata = ExceptionMetadata(
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        default_message_key="MALFORMED_REQUEST",
    )


class UnsupportedMediaTypeError(MalformedRequestError):
    """资源限定了可接受的 Content-Type, 而请求不在其中."""

    metadata = ExceptionMetadata(
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        default_message_key="UNSUPPORTED_CONTENT_TYPE",
    )


class EmptyUploadError(ValidationError):
    """声明了文件字段但未接收到任何字节."""

    metadata = ExceptionMetadata(
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        default_message_key="EMPTY_UPLOAD",
    )


class SchemaValidationError(ValidationError):
    """schema 校验失败, 一次性携带全部字段错误.

    ``message`` 取第一条错误文案, 便于沿用单条提示的调用方;
    完整列表见 ``errors``.
    """

    def __init__(
        self,
        errors: Sequence[FieldError],
        *,
        message: str | None = None,
        message_key: str | None = None,
    ) -> None:
        self.errors: tuple[FieldError, ...] = tuple(errors)
        first_message = self.errors[0].message if self.errors else None
        super().__init__(
            message or first_message,
            message_key=message_key,
            extra={"errors": [error.to_dict() for error in self.errors]},
        )

    @property
    def fields(self) -> tuple[str, ...]:
        """出错字段列表(保持顺序, 去重)."""
        return tuple(dict.fromkeys(error.field for error in self.errors))


class NotFoundError(AppError):
    """表示客户端请求的资源不存在或被删除."""

    metadata = ExceptionMetadata(
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.LOW,
        default_message_key="RESOURCE_NOT_FOUND",
    )


class ConflictError(AppError):
    """表示资源状态冲突或违反唯一性约束."""

    metadata = ExceptionMetadata(
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="CONSTRAINT_VIOLATION",
    )


class StorageError(AppError):
    """文件写入/删除失败(文件本就不存在的情况除外)."""

    metadata = ExceptionMetadata(
        category=ErrorCategory.STORAGE,
        severity=ErrorSeverity.HIGH,
        default_message_key="FILE_UPLOAD_ERROR",
    )


class SystemError(AppError):
    """表示系统级未知错误或底层故障."""


__all__ = [
    "AppError",
    "ConflictError",
    "EmptyUploadError",
    "FieldError",
    "MalformedRequestError",
    "NotFoundError",
    "SchemaValidationError",
    "StorageError",
    "SystemError",
    "UnsupportedMediaTypeError",
    "ValidationError",
]
