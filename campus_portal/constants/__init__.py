"""常量模块。

集中管理系统常量，包括错误消息、HTTP 相关常量、请求模式与上传类型等。
"""

# 导入HTTP状态码常量（使用Python标准库）
from http import HTTPStatus as HttpStatus

from .content_types import (
    DEFAULT_MAX_FILE_SIZE_BYTES,
    DOCUMENT_MIME_TYPES,
    IMAGE_MIME_TYPES,
    MEGABYTE,
    ContentType,
    MimeType,
)
from .http_headers import HttpHeaders
from .request_modes import IDENTITY_FIELDS, RequestMode
from .system_constants import (
    ErrorCategory,
    ErrorMessages,
    ErrorSeverity,
    LogLevel,
    SuccessMessages,
)

__all__ = [
    "DEFAULT_MAX_FILE_SIZE_BYTES",
    "DOCUMENT_MIME_TYPES",
    "IDENTITY_FIELDS",
    "IMAGE_MIME_TYPES",
    "MEGABYTE",
    "ContentType",
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "HttpHeaders",
    "HttpStatus",
    "LogLevel",
    "MimeType",
    "RequestMode",
    "SuccessMessages",
]
