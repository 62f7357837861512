"""校园门户 - 常量定义模块

统一管理错误分类、严重度与对外文案.
"""

from enum import Enum


class LogLevel(Enum):
    """日志级别枚举."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ErrorCategory(Enum):
    """错误分类枚举."""

    VALIDATION = "validation"
    BUSINESS = "business"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    SECURITY = "security"
    STORAGE = "storage"
    EXTERNAL = "external"
    NETWORK = "network"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """错误严重程度枚举."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# 错误消息常量
class ErrorMessages:
    """错误消息常量."""

    # 通用错误
    INTERNAL_ERROR = "服务器内部错误"
    VALIDATION_ERROR = "数据验证失败"
    PERMISSION_DENIED = "权限不足"
    RESOURCE_NOT_FOUND = "资源不存在"
    INVALID_REQUEST = "无效的请求"
    CONSTRAINT_VIOLATION = "数据约束错误"

    # 请求体错误
    MALFORMED_REQUEST = "请求格式错误"
    JSON_REQUIRED = "请求必须是JSON格式"
    INVALID_JSON_BODY = "JSON 请求体无效或为空"
    REQUEST_DATA_EMPTY = "请求数据不能为空"
    UNSUPPORTED_CONTENT_TYPE = "不支持的 Content-Type"
    UNDEFINED_FIELD_VALUE = "字段值未定义"
    INVALID_FIELD_NAME = "字段名格式无效"
    UPDATE_FIELDS_REQUIRED = "除标识字段外至少需要提供一个待更新字段"

    # 文件错误
    FILE_TOO_LARGE = "文件过大"
    INVALID_FILE_TYPE = "无效的文件类型"
    EMPTY_UPLOAD = "未接收到任何文件内容"
    FILE_UPLOAD_ERROR = "文件上传失败"
    FILE_DELETE_ERROR = "文件删除失败"
    FILE_NOT_FOUND = "文件不存在"
    INVALID_FILE_ID = "文件标识无效"

    # 业务错误
    CATEGORY_NOT_SUPPORTED = "不支持的分类"
    PASSWORD_INVALID = "密码不符合规则"
    PASSWORD_DECRYPT_FAILED = "密码密文无效"
    RESET_TOKEN_INVALID = "重置链接无效或已使用"


# 成功消息常量
class SuccessMessages:
    """成功消息常量."""

    OPERATION_SUCCESS = "操作成功"
    DATA_SAVED = "数据保存成功"
    DATA_DELETED = "数据删除成功"
    DATA_UPDATED = "数据更新成功"
    FILE_DELETED = "文件删除成功"
    PASSWORD_CHANGED = "密码修改成功"


__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "LogLevel",
    "SuccessMessages",
]
