"""可复用的字段类型.

字段类型以 ``typing.Annotated`` 的形式声明, 校验失败统一抛出带中文文案的 ValueError
(或 `SchemaMessageKeyError` 以便透传 message_key).
"""

from __future__ import annotations

import re
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, TypeVar
from urllib.parse import urlsplit

from pydantic import AfterValidator, BeforeValidator, GetCoreSchemaHandler
from pydantic_core import core_schema

from campus_portal.constants import DEFAULT_MAX_FILE_SIZE_BYTES, MEGABYTE
from campus_portal.schemas.validation import SchemaMessageKeyError
from campus_portal.types.uploads import UploadDescriptor
from campus_portal.utils.password_crypto_utils import PasswordDecryptError, get_password_manager

EnumT = TypeVar("EnumT", bound=Enum)

_RECORD_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
_PASSWORD_SPECIAL_CHARS = "@$!%*?&#"
_PASSWORD_PATTERN = re.compile(
    rf"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[{re.escape(_PASSWORD_SPECIAL_CHARS)}])"
    rf"[A-Za-z\d{re.escape(_PASSWORD_SPECIAL_CHARS)}]+$"
)
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
_DAY_FIRST_DATE_FORMAT = "%d/%m/%Y"


def bounded_text(max_length: int, *, min_length: int = 1) -> Any:
    """非空且限制长度的字符串."""

    def _check(value: str) -> str:
        if len(value) < min_length:
            raise ValueError("不能为空" if min_length == 1 else f"长度不能少于 {min_length} 个字符")
        if len(value) > max_length:
            raise ValueError(f"长度不能超过 {max_length} 个字符")
        return value

    return Annotated[str, AfterValidator(_check)]


def enum_choice(enum_cls: type[EnumT]) -> Any:
    """按取值匹配枚举成员, 失败时列出可选值."""
    allowed = [member.value for member in enum_cls]

    def _parse(value: object) -> object:
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            raise ValueError(f"必须为以下值之一: {', '.join(map(str, allowed))}") from None

    return Annotated[enum_cls, BeforeValidator(_parse)]


def _parse_boolean_string(value: object) -> object:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise ValueError("必须为布尔值或 'true'/'false'")


def _parse_flexible_date(value: object) -> object:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.strptime(text, _DAY_FIRST_DATE_FORMAT).date()  # noqa: DTZ007
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValueError("日期格式无效, 应为 DD/MM/YYYY 或 ISO 8601")


def _check_record_id(value: str) -> str:
    if not _RECORD_ID_PATTERN.match(value):
        raise ValueError("记录 ID 必须为 24 位十六进制字符串")
    return value.lower()


def _check_email(value: str) -> str:
    if not _EMAIL_PATTERN.match(value):
        raise ValueError("邮箱格式无效")
    return value.lower()


def _check_https_url(value: str) -> str:
    parts = urlsplit(value)
    if parts.scheme != "https" or not parts.netloc:
        raise ValueError("必须为 https 链接")
    return value


def _decrypt_password(value: str) -> str:
    try:
        plaintext = get_password_manager().decrypt_password(value)
    except PasswordDecryptError as exc:
        raise SchemaMessageKeyError(str(exc), message_key="PASSWORD_DECRYPT_FAILED") from exc

    if not PASSWORD_MIN_LENGTH <= len(plaintext) <= PASSWORD_MAX_LENGTH:
        raise SchemaMessageKeyError(
            f"密码长度必须在 {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} 个字符之间",
            message_key="PASSWORD_INVALID",
        )
    if not _PASSWORD_PATTERN.match(plaintext):
        raise SchemaMessageKeyError(
            f"密码必须同时包含大写字母、小写字母、数字和特殊字符({_PASSWORD_SPECIAL_CHARS})",
            message_key="PASSWORD_INVALID",
        )
    return plaintext


BooleanString = Annotated[bool, BeforeValidator(_parse_boolean_string)]
FlexibleDate = Annotated[date, BeforeValidator(_parse_flexible_date)]
RecordId = Annotated[str, AfterValidator(_check_record_id)]
EmailAddress = Annotated[str, AfterValidator(_check_email)]
HttpsUrl = Annotated[str, AfterValidator(_check_https_url)]
# 客户端提交 Fernet 密文, 校验通过后得到明文密码.
EncryptedPassword = Annotated[str, AfterValidator(_decrypt_password)]


@dataclass(frozen=True, slots=True)
class FileArray:
    """上传文件字段的约束.

    作为 ``Annotated`` 元数据使用, 请求解析流水线通过它识别哪些字段需要在校验通过后落盘.

    Attributes:
        allowed_types: 允许的 MIME 类型.
        max_size: 单个文件的字节上限.
        min_files: 最少文件数.
        max_files: 最多文件数; 为 1 时命令对象中的引用是单个对象而不是列表.
        reference_key: 引用结构使用的键名, 缺省为字段名.

    Example:
        >>> images: Annotated[list[UploadDescriptor], FileArray(IMAGE_MIME_TYPES, max_files=10)]

    """

    allowed_types: Collection[str]
    max_size: int = DEFAULT_MAX_FILE_SIZE_BYTES
    min_files: int = 1
    max_files: int = 1
    reference_key: str | None = None

    @property
    def single(self) -> bool:
        return self.max_files == 1

    def __get_pydantic_core_schema__(self, _source_type: Any, _handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(self.validate)

    def validate(self, value: object) -> list[UploadDescriptor]:
        """检查文件数量、类型与大小, 返回文件列表."""
        files = self._as_file_list(value)
        if len(files) < self.min_files:
            raise ValueError(f"至少需要上传 {self.min_files} 个文件")
        if len(files) > self.max_files:
            raise ValueError(f"最多只能上传 {self.max_files} 个文件")

        allowed = {item.lower() for item in self.allowed_types}
        for upload in files:
            if upload.content_type.lower() not in allowed:
                raise SchemaMessageKeyError(
                    f"不支持的文件类型: {upload.content_type or '未知'}, 允许: {', '.join(sorted(allowed))}",
                    message_key="INVALID_FILE_TYPE",
                )
            if upload.size > self.max_size:
                raise SchemaMessageKeyError(
                    f"文件 {upload.filename} 超过大小上限 {self.max_size / MEGABYTE:g}MB",
                    message_key="FILE_TOO_LARGE",
                )
        return files

    @staticmethod
    def _as_file_list(value: object) -> list[UploadDescriptor]:
        if isinstance(value, UploadDescriptor):
            return [value]
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            if all(isinstance(item, UploadDescriptor) for item in value):
                return list(value)
        raise ValueError("必须以文件形式上传")


__all__ = [
    "PASSWORD_MAX_LENGTH",
    "PASSWORD_MIN_LENGTH",
    "BooleanString",
    "EmailAddress",
    "EncryptedPassword",
    "FileArray",
    "FlexibleDate",
    "HttpsUrl",
    "RecordId",
    "bounded_text",
    "enum_choice",
]
