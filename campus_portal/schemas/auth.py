"""认证相关 schema."""

from __future__ import annotations

from pydantic import ValidationInfo, field_validator

from campus_portal.schemas.base import PayloadSchema
from campus_portal.schemas.fields import EmailAddress, EncryptedPassword, bounded_text

TOKEN_MAX_LENGTH = 512

Token = bounded_text(TOKEN_MAX_LENGTH)


class ResetPasswordSchema(PayloadSchema):
    """重置密码: 两次输入均为加密提交, 解密后必须一致."""

    token: Token
    password: EncryptedPassword
    confirm_password: EncryptedPassword

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and password != value:
            raise ValueError("两次输入的密码不一致")
        return value


class PasswordResetRequestSchema(PayloadSchema):
    """申请重置密码."""

    email: EmailAddress
