"""密码重置服务.

重置申请生成一次性 token; 提交新密码时 token 必须存在且未使用.
新密码以 werkzeug 的哈希格式保存.
"""

from __future__ import annotations

import secrets
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from werkzeug.security import generate_password_hash

from campus_portal.core.exceptions import NotFoundError
from campus_portal.repositories.registry import PASSWORD_RESETS, get_repository
from campus_portal.types import RecordRepository
from campus_portal.utils.structlog_config import log_info

TOKEN_BYTES = 32


class PasswordResetService:
    """密码重置读写服务."""

    @property
    def repository(self) -> RecordRepository:
        return get_repository(PASSWORD_RESETS)

    def request_reset(self, command: Mapping[str, Any]) -> dict[str, Any]:
        """为邮箱生成一次性重置 token."""
        entry = self.repository.create(
            {
                "email": command["email"],
                "token": secrets.token_urlsafe(TOKEN_BYTES),
                "used": False,
            },
        )
        # token 只应通过邮件下发, 日志中不记录.
        log_info("已生成密码重置申请", module="auth", reset_id=entry["id"], email=entry["email"])
        return entry

    def reset_password(self, command: Mapping[str, Any]) -> dict[str, Any]:
        """校验 token 并保存新密码哈希.

        Raises:
            NotFoundError: token 不存在或已使用.

        """
        entry = self.repository.find_one(token=command["token"], used=False)
        if entry is None:
            raise NotFoundError(message_key="RESET_TOKEN_INVALID")

        self.repository.update(
            entry["id"],
            {
                "password_hash": generate_password_hash(command["password"]),
                "used": True,
                "used_at": datetime.now(UTC).isoformat(),
            },
        )
        log_info("密码已重置", module="auth", reset_id=entry["id"], email=entry.get("email"))
        return {"email": entry.get("email")}


__all__ = ["PasswordResetService"]
