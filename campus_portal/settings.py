"""校园门户 - 统一配置读取与校验.

目标:
- 将环境变量读取、默认值、校验集中到单一入口,避免散落在各模块中重复解析.
- `create_app(settings=...)` 只消费 Settings,不再直接读取环境变量.

说明:
- Settings 使用 `pydantic-settings` 的 `BaseSettings` 从环境变量与本地 `.env`(可选)读取配置.
- 生产环境默认更严格: 缺失关键密钥会直接抛出 ValueError.
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path

from cryptography.fernet import Fernet
from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DOTENV_PATH = PROJECT_ROOT / ".env"

DEFAULT_ENVIRONMENT = "development"
APP_VERSION = "0.3.0"

DEFAULT_UPLOAD_ROOT = PROJECT_ROOT / "userdata" / "assets"
DEFAULT_UPLOAD_URL_PREFIX = "assets"
DEFAULT_UPLOAD_MAX_WORKERS = 4

DEFAULT_MAX_CONTENT_LENGTH_BYTES = 64 * 1024 * 1024

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_API_V1_DOCS_ENABLED = True

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _is_valid_fernet_key(value: str) -> bool:
    try:
        Fernet(value.encode())
    except ValueError:
        return False
    return True


class Settings(BaseSettings):
    """应用运行时设置集合."""

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )

    environment: str = Field(default=DEFAULT_ENVIRONMENT, validation_alias="FLASK_ENV")
    debug: bool = Field(default=False, validation_alias="FLASK_DEBUG")

    app_name: str = Field(default="校园门户", validation_alias="APP_NAME")
    app_version: str = APP_VERSION

    secret_key: str = Field(default="", validation_alias="SECRET_KEY")
    password_encryption_key: str = Field(default="", validation_alias="PASSWORD_ENCRYPTION_KEY")

    upload_root: Path = Field(default=DEFAULT_UPLOAD_ROOT, validation_alias="UPLOAD_ROOT")
    upload_url_prefix: str = Field(default=DEFAULT_UPLOAD_URL_PREFIX, validation_alias="UPLOAD_URL_PREFIX")
    upload_max_workers: int = Field(default=DEFAULT_UPLOAD_MAX_WORKERS, validation_alias="UPLOAD_MAX_WORKERS")

    max_content_length_bytes: int = Field(
        default=DEFAULT_MAX_CONTENT_LENGTH_BYTES, validation_alias="MAX_CONTENT_LENGTH"
    )
    force_https: bool = Field(default=False, validation_alias="FORCE_HTTPS")

    log_level: str = Field(default=DEFAULT_LOG_LEVEL, validation_alias="LOG_LEVEL")
    enable_debug_log: bool = Field(default=False, validation_alias="ENABLE_DEBUG_LOG")

    api_v1_docs_enabled: bool = Field(default=DEFAULT_API_V1_DOCS_ENABLED, validation_alias="API_V1_DOCS_ENABLED")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("upload_url_prefix")
    @classmethod
    def _normalize_url_prefix(cls, value: str) -> str:
        return value.strip("/")

    @property
    def is_production(self) -> bool:
        """当前是否为生产环境."""
        return self.environment.strip().lower() == "production"

    @property
    def preferred_url_scheme(self) -> str:
        """构造绝对 URL 时优先使用的 scheme."""
        return "https" if self.force_https else "http"

    def to_flask_config(self) -> dict[str, object]:
        """转换为 Flask app.config 可写入的配置字典."""
        return {
            "ENV": self.environment,
            "DEBUG": self.debug,
            "APP_NAME": self.app_name,
            "APP_VERSION": self.app_version,
            "SECRET_KEY": self.secret_key,
            "PASSWORD_ENCRYPTION_KEY": self.password_encryption_key,
            "UPLOAD_ROOT": str(self.upload_root),
            "UPLOAD_URL_PREFIX": self.upload_url_prefix,
            "UPLOAD_MAX_WORKERS": self.upload_max_workers,
            "MAX_CONTENT_LENGTH": self.max_content_length_bytes,
            "FORCE_HTTPS": self.force_https,
            "PREFERRED_URL_SCHEME": self.preferred_url_scheme,
            "LOG_LEVEL": self.log_level,
            "ENABLE_DEBUG_LOG": self.enable_debug_log,
            "API_V1_DOCS_ENABLED": self.api_v1_docs_enabled,
        }

    @classmethod
    def load(cls) -> Settings:
        """从环境变量加载 Settings 并执行必要校验."""
        load_dotenv(dotenv_path=DOTENV_PATH if DOTENV_PATH.exists() else None, override=False)
        return cls()

    @model_validator(mode="after")
    def _apply_defaults_and_validate(self) -> Settings:
        environment_normalized = self.environment.strip().lower()

        debug = self._resolve_debug(environment_normalized)
        self._ensure_secret_key(debug)
        self._ensure_password_encryption_key(debug, environment_normalized)
        self._apply_api_docs_default(environment_normalized)

        self._validate()
        return self

    def _resolve_debug(self, environment_normalized: str) -> bool:
        if "debug" in self.model_fields_set:
            return bool(self.debug)
        debug = environment_normalized != "production"
        object.__setattr__(self, "debug", debug)
        return debug

    def _ensure_secret_key(self, debug: bool) -> None:
        if self.secret_key:
            return
        if not debug:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        object.__setattr__(self, "secret_key", secrets.token_urlsafe(32))
        logger.warning("⚠️  开发环境使用随机生成的SECRET_KEY,生产环境请设置环境变量")

    def _ensure_password_encryption_key(self, debug: bool, environment_normalized: str) -> None:
        if self.password_encryption_key:
            return
        if environment_normalized == "production":
            return

        generated = Fernet.generate_key().decode()
        object.__setattr__(self, "password_encryption_key", generated)
        if debug:
            logger.warning("⚠️  未设置 PASSWORD_ENCRYPTION_KEY,将使用临时密钥(重启后客户端需重新获取加密密钥)")

    def _apply_api_docs_default(self, environment_normalized: str) -> None:
        if environment_normalized != "production":
            return
        if "api_v1_docs_enabled" in self.model_fields_set:
            return
        object.__setattr__(self, "api_v1_docs_enabled", False)

    def _validate(self) -> None:
        """执行跨字段校验,统一抛出可读的 ValueError."""
        errors: list[str] = []
        password_encryption_key = self.password_encryption_key.strip()
        password_encryption_key_present = bool(password_encryption_key)
        checks: list[tuple[str, bool]] = [
            ("UPLOAD_MAX_WORKERS 必须为正整数", self.upload_max_workers <= 0),
            ("UPLOAD_URL_PREFIX 不能为空", not self.upload_url_prefix),
            ("MAX_CONTENT_LENGTH 必须为正整数(字节)", self.max_content_length_bytes <= 0),
            (f"LOG_LEVEL 仅支持 {'/'.join(sorted(_VALID_LOG_LEVELS))}", self.log_level not in _VALID_LOG_LEVELS),
            (
                "生产环境必须设置 PASSWORD_ENCRYPTION_KEY(用于解密客户端提交的密码)",
                self.is_production and not password_encryption_key_present,
            ),
            (
                "PASSWORD_ENCRYPTION_KEY 格式非法,请先使用 Fernet.generate_key() 生成并设置",
                password_encryption_key_present and not _is_valid_fernet_key(password_encryption_key),
            ),
        ]
        for message, condition in checks:
            if condition:
                errors.append(message)

        if errors:
            joined = "; ".join(errors)
            raise ValueError(f"配置校验失败: {joined}")
