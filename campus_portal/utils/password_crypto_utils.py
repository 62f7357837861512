"""密码传输加解密工具.

客户端使用共享的 Fernet 密钥加密密码后提交, 服务端在 schema 校验阶段解密再检查复杂度,
避免明文密码出现在代理/网关的请求日志中.
"""

import base64
import binascii
import os
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app, has_app_context


class PasswordDecryptError(ValueError):
    """密文无法解密(格式错误或密钥不匹配)."""


class PasswordManager:
    """密码管理器.

    使用 Fernet 对称加密算法加密和解密客户端提交的密码.

    Attributes:
        cipher: Fernet 加密器实例.

    Example:
        >>> manager = PasswordManager(Fernet.generate_key().decode())
        >>> encrypted = manager.encrypt_password("Secret#2024")
        >>> manager.decrypt_password(encrypted)
        'Secret#2024'

    """

    def __init__(self, key: str) -> None:
        self.cipher = Fernet(key.encode())

    def encrypt_password(self, password: str) -> str:
        """加密密码.

        Args:
            password: 原始密码

        Returns:
            str: 加密后的密码

        """
        if not password:
            return ""

        encrypted = self.cipher.encrypt(password.encode())
        return base64.b64encode(encrypted).decode()

    def decrypt_password(self, encrypted_password: str) -> str:
        """解密密码.

        Args:
            encrypted_password: 加密后的密码

        Returns:
            str: 原始密码

        Raises:
            PasswordDecryptError: 密文为空、不是合法 base64 或无法用当前密钥解密.

        """
        if not encrypted_password:
            raise PasswordDecryptError("密码密文为空")

        try:
            encrypted = base64.b64decode(encrypted_password.encode(), validate=True)
            decrypted = self.cipher.decrypt(encrypted)
        except (binascii.Error, InvalidToken) as exc:
            raise PasswordDecryptError("密码密文无效") from exc
        return decrypted.decode()


@lru_cache(maxsize=4)
def _manager_for_key(key: str) -> PasswordManager:
    return PasswordManager(key)


def get_password_manager() -> PasswordManager:
    """获取密码管理器实例.

    优先读取当前应用的 ``PASSWORD_ENCRYPTION_KEY``, 脱离应用上下文时回退到环境变量.

    Raises:
        RuntimeError: 未配置任何密钥.

    """
    key = current_app.config.get("PASSWORD_ENCRYPTION_KEY") if has_app_context() else None
    key = key or os.getenv("PASSWORD_ENCRYPTION_KEY")
    if not key:
        raise RuntimeError("PASSWORD_ENCRYPTION_KEY 未配置")
    return _manager_for_key(str(key))


__all__ = ["PasswordDecryptError", "PasswordManager", "get_password_manager"]
