# tests/unit/routes/conftest.py
"""API 契约测试专用 fixtures.

`app`/`client` 来自 tests/unit/conftest.py, 这里只补充构造请求体的 helper.
"""

import io

import pytest

from campus_portal.utils.password_crypto_utils import get_password_manager


@pytest.fixture
def pdf_part():
    """构造 multipart 文件字段."""

    def _make(filename="routine.pdf", data=b"%PDF-1.4 fake", content_type="application/pdf"):
        return (io.BytesIO(data), filename, content_type)

    return _make


@pytest.fixture
def png_part():
    def _make(filename="photo.png", data=b"\x89PNG fake image"):
        return (io.BytesIO(data), filename, "image/png")

    return _make


@pytest.fixture
def encrypt(app):
    """按当前应用密钥加密密码."""

    def _encrypt(password):
        with app.app_context():
            return get_password_manager().encrypt_password(password)

    return _encrypt
