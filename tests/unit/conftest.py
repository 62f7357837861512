# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供隔离的环境变量、临时上传目录、应用与测试客户端。
"""

import io

import pytest
from cryptography.fernet import Fernet

from campus_portal import create_app
from campus_portal.settings import Settings
from campus_portal.types.uploads import UploadDescriptor


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch, tmp_path):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - 上传文件只写入临时目录
    - 避免开发者本机环境变量与 `.env` 影响测试稳定性
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("UPLOAD_ROOT", str(tmp_path / "assets"))
    monkeypatch.setenv("PASSWORD_ENCRYPTION_KEY", Fernet.generate_key().decode())
    monkeypatch.delenv("FORCE_HTTPS", raising=False)
    monkeypatch.delenv("UPLOAD_URL_PREFIX", raising=False)


@pytest.fixture
def upload_root(tmp_path):
    return tmp_path / "assets"


@pytest.fixture
def settings():
    return Settings.load()


@pytest.fixture
def app(settings):
    """创建测试应用实例."""
    app = create_app(settings=settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """创建测试客户端."""
    return app.test_client()


@pytest.fixture
def make_upload():
    """构造上传文件描述符."""

    def _make(filename="notice.png", data=b"\x89PNG fake image", content_type="image/png"):
        return UploadDescriptor(filename=filename, content_type=content_type, size=len(data), stream=io.BytesIO(data))

    return _make
