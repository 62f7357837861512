"""校园门户 JSON API (Flask-RESTX) 入口.

- `/api/v1/**` 为唯一对外 JSON API
- 提供 Swagger UI 与 OpenAPI JSON 导出能力
"""

from __future__ import annotations

from flask import Flask

from campus_portal.settings import Settings


def register_api_blueprints(app: Flask, settings: Settings) -> None:
    """按 Settings 注册 API blueprints."""
    from campus_portal.api.v1 import create_api_v1_blueprint  # noqa: PLC0415

    api_v1_bp = create_api_v1_blueprint(settings)
    app.register_blueprint(api_v1_bp, url_prefix="/api/v1")
