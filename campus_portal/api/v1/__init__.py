"""API v1 (Flask-RESTX).

该包仅承载对外 JSON API 的路由层与 OpenAPI 文档能力.
请求解析与校验统一走 `services.ingestion.parse_and_validate`.
"""

from __future__ import annotations

from typing import cast

from flask import Blueprint, Response, jsonify

from campus_portal.api.v1.api import CampusPortalApi
from campus_portal.api.v1.namespaces.academic import ns as academic_ns
from campus_portal.api.v1.namespaces.announcements import ns as announcements_ns
from campus_portal.api.v1.namespaces.auth import ns as auth_ns
from campus_portal.api.v1.namespaces.files import ns as files_ns
from campus_portal.api.v1.namespaces.gallery import ns as gallery_ns
from campus_portal.api.v1.namespaces.health import ns as health_ns
from campus_portal.settings import Settings


def create_api_v1_blueprint(settings: Settings) -> Blueprint:
    """创建并配置 `/api/v1` Blueprint.

    - Swagger UI: `/api/v1/docs`(可配置关闭)
    - OpenAPI JSON: `/api/v1/openapi.json`
    """
    blueprint = Blueprint("api_v1", __name__)

    docs_path = "/docs" if settings.api_v1_docs_enabled else cast(str, False)
    api = CampusPortalApi(
        blueprint,
        title=settings.app_name,
        version=settings.app_version,
        doc=docs_path,
    )

    api.add_namespace(health_ns, path="/health")
    api.add_namespace(auth_ns, path="/auth")
    api.add_namespace(academic_ns, path="/academic")
    api.add_namespace(announcements_ns, path="/announcements")
    api.add_namespace(gallery_ns, path="/gallery")
    api.add_namespace(files_ns, path="/files")

    @blueprint.get("/openapi.json")
    def openapi_json() -> tuple[Response, int]:
        return jsonify(api.__schema__), 200

    return blueprint
