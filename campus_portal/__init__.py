"""校园门户 - Flask 应用初始化.

院校官网内容管理后台: 请求解析与校验流水线、文件上传与内容记录 API.
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from flask.typing import ResponseReturnValue

from campus_portal.api import register_api_blueprints
from campus_portal.infra.logging.request_middleware import register_request_logging
from campus_portal.repositories import init_repositories
from campus_portal.services.uploads import LocalFileStorage, init_file_storage
from campus_portal.settings import Settings
from campus_portal.utils.response_utils import unified_error_response
from campus_portal.utils.structlog_config import ErrorContext, configure_structlog, get_system_logger


def create_app(
    *,
    settings: Settings | None = None,
    storage: LocalFileStorage | None = None,
) -> Flask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.
        storage: 可选的文件存储实例,缺省按 UPLOAD_ROOT 创建.

    Returns:
        Flask: Flask应用实例

    """
    resolved_settings = settings or Settings.load()
    app = Flask(__name__)

    configure_app(app, resolved_settings)

    # 日志先于其他组件, 便于记录初始化过程
    configure_structlog(app)
    log_level_name = str(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger().setLevel(getattr(logging, log_level_name, logging.INFO))
    register_request_logging(app)

    init_file_storage(app, storage)
    init_repositories(app)
    register_api_blueprints(app, resolved_settings)

    @app.errorhandler(Exception)
    def handle_global_exception(error: Exception) -> ResponseReturnValue:
        """全局错误处理."""
        payload, status_code = unified_error_response(error, context=ErrorContext(error, request))
        return jsonify(payload), status_code

    get_system_logger().info(
        "应用初始化完成",
        module="system",
        environment=resolved_settings.environment,
        upload_root=str(resolved_settings.upload_root),
    )
    return app


def configure_app(app: Flask, settings: Settings) -> None:
    """写入 Settings 提供的配置.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,包含环境变量解析、默认值与校验结果.

    """
    app.config.from_mapping(settings.to_flask_config())
    app.config.setdefault("APPLICATION_ROOT", "/")
    # 中文错误信息不转义
    app.json.ensure_ascii = False  # type: ignore[attr-defined]


__all__ = ["configure_app", "create_app"]
