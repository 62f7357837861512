"""校园门户的结构化日志配置与辅助函数."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, cast

import structlog
from flask import Flask, current_app, g, has_request_context

from campus_portal.constants.system_constants import ErrorSeverity
from campus_portal.core.exceptions import AppError
from campus_portal.settings import APP_VERSION
from campus_portal.types import ContextDict, JsonValue, LoggerExtra, StructlogEventDict
from campus_portal.utils.logging.context_vars import request_id_var
from campus_portal.utils.logging.error_adapter import (
    ErrorContext,
    ErrorMetadata,
    build_public_context,
    derive_error_metadata,
    get_error_suggestions,
)
from campus_portal.utils.logging.handlers import DebugFilter

if TYPE_CHECKING:
    from structlog.typing import BindableLogger, Processor

LogField = JsonValue | ContextDict | LoggerExtra
ErrorPayload = dict[str, LogField]


class StructlogConfig:
    """structlog 配置核心类.

    负责处理器链与调试日志过滤. 渲染器根据终端能力在控制台与 JSON 之间切换.

    Attributes:
        debug_filter: 调试日志过滤器.
        configured: 是否已配置标志.

    Example:
        >>> config = StructlogConfig()
        >>> config.configure(app)
        >>> logger = get_logger('my_module')

    """

    def __init__(self) -> None:
        self.debug_filter = DebugFilter(enabled=False)
        self.configured = False

    def configure(self, app: Flask | None = None) -> None:
        """初始化 structlog 处理器(幂等).

        Args:
            app: Flask 应用实例,可选.如果提供,将按应用配置调整日志级别与调试过滤.

        """
        if not self.configured:
            processors = [
                self.debug_filter,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                self._add_request_context,
                self._add_global_context,
                self._get_renderer(),
            ]
            structlog.configure(
                processors=cast("list[structlog.types.Processor]", processors),
                context_class=dict,
                logger_factory=structlog.stdlib.LoggerFactory(),
                wrapper_class=structlog.stdlib.BoundLogger,
                cache_logger_on_first_use=True,
            )
            logging.basicConfig(format="%(message)s", stream=sys.stdout, level=logging.INFO)
            self.configured = True

        if app is not None:
            self._attach_app(app)

    def _attach_app(self, app: Flask) -> None:
        level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
        logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))

        enable_debug = bool(app.config.get("ENABLE_DEBUG_LOG", False))
        self.debug_filter.set_enabled(enabled=enable_debug)

    @staticmethod
    def _add_request_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """向事件字典写入 request_id."""
        if has_request_context():
            event_dict["request_id"] = request_id_var.get()
        return event_dict

    @staticmethod
    def _add_global_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """附加环境、版本等全局上下文."""
        try:
            event_dict["app_name"] = current_app.config["APP_NAME"]
            event_dict["app_version"] = current_app.config["APP_VERSION"]
        except (RuntimeError, KeyError):
            event_dict["app_name"] = "校园门户"
            event_dict["app_version"] = APP_VERSION

        if has_request_context():
            event_dict["environment"] = current_app.config.get("ENV", "development")
            event_dict["host"] = getattr(g, "host", "localhost")

        event_dict["logger_name"] = getattr(_logger, "name", "unknown")
        return event_dict

    @staticmethod
    def _get_renderer() -> Processor:
        """终端输出彩色控制台格式,其余情况输出 JSON 行."""
        if sys.stdout.isatty():
            return structlog.dev.ConsoleRenderer(colors=True)
        return structlog.processors.JSONRenderer(ensure_ascii=False)


structlog_config = StructlogConfig()


def get_logger(name: str) -> structlog.BoundLogger:
    """获取结构化日志记录器.

    Args:
        name: 日志记录器名称,通常使用模块名.

    Returns:
        绑定的 structlog 日志记录器实例.

    Example:
        >>> logger = get_logger('uploads')
        >>> logger.info('文件写入成功', file_id='...')

    """
    structlog_config.configure()
    return structlog.get_logger(name)


def configure_structlog(app: Flask) -> None:
    """配置 structlog 并注册 Flask 钩子."""
    structlog_config.configure(app)

    @app.teardown_appcontext
    def log_teardown_error(exception: BaseException | None) -> None:
        if exception:
            get_logger("app").error("应用请求处理异常", module="system", exception=str(exception))


def log_info(message: str, module: str = "app", **kwargs: LogField) -> None:
    """记录信息级别日志.

    Example:
        >>> log_info('公告创建成功', module='announcements', record_id='...')

    """
    logger = get_logger("app")
    logger.info(message, module=module, **kwargs)


def log_warning(
    message: str,
    module: str = "app",
    exception: Exception | None = None,
    **kwargs: LogField,
) -> None:
    """记录警告级别日志."""
    logger = get_logger("app")
    if exception:
        logger.warning(message, module=module, exception=str(exception), **kwargs)
    else:
        logger.warning(message, module=module, **kwargs)


def log_error(
    message: str,
    module: str = "app",
    exception: Exception | None = None,
    **kwargs: LogField,
) -> None:
    """记录错误级别日志.

    Args:
        message: 日志消息.
        module: 模块名称,默认为 'app'.
        exception: 可选的异常对象,会记录堆栈信息.
        **kwargs: 额外的上下文信息.

    """
    logger = get_logger("app")
    if exception:
        logger.exception(message, module=module, error=str(exception), **kwargs)
    else:
        logger.error(message, module=module, **kwargs)


def log_critical(
    message: str,
    module: str = "app",
    exception: Exception | None = None,
    **kwargs: LogField,
) -> None:
    """记录严重错误级别日志."""
    logger = get_logger("app")
    if exception:
        logger.critical(message, module=module, error=str(exception), **kwargs)
    else:
        logger.critical(message, module=module, **kwargs)


def get_system_logger() -> structlog.BoundLogger:
    """返回系统级 logger."""
    return get_logger("system")


def get_upload_logger() -> structlog.BoundLogger:
    """返回文件上传/删除使用的 logger."""
    return get_logger("uploads")


def get_ingestion_logger() -> structlog.BoundLogger:
    """返回请求解析与校验流水线使用的 logger."""
    return get_logger("ingestion")


def enhanced_error_handler(
    error: Exception,
    context: ErrorContext | None = None,
    *,
    extra: LoggerExtra | None = None,
) -> ErrorPayload:
    """增强的错误处理器.

    将异常转换为结构化的错误响应,包含错误分类、严重级别和建议.

    Args:
        error: 异常对象.
        context: 错误上下文,可选.如果未提供会自动创建.
        extra: 额外的上下文信息,可选. 与 ``AppError.extra`` 合并, 显式传入者优先.

    Returns:
        结构化的错误响应字典,包含以下字段:
        - error_id: 错误唯一标识
        - category: 错误分类
        - severity: 严重级别
        - message: 错误消息
        - suggestions: 解决建议
        - context: 错误上下文

    """
    context = context or ErrorContext(error)
    context.ensure_request()

    metadata = derive_error_metadata(error)
    public_context = build_public_context(context)

    extra_payload: dict[str, JsonValue] = {}
    if isinstance(error, AppError):
        extra_payload.update(error.extra)
    if extra:
        extra_payload.update(extra)

    payload: ErrorPayload = {
        "error": True,
        "error_id": context.error_id,
        "category": metadata.category.value,
        "severity": metadata.severity.value,
        "message_code": metadata.message_key,
        "message": metadata.message,
        "timestamp": context.timestamp.isoformat(),
        "recoverable": metadata.recoverable,
        "suggestions": get_error_suggestions(metadata.category),
        "context": public_context,
    }

    if extra_payload:
        payload["extra"] = extra_payload

    _log_enhanced_error(error, metadata, payload)
    return payload


def _log_enhanced_error(error: Exception, metadata: ErrorMetadata, payload: ErrorPayload) -> None:
    log_kwargs: dict[str, LogField] = {
        "error_id": payload["error_id"],
        "category": payload["category"],
        "severity": payload["severity"],
        "context": payload.get("context"),
    }
    if "extra" in payload:
        log_kwargs["extra"] = payload["extra"]

    message_val = payload.get("message", "")
    message_text = message_val if isinstance(message_val, str) else str(message_val)

    if metadata.severity == ErrorSeverity.CRITICAL:
        log_critical(message_text, module="error_handler", exception=error, **log_kwargs)
    elif metadata.severity == ErrorSeverity.HIGH:
        log_error(message_text, module="error_handler", exception=error, **log_kwargs)
    else:
        log_warning(message_text, module="error_handler", exception=error, **log_kwargs)



__all__ = [
    "ErrorContext",
    "ErrorMetadata",
    "configure_structlog",
    "enhanced_error_handler",
    "get_ingestion_logger",
    "get_logger",
    "get_system_logger",
    "get_upload_logger",
    "log_critical",
    "log_error",
    "log_info",
    "log_warning",
]
