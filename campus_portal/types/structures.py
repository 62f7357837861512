"""通用结构化数据类型别名.

统一 JSON/Mapping 风格的类型,方便在视图、服务等模块中共享定义,避免重复声明.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, TypedDict

if TYPE_CHECKING:
    from campus_portal.core.exceptions import AppError

ScalarValue: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = ScalarValue | Sequence["JsonValue"] | Mapping[str, "JsonValue"]
JsonDict: TypeAlias = dict[str, JsonValue]
ContextValue: TypeAlias = ScalarValue | Sequence["ContextValue"] | Mapping[str, "ContextValue"]
ContextDict: TypeAlias = dict[str, ContextValue]
StructlogEventDict: TypeAlias = MutableMapping[str, JsonValue]
LoggerExtra: TypeAlias = Mapping[str, JsonValue]

# 候选记录中的值可能是标量、上传文件、列表或嵌套对象, 在 schema 校验前不做类型约束.
RecordValue: TypeAlias = Any
CandidateRecord: TypeAlias = dict[str, RecordValue]
RouteParams: TypeAlias = Mapping[str, "str | Sequence[str] | None"]


class LoggerProtocol(Protocol):
    """结构化日志协议,统一 logger 的最小接口."""

    def bind(self, **kwargs: JsonValue) -> LoggerProtocol: ...

    def debug(self, event: str, *args: object, **kwargs: JsonValue) -> object: ...

    def info(self, event: str, *args: object, **kwargs: JsonValue) -> object: ...

    def warning(self, event: str, *args: object, **kwargs: JsonValue) -> object: ...

    def error(self, event: str, *args: object, **kwargs: JsonValue) -> object: ...

    def exception(self, event: str, *args: object, **kwargs: JsonValue) -> object: ...


class RouteSafetyOptions(TypedDict, total=False):
    """safe_route_call 的扩展配置."""

    context: ContextDict | None
    extra: LoggerExtra | None
    expected_exceptions: tuple[type[BaseException], ...]
    fallback_exception: type[AppError]
    log_event: str | None
