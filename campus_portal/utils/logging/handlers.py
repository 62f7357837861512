"""structlog 处理器."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from structlog.typing import BindableLogger

    from campus_portal.types import StructlogEventDict


class DebugFilter:
    """根据配置决定是否丢弃 DEBUG 日志的处理器.

    Attributes:
        enabled: 是否启用 DEBUG 日志.

    """

    def __init__(self, *, enabled: bool = False) -> None:
        self.enabled = enabled

    def set_enabled(self, *, enabled: bool) -> None:
        """设置是否启用 DEBUG 日志."""
        self.enabled = enabled

    def __call__(
        self,
        _logger: BindableLogger,
        method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """未启用时丢弃 debug 事件.

        Raises:
            structlog.DropEvent: 当前事件为 DEBUG 且未启用调试日志.

        """
        if method_name == "debug" and not self.enabled:
            raise structlog.DropEvent
        return event_dict


__all__ = ["DebugFilter"]
