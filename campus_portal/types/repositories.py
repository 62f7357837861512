"""持久化层协议.

路由处理函数在拿到校验后的命令对象后才调用持久化层, 本协议只约定最小接口.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class RecordRepository(Protocol):
    """单一资源集合的持久化协议."""

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]: ...

    def get(self, record_id: str) -> dict[str, Any] | None: ...

    def find_one(self, **criteria: Any) -> dict[str, Any] | None: ...

    def list(self, **criteria: Any) -> list[dict[str, Any]]: ...

    def update(self, record_id: str, changes: Mapping[str, Any]) -> dict[str, Any] | None: ...

    def delete(self, record_id: str) -> dict[str, Any] | None: ...


__all__ = ["RecordRepository"]
