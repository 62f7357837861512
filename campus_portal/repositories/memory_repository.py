"""内存 Repository.

职责:
- 演示应用与测试使用的持久化实现, 满足 `RecordRepository` 协议
- 只负责存取, 不做校验、不做序列化
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4


def _new_record_id() -> str:
    # 与 RecordId 字段一致: 24 位十六进制.
    return uuid4().hex[:24]


class InMemoryRecordRepository:
    """进程内的单集合存储, 读写均返回副本."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._records: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        now = datetime.now(UTC).isoformat()
        record = {**copy.deepcopy(dict(data)), "id": _new_record_id(), "created_at": now, "updated_at": now}
        with self._lock:
            self._records[record["id"]] = record
        return copy.deepcopy(record)

    def get(self, record_id: str) -> dict[str, Any] | None:
        with self._lock:
            record = self._records.get(record_id)
            return copy.deepcopy(record) if record is not None else None

    def find_one(self, **criteria: Any) -> dict[str, Any] | None:
        matches = self.list(**criteria)
        return matches[0] if matches else None

    def list(self, **criteria: Any) -> list[dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(record)
                for record in self._records.values()
                if all(record.get(key) == value for key, value in criteria.items())
            ]

    def update(self, record_id: str, changes: Mapping[str, Any]) -> dict[str, Any] | None:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                return None
            record.update(copy.deepcopy(dict(changes)))
            record["id"] = record_id
            record["updated_at"] = datetime.now(UTC).isoformat()
            return copy.deepcopy(record)

    def delete(self, record_id: str) -> dict[str, Any] | None:
        with self._lock:
            return self._records.pop(record_id, None)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


__all__ = ["InMemoryRecordRepository"]
