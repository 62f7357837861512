"""请求处理模式常量."""

from enum import Enum
from typing import Final


class RequestMode(str, Enum):
    """解析请求时的操作模式.

    不同模式对"字段必须有值"的要求不同, 见 `services.ingestion.completeness`.
    """

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    QUERY = "query"


# 路由标识字段: 无论何种模式都会透传给 schema 层.
IDENTITY_FIELDS: Final[tuple[str, ...]] = ("id", "email", "category_params")

__all__ = ["IDENTITY_FIELDS", "RequestMode"]
