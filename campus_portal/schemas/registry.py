"""按路由分类参数选择 schema.

同一个资源在不同分类下字段不同(例如教务中的课表与招生表), 路由里的
``category_params`` 决定使用哪个 schema. 分类集合用枚举表达, `CategorySchemaTable`
在构造时检查每个枚举成员都有对应 schema, 避免运行时才发现遗漏.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel

from campus_portal.core.exceptions import FieldError, SchemaValidationError
from campus_portal.utils.text_utils import collapse_whitespace, to_sentence_case

CategoryT = TypeVar("CategoryT", bound=Enum)

CATEGORY_FIELD = "category_params"


def normalize_category_token(raw: str) -> str:
    """把路由中的分类参数规范化为枚举取值.

    Example:
        >>> normalize_category_token("admission_form")
        'Admission form'

    """
    return to_sentence_case(collapse_whitespace(raw.replace("_", " ")))


class CategorySchemaTable(Generic[CategoryT]):
    """分类枚举到 schema 的映射表.

    Args:
        enum_cls: 分类枚举, 取值为规范化后的分类名.
        schemas: 每个枚举成员对应的 schema.

    Raises:
        ValueError: 存在未映射的枚举成员, 或映射了不属于该枚举的键.

    """

    def __init__(self, enum_cls: type[CategoryT], schemas: Mapping[CategoryT, type[BaseModel]]) -> None:
        missing = [member.name for member in enum_cls if member not in schemas]
        if missing:
            raise ValueError(f"{enum_cls.__name__} 缺少 schema 映射: {', '.join(missing)}")
        foreign = [key for key in schemas if not isinstance(key, enum_cls)]
        if foreign:
            raise ValueError(f"{enum_cls.__name__} 映射中存在无效分类: {foreign}")
        self.enum_cls = enum_cls
        self._schemas = dict(schemas)

    def resolve(self, token: str | None) -> tuple[CategoryT, type[BaseModel]]:
        """根据路由分类参数返回 (分类, schema).

        Raises:
            SchemaValidationError: 分类参数缺失或不属于该枚举.

        """
        normalized = normalize_category_token(token) if isinstance(token, str) else ""
        for member in self.enum_cls:
            if member.value == normalized:
                return member, self._schemas[member]
        raise SchemaValidationError(
            [FieldError(field=CATEGORY_FIELD, message=f"不支持的分类: {token}")],
            message_key="CATEGORY_NOT_SUPPORTED",
        )

    def __contains__(self, token: object) -> bool:
        if not isinstance(token, str):
            return False
        normalized = normalize_category_token(token)
        return any(member.value == normalized for member in self.enum_cls)

    @property
    def categories(self) -> tuple[CategoryT, ...]:
        return tuple(self.enum_cls)


SchemaSource = type[BaseModel] | CategorySchemaTable


def resolve_schema(source: SchemaSource, category_token: str | None) -> tuple[Enum | None, type[BaseModel]]:
    """固定 schema 原样返回; 映射表按分类参数选择."""
    if isinstance(source, CategorySchemaTable):
        return source.resolve(category_token)
    return None, source


__all__ = [
    "CATEGORY_FIELD",
    "CategorySchemaTable",
    "SchemaSource",
    "normalize_category_token",
    "resolve_schema",
]
