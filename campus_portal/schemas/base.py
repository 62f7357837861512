"""Schema 基础设施."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from campus_portal.constants import IDENTITY_FIELDS, ErrorMessages
from campus_portal.schemas.validation import SchemaMessageKeyError


class PayloadSchema(BaseModel):
    """写路径 payload 的基础 schema.

    约定:
    - 拒绝未知字段, 拼错的字段名直接报错而不是被静默忽略.
    - schema 负责业务校验与错误文案(中文), 请求解析流水线负责基础规范化.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)


class UpdatePayloadSchema(PayloadSchema):
    """更新请求的基础 schema.

    除路由标识字段(id/email/category_params)外至少要提供一个字段,
    否则这次更新没有任何效果.
    """

    @model_validator(mode="after")
    def _require_changes(self) -> UpdatePayloadSchema:
        if not self.model_fields_set - set(IDENTITY_FIELDS):
            raise SchemaMessageKeyError(ErrorMessages.UPDATE_FIELDS_REQUIRED, message_key="UPDATE_FIELDS_REQUIRED")
        return self


class QuerySchema(BaseModel):
    """读路径 query 参数的基础 schema.

    约定:
    - 默认拒绝未知字段，避免"拼错参数却被静默忽略"的隐患
    - 分页统一通过 page/limit 表达
    """

    model_config = ConfigDict(extra="forbid")

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


__all__ = ["PayloadSchema", "QuerySchema", "UpdatePayloadSchema"]
