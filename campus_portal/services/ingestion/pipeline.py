"""请求解析与校验流水线.

解析请求体 -> 合并参数来源 -> 按模式处理未定义字段 -> 选择并执行 schema 校验 ->
文件字段落盘. 文件只在校验全部通过后才写入, 校验失败不会产生任何存储副作用.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from campus_portal.constants import RequestMode
from campus_portal.schemas.registry import CATEGORY_FIELD, SchemaSource, resolve_schema
from campus_portal.schemas.validation import validate_or_raise
from campus_portal.services.ingestion.completeness import enforce_completeness
from campus_portal.services.ingestion.file_fields import find_file_fields, store_file_fields
from campus_portal.services.ingestion.source_merger import merge_sources
from campus_portal.services.uploads.upload_service import get_file_storage, request_base_url
from campus_portal.services.uploads.upload_session import UploadSession
from campus_portal.utils.request_payload import ensure_supported_content_type, read_request_body
from campus_portal.utils.sensitive_data import scrub_sensitive_fields
from campus_portal.utils.structlog_config import get_ingestion_logger

if TYPE_CHECKING:
    from flask import Request

    from campus_portal.services.uploads.local_file_storage import LocalFileStorage


def parse_and_validate(
    request: Request,
    route_params: Mapping[str, Any] | None,
    mode: RequestMode | str,
    schema: SchemaSource,
    *,
    storage: LocalFileStorage | None = None,
    session: UploadSession | None = None,
    content_types: Collection[str] | None = None,
) -> dict[str, Any]:
    """把原始请求转换为校验通过的命令对象.

    Args:
        request: 当前 Flask 请求.
        route_params: 路由参数(例如 ``{"category_params": "notice", "id": "..."}``).
        mode: 请求模式, 决定未定义字段的处理方式.
        schema: 固定 schema 或按 ``category_params`` 选择的 `CategorySchemaTable`.
        storage: 文件存储, 缺省使用当前应用的存储.
        session: 上传补偿会话; 传入时由调用方在持久化失败后回滚.
        content_types: 资源可接受的 Content-Type, 缺省不限制.

    Returns:
        命令对象. 更新模式只包含请求中出现的字段; 文件字段替换为存储引用;
        使用分类映射表时 ``category_params`` 为规范化后的分类名.

    Raises:
        UnsupportedMediaTypeError: Content-Type 不在 ``content_types`` 中.
        MalformedRequestError: 请求体无法解析、字段名非法或 create 模式下存在未定义值.
        SchemaValidationError: schema 校验失败, 携带全部字段错误.
        EmptyUploadError: 文件字段收到空文件.
        StorageError: 文件写入失败.

    """
    mode = RequestMode(mode)
    logger = get_ingestion_logger()

    if content_types is not None:
        ensure_supported_content_type(request, content_types)

    body = read_request_body(request, mode)
    logger.info(
        "收到请求数据",
        module="ingestion",
        mode=mode.value,
        content_type=request.mimetype or None,
        route_params=scrub_sensitive_fields(dict(route_params or {})),
        body=scrub_sensitive_fields(body),
    )

    record = merge_sources(body, route_params, request.args)
    record = enforce_completeness(record, mode)

    category, model = resolve_schema(schema, record.get(CATEGORY_FIELD))
    payload = dict(record)
    if category is not None:
        payload.pop(CATEGORY_FIELD, None)

    validated = validate_or_raise(model, payload)
    command = _to_command(validated, include_defaults=mode is not RequestMode.UPDATE)
    if category is not None:
        command[CATEGORY_FIELD] = category.value

    file_fields = find_file_fields(model)
    if any(command.get(name) for name in file_fields):
        owned_session = session or UploadSession(storage or get_file_storage(), request_base_url(request))
        try:
            store_file_fields(command, file_fields, owned_session)
        except Exception:
            owned_session.rollback()
            raise

    logger.info(
        "请求数据校验通过",
        module="ingestion",
        mode=mode.value,
        schema=model.__name__,
        fields=sorted(command),
    )
    return command


def _to_command(validated: BaseModel, *, include_defaults: bool) -> dict[str, Any]:
    # 不使用 model_dump: 文件字段中的 UploadDescriptor 需要原样保留到落盘阶段.
    fields = type(validated).model_fields
    names = fields.keys() if include_defaults else validated.model_fields_set
    return {name: getattr(validated, name) for name in fields if name in names}


__all__ = ["parse_and_validate"]
