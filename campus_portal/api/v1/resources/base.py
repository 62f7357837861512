"""Base Resource helpers."""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from typing import TYPE_CHECKING, Any, TypeVar, cast

from flask import Response, request
from flask_restx import Resource

from campus_portal.services.ingestion import parse_and_validate
from campus_portal.services.uploads import open_upload_session
from campus_portal.utils.response_utils import jsonify_unified_success
from campus_portal.utils.route_safety import safe_route_call

if TYPE_CHECKING:
    from campus_portal.constants import RequestMode
    from campus_portal.schemas.registry import SchemaSource
    from campus_portal.services.uploads import UploadSession
    from campus_portal.types import ContextDict, JsonValue, LoggerExtra, RouteSafetyOptions

R = TypeVar("R")


class BaseResource(Resource):
    """统一封套、safe_route_call 与请求解析适配."""

    def success(
        self,
        data: object | None = None,
        message: object | None = None,
        *,
        status: int = 200,
        meta: Mapping[str, object] | None = None,
    ) -> tuple[Response, int]:
        return jsonify_unified_success(data=data, message=message, status=status, meta=meta)

    def safe_call(
        self,
        func: Callable[[], R],
        *,
        module: str,
        action: str,
        public_error: str,
        context: ContextDict | None = None,
        extra: LoggerExtra | None = None,
        **options: RouteSafetyOptions,
    ) -> R:
        return safe_route_call(
            func,
            module=module,
            action=action,
            public_error=public_error,
            context=cast("ContextDict | None", context),
            extra=cast("dict[str, JsonValue] | None", extra),
            **cast("dict[str, Any]", options),
        )

    def parse(
        self,
        route_params: Mapping[str, Any] | None,
        mode: RequestMode,
        schema: SchemaSource,
        *,
        session: UploadSession | None = None,
        content_types: Collection[str] | None = None,
    ) -> dict[str, Any]:
        """解析并校验当前请求."""
        return parse_and_validate(
            request,
            route_params,
            mode,
            schema,
            session=session,
            content_types=content_types,
        )

    def upload_session(self) -> UploadSession:
        return open_upload_session(request)
