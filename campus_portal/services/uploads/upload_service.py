"""路由层使用的上传/删除入口.

存储实例挂在 ``app.extensions`` 上, 由 `init_file_storage` 按配置创建.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from flask import Flask, current_app, send_from_directory

from campus_portal.services.uploads.file_links import build_base_url
from campus_portal.services.uploads.local_file_storage import LocalFileStorage
from campus_portal.services.uploads.upload_session import UploadSession

if TYPE_CHECKING:
    from flask import Request, Response

    from campus_portal.types import JsonDict
    from campus_portal.types.uploads import UploadDescriptor

EXTENSION_KEY = "campus_portal.file_storage"


def init_file_storage(app: Flask, storage: LocalFileStorage | None = None) -> LocalFileStorage:
    """创建存储实例并注册静态文件访问路由."""
    storage = storage or LocalFileStorage(
        Path(app.config["UPLOAD_ROOT"]),
        url_prefix=app.config["UPLOAD_URL_PREFIX"],
        max_workers=int(app.config.get("UPLOAD_MAX_WORKERS", 4)),
    )
    app.extensions[EXTENSION_KEY] = storage

    def serve_uploaded_file(file_id: str) -> Response:
        target = storage.path_for(file_id)
        return send_from_directory(target.parent, target.name)

    app.add_url_rule(
        f"/{storage.url_prefix}/<path:file_id>",
        endpoint="uploaded_file",
        view_func=serve_uploaded_file,
        methods=["GET"],
    )
    return storage


def get_file_storage() -> LocalFileStorage:
    """返回当前应用的存储实例."""
    return current_app.extensions[EXTENSION_KEY]


def request_base_url(request: Request) -> str:
    return build_base_url(request, force_https=bool(current_app.config.get("FORCE_HTTPS", False)))


def open_upload_session(request: Request) -> UploadSession:
    """为当前请求创建上传补偿会话."""
    return UploadSession(get_file_storage(), request_base_url(request))


def upload_file(request: Request, descriptor: UploadDescriptor) -> JsonDict:
    """写入单个文件, 返回 ``{"file_id", "file_link"}``."""
    stored = get_file_storage().store(descriptor, base_url=request_base_url(request))
    return stored.to_payload()


def upload_files(request: Request, descriptors: Sequence[UploadDescriptor]) -> list[JsonDict]:
    """并发写入多个文件, 返回结果顺序与输入一致."""
    stored = get_file_storage().store_many(descriptors, base_url=request_base_url(request))
    return [item.to_payload() for item in stored]


def delete_file(file_id: str) -> None:
    """删除单个文件, 文件不存在视为成功."""
    get_file_storage().remove(file_id)


def delete_files(file_ids: Sequence[str]) -> None:
    """并发删除多个文件."""
    get_file_storage().remove_many(file_ids)


__all__ = [
    "delete_file",
    "delete_files",
    "get_file_storage",
    "init_file_storage",
    "open_upload_session",
    "request_base_url",
    "upload_file",
    "upload_files",
]
