"""文件上传服务: 本地存储、访问链接与补偿会话."""

from campus_portal.services.uploads.local_file_storage import LocalFileStorage
from campus_portal.services.uploads.upload_service import (
    delete_file,
    delete_files,
    get_file_storage,
    init_file_storage,
    open_upload_session,
    upload_file,
    upload_files,
)
from campus_portal.services.uploads.upload_session import UploadSession

__all__ = [
    "LocalFileStorage",
    "UploadSession",
    "delete_file",
    "delete_files",
    "get_file_storage",
    "init_file_storage",
    "open_upload_session",
    "upload_file",
    "upload_files",
]
