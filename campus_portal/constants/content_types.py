"""请求体 Content-Type 与上传文件 MIME 类型常量."""

from typing import Final


class ContentType:
    """请求体 Content-Type 常用值."""

    JSON = "application/json"
    FORM_DATA = "multipart/form-data"
    FORM_URLENCODED = "application/x-www-form-urlencoded"


class MimeType:
    """上传文件允许的 MIME 类型."""

    JPEG = "image/jpeg"
    JPG = "image/jpg"
    PNG = "image/png"
    GIF = "image/gif"
    WEBP = "image/webp"
    PDF = "application/pdf"


IMAGE_MIME_TYPES: Final[tuple[str, ...]] = (MimeType.JPEG, MimeType.JPG, MimeType.PNG, MimeType.GIF)
DOCUMENT_MIME_TYPES: Final[tuple[str, ...]] = (MimeType.PDF,)

MEGABYTE: Final[int] = 1024 * 1024
DEFAULT_MAX_FILE_SIZE_BYTES: Final[int] = 5 * MEGABYTE

__all__ = [
    "DEFAULT_MAX_FILE_SIZE_BYTES",
    "DOCUMENT_MIME_TYPES",
    "IMAGE_MIME_TYPES",
    "MEGABYTE",
    "ContentType",
    "MimeType",
]
