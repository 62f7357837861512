"""上传文件相关的数据结构."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import IO, TYPE_CHECKING

from campus_portal.types.structures import JsonDict

if TYPE_CHECKING:
    from werkzeug.datastructures import FileStorage


@dataclass(slots=True)
class UploadDescriptor:
    """尚未落盘的上传文件.

    Attributes:
        filename: 客户端声明的原始文件名.
        content_type: 客户端声明的 MIME 类型.
        size: 字节数.
        stream: 文件内容流.

    """

    filename: str
    content_type: str
    size: int
    stream: IO[bytes] = field(repr=False)

    @classmethod
    def from_file_storage(cls, storage: FileStorage) -> UploadDescriptor:
        """从 werkzeug FileStorage 构造描述符.

        multipart 解析时 Content-Length 通常缺失, 因此读入内存计算真实大小.
        """
        data = storage.stream.read()
        return cls(
            filename=storage.filename or "",
            content_type=(storage.mimetype or storage.content_type or "").lower(),
            size=len(data),
            stream=io.BytesIO(data),
        )

    @classmethod
    def from_bytes(cls, filename: str, data: bytes, content_type: str) -> UploadDescriptor:
        """从内存字节构造描述符."""
        return cls(filename=filename, content_type=content_type, size=len(data), stream=io.BytesIO(data))

    def read_bytes(self) -> bytes:
        """读取全部内容, 可重复调用."""
        self.stream.seek(0)
        return self.stream.read()


@dataclass(frozen=True, slots=True)
class StoredFile:
    """已落盘文件的稳定引用.

    Attributes:
        file_id: 存储内唯一的文件名, 同时作为删除时的标识.
        link: 可直接访问的绝对 URL.
        original_name: 客户端上传时的原始文件名.

    """

    file_id: str
    link: str
    original_name: str

    def to_payload(self) -> JsonDict:
        """上传接口对外返回的结构."""
        return {"file_id": self.file_id, "file_link": self.link}

    def to_reference(self, key: str) -> JsonDict:
        """嵌入命令对象的引用结构, 形如 ``{"<key>_id": ..., "<key>": link}``."""
        return {f"{key}_id": self.file_id, key: self.link}


__all__ = ["StoredFile", "UploadDescriptor"]
