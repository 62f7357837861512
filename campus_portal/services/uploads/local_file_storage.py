"""本地磁盘文件存储.

文件以 ``<uuid>_<清洗后的原文件名><扩展名>`` 命名写入上传根目录, 生成的文件名
同时作为对外的 file_id. 多文件写入/删除通过线程池并发执行.
"""

from __future__ import annotations

import os
import re
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from uuid import uuid4

from werkzeug.utils import secure_filename

from campus_portal.core.exceptions import AppError, EmptyUploadError, MalformedRequestError, StorageError
from campus_portal.types.uploads import StoredFile, UploadDescriptor
from campus_portal.utils.structlog_config import get_upload_logger

_WHITESPACE_PATTERN = re.compile(r"\s+")
_EXTENSION_PATTERN = re.compile(r"[^A-Za-z0-9]")
_FILE_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")
_FALLBACK_STEM = "file"


class LocalFileStorage:
    """上传根目录下的扁平文件存储.

    Args:
        root: 上传根目录, 不存在时在首次写入前创建.
        url_prefix: 对外访问路径前缀(不含首尾斜杠).
        max_workers: 并发写入/删除的线程数上限.

    """

    def __init__(self, root: Path | str, *, url_prefix: str, max_workers: int = 4) -> None:
        self.root = Path(root)
        self.url_prefix = url_prefix.strip("/")
        self.max_workers = max(1, max_workers)
        self._logger = get_upload_logger()

    def store(self, descriptor: UploadDescriptor, *, base_url: str) -> StoredFile:
        """写入单个文件并返回引用.

        Raises:
            EmptyUploadError: 文件内容为空.
            StorageError: 写入失败.

        """
        data = descriptor.read_bytes()
        if not data:
            raise EmptyUploadError(extra={"filename": descriptor.filename})

        file_id = self.build_file_id(descriptor.filename)
        target = self.root / file_id
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            # "x" 模式保证不会覆盖已有文件.
            with target.open("xb") as handle:
                handle.write(data)
        except OSError as exc:
            self._logger.error(
                "文件写入失败",
                module="uploads",
                file_id=file_id,
                original_name=descriptor.filename,
                error=str(exc),
            )
            raise StorageError(extra={"filename": descriptor.filename}) from exc

        self._logger.info(
            "文件写入成功",
            module="uploads",
            file_id=file_id,
            original_name=descriptor.filename,
            size=len(data),
            content_type=descriptor.content_type,
        )
        return StoredFile(file_id=file_id, link=self.build_link(base_url, file_id), original_name=descriptor.filename)

    def store_many(self, descriptors: Sequence[UploadDescriptor], *, base_url: str) -> list[StoredFile]:
        """并发写入多个文件, 结果顺序与输入一致.

        任意一个文件失败时, 本批次已写入的文件会先被删除, 再抛出第一个失败(按输入顺序).

        Raises:
            EmptyUploadError: 文件列表为空或其中有空文件.
            StorageError: 写入失败.

        """
        if not descriptors:
            raise EmptyUploadError()

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(descriptors))) as executor:
            futures = [executor.submit(self.store, descriptor, base_url=base_url) for descriptor in descriptors]

        stored: list[StoredFile] = []
        first_error: Exception | None = None
        for future in futures:
            try:
                stored.append(future.result())
            except Exception as exc:  # noqa: BLE001
                first_error = first_error or exc

        if first_error is not None:
            self._logger.warning(
                "批量写入失败,回滚已写入文件",
                module="uploads",
                written=[item.file_id for item in stored],
                error=str(first_error),
            )
            try:
                self.remove_many([item.file_id for item in stored])
            except AppError as cleanup_error:
                self._logger.error(
                    "批量写入回滚失败,以下文件可能残留",
                    module="uploads",
                    written=[item.file_id for item in stored],
                    error=str(cleanup_error),
                )
            raise first_error
        return stored

    def remove(self, file_id: str) -> bool:
        """删除文件.

        文件本就不存在时记录日志并视为成功, 因此重复删除是安全的.

        Returns:
            True 表示确实删除了文件, False 表示文件不存在.

        Raises:
            MalformedRequestError: file_id 含路径分隔符或试图跳出上传根目录.
            StorageError: 其他删除失败.

        """
        target = self.path_for(file_id)
        try:
            target.unlink()
        except FileNotFoundError:
            self._logger.info("文件不存在,跳过删除", module="uploads", file_id=file_id)
            return False
        except OSError as exc:
            self._logger.error("文件删除失败", module="uploads", file_id=file_id, error=str(exc))
            raise StorageError(message_key="FILE_DELETE_ERROR", extra={"file_id": file_id}) from exc

        self._logger.info("文件删除成功", module="uploads", file_id=file_id)
        return True

    def remove_many(self, file_ids: Sequence[str]) -> list[bool]:
        """并发删除多个文件; 所有删除完成后再抛出第一个失败."""
        if not file_ids:
            return []
        # 先校验全部标识, 避免部分删除后才发现非法输入.
        for file_id in file_ids:
            self.path_for(file_id)

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(file_ids))) as executor:
            futures = [executor.submit(self.remove, file_id) for file_id in file_ids]

        results: list[bool] = []
        first_error: Exception | None = None
        for future in futures:
            try:
                results.append(future.result())
            except Exception as exc:  # noqa: BLE001
                first_error = first_error or exc
        if first_error is not None:
            raise first_error
        return results

    def exists(self, file_id: str) -> bool:
        return self.path_for(file_id).is_file()

    def path_for(self, file_id: str) -> Path:
        """把 file_id 解析为上传根目录下的路径.

        Raises:
            MalformedRequestError: file_id 不是根目录下的单个文件名.

        """
        if (
            not isinstance(file_id, str)
            or not _FILE_ID_PATTERN.match(file_id)
            or file_id in {".", ".."}
            or os.sep in file_id
            or "/" in file_id
            or "\\" in file_id
        ):
            raise MalformedRequestError(message_key="INVALID_FILE_ID", extra={"file_id": str(file_id)})

        root = self.root.resolve()
        target = (root / file_id).resolve()
        if target.parent != root:
            raise MalformedRequestError(message_key="INVALID_FILE_ID", extra={"file_id": file_id})
        return target

    def build_link(self, base_url: str, file_id: str) -> str:
        return f"{base_url.rstrip('/')}/{self.url_prefix}/{file_id}"

    @staticmethod
    def build_file_id(filename: str) -> str:
        """生成唯一文件名: 空白替换为下划线, 其余字符按 secure_filename 清洗, 保留扩展名."""
        stem, extension = os.path.splitext(os.path.basename(filename or ""))
        stem = secure_filename(_WHITESPACE_PATTERN.sub("_", stem.strip())) or _FALLBACK_STEM
        extension = _EXTENSION_PATTERN.sub("", extension)
        suffix = f".{extension}" if extension else ""
        return f"{uuid4().hex}_{stem}{suffix}"


__all__ = ["LocalFileStorage"]
