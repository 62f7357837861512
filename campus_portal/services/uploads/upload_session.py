"""上传补偿会话.

文件在 schema 校验通过后、持久化之前落盘. 如果随后的持久化失败, 这些文件就成了孤儿;
`UploadSession` 记录本次请求写入的文件, 在代码块抛出异常时删除它们再把异常继续抛出.
更新时被替换的旧文件则登记到 ``discard_on_success``, 只有持久化成功后才删除.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from types import TracebackType

from campus_portal.core.exceptions import AppError
from campus_portal.services.uploads.local_file_storage import LocalFileStorage
from campus_portal.types.uploads import StoredFile, UploadDescriptor
from campus_portal.utils.structlog_config import get_upload_logger


class UploadSession:
    """记录一次请求内写入的文件, 失败时回滚.

    Example:
        >>> with UploadSession(storage, base_url) as session:
        ...     stored = session.store_many(descriptors)
        ...     repository.create({...})

    """

    def __init__(self, storage: LocalFileStorage, base_url: str) -> None:
        self.storage = storage
        self.base_url = base_url
        self._stored: list[StoredFile] = []
        self._discard: list[str] = []
        self._logger = get_upload_logger()

    @property
    def stored(self) -> tuple[StoredFile, ...]:
        return tuple(self._stored)

    def adopt(self, stored: Iterable[StoredFile]) -> None:
        """登记已由其他调用写入的文件, 使其参与回滚."""
        self._stored.extend(stored)

    def store(self, descriptor: UploadDescriptor) -> StoredFile:
        stored = self.storage.store(descriptor, base_url=self.base_url)
        self._stored.append(stored)
        return stored

    def store_many(self, descriptors: Sequence[UploadDescriptor]) -> list[StoredFile]:
        stored = self.storage.store_many(descriptors, base_url=self.base_url)
        self._stored.extend(stored)
        return stored

    def discard_on_success(self, file_ids: Iterable[str]) -> None:
        """登记在代码块成功结束后才删除的旧文件."""
        self._discard.extend(file_ids)

    def __enter__(self) -> UploadSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc is None:
            if self._discard:
                self._remove_discarded()
            return False

        self.rollback(reason=exc)
        return False

    def _remove_discarded(self) -> None:
        file_ids = list(dict.fromkeys(self._discard))
        try:
            self.storage.remove_many(file_ids)
        except AppError as cleanup_error:
            # 记录已经写入成功, 旧文件残留只记日志.
            self._logger.error(
                "旧文件清理失败,以下文件可能残留",
                module="uploads",
                file_ids=file_ids,
                error=str(cleanup_error),
            )

    def rollback(self, *, reason: BaseException | None = None) -> None:
        """删除本会话写入的全部文件."""
        if not self._stored:
            return
        file_ids = [item.file_id for item in self._stored]
        self._logger.warning(
            "持久化失败,删除本次上传的文件",
            module="uploads",
            file_ids=file_ids,
            error_type=type(reason).__name__ if reason else None,
        )
        try:
            self.storage.remove_many(file_ids)
        except AppError as cleanup_error:
            # 清理失败不覆盖原始异常.
            self._logger.error(
                "回滚上传文件失败",
                module="uploads",
                file_ids=file_ids,
                error=str(cleanup_error),
            )
        self._stored.clear()


__all__ = ["UploadSession"]
