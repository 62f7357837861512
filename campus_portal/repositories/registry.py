"""按资源名称注册 Repository, 实例挂在 ``app.extensions`` 上."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Flask, current_app

from campus_portal.repositories.memory_repository import InMemoryRecordRepository
from campus_portal.types import RecordRepository

EXTENSION_KEY = "campus_portal.repositories"

ACADEMIC = "academic"
ANNOUNCEMENTS = "announcements"
GALLERY_PHOTOS = "gallery_photos"
PASSWORD_RESETS = "password_resets"
DEFAULT_COLLECTIONS: tuple[str, ...] = (ACADEMIC, ANNOUNCEMENTS, GALLERY_PHOTOS, PASSWORD_RESETS)


def init_repositories(
    app: Flask,
    collections: Iterable[str] = DEFAULT_COLLECTIONS,
) -> dict[str, RecordRepository]:
    """为每个集合创建内存 Repository."""
    repositories: dict[str, RecordRepository] = {name: InMemoryRecordRepository(name) for name in collections}
    app.extensions[EXTENSION_KEY] = repositories
    return repositories


def get_repository(name: str) -> RecordRepository:
    return current_app.extensions[EXTENSION_KEY][name]


__all__ = [
    "ACADEMIC",
    "ANNOUNCEMENTS",
    "DEFAULT_COLLECTIONS",
    "GALLERY_PHOTOS",
    "PASSWORD_RESETS",
    "get_repository",
    "init_repositories",
]
