"""持久化实现."""

from campus_portal.repositories.memory_repository import InMemoryRecordRepository
from campus_portal.repositories.registry import get_repository, init_repositories

__all__ = ["InMemoryRecordRepository", "get_repository", "init_repositories"]
