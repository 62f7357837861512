"""请求解析与校验流水线."""

from campus_portal.services.ingestion.completeness import enforce_completeness
from campus_portal.services.ingestion.pipeline import parse_and_validate
from campus_portal.services.ingestion.source_merger import merge_sources

__all__ = ["enforce_completeness", "merge_sources", "parse_and_validate"]
