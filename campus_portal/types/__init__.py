"""共享类型定义."""

from campus_portal.types.repositories import RecordRepository
from campus_portal.types.structures import (
    CandidateRecord,
    ContextDict,
    ContextValue,
    JsonDict,
    JsonValue,
    LoggerExtra,
    LoggerProtocol,
    RecordValue,
    RouteParams,
    RouteSafetyOptions,
    ScalarValue,
    StructlogEventDict,
)
from campus_portal.types.uploads import StoredFile, UploadDescriptor

__all__ = [
    "CandidateRecord",
    "ContextDict",
    "ContextValue",
    "JsonDict",
    "JsonValue",
    "LoggerExtra",
    "LoggerProtocol",
    "RecordRepository",
    "RecordValue",
    "RouteParams",
    "RouteSafetyOptions",
    "ScalarValue",
    "StoredFile",
    "StructlogEventDict",
    "UploadDescriptor",
]
