"""公告资源 schema."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from campus_portal.constants import IMAGE_MIME_TYPES
from campus_portal.schemas.base import PayloadSchema, QuerySchema, UpdatePayloadSchema
from campus_portal.schemas.common import FileIdList, RecordLookupSchema
from campus_portal.schemas.fields import (
    BooleanString,
    FileArray,
    FlexibleDate,
    RecordId,
    bounded_text,
    enum_choice,
)
from campus_portal.schemas.registry import CategorySchemaTable
from campus_portal.types.uploads import UploadDescriptor

TITLE_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500
MAX_FILES = 10


class AnnouncementCategory(str, Enum):
    """公告分类."""

    NOTICE = "Notice"
    LEAVE_CALENDAR = "Leave calendar"
    TRANSPORTATION = "Transportation"
    ADMISSION_INFO = "Admission info"


Title = bounded_text(TITLE_MAX_LENGTH)
Description = bounded_text(DESCRIPTION_MAX_LENGTH)
CategoryChoice = enum_choice(AnnouncementCategory)
_ATTACHMENTS = FileArray(IMAGE_MIME_TYPES, max_files=MAX_FILES, reference_key="file")


class AnnouncementCreateSchema(PayloadSchema):
    title: Title
    description: Description
    files: Annotated[list[UploadDescriptor], _ATTACHMENTS]
    date: FlexibleDate
    is_headline: BooleanString = False
    is_advertise: BooleanString = False
    advertise_mail_time: FlexibleDate | None = None


class AnnouncementUpdateSchema(UpdatePayloadSchema):
    id: RecordId
    category: CategoryChoice | None = None
    title: Title | None = None
    description: Description | None = None
    files: Annotated[list[UploadDescriptor] | None, _ATTACHMENTS] = None
    delete_files: FileIdList | None = None
    date: FlexibleDate | None = None
    is_headline: BooleanString | None = None
    is_advertise: BooleanString | None = None
    advertise_mail_time: FlexibleDate | None = None


class AnnouncementQuerySchema(QuerySchema):
    id: RecordId | None = None
    title: Title | None = None
    date: FlexibleDate | None = None
    is_headline: BooleanString | None = None
    is_advertise: BooleanString | None = None


ANNOUNCEMENT_CREATE_SCHEMAS = CategorySchemaTable(
    AnnouncementCategory,
    dict.fromkeys(AnnouncementCategory, AnnouncementCreateSchema),
)
ANNOUNCEMENT_UPDATE_SCHEMAS = CategorySchemaTable(
    AnnouncementCategory,
    dict.fromkeys(AnnouncementCategory, AnnouncementUpdateSchema),
)
ANNOUNCEMENT_QUERY_SCHEMAS = CategorySchemaTable(
    AnnouncementCategory,
    dict.fromkeys(AnnouncementCategory, AnnouncementQuerySchema),
)
ANNOUNCEMENT_LOOKUP_SCHEMAS = CategorySchemaTable(
    AnnouncementCategory,
    dict.fromkeys(AnnouncementCategory, RecordLookupSchema),
)
