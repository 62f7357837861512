"""教务资源(课表/成绩/招生表) schema."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from campus_portal.constants import DOCUMENT_MIME_TYPES, IMAGE_MIME_TYPES
from campus_portal.schemas.base import PayloadSchema, QuerySchema, UpdatePayloadSchema
from campus_portal.schemas.common import RecordLookupSchema
from campus_portal.schemas.fields import FileArray, FlexibleDate, RecordId, bounded_text, enum_choice
from campus_portal.schemas.registry import CategorySchemaTable
from campus_portal.types.uploads import UploadDescriptor

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 2000
BADGE_MAX_LENGTH = 20


class AcademicCategory(str, Enum):
    """教务分类, 取值为路由参数规范化后的结果."""

    ROUTINE = "Routine"
    RESULT = "Result"
    ADMISSION_FORM = "Admission form"


Title = bounded_text(TITLE_MAX_LENGTH)
Description = bounded_text(DESCRIPTION_MAX_LENGTH)
Badge = bounded_text(BADGE_MAX_LENGTH)
CategoryChoice = enum_choice(AcademicCategory)
AcademicFile = Annotated[list[UploadDescriptor], FileArray(DOCUMENT_MIME_TYPES + IMAGE_MIME_TYPES)]
# 招生表只接受 PDF.
AdmissionFormFile = Annotated[list[UploadDescriptor], FileArray(DOCUMENT_MIME_TYPES)]


class AcademicCreateSchema(PayloadSchema):
    title: Title
    description: Description
    file: AcademicFile
    publish_date: FlexibleDate
    badge: Badge


class AdmissionFormCreateSchema(AcademicCreateSchema):
    file: AdmissionFormFile


class AcademicUpdateSchema(UpdatePayloadSchema):
    id: RecordId
    category: CategoryChoice | None = None
    title: Title | None = None
    description: Description | None = None
    file: Annotated[list[UploadDescriptor] | None, FileArray(DOCUMENT_MIME_TYPES + IMAGE_MIME_TYPES)] = None
    publish_date: FlexibleDate | None = None
    badge: Badge | None = None


class AdmissionFormUpdateSchema(AcademicUpdateSchema):
    file: Annotated[list[UploadDescriptor] | None, FileArray(DOCUMENT_MIME_TYPES)] = None


class AcademicQuerySchema(QuerySchema):
    id: RecordId | None = None
    title: Title | None = None
    publish_date: FlexibleDate | None = None
    badge: Badge | None = None


ACADEMIC_CREATE_SCHEMAS = CategorySchemaTable(
    AcademicCategory,
    {
        AcademicCategory.ROUTINE: AcademicCreateSchema,
        AcademicCategory.RESULT: AcademicCreateSchema,
        AcademicCategory.ADMISSION_FORM: AdmissionFormCreateSchema,
    },
)
ACADEMIC_UPDATE_SCHEMAS = CategorySchemaTable(
    AcademicCategory,
    {
        AcademicCategory.ROUTINE: AcademicUpdateSchema,
        AcademicCategory.RESULT: AcademicUpdateSchema,
        AcademicCategory.ADMISSION_FORM: AdmissionFormUpdateSchema,
    },
)
ACADEMIC_QUERY_SCHEMAS = CategorySchemaTable(
    AcademicCategory,
    dict.fromkeys(AcademicCategory, AcademicQuerySchema),
)
ACADEMIC_LOOKUP_SCHEMAS = CategorySchemaTable(
    AcademicCategory,
    dict.fromkeys(AcademicCategory, RecordLookupSchema),
)
