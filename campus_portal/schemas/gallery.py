"""相册照片 schema."""

from __future__ import annotations

from typing import Annotated

from campus_portal.constants import IMAGE_MIME_TYPES
from campus_portal.schemas.base import PayloadSchema, QuerySchema, UpdatePayloadSchema
from campus_portal.schemas.common import FileIdList
from campus_portal.schemas.fields import FileArray, RecordId, bounded_text
from campus_portal.types.uploads import UploadDescriptor

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
MAX_IMAGES = 10

Title = bounded_text(TITLE_MAX_LENGTH)
Description = bounded_text(DESCRIPTION_MAX_LENGTH)
_IMAGES = FileArray(IMAGE_MIME_TYPES, max_files=MAX_IMAGES, reference_key="image")


class GalleryPhotoCreateSchema(PayloadSchema):
    title: Title
    description: Description
    images: Annotated[list[UploadDescriptor], _IMAGES]


class GalleryPhotoUpdateSchema(UpdatePayloadSchema):
    """更新相册; ``delete_images`` 中的图片在保存成功后删除."""

    id: RecordId
    title: Title | None = None
    description: Description | None = None
    images: Annotated[list[UploadDescriptor] | None, _IMAGES] = None
    delete_images: FileIdList | None = None


class GalleryPhotoQuerySchema(QuerySchema):
    id: RecordId | None = None
    title: Title | None = None
