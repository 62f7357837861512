"""Gallery namespace (相册照片)."""

from __future__ import annotations

from flask import request
from flask_restx import Namespace, fields

from campus_portal.api.v1.models.envelope import get_error_envelope_model, make_success_envelope_model
from campus_portal.api.v1.resources.base import BaseResource
from campus_portal.constants import ContentType, HttpStatus, RequestMode
from campus_portal.constants.system_constants import SuccessMessages
from campus_portal.repositories.registry import GALLERY_PHOTOS
from campus_portal.schemas.common import RecordLookupSchema
from campus_portal.schemas.gallery import GalleryPhotoCreateSchema, GalleryPhotoQuerySchema, GalleryPhotoUpdateSchema
from campus_portal.services.content import ContentRecordService, attachment_fields

ns = Namespace("gallery", description="相册")

ErrorEnvelope = get_error_envelope_model(ns)

GalleryPhotoData = ns.model(
    "GalleryPhotoData",
    {
        "photo": fields.Raw(description="相册记录, images 为 {image_id, image} 列表"),
    },
)
GalleryPhotoSuccessEnvelope = make_success_envelope_model(ns, "GalleryPhotoSuccessEnvelope", GalleryPhotoData)

GalleryPhotoListData = ns.model(
    "GalleryPhotoListData",
    {
        "items": fields.List(fields.Raw, description="相册列表"),
        "total": fields.Integer(description="总数", example=1),
        "page": fields.Integer(description="页码", example=1),
        "pages": fields.Integer(description="总页数", example=1),
        "limit": fields.Integer(description="分页大小", example=20),
    },
)
GalleryPhotoListSuccessEnvelope = make_success_envelope_model(
    ns,
    "GalleryPhotoListSuccessEnvelope",
    GalleryPhotoListData,
)

CREATE_CONTENT_TYPES = (ContentType.FORM_DATA,)
UPDATE_CONTENT_TYPES = (ContentType.FORM_DATA, ContentType.FORM_URLENCODED)

_service = ContentRecordService(
    GALLERY_PHOTOS,
    attachments=attachment_fields(GalleryPhotoUpdateSchema, {"images": "delete_images"}),
    scope_field=None,
)


@ns.route("/photos")
class GalleryPhotosResource(BaseResource):
    """相册集合."""

    @ns.response(200, "OK", GalleryPhotoListSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def get(self):
        """分页查询相册."""

        def _execute():
            query = self.parse(None, RequestMode.QUERY, GalleryPhotoQuerySchema)
            return self.success(data=_service.list_records(query))

        return self.safe_call(
            _execute,
            module="gallery",
            action="list_gallery_photos",
            public_error="获取相册失败",
            context={"query": request.args.to_dict()},
        )

    @ns.response(201, "Created", GalleryPhotoSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(409, "Conflict", ErrorEnvelope)
    @ns.response(415, "Unsupported Media Type", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def post(self):
        """创建相册(multipart, images 最多 10 张)."""

        def _execute():
            with self.upload_session() as session:
                command = self.parse(
                    None,
                    RequestMode.CREATE,
                    GalleryPhotoCreateSchema,
                    session=session,
                    content_types=CREATE_CONTENT_TYPES,
                )
                photo = _service.create_record(command)
            return self.success(data={"photo": photo}, message=SuccessMessages.DATA_SAVED, status=HttpStatus.CREATED)

        return self.safe_call(
            _execute,
            module="gallery",
            action="create_gallery_photo",
            public_error="相册创建失败",
        )


@ns.route("/photos/<string:record_id>")
@ns.param("record_id", "相册 ID")
class GalleryPhotoDetailResource(BaseResource):
    """单个相册."""

    @ns.response(200, "OK", GalleryPhotoSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(409, "Conflict", ErrorEnvelope)
    @ns.response(415, "Unsupported Media Type", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def patch(self, record_id: str):
        """更新相册; delete_images 中的图片在保存成功后删除."""

        def _execute():
            with self.upload_session() as session:
                command = self.parse(
                    {"id": record_id},
                    RequestMode.UPDATE,
                    GalleryPhotoUpdateSchema,
                    session=session,
                    content_types=UPDATE_CONTENT_TYPES,
                )
                photo = _service.update_record(command, session)
            return self.success(data={"photo": photo}, message=SuccessMessages.DATA_UPDATED)

        return self.safe_call(
            _execute,
            module="gallery",
            action="update_gallery_photo",
            public_error="相册更新失败",
            context={"record_id": record_id},
        )

    @ns.response(200, "OK", GalleryPhotoSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def delete(self, record_id: str):
        """删除相册及其图片."""

        def _execute():
            lookup = self.parse({"id": record_id}, RequestMode.DELETE, RecordLookupSchema)
            with self.upload_session() as session:
                photo = _service.delete_record(lookup["id"], session)
            return self.success(data={"photo": photo}, message=SuccessMessages.DATA_DELETED)

        return self.safe_call(
            _execute,
            module="gallery",
            action="delete_gallery_photo",
            public_error="相册删除失败",
            context={"record_id": record_id},
        )
