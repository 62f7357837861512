"""Announcements namespace (通知/校历/交通/招生信息)."""

from __future__ import annotations

from flask import request
from flask_restx import Namespace, fields

from campus_portal.api.v1.models.envelope import get_error_envelope_model, make_success_envelope_model
from campus_portal.api.v1.resources.base import BaseResource
from campus_portal.constants import ContentType, HttpStatus, RequestMode
from campus_portal.constants.system_constants import SuccessMessages
from campus_portal.repositories.registry import ANNOUNCEMENTS
from campus_portal.schemas.announcements import (
    ANNOUNCEMENT_CREATE_SCHEMAS,
    ANNOUNCEMENT_LOOKUP_SCHEMAS,
    ANNOUNCEMENT_QUERY_SCHEMAS,
    ANNOUNCEMENT_UPDATE_SCHEMAS,
    AnnouncementUpdateSchema,
)
from campus_portal.schemas.registry import CATEGORY_FIELD
from campus_portal.services.content import ContentRecordService, attachment_fields

ns = Namespace("announcements", description="公告")

ErrorEnvelope = get_error_envelope_model(ns)

AnnouncementRecordData = ns.model(
    "AnnouncementRecordData",
    {
        "record": fields.Raw(description="公告"),
    },
)
AnnouncementRecordSuccessEnvelope = make_success_envelope_model(
    ns,
    "AnnouncementRecordSuccessEnvelope",
    AnnouncementRecordData,
)

AnnouncementListData = ns.model(
    "AnnouncementListData",
    {
        "items": fields.List(fields.Raw, description="公告列表"),
        "total": fields.Integer(description="总数", example=1),
        "page": fields.Integer(description="页码", example=1),
        "pages": fields.Integer(description="总页数", example=1),
        "limit": fields.Integer(description="分页大小", example=20),
    },
)
AnnouncementListSuccessEnvelope = make_success_envelope_model(
    ns,
    "AnnouncementListSuccessEnvelope",
    AnnouncementListData,
)

CREATE_CONTENT_TYPES = (ContentType.FORM_DATA,)
UPDATE_CONTENT_TYPES = (ContentType.FORM_DATA, ContentType.FORM_URLENCODED)

_service = ContentRecordService(
    ANNOUNCEMENTS,
    attachments=attachment_fields(AnnouncementUpdateSchema, {"files": "delete_files"}),
)


@ns.route("/<string:category_params>")
@ns.param("category_params", "分类: notice/leave_calendar/transportation/admission_info")
class AnnouncementCollectionResource(BaseResource):
    """公告分类下的记录集合."""

    @ns.response(200, "OK", AnnouncementListSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def get(self, category_params: str):
        """按分类分页查询."""

        def _execute():
            query = self.parse({CATEGORY_FIELD: category_params}, RequestMode.QUERY, ANNOUNCEMENT_QUERY_SCHEMAS)
            return self.success(data=_service.list_records(query))

        return self.safe_call(
            _execute,
            module="announcements",
            action="list_announcements",
            public_error="获取公告失败",
            context={"category_params": category_params, "query": request.args.to_dict()},
        )

    @ns.response(201, "Created", AnnouncementRecordSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(409, "Conflict", ErrorEnvelope)
    @ns.response(415, "Unsupported Media Type", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def post(self, category_params: str):
        """创建公告(multipart, 附件字段 files, 最多 10 张图片)."""

        def _execute():
            with self.upload_session() as session:
                command = self.parse(
                    {CATEGORY_FIELD: category_params},
                    RequestMode.CREATE,
                    ANNOUNCEMENT_CREATE_SCHEMAS,
                    session=session,
                    content_types=CREATE_CONTENT_TYPES,
                )
                record = _service.create_record(command)
            return self.success(data={"record": record}, message=SuccessMessages.DATA_SAVED, status=HttpStatus.CREATED)

        return self.safe_call(
            _execute,
            module="announcements",
            action="create_announcement",
            public_error="公告创建失败",
            context={"category_params": category_params},
        )


@ns.route("/<string:category_params>/<string:record_id>")
@ns.param("category_params", "分类: notice/leave_calendar/transportation/admission_info")
@ns.param("record_id", "记录 ID")
class AnnouncementDetailResource(BaseResource):
    """单条公告."""

    @ns.response(200, "OK", AnnouncementRecordSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def get(self, category_params: str, record_id: str):
        """获取公告详情."""

        def _execute():
            lookup = self.parse(
                {CATEGORY_FIELD: category_params, "id": record_id},
                RequestMode.QUERY,
                ANNOUNCEMENT_LOOKUP_SCHEMAS,
            )
            record = _service.get_record(lookup["id"], scope=lookup[CATEGORY_FIELD])
            return self.success(data={"record": record})

        return self.safe_call(
            _execute,
            module="announcements",
            action="get_announcement",
            public_error="获取公告失败",
            context={"category_params": category_params, "record_id": record_id},
        )

    @ns.response(200, "OK", AnnouncementRecordSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(409, "Conflict", ErrorEnvelope)
    @ns.response(415, "Unsupported Media Type", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def patch(self, category_params: str, record_id: str):
        """更新公告; 新上传的 files 追加到现有附件, delete_files 中的附件在保存成功后删除."""

        def _execute():
            with self.upload_session() as session:
                command = self.parse(
                    {CATEGORY_FIELD: category_params, "id": record_id},
                    RequestMode.UPDATE,
                    ANNOUNCEMENT_UPDATE_SCHEMAS,
                    session=session,
                    content_types=UPDATE_CONTENT_TYPES,
                )
                record = _service.update_record(command, session)
            return self.success(data={"record": record}, message=SuccessMessages.DATA_UPDATED)

        return self.safe_call(
            _execute,
            module="announcements",
            action="update_announcement",
            public_error="公告更新失败",
            context={"category_params": category_params, "record_id": record_id},
        )

    @ns.response(200, "OK", AnnouncementRecordSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def delete(self, category_params: str, record_id: str):
        """删除公告及其附件."""

        def _execute():
            lookup = self.parse(
                {CATEGORY_FIELD: category_params, "id": record_id},
                RequestMode.DELETE,
                ANNOUNCEMENT_LOOKUP_SCHEMAS,
            )
            with self.upload_session() as session:
                record = _service.delete_record(lookup["id"], session, scope=lookup[CATEGORY_FIELD])
            return self.success(data={"record": record}, message=SuccessMessages.DATA_DELETED)

        return self.safe_call(
            _execute,
            module="announcements",
            action="delete_announcement",
            public_error="公告删除失败",
            context={"category_params": category_params, "record_id": record_id},
        )
