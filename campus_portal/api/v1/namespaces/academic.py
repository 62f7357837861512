"""Academic namespace (课表/成绩/招生表)."""

from __future__ import annotations

from flask import request
from flask_restx import Namespace, fields

from campus_portal.api.v1.models.envelope import get_error_envelope_model, make_success_envelope_model
from campus_portal.api.v1.resources.base import BaseResource
from campus_portal.constants import ContentType, HttpStatus, RequestMode
from campus_portal.constants.system_constants import SuccessMessages
from campus_portal.repositories.registry import ACADEMIC
from campus_portal.schemas.academic import (
    ACADEMIC_CREATE_SCHEMAS,
    ACADEMIC_LOOKUP_SCHEMAS,
    ACADEMIC_QUERY_SCHEMAS,
    ACADEMIC_UPDATE_SCHEMAS,
    AcademicUpdateSchema,
)
from campus_portal.schemas.registry import CATEGORY_FIELD
from campus_portal.services.content import ContentRecordService, attachment_fields

ns = Namespace("academic", description="教务资料")

ErrorEnvelope = get_error_envelope_model(ns)

AcademicRecordData = ns.model(
    "AcademicRecordData",
    {
        "record": fields.Raw(description="教务记录"),
    },
)
AcademicRecordSuccessEnvelope = make_success_envelope_model(ns, "AcademicRecordSuccessEnvelope", AcademicRecordData)

AcademicListData = ns.model(
    "AcademicListData",
    {
        "items": fields.List(fields.Raw, description="教务记录列表"),
        "total": fields.Integer(description="总数", example=1),
        "page": fields.Integer(description="页码", example=1),
        "pages": fields.Integer(description="总页数", example=1),
        "limit": fields.Integer(description="分页大小", example=20),
    },
)
AcademicListSuccessEnvelope = make_success_envelope_model(ns, "AcademicListSuccessEnvelope", AcademicListData)

CREATE_CONTENT_TYPES = (ContentType.FORM_DATA,)
UPDATE_CONTENT_TYPES = (ContentType.FORM_DATA, ContentType.FORM_URLENCODED)

_service = ContentRecordService(ACADEMIC, attachments=attachment_fields(AcademicUpdateSchema))


@ns.route("/<string:category_params>")
@ns.param("category_params", "分类: routine/result/admission_form")
class AcademicCollectionResource(BaseResource):
    """教务分类下的记录集合."""

    @ns.response(200, "OK", AcademicListSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def get(self, category_params: str):
        """按分类分页查询."""

        def _execute():
            query = self.parse({CATEGORY_FIELD: category_params}, RequestMode.QUERY, ACADEMIC_QUERY_SCHEMAS)
            return self.success(data=_service.list_records(query))

        return self.safe_call(
            _execute,
            module="academic",
            action="list_academic_records",
            public_error="获取教务资料失败",
            context={"category_params": category_params, "query": request.args.to_dict()},
        )

    @ns.response(201, "Created", AcademicRecordSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(409, "Conflict", ErrorEnvelope)
    @ns.response(415, "Unsupported Media Type", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def post(self, category_params: str):
        """创建教务记录(multipart, 附件字段 file)."""

        def _execute():
            with self.upload_session() as session:
                command = self.parse(
                    {CATEGORY_FIELD: category_params},
                    RequestMode.CREATE,
                    ACADEMIC_CREATE_SCHEMAS,
                    session=session,
                    content_types=CREATE_CONTENT_TYPES,
                )
                record = _service.create_record(command)
            return self.success(data={"record": record}, message=SuccessMessages.DATA_SAVED, status=HttpStatus.CREATED)

        return self.safe_call(
            _execute,
            module="academic",
            action="create_academic_record",
            public_error="教务资料创建失败",
            context={"category_params": category_params},
        )


@ns.route("/<string:category_params>/<string:record_id>")
@ns.param("category_params", "分类: routine/result/admission_form")
@ns.param("record_id", "记录 ID")
class AcademicDetailResource(BaseResource):
    """单条教务记录."""

    @ns.response(200, "OK", AcademicRecordSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def get(self, category_params: str, record_id: str):
        """获取教务记录详情."""

        def _execute():
            lookup = self.parse(
                {CATEGORY_FIELD: category_params, "id": record_id},
                RequestMode.QUERY,
                ACADEMIC_LOOKUP_SCHEMAS,
            )
            record = _service.get_record(lookup["id"], scope=lookup[CATEGORY_FIELD])
            return self.success(data={"record": record})

        return self.safe_call(
            _execute,
            module="academic",
            action="get_academic_record",
            public_error="获取教务资料失败",
            context={"category_params": category_params, "record_id": record_id},
        )

    @ns.response(200, "OK", AcademicRecordSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(409, "Conflict", ErrorEnvelope)
    @ns.response(415, "Unsupported Media Type", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def patch(self, category_params: str, record_id: str):
        """更新教务记录; 上传新 file 时替换旧文件."""

        def _execute():
            with self.upload_session() as session:
                command = self.parse(
                    {CATEGORY_FIELD: category_params, "id": record_id},
                    RequestMode.UPDATE,
                    ACADEMIC_UPDATE_SCHEMAS,
                    session=session,
                    content_types=UPDATE_CONTENT_TYPES,
                )
                record = _service.update_record(command, session)
            return self.success(data={"record": record}, message=SuccessMessages.DATA_UPDATED)

        return self.safe_call(
            _execute,
            module="academic",
            action="update_academic_record",
            public_error="教务资料更新失败",
            context={"category_params": category_params, "record_id": record_id},
        )

    @ns.response(200, "OK", AcademicRecordSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def delete(self, category_params: str, record_id: str):
        """删除教务记录及其附件."""

        def _execute():
            lookup = self.parse(
                {CATEGORY_FIELD: category_params, "id": record_id},
                RequestMode.DELETE,
                ACADEMIC_LOOKUP_SCHEMAS,
            )
            with self.upload_session() as session:
                record = _service.delete_record(lookup["id"], session, scope=lookup[CATEGORY_FIELD])
            return self.success(data={"record": record}, message=SuccessMessages.DATA_DELETED)

        return self.safe_call(
            _execute,
            module="academic",
            action="delete_academic_record",
            public_error="教务资料删除失败",
            context={"category_params": category_params, "record_id": record_id},
        )
