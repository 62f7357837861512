"""Files namespace (已上传文件)."""

from __future__ import annotations

from flask_restx import Namespace, fields

from campus_portal.api.v1.models.envelope import get_error_envelope_model, make_success_envelope_model
from campus_portal.api.v1.resources.base import BaseResource
from campus_portal.constants.system_constants import SuccessMessages
from campus_portal.services.uploads import delete_file

ns = Namespace("files", description="文件管理")

ErrorEnvelope = get_error_envelope_model(ns)

FileDeleteData = ns.model(
    "FileDeleteData",
    {
        "file_id": fields.String(description="文件 ID"),
    },
)
FileDeleteSuccessEnvelope = make_success_envelope_model(ns, "FileDeleteSuccessEnvelope", FileDeleteData)


@ns.route("/<path:file_id>")
@ns.param("file_id", "上传时返回的 file_id")
class FileResource(BaseResource):
    """单个已上传文件."""

    @ns.response(200, "OK", FileDeleteSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def delete(self, file_id: str):
        """删除文件; 文件不存在同样返回成功."""

        def _execute():
            delete_file(file_id)
            return self.success(data={"file_id": file_id}, message=SuccessMessages.FILE_DELETED)

        return self.safe_call(
            _execute,
            module="files",
            action="delete_file",
            public_error="文件删除失败",
            context={"file_id": file_id},
        )
