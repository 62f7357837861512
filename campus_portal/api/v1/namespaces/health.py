"""Health namespace."""

from __future__ import annotations

from flask import current_app
from flask_restx import Namespace, fields

from campus_portal.api.v1.models.envelope import get_error_envelope_model, make_success_envelope_model
from campus_portal.api.v1.resources.base import BaseResource

ns = Namespace("health", description="健康检查")

PingData = ns.model(
    "HealthPingData",
    {
        "status": fields.String(required=True, description="服务状态", example="ok"),
        "version": fields.String(required=True, description="版本号", example="0.3.0"),
    },
)

PingSuccessEnvelope = make_success_envelope_model(ns, "HealthPingSuccessEnvelope", PingData)
ErrorEnvelope = get_error_envelope_model(ns)


@ns.route("/ping")
class HealthPingResource(BaseResource):
    """存活探针."""

    @ns.response(200, "OK", PingSuccessEnvelope)
    @ns.response(500, "Internal Server Error", ErrorEnvelope)
    def get(self):
        """返回服务状态."""
        return self.success(
            data={"status": "ok", "version": current_app.config.get("APP_VERSION")},
            message="健康检查成功",
        )
