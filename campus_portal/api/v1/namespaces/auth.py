"""Auth namespace (密码重置)."""

from __future__ import annotations

from flask_restx import Namespace, fields

from campus_portal.api.v1.models.envelope import get_error_envelope_model, make_success_envelope_model
from campus_portal.api.v1.resources.base import BaseResource
from campus_portal.constants import ContentType, HttpStatus, RequestMode
from campus_portal.constants.system_constants import SuccessMessages
from campus_portal.schemas.auth import PasswordResetRequestSchema, ResetPasswordSchema
from campus_portal.services.auth.password_reset_service import PasswordResetService

ns = Namespace("auth", description="认证")

ErrorEnvelope = get_error_envelope_model(ns)

PasswordResetRequestPayload = ns.model(
    "PasswordResetRequestPayload",
    {
        "email": fields.String(required=True, description="账号邮箱", example="admin@example.com"),
    },
)

ResetPasswordPayload = ns.model(
    "ResetPasswordPayload",
    {
        "token": fields.String(required=True, description="重置 token"),
        "password": fields.String(required=True, description="新密码(Fernet 密文)"),
        "confirm_password": fields.String(required=True, description="确认密码(Fernet 密文)"),
    },
)

PasswordResetData = ns.model(
    "PasswordResetData",
    {
        "email": fields.String(description="账号邮箱", example="admin@example.com"),
    },
)
PasswordResetSuccessEnvelope = make_success_envelope_model(ns, "PasswordResetSuccessEnvelope", PasswordResetData)

JSON_ONLY = (ContentType.JSON,)

_reset_service = PasswordResetService()


@ns.route("/password-reset-requests")
class PasswordResetRequestsResource(BaseResource):
    """密码重置申请."""

    @ns.expect(PasswordResetRequestPayload, validate=False)
    @ns.response(202, "Accepted", PasswordResetSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(415, "Unsupported Media Type", ErrorEnvelope)
    def post(self):
        """申请重置密码, token 通过邮件下发."""

        def _execute():
            command = self.parse(None, RequestMode.CREATE, PasswordResetRequestSchema, content_types=JSON_ONLY)
            entry = _reset_service.request_reset(command)
            return self.success(
                data={"email": entry["email"]},
                message="重置申请已受理",
                status=HttpStatus.ACCEPTED,
            )

        return self.safe_call(
            _execute,
            module="auth",
            action="request_password_reset",
            public_error="重置申请失败",
        )


@ns.route("/reset-password")
class ResetPasswordResource(BaseResource):
    """提交新密码."""

    @ns.expect(ResetPasswordPayload, validate=False)
    @ns.response(200, "OK", PasswordResetSuccessEnvelope)
    @ns.response(400, "Bad Request", ErrorEnvelope)
    @ns.response(404, "Not Found", ErrorEnvelope)
    @ns.response(415, "Unsupported Media Type", ErrorEnvelope)
    def post(self):
        """使用重置 token 设置新密码."""

        def _execute():
            command = self.parse(None, RequestMode.CREATE, ResetPasswordSchema, content_types=JSON_ONLY)
            result = _reset_service.reset_password(command)
            return self.success(data=result, message=SuccessMessages.PASSWORD_CHANGED)

        return self.safe_call(
            _execute,
            module="auth",
            action="reset_password",
            public_error="密码重置失败",
        )
