"""OpenAPI: JSON Envelope Models.

仅用于文档表达; 实际响应以 `jsonify_unified_success` / `CampusPortalApi.handle_error` 为准.
"""

from __future__ import annotations

from flask_restx import Namespace, fields


def get_error_envelope_model(ns: Namespace):
    """注册/获取错误封套 Model."""
    model_name = "ErrorEnvelope"
    if model_name in ns.models:
        return ns.models[model_name]

    return ns.model(
        model_name,
        {
            "success": fields.Boolean(required=True, description="是否成功", example=False),
            "error": fields.Boolean(required=True, description="是否错误", example=True),
            "error_id": fields.String(required=True, description="错误ID", example="a1b2c3d4"),
            "category": fields.String(required=True, description="错误分类", example="validation"),
            "severity": fields.String(required=True, description="严重程度", example="medium"),
            "message_code": fields.String(required=True, description="错误码", example="VALIDATION_ERROR"),
            "message": fields.String(required=True, description="可展示的错误摘要", example="数据验证失败"),
            "timestamp": fields.String(required=True, description="时间戳(ISO8601)", example="2025-01-01T00:00:00"),
            "recoverable": fields.Boolean(required=True, description="是否可恢复", example=True),
            "suggestions": fields.List(fields.String, required=True, description="建议列表"),
            "context": fields.Raw(required=True, description="结构化上下文信息", example={}),
            "extra": fields.Raw(
                required=False,
                description="诊断字段; 校验失败时 errors 为全部字段错误",
                example={"errors": [{"field": "title", "message": "不能为空"}]},
            ),
        },
    )


def make_success_envelope_model(ns: Namespace, name: str, data_model=None):
    """构建成功封套 Model, data_model 可选."""
    envelope_fields: dict[str, fields.Raw] = {
        "success": fields.Boolean(required=True, description="是否成功", example=True),
        "error": fields.Boolean(required=True, description="是否错误", example=False),
        "message": fields.String(required=True, description="可展示的成功摘要", example="操作成功"),
        "timestamp": fields.String(required=True, description="时间戳(ISO8601)", example="2025-01-01T00:00:00"),
        "meta": fields.Raw(required=False, description="元数据(可选)", example={}),
    }

    if data_model is None:
        envelope_fields["data"] = fields.Raw(required=False, description="响应数据(可选)", example={})
    else:
        envelope_fields["data"] = fields.Nested(data_model, required=False, description="响应数据(可选)")

    return ns.model(name, envelope_fields)
