"""校园门户 - 工具模块.

请求体解析、字段路径重建、结构化日志、统一响应等横切工具.
"""
