"""校园门户 - 请求 schema(pydantic).

- `base`: 写路径/更新/查询的基础 schema
- `fields`: 可复用字段类型(布尔字符串、日期、加密密码、文件数组等)
- `registry`: 按路由分类参数选择 schema
- `validation`: 校验结果与 SchemaValidationError 映射
"""
