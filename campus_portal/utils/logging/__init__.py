"""日志辅助子模块: 上下文变量、错误元数据推导与 structlog 处理器."""
