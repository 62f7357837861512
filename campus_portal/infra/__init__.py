"""基础设施层: 与 Flask 请求生命周期绑定的横切能力."""
