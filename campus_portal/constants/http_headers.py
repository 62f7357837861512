"""HTTP头常量.

定义常用的HTTP头名称，避免魔法字符串。
"""


class HttpHeaders:
    """HTTP头常量."""

    CONTENT_TYPE = "Content-Type"
    CONTENT_LENGTH = "Content-Length"
    HOST = "Host"
    USER_AGENT = "User-Agent"

    X_FORWARDED_PROTO = "X-Forwarded-Proto"
    X_FORWARDED_HOST = "X-Forwarded-Host"
    X_REQUEST_ID = "X-Request-ID"
