"""根据入站请求推导文件访问链接的 base URL."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flask import Request

LOCAL_HOSTNAMES = frozenset({"localhost", "127.0.0.1", "::1"})


def build_base_url(request: Request, *, force_https: bool = False) -> str:
    """返回 ``scheme://host[:port]``.

    本机访问使用 http, 其余主机默认 https; ``force_https`` 或请求本身为 https 时一律 https.

    Example:
        >>> build_base_url(request)  # Host: localhost:5000
        'http://localhost:5000'

    """
    host = request.host
    if host.startswith("["):
        hostname = host[1:].split("]", 1)[0]
    else:
        hostname = host.rsplit(":", 1)[0]
    if force_https or request.scheme == "https":
        scheme = "https"
    elif hostname in LOCAL_HOSTNAMES:
        scheme = "http"
    else:
        scheme = "https"
    return f"{scheme}://{host}"


__all__ = ["LOCAL_HOSTNAMES", "build_base_url"]
