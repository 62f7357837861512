"""文本规范化工具."""

from __future__ import annotations

import re

_WHITESPACE_PATTERN = re.compile(r"\s+")


def collapse_whitespace(value: str) -> str:
    """把连续空白折叠为单个空格并去除首尾空白."""
    return _WHITESPACE_PATTERN.sub(" ", value).strip()


def to_sentence_case(value: str) -> str:
    """首字母大写, 其余小写.

    Example:
        >>> to_sentence_case("ADMISSION form")
        'Admission form'

    """
    if not value:
        return value
    return value[0].upper() + value[1:].lower()


__all__ = ["collapse_whitespace", "to_sentence_case"]
