"""Fetch error classification."""

from enum import StrEnum


class ErrorKind(StrEnum):
    """抓取失败类型。"""

    TIMEOUT = "timeout"
    NETWORK = "network"
    PARSE = "parse"


# 匹配顺序即优先级：超时 > HTTP 状态 > 解析
_TIMEOUT_MARKERS = ("timeout", "deadline exceeded")
_HTTP_STATUS_MARKERS = ("404", "403", "500")
_PARSE_MARKERS = ("parse", "xml", "invalid")


def classify_error(message: str | BaseException) -> ErrorKind:
    """Map a fetch failure message to an :class:`ErrorKind`.

    Case-insensitive substring heuristic; anything unrecognised is a
    network error.
    """
    text = str(message).lower()

    if any(marker in text for marker in _TIMEOUT_MARKERS):
        return ErrorKind.TIMEOUT
    if any(marker in text for marker in _HTTP_STATUS_MARKERS):
        return ErrorKind.NETWORK
    if any(marker in text for marker in _PARSE_MARKERS):
        return ErrorKind.PARSE

    return ErrorKind.NETWORK
