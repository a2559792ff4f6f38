"""
Ошибки клиента Pushbullet и разбор HTTP-статусов.

TransportError / ProtocolError / DecodeError: разные классы, чтобы вызывающий
код мог различать причину (сеть, ответ API, битый JSON).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    # не HTTP-статус: сеть и битый JSON
    TRANSPORT = "transport"
    DECODE = "decode"


ERROR_MESSAGES = {
    ErrorKind.BAD_REQUEST: "missing a required parameter",
    ErrorKind.UNAUTHORIZED: "no valid access token provided",
    ErrorKind.FORBIDDEN: "access token not valid for that request",
    ErrorKind.NOT_FOUND: "requested item doesn't exist",
    ErrorKind.RATE_LIMITED: "too many requests",
    ErrorKind.SERVER_ERROR: "something went wrong on the server side; response may not be valid JSON",
}

_STATUS_KINDS = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
}


def classify_status(status_code: int) -> Optional[ErrorKind]:
    """
    HTTP-статус -> ErrorKind, либо None если ошибки нет (в т.ч. все 2xx).

    Сначала точные коды, потом диапазон 5xx.
    """
    kind = _STATUS_KINDS.get(status_code)
    if kind is not None:
        return kind
    if 500 <= status_code < 600:
        return ErrorKind.SERVER_ERROR
    return None


class PushbulletError(RuntimeError):
    kind: Optional[ErrorKind] = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(PushbulletError):
    """Запрос не дошёл до API или ответ не был получен (DNS, соединение, таймаут)."""

    kind = ErrorKind.TRANSPORT


class ProtocolError(PushbulletError):
    """
    API ответил статусом из таблицы ошибок.

    body: распарсенное тело ответа, если оно оказалось валидным JSON
    (у Pushbullet там обычно {"error": {...}}), иначе None.
    """

    def __init__(
        self,
        kind: ErrorKind,
        status_code: int,
        *,
        body: Any = None,
        raw_body: str = "",
    ) -> None:
        super().__init__(ERROR_MESSAGES[kind])
        self.kind = kind
        self.status_code = status_code
        self.body = body
        self.raw_body = raw_body

    @property
    def partial_body(self) -> Any:
        return self.body

    def __str__(self) -> str:
        return f"HTTP {self.status_code} ({self.kind.value}): {self.message}"


class DecodeError(PushbulletError):
    """Статус успешный, но тело ответа не JSON."""

    kind = ErrorKind.DECODE

    def __init__(self, status_code: int, raw_body: str) -> None:
        super().__init__(f"HTTP {status_code}: response body is not valid JSON: {raw_body[:200]!r}")
        self.status_code = status_code
        self.raw_body = raw_body
