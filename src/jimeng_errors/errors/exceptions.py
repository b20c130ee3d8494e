"""Custom exception hierarchy for jimeng_errors."""

from __future__ import annotations

from typing import Any

from jimeng_errors.types import ExceptionKind

# Numeric codes surfaced to API consumers. Transport kinds refine
# "request failed" and share its code.
_ERRCODES: dict[ExceptionKind, int] = {
    ExceptionKind.PARAMS_INVALID: -2000,
    ExceptionKind.REQUEST_FAILED: -2001,
    ExceptionKind.TOKEN_EXPIRED: -2002,
    ExceptionKind.CONTENT_FILTERED: -2006,
    ExceptionKind.IMAGE_GENERATION_FAILED: -2007,
    ExceptionKind.VIDEO_GENERATION_FAILED: -2008,
    ExceptionKind.INSUFFICIENT_POINTS: -2009,
    ExceptionKind.REQUEST_TIMEOUT: -2001,
    ExceptionKind.NETWORK_UNREACHABLE: -2001,
    ExceptionKind.SERVER_UNAVAILABLE: -2001,
    ExceptionKind.RATE_LIMITED: -2001,
}


class JimengError(Exception):
    """Base exception for all jimeng_errors errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class APIException(JimengError):
    """Classified API failure; never retried.

    The kind tells callers which failure occurred; the message is the
    operator-facing diagnostic.
    """

    def __init__(
        self,
        kind: ExceptionKind,
        message: str = "",
        history_id: str | None = None,
        http_status: int | None = None,
        fail_code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.history_id = history_id
        self.http_status = http_status
        self.fail_code = fail_code

    @property
    def errcode(self) -> int:
        return _ERRCODES[self.kind]

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.errcode, "kind": str(self.kind), "message": self.message}
