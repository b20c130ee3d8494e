"""jimeng_errors — error classification and retry policy for the Jimeng API."""

from jimeng_errors.errors import (
    FAIL_CODE_MAP,
    APIException,
    JimengError,
    JimengErrorHandler,
    describe_fail_code,
    handle_api_response,
    handle_generation_failure,
    handle_network_error,
    handle_polling_timeout,
    with_retry,
)
from jimeng_errors.types import ErrorResponse, ExceptionKind, HandlerOptions, MediaType

__version__ = "0.1.0"

__all__ = [
    "APIException",
    "ErrorResponse",
    "ExceptionKind",
    "FAIL_CODE_MAP",
    "HandlerOptions",
    "JimengError",
    "JimengErrorHandler",
    "MediaType",
    "describe_fail_code",
    "handle_api_response",
    "handle_generation_failure",
    "handle_network_error",
    "handle_polling_timeout",
    "with_retry",
]
