"""Error handling — exceptions, fail codes, classification and retry."""

from jimeng_errors.errors.exceptions import APIException, JimengError
from jimeng_errors.errors.fail_codes import FAIL_CODE_MAP, describe_fail_code
from jimeng_errors.errors.handler import (
    JimengErrorHandler,
    handle_api_response,
    handle_generation_failure,
    handle_network_error,
    handle_polling_timeout,
    with_retry,
)

__all__ = [
    "APIException",
    "JimengError",
    "JimengErrorHandler",
    "FAIL_CODE_MAP",
    "describe_fail_code",
    "handle_api_response",
    "handle_network_error",
    "handle_polling_timeout",
    "handle_generation_failure",
    "with_retry",
]
