"""Jimeng error handler — classification of API and transport failures.

Five entry points, available as static methods on ``JimengErrorHandler``
and as module-level aliases:

- ``handle_api_response``: failed API response body → ``APIException``
- ``handle_network_error``: raw transport error → ``APIException``
- ``handle_polling_timeout``: polling gave up; raises unless partial results exist
- ``handle_generation_failure``: job failed; raises unless partial results exist
- ``with_retry``: bounded fixed-delay retry around an async operation

The two partial-success handlers return ``None`` when ``item_count > 0``.
Callers reach them only on paths that may already hold partial results,
and must treat a normal return as "use what you have", not as full success.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from collections.abc import Awaitable, Callable, Iterator, Mapping
from typing import Any, NoReturn, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from jimeng_errors.config.defaults import (
    DEFAULT_API_CONTEXT,
    DEFAULT_NETWORK_CONTEXT,
    DEFAULT_OPERATION,
    DEFAULT_RETRY_CONTEXT,
    DEFAULT_RETRY_OPERATION,
)
from jimeng_errors.errors.exceptions import APIException
from jimeng_errors.errors.fail_codes import describe_fail_code
from jimeng_errors.types import ErrorResponse, ExceptionKind, HandlerOptions, MediaType

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ret code -> (kind, message template)
_RESPONSE_CODES: dict[str, tuple[ExceptionKind, str]] = {
    "1015": (
        ExceptionKind.TOKEN_EXPIRED,
        "[登录失效]: {errmsg}。请重新获取refresh_token并更新配置",
    ),
    "5000": (
        ExceptionKind.INSUFFICIENT_POINTS,
        "[积分不足]: {errmsg}。建议：1)尝试使用1024x1024分辨率，"
        "2)检查是否需要购买积分，3)确认账户状态正常",
    ),
    "4001": (ExceptionKind.CONTENT_FILTERED, "[内容违规]: {errmsg}"),
    "4002": (ExceptionKind.PARAMS_INVALID, "[参数错误]: {errmsg}"),
    "5001": (ExceptionKind.IMAGE_GENERATION_FAILED, "[生成失败]: {errmsg}"),
    "5002": (ExceptionKind.VIDEO_GENERATION_FAILED, "[视频生成失败]: {errmsg}"),
}

_MEDIA_LABELS: dict[MediaType, str] = {
    MediaType.IMAGE: "图像",
    MediaType.VIDEO: "视频",
}

_MEDIA_FAILURE_KINDS: dict[MediaType, ExceptionKind] = {
    MediaType.IMAGE: ExceptionKind.IMAGE_GENERATION_FAILED,
    MediaType.VIDEO: ExceptionKind.VIDEO_GENERATION_FAILED,
}

# Resolver failures surface as text when the gaierror itself is not chained
_DNS_FAILURE_HINTS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
)


def _resolve_options(
    options: HandlerOptions | None, overrides: Mapping[str, Any]
) -> HandlerOptions:
    if options is None:
        return HandlerOptions(**overrides)
    if overrides:
        return HandlerOptions.model_validate({**options.model_dump(), **overrides})
    return options


def _with_history(message: str, history_id: str | None) -> str:
    if history_id:
        return f"{message}（历史ID: {history_id}）"
    return message


def _error_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield the error followed by its explicit causes (``raise ... from``)."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def _is_timeout(error: BaseException) -> bool:
    return any(
        isinstance(exc, (httpx.TimeoutException, TimeoutError, ConnectionAbortedError))
        for exc in _error_chain(error)
    )


def _is_dns_failure(error: BaseException) -> bool:
    for exc in _error_chain(error):
        if isinstance(exc, socket.gaierror):
            return True
        if isinstance(exc, httpx.ConnectError):
            text = str(exc).lower()
            if any(hint in text for hint in _DNS_FAILURE_HINTS):
                return True
    return False


def _http_status(error: BaseException) -> int | None:
    for exc in _error_chain(error):
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
        if status is None:
            status = getattr(exc, "status_code", None)
        if isinstance(status, int):
            return status
    return None


def _error_message(error: BaseException) -> str:
    return str(error) or type(error).__name__


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, Exception) and not isinstance(exc, APIException)


class JimengErrorHandler:
    """Namespace for the Jimeng error-handling entry points."""

    @staticmethod
    def handle_api_response(
        response: ErrorResponse | Mapping[str, Any],
        options: HandlerOptions | None = None,
        **kwargs: Any,
    ) -> NoReturn:
        """Raise the typed exception for a failed API response.

        Known ``ret`` codes map to their own kind; anything else becomes
        ``REQUEST_FAILED`` with the raw code in the message.
        """
        if not isinstance(response, ErrorResponse):
            response = ErrorResponse.model_validate(response)
        opts = _resolve_options(options, kwargs)
        context = opts.context or DEFAULT_API_CONTEXT
        operation = opts.operation or DEFAULT_OPERATION
        history_id = response.history_id or opts.history_id

        logger.error(
            "%s failed: ret=%s, errmsg=%s%s",
            context,
            response.ret,
            response.errmsg,
            f", history_id={history_id}" if history_id else "",
        )

        mapped = _RESPONSE_CODES.get(response.ret)
        if mapped is not None:
            kind, template = mapped
            message = template.format(errmsg=response.errmsg)
        else:
            kind = ExceptionKind.REQUEST_FAILED
            message = f"[{operation}失败]: {response.errmsg} (错误码: {response.ret})"

        raise APIException(kind, _with_history(message, history_id), history_id=history_id)

    @staticmethod
    def handle_network_error(
        error: BaseException,
        options: HandlerOptions | None = None,
        **kwargs: Any,
    ) -> NoReturn:
        """Raise the typed exception for a raw transport error.

        Signals are checked in order: timeout, DNS failure, 5xx, 429.
        """
        opts = _resolve_options(options, kwargs)
        context = opts.context or DEFAULT_NETWORK_CONTEXT
        detail = _error_message(error)

        logger.error(
            "%s network error (attempt %d/%d): %s",
            context,
            opts.retry_count + 1,
            opts.max_retries + 1,
            detail,
        )

        status = _http_status(error)
        if _is_timeout(error):
            kind = ExceptionKind.REQUEST_TIMEOUT
            message = f"[请求超时]: {context}超时，请稍后重试"
        elif _is_dns_failure(error):
            kind = ExceptionKind.NETWORK_UNREACHABLE
            message = "[网络错误]: 无法连接到即梦服务器，请检查网络连接"
        elif status is not None and status >= 500:
            kind = ExceptionKind.SERVER_UNAVAILABLE
            message = f"[服务器错误]: 即梦服务器暂时不可用 ({status})"
        elif status == 429:
            kind = ExceptionKind.RATE_LIMITED
            message = "[请求频率限制]: 请求过于频繁，请稍后重试"
        else:
            kind = ExceptionKind.REQUEST_FAILED
            message = f"[{context}失败]: {detail}"

        raise APIException(
            kind,
            _with_history(message, opts.history_id),
            history_id=opts.history_id,
            http_status=status,
        ) from error

    @staticmethod
    def handle_polling_timeout(
        poll_count: int,
        max_poll_count: int,
        elapsed_seconds: float,
        status: int,
        item_count: int,
        history_id: str | None = None,
        media_type: MediaType = MediaType.IMAGE,
    ) -> None:
        """Handle a polling loop that ran out of attempts.

        Returns ``None`` when ``item_count > 0``: the caller should return
        the partial results it already holds. Raises otherwise.
        """
        media_type = MediaType(media_type)
        logger.warning(
            "Polling timed out: polls=%d/%d, elapsed=%ss, status=%s, items=%d%s",
            poll_count,
            max_poll_count,
            elapsed_seconds,
            status,
            item_count,
            f", history_id={history_id}" if history_id else "",
        )

        if item_count == 0:
            raise APIException(
                _MEDIA_FAILURE_KINDS[media_type],
                _with_history(f"生成超时且无结果，状态码: {status}", history_id),
                history_id=history_id,
            )

        logger.info("Polling timed out with %d items; returning partial results", item_count)

    @staticmethod
    def handle_generation_failure(
        status: int,
        fail_code: str | None = None,
        history_id: str | None = None,
        media_type: MediaType = MediaType.IMAGE,
        item_count: int = 0,
    ) -> None:
        """Handle a generation job that reported final failure.

        Returns ``None`` when ``item_count > 0`` (partial results win over
        the failure). Otherwise raises the media-specific generation failure
        with the resolved fail-code meaning.
        """
        media_type = MediaType(media_type)
        label = _MEDIA_LABELS[media_type]
        summary = "%s generation failed: status=%s, fail_code=%s%s, items=%d"
        summary_args = (
            media_type,
            status,
            fail_code,
            f", history_id={history_id}" if history_id else "",
            item_count,
        )

        if item_count > 0:
            logger.warning(summary, *summary_args)
            logger.info(
                "%s generation partially failed; returning %d existing results",
                media_type,
                item_count,
            )
            return

        meaning = describe_fail_code(fail_code)
        logger.error(summary + ", meaning=%s", *summary_args, meaning)
        message = f"{label}生成失败: {meaning}"
        if fail_code:
            message += f" (错误码: {fail_code})"
        raise APIException(
            _MEDIA_FAILURE_KINDS[media_type],
            _with_history(message, history_id),
            history_id=history_id,
            fail_code=fail_code,
        )

    @staticmethod
    async def with_retry(
        operation: Callable[[], Awaitable[T]],
        options: HandlerOptions | None = None,
        **kwargs: Any,
    ) -> T:
        """Run ``operation`` with up to ``max_retries`` fixed-delay retries.

        ``APIException`` is raised immediately. Other errors are retried
        after ``retry_delay`` seconds; the last one is classified by
        ``handle_network_error`` once attempts run out.
        """
        opts = _resolve_options(options, kwargs)
        context = opts.context or DEFAULT_RETRY_CONTEXT
        operation_name = opts.operation or DEFAULT_RETRY_OPERATION
        total_attempts = opts.max_retries + 1

        def _log_retry(retry_state: RetryCallState) -> None:
            exc = retry_state.outcome.exception() if retry_state.outcome else None
            logger.warning(
                "%s failed (attempt %d/%d): %s. Retrying in %.1fs",
                context,
                retry_state.attempt_number,
                total_attempts,
                exc,
                opts.retry_delay,
            )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(total_attempts),
            wait=wait_fixed(opts.retry_delay),
            retry=retry_if_exception(_is_retryable),
            before_sleep=_log_retry,
            sleep=asyncio.sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await operation()
        except APIException:
            raise
        except Exception as exc:
            JimengErrorHandler.handle_network_error(
                exc,
                context=context,
                history_id=opts.history_id,
                retry_count=opts.max_retries,
                max_retries=opts.max_retries,
                operation=operation_name,
            )


handle_api_response = JimengErrorHandler.handle_api_response
handle_network_error = JimengErrorHandler.handle_network_error
handle_polling_timeout = JimengErrorHandler.handle_polling_timeout
handle_generation_failure = JimengErrorHandler.handle_generation_failure
with_retry = JimengErrorHandler.with_retry
