"""Generation fail codes reported while polling a Jimeng job."""

from __future__ import annotations

from types import MappingProxyType

FAIL_CODE_MAP = MappingProxyType({
    # Content moderation
    "2038": "输入的文字不符合平台规则，请修改后重试",
    "2043": "生成的内容不符合平台规则，已被拦截",
    "2044": "输入的图片不符合平台规则，请更换图片后重试",
    "2045": "输入的视频不符合平台规则，请更换视频后重试",
    # Credits and server-side failures
    "5000": "即梦积分不足，请充值或更换账号",
    "5001": "服务端生成失败，请稍后重试",
    "5002": "视频生成失败，服务端内部错误",
    # Parameters and request fingerprint
    "1000": "请求参数无效 (invalid parameter)",
    "1019": "TLS指纹校验失败 (shark not pass)，请确认 browser_proxy 是否正常运行",
    # Timeouts and queueing
    "3001": "生成任务超时，服务器繁忙，请稍后重试",
    "3002": "排队超时，当前用户过多，请稍后重试",
})

UNKNOWN_ERROR = "未知错误"


def describe_fail_code(fail_code: str | None) -> str:
    """Return a human-readable explanation for a fail code."""
    if not fail_code:
        return UNKNOWN_ERROR
    return FAIL_CODE_MAP.get(
        fail_code, f"未知错误码 {fail_code}（请在即梦官网查看该错误码含义）"
    )
