"""Shared Pydantic models for jimeng_errors."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jimeng_errors.config.defaults import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY
from jimeng_errors.config.hierarchy import load_config_hierarchy

# ── Enums ──


class ExceptionKind(StrEnum):
    TOKEN_EXPIRED = "token_expired"
    INSUFFICIENT_POINTS = "insufficient_points"
    CONTENT_FILTERED = "content_filtered"
    PARAMS_INVALID = "params_invalid"
    IMAGE_GENERATION_FAILED = "image_generation_failed"
    VIDEO_GENERATION_FAILED = "video_generation_failed"
    REQUEST_FAILED = "request_failed"
    REQUEST_TIMEOUT = "request_timeout"
    NETWORK_UNREACHABLE = "network_unreachable"
    SERVER_UNAVAILABLE = "server_unavailable"
    RATE_LIMITED = "rate_limited"


class MediaType(StrEnum):
    IMAGE = "image"
    VIDEO = "video"


# ── Runtime models ──


class ErrorResponse(BaseModel):
    """Failed response body returned by the Jimeng API."""

    model_config = ConfigDict(populate_by_name=True)

    ret: str
    errmsg: str = ""
    data: Any = None
    history_id: str | None = Field(default=None, alias="historyId")

    @field_validator("ret", mode="before")
    @classmethod
    def _coerce_ret(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value


class HandlerOptions(BaseModel):
    context: str | None = None
    history_id: str | None = None
    retry_count: int = Field(default=0, ge=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0)
    operation: str | None = None

    @classmethod
    def from_config(cls, **overrides: Any) -> HandlerOptions:
        """Build options from the config hierarchy, runtime overrides last."""
        config = load_config_hierarchy(**overrides)
        return cls(**{k: v for k, v in config.items() if k in cls.model_fields})
