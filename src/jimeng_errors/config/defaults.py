"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Default retry settings
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 5.0  # seconds

# Default labels used in diagnostics
DEFAULT_API_CONTEXT = "即梦API请求"
DEFAULT_NETWORK_CONTEXT = "网络请求"
DEFAULT_RETRY_CONTEXT = "操作"
DEFAULT_OPERATION = "操作"
DEFAULT_RETRY_OPERATION = "请求"

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "max_retries": DEFAULT_MAX_RETRIES,
        "retry_delay": DEFAULT_RETRY_DELAY,
        "log_level": DEFAULT_LOG_LEVEL,
    }
