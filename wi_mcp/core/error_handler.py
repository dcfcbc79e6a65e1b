"""
Tool invocation wrapper and error rendering
"""

import time
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from .errors import WIError, classify_error
from .logging_config import log_tool_error, log_tool_start, log_tool_success


async def with_error_handling(
    operation: Callable[[], Awaitable[Any]],
    tool_name: str,
    context: Optional[Mapping[str, Any]] = None,
) -> Any:
    """Run a tool body with start/success/error events.

    Failures leave as a classified :class:`WIError` chained to the original.
    """
    started = time.perf_counter()
    log_tool_start(tool_name, "execute", context)
    try:
        result = await operation()
    except Exception as exc:  # noqa: BLE001 - every failure is classified here
        duration_ms = (time.perf_counter() - started) * 1000
        error = classify_error(exc, tool_name, "execute")
        log_tool_error(tool_name, "execute", error, duration_ms, context)
        if error is exc:
            raise
        raise error from exc

    log_tool_success(tool_name, "execute", (time.perf_counter() - started) * 1000, context)
    return result


def render_error(error: BaseException, include_debug: bool = False) -> List[Dict[str, Any]]:
    """Turn any failure into response content blocks."""
    if not isinstance(error, WIError):
        error = classify_error(error)
    return error.to_response(include_debug=include_debug)
