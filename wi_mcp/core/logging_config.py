"""
Logging setup
"""

import logging
import sys
from typing import Any, Mapping, Optional

import structlog


_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
]


def _level(level: str) -> int:
    return _LEVELS.get(level.lower(), logging.INFO)


def _extra(context: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    reserved = {"event", "tool", "operation", "duration_ms", "code", "error", "retryable"}
    return {key: value for key, value in (context or {}).items() if key not in reserved}


def setup_logging(level: str = "info", log_format: str = "text", enable_colors: bool = False) -> None:
    """Route stdlib and structlog output to stderr.

    stdout belongs to the MCP stdio transport, so nothing may be written there.
    """
    log_level = _level(level)

    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=enable_colors)

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_SHARED_PROCESSORS,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Third-party chatter
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("mcp").setLevel(max(log_level, logging.INFO))
    logging.getLogger("fastmcp").setLevel(max(log_level, logging.INFO))

    structlog.get_logger(__name__).debug("logging_configured", level=level, format=log_format)


def get_logger(name: str):
    return structlog.get_logger(name)


def log_tool_start(tool: str, operation: str, context: Optional[Mapping[str, Any]] = None) -> None:
    get_logger("wi_mcp.tools").debug(
        "tool_start", tool=tool, operation=operation, **_extra(context)
    )


def log_tool_success(
    tool: str, operation: str, duration_ms: float, context: Optional[Mapping[str, Any]] = None
) -> None:
    get_logger("wi_mcp.tools").info(
        "tool_success",
        tool=tool,
        operation=operation,
        duration_ms=round(duration_ms, 1),
        **_extra(context),
    )


def log_tool_error(
    tool: str,
    operation: str,
    error: BaseException,
    duration_ms: float,
    context: Optional[Mapping[str, Any]] = None,
) -> None:
    code = getattr(error, "code", None)
    get_logger("wi_mcp.tools").error(
        "tool_error",
        tool=tool,
        operation=operation,
        code=getattr(code, "value", code),
        error=str(error),
        retryable=getattr(error, "retryable", None),
        duration_ms=round(duration_ms, 1),
        **_extra(context),
    )


def log_api_request(method: str, url: str, operation: Optional[str] = None) -> None:
    get_logger("wi_mcp.api").debug("api_request", method=method, url=url, operation=operation)


def log_api_response(
    method: str, url: str, status_code: int, duration_ms: float, operation: Optional[str] = None
) -> None:
    logger = get_logger("wi_mcp.api")
    emit = logger.warning if status_code >= 400 else logger.debug
    emit(
        "api_response",
        method=method,
        url=url,
        status_code=status_code,
        duration_ms=round(duration_ms, 1),
        operation=operation,
    )
