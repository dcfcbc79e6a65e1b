from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

import httpx


class ErrorCode(str, Enum):
    # Authentication
    AUTH_TOKEN_MISSING = "AUTH_TOKEN_MISSING"
    AUTH_TOKEN_INVALID = "AUTH_TOKEN_INVALID"
    AUTH_TOKEN_EXPIRED = "AUTH_TOKEN_EXPIRED"

    # Upstream API
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_RESPONSE_INVALID = "API_RESPONSE_INVALID"
    API_RATE_LIMITED = "API_RATE_LIMITED"
    API_SERVER_ERROR = "API_SERVER_ERROR"

    # GraphQL
    GRAPHQL_QUERY_FAILED = "GRAPHQL_QUERY_FAILED"
    GRAPHQL_VALIDATION_ERROR = "GRAPHQL_VALIDATION_ERROR"
    GRAPHQL_SYNTAX_ERROR = "GRAPHQL_SYNTAX_ERROR"

    # Tool execution
    TOOL_EXECUTION_FAILED = "TOOL_EXECUTION_FAILED"
    TOOL_INVALID_INPUT = "TOOL_INVALID_INPUT"
    TOOL_MISSING_REQUIRED_PARAM = "TOOL_MISSING_REQUIRED_PARAM"

    # File upload
    UPLOAD_FILE_NOT_FOUND = "UPLOAD_FILE_NOT_FOUND"
    UPLOAD_SESSION_FAILED = "UPLOAD_SESSION_FAILED"
    UPLOAD_URL_GENERATION_FAILED = "UPLOAD_URL_GENERATION_FAILED"
    UPLOAD_NETWORK_ERROR = "UPLOAD_NETWORK_ERROR"

    # Configuration
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_MISSING_REQUIRED = "CONFIG_MISSING_REQUIRED"

    # Network
    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    NETWORK_CONNECTION_ERROR = "NETWORK_CONNECTION_ERROR"

    UNKNOWN_ERROR = "UNKNOWN_ERROR"


UNEXPECTED_ERROR_MESSAGE = (
    "❌ An unexpected error occurred. Please try again or contact support if the issue persists."
)

_TIMEOUT_TYPES = (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)
_CONNECTION_TYPES = (httpx.ConnectError, ConnectionError)


@dataclass(slots=True, eq=False)
class WIError(Exception):
    """A failure normalized into the error taxonomy.

    ``message`` is the technical description kept for logs, ``user_message``
    is what the caller sees. Instances are not modified after construction.
    """

    code: ErrorCode
    message: str
    user_message: str = UNEXPECTED_ERROR_MESSAGE
    retryable: bool = False
    context: Mapping[str, Any] = field(default_factory=dict)
    cause: BaseException | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    @property
    def tool(self) -> str | None:
        return self.context.get("tool")

    @property
    def operation(self) -> str | None:
        return self.context.get("operation")

    def to_dict(self, include_debug: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "context": dict(self.context),
            "retryable": self.retryable,
        }
        if include_debug and self.cause is not None:
            payload["originalError"] = str(self.cause)
        return payload

    def to_response(self, include_debug: bool = False) -> list[dict[str, Any]]:
        """Render as a user text block followed by an ``error-details.json`` resource."""
        details = json.dumps({"error": self.to_dict(include_debug)}, indent=2, ensure_ascii=False)
        return [
            {"type": "text", "text": self.user_message},
            {"type": "resource", "resource": {"text": details, "uri": "error-details.json"}},
        ]


def _graphql_errors(failure: Any) -> Sequence[Any] | None:
    if isinstance(failure, Mapping):
        errors = failure.get("errors")
    else:
        errors = getattr(failure, "errors", None)
    if isinstance(errors, Sequence) and not isinstance(errors, (str, bytes)) and errors:
        return errors
    return None


def _first_message(errors: Sequence[Any]) -> str | None:
    first = errors[0]
    if isinstance(first, Mapping):
        message = first.get("message")
    else:
        message = getattr(first, "message", None)
    return message if isinstance(message, str) and message else None


def _classify_envelope(errors: Sequence[Any], context: dict[str, Any]) -> WIError:
    first = _first_message(errors)
    text = first or ""

    if "Unauthorized" in text or "Invalid token" in text:
        return WIError(
            code=ErrorCode.AUTH_TOKEN_INVALID,
            message="Authentication failed",
            user_message="❌ Authentication failed. Please check your bearer token and try again.",
            retryable=True,
            context=context,
            cause=RuntimeError(text),
        )

    if "rate limit" in text or "too many requests" in text:
        return WIError(
            code=ErrorCode.API_RATE_LIMITED,
            message="API rate limit exceeded",
            user_message="⏱️ API rate limit exceeded. Please wait a moment and try again.",
            retryable=True,
            context=context,
            cause=RuntimeError(text),
        )

    return WIError(
        code=ErrorCode.GRAPHQL_QUERY_FAILED,
        message=first or "GraphQL query failed",
        user_message="❌ Query failed. Please check your parameters and try again.",
        retryable=True,
        context=context,
        cause=RuntimeError(first or "Unknown GraphQL error"),
    )


def _classify_status(status: int, text: str, context: dict[str, Any]) -> WIError | None:
    cause = RuntimeError(text)

    if status in (401, 403):
        return WIError(
            code=ErrorCode.AUTH_TOKEN_INVALID,
            message=f"Authentication rejected with HTTP {status}",
            user_message="❌ Authentication failed. Please check your bearer token and try again.",
            retryable=False,
            context=context,
            cause=cause,
        )

    if status == 429:
        return WIError(
            code=ErrorCode.API_RATE_LIMITED,
            message="API rate limit exceeded",
            user_message="⏱️ API rate limit exceeded. Please wait a moment and try again.",
            retryable=True,
            context=context,
            cause=cause,
        )

    if status >= 500:
        return WIError(
            code=ErrorCode.API_SERVER_ERROR,
            message=f"Upstream server error: {text}",
            user_message="⚠️ Wildlife Insights is temporarily unavailable. Please try again shortly.",
            retryable=True,
            context=context,
            cause=cause,
        )

    if status >= 400:
        return WIError(
            code=ErrorCode.API_REQUEST_FAILED,
            message=f"API request rejected: {text}",
            user_message="❌ API request failed. Please check your parameters and try again.",
            retryable=False,
            context=context,
            cause=cause,
        )

    return None


def _classify_exception(exc: BaseException, context: dict[str, Any]) -> WIError | None:
    text = str(exc)

    # Order matters: timeout, then connection, then generic request failure.
    if "timeout" in text or "ETIMEDOUT" in text or isinstance(exc, _TIMEOUT_TYPES):
        return WIError(
            code=ErrorCode.NETWORK_TIMEOUT,
            message="Network timeout",
            user_message="⏱️ Request timed out. Please try again.",
            retryable=True,
            context=context,
            cause=exc,
        )

    if "ECONNREFUSED" in text or "ENOTFOUND" in text or isinstance(exc, _CONNECTION_TYPES):
        return WIError(
            code=ErrorCode.NETWORK_CONNECTION_ERROR,
            message="Network connection error",
            user_message="🌐 Connection error. Please check your internet connection and try again.",
            retryable=True,
            context=context,
            cause=exc,
        )

    if "fetch" in text or isinstance(exc, httpx.TransportError):
        return WIError(
            code=ErrorCode.API_REQUEST_FAILED,
            message="API request failed",
            user_message="❌ API request failed. Please check your parameters and try again.",
            retryable=True,
            context=context,
            cause=exc,
        )

    return None


def classify_error(
    failure: Any,
    tool_name: str | None = None,
    operation_name: str | None = None,
) -> WIError:
    """Map any caught failure onto a :class:`WIError`.

    Already-classified errors are returned as-is. A non-2xx response without
    a GraphQL body is judged by its status code. Other GraphQL envelopes are
    judged by their first message, exceptions by message text and transport
    type. Strings and anything unrecognized become ``UNKNOWN_ERROR``.
    """
    if isinstance(failure, WIError):
        return failure

    context = {"tool": tool_name, "operation": operation_name}

    errors = _graphql_errors(failure)
    if errors is not None:
        status = getattr(failure, "status_code", None)
        if getattr(failure, "from_status", False) and isinstance(status, int):
            classified = _classify_status(status, _first_message(errors) or "", context)
            if classified is not None:
                return classified
        return _classify_envelope(errors, context)

    if isinstance(failure, BaseException):
        classified = _classify_exception(failure, context)
        if classified is not None:
            return classified

    if isinstance(failure, str):
        return WIError(
            code=ErrorCode.UNKNOWN_ERROR,
            message=failure,
            retryable=False,
            context=context,
            cause=RuntimeError(failure),
        )

    return WIError(
        code=ErrorCode.UNKNOWN_ERROR,
        message="Unknown error occurred",
        retryable=False,
        context=context,
        cause=failure if isinstance(failure, BaseException) else RuntimeError(repr(failure)),
    )
