from __future__ import annotations

from prometheus_client import Counter, Histogram


WI_API_REQUESTS = Counter(
    "wi_api_requests_total",
    "Total GraphQL requests sent to Wildlife Insights",
    labelnames=("operation", "result"),
)

WI_API_LATENCY = Histogram(
    "wi_api_request_latency_seconds",
    "Latency for Wildlife Insights GraphQL requests",
    labelnames=("operation",),
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

WI_TOOL_CALLS = Counter(
    "wi_tool_calls_total",
    "Total MCP tool invocations",
    labelnames=("tool", "result"),
)

WI_TOOL_ERRORS = Counter(
    "wi_tool_errors_total",
    "Total classified tool errors",
    labelnames=("tool", "code"),
)

WI_STORAGE_UPLOADS = Counter(
    "wi_storage_uploads_total",
    "Total file uploads to signed storage URLs",
    labelnames=("result",),
)
