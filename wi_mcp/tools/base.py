from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping

import structlog
from fastmcp.tools import Tool, ToolResult
from mcp.types import EmbeddedResource, TextContent, TextResourceContents
from pydantic import PrivateAttr, ValidationError

from ..client.graphql import WiClient
from ..client.metrics import WI_TOOL_CALLS, WI_TOOL_ERRORS
from ..client.retry import RetryPolicy, with_retry
from ..client.storage import SignedUrlUploader
from ..core.config import Settings
from ..core.error_handler import render_error, with_error_handling
from ..core.errors import ErrorCode, WIError, classify_error
from .schemas import ToolInput, WireModel


logger = structlog.get_logger(__name__)

RESOURCE_URI_PREFIX = "wi://"


def text_block(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}


def resource_block(payload: Any, uri: str) -> dict[str, Any]:
    return {
        "type": "resource",
        "resource": {"text": json.dumps(payload, indent=2, ensure_ascii=False, default=str), "uri": uri},
    }


@dataclass(slots=True)
class ToolResponse:
    content: list[dict[str, Any]]
    is_error: bool = False

    @classmethod
    def text(cls, *texts: str) -> "ToolResponse":
        return cls([text_block(t) for t in texts])

    @classmethod
    def with_resource(cls, summary: str, payload: Any, uri: str) -> "ToolResponse":
        return cls([text_block(summary), resource_block(payload, uri)])

    @classmethod
    def resource(cls, payload: Any, uri: str) -> "ToolResponse":
        return cls([resource_block(payload, uri)])

    def texts(self) -> list[str]:
        return [block["text"] for block in self.content if block["type"] == "text"]

    def resources(self) -> dict[str, Any]:
        """Decoded resource payloads keyed by uri."""
        return {
            block["resource"]["uri"]: json.loads(block["resource"]["text"])
            for block in self.content
            if block["type"] == "resource"
        }


Handler = Callable[["ToolInvocation", Any], Awaitable[ToolResponse]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    title: str
    description: str
    input_model: type[WireModel]
    handler: Handler
    retry: bool = True

    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema(by_alias=True)


@dataclass(slots=True)
class ToolInvocation:
    """Per-call state handed to a tool handler.

    ``resolved_token`` is captured once when the call starts so that every
    upstream request made by this call uses the same credential.
    """

    tool_name: str
    arguments: Any
    resolved_token: str | None
    client: WiClient
    settings: Settings
    uploader: SignedUrlUploader
    retry_policy: RetryPolicy | None = None

    async def execute(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> dict[str, Any]:
        """Run one upstream request, classified at this boundary and retried per policy."""

        async def _run() -> dict[str, Any]:
            try:
                return await self.client.execute_with_token(query, variables, operation_name, self.resolved_token)
            except WIError:
                raise
            except Exception as exc:  # noqa: BLE001 - classified for the retry loop
                raise classify_error(exc, self.tool_name, operation_name) from exc

        if self.retry_policy is None:
            return await _run()
        return await with_retry(
            _run,
            self.retry_policy.max_attempts,
            self.retry_policy.base_delay_ms,
            self.tool_name,
        )

    def set_default_token(self, token: str) -> None:
        self.client.set_token(token)


def _validation_error(tool_name: str, exc: ValidationError) -> WIError:
    problems = exc.errors(include_url=False)
    missing = [".".join(str(part) for part in p["loc"]) for p in problems if p["type"] == "missing"]
    details = "; ".join(
        f"{'.'.join(str(part) for part in p['loc']) or '<root>'}: {p['msg']}" for p in problems
    )
    if missing:
        return WIError(
            code=ErrorCode.TOOL_MISSING_REQUIRED_PARAM,
            message=f"Missing required parameter(s): {', '.join(missing)}",
            user_message=f"❌ Missing required parameter(s) for {tool_name}: {', '.join(missing)}",
            retryable=False,
            context={"tool": tool_name, "operation": "validate"},
            cause=exc,
        )
    return WIError(
        code=ErrorCode.TOOL_INVALID_INPUT,
        message=f"Invalid input: {details}",
        user_message=f"❌ Invalid input for {tool_name}: {details}",
        retryable=False,
        context={"tool": tool_name, "operation": "validate"},
        cause=exc,
    )


class ToolRegistry:
    """Owns the tool table and is the single place failures become content."""

    def __init__(
        self,
        client: WiClient,
        settings: Settings,
        uploader: SignedUrlUploader | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._uploader = uploader or SignedUrlUploader(timeout_ms=settings.timeout_ms)
        self._tools: dict[str, ToolSpec] = {}

    @property
    def client(self) -> WiClient:
        return self._client

    @property
    def settings(self) -> Settings:
        return self._settings

    def register(self, spec: ToolSpec) -> ToolSpec:
        if spec.name in self._tools:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._tools[spec.name] = spec
        return spec

    def register_all(self, specs: Iterable[ToolSpec]) -> None:
        for spec in specs:
            self.register(spec)

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def specs(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def retry_enabled(self, spec: ToolSpec) -> bool:
        return spec.retry and spec.name not in self._settings.no_retry_tools

    def _validate(self, spec: ToolSpec, arguments: Mapping[str, Any] | None) -> Any:
        try:
            return spec.input_model.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            raise _validation_error(spec.name, exc) from exc

    async def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        """Validate, run and render one tool call. Never raises for tool failures."""
        spec = self._tools.get(name)
        if spec is None:
            error = WIError(
                code=ErrorCode.TOOL_EXECUTION_FAILED,
                message=f"Unknown tool: {name}",
                user_message=f"❌ Unknown tool '{name}'.",
                context={"tool": name, "operation": "lookup"},
            )
            WI_TOOL_CALLS.labels(name, "unknown").inc()
            return ToolResponse(render_error(error), is_error=True)

        # Argument names only; values may hold credentials.
        context = {"arguments": sorted(k for k in (arguments or {}) if k != "bearerToken")}

        async def _run() -> ToolResponse:
            args = self._validate(spec, arguments)
            per_call = args.bearer_token if isinstance(args, ToolInput) else None
            invocation = ToolInvocation(
                tool_name=spec.name,
                arguments=args,
                resolved_token=self._client.resolve_token(per_call),
                client=self._client,
                settings=self._settings,
                uploader=self._uploader,
                retry_policy=RetryPolicy.from_settings(self._settings) if self.retry_enabled(spec) else None,
            )
            return await spec.handler(invocation, args)

        try:
            response = await with_error_handling(_run, spec.name, context)
        except WIError as error:
            WI_TOOL_CALLS.labels(spec.name, "error").inc()
            WI_TOOL_ERRORS.labels(spec.name, error.code.value).inc()
            return ToolResponse(
                render_error(error, include_debug=self._settings.is_development),
                is_error=True,
            )

        WI_TOOL_CALLS.labels(spec.name, "ok").inc()
        return response


def to_mcp_content(blocks: Iterable[Mapping[str, Any]]) -> list[TextContent | EmbeddedResource]:
    content: list[TextContent | EmbeddedResource] = []
    for block in blocks:
        if block["type"] == "resource":
            resource = block["resource"]
            content.append(
                EmbeddedResource(
                    type="resource",
                    resource=TextResourceContents(
                        uri=f"{RESOURCE_URI_PREFIX}{resource['uri']}",
                        text=resource["text"],
                    ),
                )
            )
        else:
            content.append(TextContent(type="text", text=block["text"]))
    return content


class WildlifeTool(Tool):
    """FastMCP tool backed by a :class:`ToolRegistry` entry."""

    _registry: ToolRegistry = PrivateAttr()

    @classmethod
    def from_spec(cls, spec: ToolSpec, registry: ToolRegistry) -> "WildlifeTool":
        tool = cls(
            name=spec.name,
            title=spec.title,
            description=spec.description,
            parameters=spec.input_schema(),
        )
        tool._registry = registry
        return tool

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        response = await self._registry.call(self.name, arguments)
        return ToolResult(content=to_mcp_content(response.content), is_error=response.is_error)
