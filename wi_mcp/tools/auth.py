from __future__ import annotations

from .. import SCHEMA_NAME, SERVER_NAME, SERVER_VERSION
from .base import ToolInvocation, ToolResponse, ToolSpec
from .schemas import EmptyInput, RefreshTokenInput, SetTokenInput


async def set_token(ctx: ToolInvocation, args: SetTokenInput) -> ToolResponse:
    ctx.set_default_token(args.token)
    return ToolResponse.text("Token set for this MCP server session.")


async def refresh_token(ctx: ToolInvocation, args: RefreshTokenInput) -> ToolResponse:
    # No refresh grant exists upstream; report whether a default token is configured.
    available = ctx.client.credentials.has_token
    return ToolResponse.text("Token available" if available else "No token found")


async def whoami(ctx: ToolInvocation, args: EmptyInput) -> ToolResponse:
    return ToolResponse.text(
        f"{SERVER_NAME} v{SERVER_VERSION}",
        f"endpoint={ctx.client.endpoint}",
        f"schema={SCHEMA_NAME}",
    )


TOOLS = [
    ToolSpec(
        name="auth.setToken",
        title="Set Bearer Token",
        description="Set Bearer Token",
        input_model=SetTokenInput,
        handler=set_token,
        retry=False,
    ),
    ToolSpec(
        name="auth.refreshToken",
        title="Refresh Token",
        description="Stubbed example refresh flow",
        input_model=RefreshTokenInput,
        handler=refresh_token,
        retry=False,
    ),
    ToolSpec(
        name="whoami",
        title="Server Information",
        description="Return basic info about this server",
        input_model=EmptyInput,
        handler=whoami,
        retry=False,
    ),
]
