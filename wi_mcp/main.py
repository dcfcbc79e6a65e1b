from __future__ import annotations

import asyncio
import sys

import structlog
from dotenv import load_dotenv
from fastmcp import FastMCP

from . import SCHEMA_NAME, SERVER_NAME, SERVER_VERSION
from .client.graphql import WiClient
from .core.config import Settings, get_settings, validate_config
from .core.errors import WIError
from .core.logging_config import setup_logging
from .tools import ToolRegistry, WildlifeTool, build_registry


logger = structlog.get_logger(__name__)

INSTRUCTIONS = (
    f"Tools for the {SCHEMA_NAME}: camera trap projects, deployments, identification, "
    "analytics and image uploads. Pass bearerToken per call or set one with auth.setToken."
)


def create_server(settings: Settings | None = None, registry: ToolRegistry | None = None) -> FastMCP:
    """Build the FastMCP server with every registry tool mounted."""
    settings = settings or get_settings()
    if registry is None:
        registry = build_registry(WiClient.from_settings(settings), settings)

    mcp = FastMCP(SERVER_NAME, INSTRUCTIONS, version=SERVER_VERSION)
    for spec in registry.specs():
        mcp.add_tool(WildlifeTool.from_spec(spec, registry))

    logger.info(
        "mcp_server_created",
        server=SERVER_NAME,
        version=SERVER_VERSION,
        endpoint=settings.graphql_endpoint,
        tools=len(registry.names()),
    )
    return mcp


async def serve(settings: Settings) -> None:
    client = WiClient.from_settings(settings)
    mcp = create_server(settings, build_registry(client, settings))
    try:
        await mcp.run_async(transport="stdio")
    finally:
        logger.info("mcp_server_stopping")
        try:
            await asyncio.wait_for(client.aclose(), settings.graceful_shutdown_timeout_ms / 1000.0)
        except asyncio.TimeoutError:
            logger.warning("http_client_close_timeout", timeout_ms=settings.graceful_shutdown_timeout_ms)


def run() -> None:
    load_dotenv()
    try:
        settings = get_settings()
        setup_logging(settings.log_level, settings.log_format, settings.log_colors)
        validate_config(settings)
    except WIError as exc:
        logger.error("startup_config_error", code=exc.code.value, error=exc.message)
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001 - any startup failure exits non-zero
        logger.error("startup_failed", error=str(exc), error_type=type(exc).__name__)
        sys.exit(1)

    logger.info(
        "mcp_server_starting",
        environment=settings.environment,
        has_token=bool(settings.bearer_token),
        transport="stdio",
    )
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("mcp_server_interrupted")
    except Exception as exc:  # noqa: BLE001
        logger.exception("mcp_server_crashed", error=str(exc))
        sys.exit(1)
