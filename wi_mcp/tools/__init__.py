"""Tool definitions exposed by the MCP server."""

from .base import ToolRegistry, ToolResponse, ToolSpec, WildlifeTool
from .registry import build_registry

__all__ = [
    "ToolRegistry",
    "ToolResponse",
    "ToolSpec",
    "WildlifeTool",
    "build_registry",
]
