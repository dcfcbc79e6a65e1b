from __future__ import annotations

from ..client.graphql import WiClient
from ..client.storage import SignedUrlUploader
from ..core.config import Settings
from . import analytics, auth, discovery, identification, organizations, uploads
from .base import ToolRegistry


TOOL_MODULES = (auth, discovery, organizations, identification, analytics, uploads)


def build_registry(
    client: WiClient,
    settings: Settings,
    uploader: SignedUrlUploader | None = None,
) -> ToolRegistry:
    """Registry with every Wildlife Insights tool registered."""
    registry = ToolRegistry(client, settings, uploader)
    for module in TOOL_MODULES:
        registry.register_all(module.TOOLS)
    return registry
