"""Wildlife Insights GraphQL tools served over MCP."""

SERVER_NAME = "wi-graphql-mcp"
SERVER_VERSION = "0.2.1"
SCHEMA_NAME = "Wildlife Insights GraphQL API"

__all__ = ["SERVER_NAME", "SERVER_VERSION", "SCHEMA_NAME"]
