from __future__ import annotations

import json

import pytest
from fastmcp import FastMCP
from mcp.types import EmbeddedResource, TextContent

from wi_mcp import main
from wi_mcp.tools import WildlifeTool
from wi_mcp.tools.base import to_mcp_content


def test_create_server_builds_fastmcp(settings, registry) -> None:
    server = main.create_server(settings, registry)
    assert isinstance(server, FastMCP)


def test_tool_exposes_wire_schema(registry) -> None:
    tool = WildlifeTool.from_spec(registry.get("getImagesForIdentification"), registry)

    assert tool.name == "getImagesForIdentification"
    assert tool.title == "Get Images for Identification"
    assert {"projectId", "limit", "offset", "bearerToken"} <= set(tool.parameters["properties"])


@pytest.mark.asyncio
async def test_tool_run_returns_text_and_embedded_resource(registry, upstream) -> None:
    upstream.on("getIdentifyPhotosCount", {"data": {"getCountInIdentifyForProject": {"meta": {"totalItems": 4}}}})
    tool = WildlifeTool.from_spec(registry.get("getIdentifyPhotosCount"), registry)

    result = await tool.run({"projectId": 8})

    text, resource = result.content
    assert isinstance(text, TextContent)
    assert text.text == "Found 4 image(s) needing identification in project 8"
    assert isinstance(resource, EmbeddedResource)
    assert str(resource.resource.uri) == "wi://identify-count.json"
    assert json.loads(resource.resource.text)["getCountInIdentifyForProject"]["meta"]["totalItems"] == 4


@pytest.mark.asyncio
async def test_tool_run_marks_failures(registry) -> None:
    tool = WildlifeTool.from_spec(registry.get("getIdentifyPhotosCount"), registry)

    result = await tool.run({})

    assert result.is_error is True
    assert isinstance(result.content[0], TextContent)


def test_to_mcp_content_prefixes_resource_uri() -> None:
    blocks = to_mcp_content([{"type": "resource", "resource": {"text": "{}", "uri": "x.json"}}])
    assert str(blocks[0].resource.uri) == "wi://x.json"


def test_run_exits_on_missing_endpoint(monkeypatch) -> None:
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)

    with pytest.raises(SystemExit) as excinfo:
        main.run()

    assert excinfo.value.code == 1


def test_run_exits_on_production_without_token(monkeypatch) -> None:
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setenv("WI_GRAPHQL_ENDPOINT", "https://wi.test/graphql")
    monkeypatch.setenv("WI_ENVIRONMENT", "production")

    with pytest.raises(SystemExit) as excinfo:
        main.run()

    assert excinfo.value.code == 1


def test_run_serves_stdio_with_valid_config(monkeypatch) -> None:
    served = []
    logging_args = []

    async def fake_serve(settings):
        served.append(settings.graphql_endpoint)

    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    monkeypatch.setattr(main, "setup_logging", lambda *args: logging_args.append(args))
    monkeypatch.setattr(main, "serve", fake_serve)
    monkeypatch.setenv("WI_GRAPHQL_ENDPOINT", "https://wi.test/graphql")
    monkeypatch.setenv("WI_LOG_COLORS", "1")

    main.run()

    assert served == ["https://wi.test/graphql"]
    assert logging_args == [("info", "text", True)]
