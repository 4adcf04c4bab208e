"""Tests for the MCP tool handlers."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from componentfinder.engine import QueryEngine
from componentfinder.mcp_server import (
    build_server,
    catalog_status_tool,
    get_component_by_path_tool,
    get_component_tool,
    list_components_tool,
    list_frameworks_tool,
    search_components_tool,
    serve,
)

from conftest import CORPUS_FILES, EXPECTED_COUNTS


def _tool_reply(result) -> dict:
    """Decode a FastMCP call_tool result into the dict the tool returned."""
    if isinstance(result, tuple):
        content, structured = result
        if isinstance(structured, dict) and "ok" in structured:
            return structured
        result = content
    if isinstance(result, dict):
        return result
    return json.loads(result[0].text)


class TestTools:
    """Test tool handler replies."""

    def test_list_frameworks(self, engine: QueryEngine) -> None:
        reply = list_frameworks_tool(engine)

        assert reply["ok"] is True
        assert {f["name"]: f["count"] for f in reply["frameworks"]} == EXPECTED_COUNTS
        daisy = next(f for f in reply["frameworks"] if f["name"] == "daisyui")
        assert daisy["dependencies"] == "npm install daisyui"

    def test_list_components_grouped(self, engine: QueryEngine) -> None:
        reply = list_components_tool(engine, "flyonui")

        assert reply["count"] == 4
        assert reply["categories"]["plugins"]["accordion"] == ["index", "types", "variants"]
        assert reply["categories"]["css"]["all"] == ["accordion"]

    def test_list_components_unknown_framework(self, engine: QueryEngine) -> None:
        reply = list_components_tool(engine, "bootstrap")

        assert reply == {
            "ok": False,
            "error": "unknown_framework",
            "detail": "Unknown framework: bootstrap",
        }

    def test_get_component(self, engine: QueryEngine) -> None:
        reply = get_component_tool(engine, "hyperui", "application", "badges", "1")

        assert reply["ok"] is True
        assert reply["content"] == CORPUS_FILES["hyperui/application/badges/1.html"]
        assert reply["framework_name"] == "HyperUI (HTML)"
        assert reply["markdown"].startswith("# 1")
        assert "```html" in reply["markdown"]

    def test_get_component_not_found(self, engine: QueryEngine) -> None:
        reply = get_component_tool(engine, "hyperui", "application", "badges", "99")

        assert reply["ok"] is False
        assert reply["error"] == "not_found"
        assert "hyperui/application/badges/1" in reply["suggestions"]

    def test_get_component_by_source_path(self, engine: QueryEngine) -> None:
        reply = get_component_by_path_tool(engine, "hyperui/application/badges/1.html")

        assert reply["path"] == "hyperui/application/badges/1"

    def test_search(self, engine: QueryEngine) -> None:
        reply = search_components_tool(engine, "modal dark", "hyperui")

        assert reply["count"] == 1
        assert reply["results"][0]["path"] == "hyperui/application/modals/1-dark"
        assert "content" not in reply["results"][0]

    def test_search_empty_query(self, engine: QueryEngine) -> None:
        assert search_components_tool(engine, "")["error"] == "empty_query"

    def test_catalog_status(self, engine: QueryEngine) -> None:
        reply = catalog_status_tool(engine)

        assert reply["ok"] is True
        assert reply["state"] == "ready"
        assert reply["warnings"] == []

    def test_not_ready(self, corpus_root: Path) -> None:
        reply = list_frameworks_tool(QueryEngine(corpus_root))

        assert reply["error"] == "catalog_not_ready"


class TestServer:
    """Test FastMCP wiring."""

    def test_build_server_registers_tools(self, engine: QueryEngine) -> None:
        pytest.importorskip("mcp")
        server = build_server(engine)

        tools = {tool.name: tool for tool in asyncio.run(server.list_tools())}

        assert server.name == "frontend-components"
        assert set(tools) == {
            "list_frameworks",
            "list_components",
            "get_component",
            "get_component_by_path",
            "search_components",
            "catalog_status",
        }
        assert list(tools["get_component"].inputSchema["properties"]) == [
            "framework",
            "category",
            "component_type",
            "variant",
        ]
        assert set(tools["search_components"].inputSchema["properties"]) == {
            "query",
            "framework",
            "timeout",
        }

    def test_search_tool_call(self, engine: QueryEngine) -> None:
        pytest.importorskip("mcp")
        server = build_server(engine)

        reply = _tool_reply(
            asyncio.run(
                server.call_tool("search_components", {"query": "modal dark", "framework": "hyperui"})
            )
        )

        assert reply["ok"] is True
        assert [hit["path"] for hit in reply["results"]] == ["hyperui/application/modals/1-dark"]

    def test_search_tool_passes_timeout(self, engine: QueryEngine) -> None:
        pytest.importorskip("mcp")
        server = build_server(engine)

        reply = _tool_reply(
            asyncio.run(server.call_tool("search_components", {"query": "modal", "timeout": 0}))
        )

        assert reply["error"] == "cancelled"

    def test_get_component_tool_call(self, engine: QueryEngine) -> None:
        pytest.importorskip("mcp")
        server = build_server(engine)

        reply = _tool_reply(
            asyncio.run(
                server.call_tool(
                    "get_component",
                    {
                        "framework": "daisyui",
                        "category": "components",
                        "component_type": "all",
                        "variant": "modal",
                    },
                )
            )
        )

        assert reply["content"] == CORPUS_FILES["daisyui/modal.md"]
        assert reply["framework_name"] == "DaisyUI (CSS Framework)"

    def test_serve_runs_server(self, engine: QueryEngine) -> None:
        fake_server = MagicMock()
        with patch("componentfinder.mcp_server.build_server", return_value=fake_server):
            serve(engine)

        fake_server.run.assert_called_once()
