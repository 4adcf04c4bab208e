"""MCP stdio server exposing the catalog as ``frontend-components`` tools.

stdout carries the protocol, so all logging goes to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict

from componentfinder.engine import QueryEngine
from componentfinder.formatting import (
    error_to_dict,
    hit_to_dict,
    record_to_dict,
    render_markdown,
    status_to_dict,
)

LOGGER = logging.getLogger(__name__)

SERVER_NAME = "frontend-components"


def list_frameworks_tool(engine: QueryEngine) -> Dict[str, Any]:
    result = engine.list_frameworks()
    if not result.ok:
        return error_to_dict(result.error)
    frameworks = [
        {
            "name": summary.name,
            "display_name": summary.display_name,
            "dependencies": summary.dependencies,
            "count": summary.count,
            "categories": summary.categories,
        }
        for summary in result.value
    ]
    return {"ok": True, "frameworks": frameworks}


def list_components_tool(
    engine: QueryEngine, framework: str, category: str | None = None
) -> Dict[str, Any]:
    result = engine.list_components(framework, category)
    if not result.ok:
        return error_to_dict(result.error)

    # Grouped like the original listing: category -> type -> variants.
    grouped: Dict[str, Dict[str, list[str]]] = {}
    for descriptor in result.value:
        grouped.setdefault(descriptor.category, {}).setdefault(
            descriptor.component_type, []
        ).append(descriptor.variant)
    return {
        "ok": True,
        "framework": framework,
        "count": len(result.value),
        "components": [descriptor.path for descriptor in result.value],
        "categories": grouped,
    }


def _component_reply(result) -> Dict[str, Any]:
    if not result.ok:
        return error_to_dict(result.error)
    record, info = result.value.record, result.value.info
    reply = record_to_dict(record, info)
    reply["ok"] = True
    reply["markdown"] = render_markdown(record, info)
    return reply


def get_component_tool(
    engine: QueryEngine,
    framework: str,
    category: str,
    component_type: str,
    variant: str,
) -> Dict[str, Any]:
    return _component_reply(
        engine.get_component_detail(framework, category, component_type, variant)
    )


def get_component_by_path_tool(engine: QueryEngine, path: str) -> Dict[str, Any]:
    return _component_reply(engine.get_component_detail_by_path(path))


def search_components_tool(
    engine: QueryEngine,
    query: str,
    framework: str | None = None,
    timeout: float | None = None,
) -> Dict[str, Any]:
    result = engine.search_components(query, framework, timeout=timeout)
    if not result.ok:
        return error_to_dict(result.error)
    hits = [hit_to_dict(hit) for hit in result.value]
    return {"ok": True, "query": query, "count": len(hits), "results": hits}


def catalog_status_tool(engine: QueryEngine) -> Dict[str, Any]:
    status = status_to_dict(engine.status())
    status["ok"] = True
    return status


def build_server(engine: QueryEngine):
    """Create a FastMCP server with every catalog tool registered."""
    from mcp.server.fastmcp import FastMCP

    mcp = FastMCP(SERVER_NAME)

    @mcp.tool()
    def list_frameworks() -> dict:
        """List available component frameworks with dependencies and component counts."""
        return list_frameworks_tool(engine)

    @mcp.tool()
    def list_components(framework: str, category: str | None = None) -> dict:
        """List component types and variants in a framework, optionally for one category.

        Args:
            framework: Framework ID (hyperui, daisyui, flyonui, headlessui-react, headlessui-vue)
            category: Category filter (application, marketing, css, plugins, components)
        """
        return list_components_tool(engine, framework, category)

    @mcp.tool()
    def get_component(framework: str, category: str, component_type: str, variant: str) -> dict:
        """Get the full source of one component variant.

        Use list_components to find available variants first.
        """
        return get_component_tool(engine, framework, category, component_type, variant)

    @mcp.tool()
    def get_component_by_path(path: str) -> dict:
        """Get component source by path as returned by search_components
        (e.g. hyperui/application/badges/1 or hyperui/application/badges/1.html)."""
        return get_component_by_path_tool(engine, path)

    @mcp.tool()
    def search_components(
        query: str, framework: str | None = None, timeout: float | None = None
    ) -> dict:
        """Search components by keywords across all frameworks or within one.

        Every keyword must match the component path or its source.

        Args:
            query: Space separated keywords
            framework: Framework ID, or "all"
            timeout: Give up after this many seconds
        """
        return search_components_tool(engine, query, framework, timeout)

    @mcp.tool()
    def catalog_status() -> dict:
        """Report catalog readiness and files skipped during load."""
        return catalog_status_tool(engine)

    return mcp


def serve(engine: QueryEngine) -> None:
    """Run the stdio server until the client disconnects."""
    try:
        sys.stderr.reconfigure(line_buffering=True)
    except AttributeError:
        pass

    try:
        server = build_server(engine)
    except ImportError as exc:
        LOGGER.error("Missing dependency 'mcp': %s", exc)
        raise

    LOGGER.info("Starting %s over stdio (%d components)", SERVER_NAME, engine.status().record_count)
    server.run()
