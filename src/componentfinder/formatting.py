"""Plain-dict views of catalog objects shared by the front-ends."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from componentfinder.engine import QueryError
from componentfinder.index.search import SearchHit
from componentfinder.ingestion.frameworks import FrameworkInfo
from componentfinder.models import CatalogStatus, ComponentRecord


def record_to_dict(
    record: ComponentRecord,
    info: FrameworkInfo | None = None,
    *,
    include_content: bool = True,
) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "path": record.path,
        "framework": record.framework,
        "category": record.category,
        "component_type": record.component_type,
        "variant": record.variant,
        "source_path": record.source_path,
        "language": record.extension,
    }
    if info is not None:
        data["framework_name"] = info.display_name
        data["dependencies"] = info.dependencies
    if include_content:
        data["content"] = record.content
    return data


def hit_to_dict(hit: SearchHit) -> Dict[str, Any]:
    data = record_to_dict(hit.record, include_content=False)
    data["score"] = hit.score
    data["path_matches"] = hit.path_matches
    return data


def status_to_dict(status: CatalogStatus) -> Dict[str, Any]:
    data = asdict(status)
    data["loaded_at"] = status.loaded_at.isoformat() if status.loaded_at else None
    return data


def error_to_dict(error: QueryError) -> Dict[str, Any]:
    data: Dict[str, Any] = {"ok": False, "error": error.kind, "detail": error.message}
    if error.suggestions:
        data["suggestions"] = list(error.suggestions)
    return data


def render_markdown(record: ComponentRecord, info: FrameworkInfo | None = None) -> str:
    """Render a component as a fenced Markdown block for chat clients."""
    lines = [f"# {record.variant}", ""]
    if info is not None:
        lines.append(f"**Framework:** {info.display_name}")
        if info.dependencies:
            lines.append(f"**Dependencies:** {info.dependencies}")
        lines.append("")
    lines.append(f"**Path:** `{record.path}`")
    lines.append("")
    lines.append(f"```{record.extension}")
    lines.append(record.content.rstrip("\n"))
    lines.append("```")
    return "\n".join(lines)
