"""FastAPI application exposing the component catalog over HTTP."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, NoReturn

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from componentfinder.config import AppConfig
from componentfinder.engine import CatalogState, QueryEngine, QueryError
from componentfinder.formatting import error_to_dict, hit_to_dict, record_to_dict, status_to_dict
from componentfinder.models import ComponentDescriptor, FrameworkSummary
from componentfinder.watcher import CorpusWatcher

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="ComponentFinder", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_STATUS = {
    "unknown_framework": 404,
    "not_found": 404,
    "malformed_path": 400,
    "empty_query": 400,
    "cancelled": 408,
    "catalog_not_ready": 503,
    "corpus_unavailable": 503,
}

_engine: QueryEngine | None = None
_watcher: CorpusWatcher | None = None


class SearchPayload(BaseModel):
    query: str
    framework: str | None = None
    limit: int | None = None
    timeout: float | None = None


def configure_engine(engine: QueryEngine | None, watcher: CorpusWatcher | None = None) -> None:
    """Replace the engine backing the API (used by the CLI and tests).

    A watcher passed here is owned by the caller; startup will not start another.
    """
    global _engine, _watcher
    _engine = engine
    _watcher = watcher


def get_engine() -> QueryEngine:
    global _engine
    if _engine is None:
        config = AppConfig()
        _engine = QueryEngine(config.resolve_corpus_root(Path.cwd()), page_size=config.page_size)
    return _engine


def _raise_for(error: QueryError) -> NoReturn:
    raise HTTPException(status_code=ERROR_STATUS.get(error.kind, 500), detail=error_to_dict(error))


@app.on_event("startup")
async def startup_event() -> None:
    global _watcher
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    engine = get_engine()
    if engine.state is CatalogState.LOADING and engine.corpus_root is not None:
        # CorpusUnavailable propagates and aborts startup.
        await asyncio.to_thread(engine.load)

    config = AppConfig()
    if config.watch and _watcher is None and engine.corpus_root is not None:
        _watcher = CorpusWatcher(engine, interval=config.watch_interval)
        _watcher.start()


@app.on_event("shutdown")
async def shutdown_event() -> None:
    global _watcher
    if _watcher is not None:
        _watcher.stop(timeout=5)
        _watcher = None


@app.get("/frameworks")
async def list_frameworks() -> Dict[str, Any]:
    result = get_engine().list_frameworks()
    if not result.ok:
        _raise_for(result.error)
    frameworks: List[FrameworkSummary] = result.value
    return {"frameworks": [asdict(summary) for summary in frameworks]}


@app.get("/frameworks/{framework}/components")
async def list_components(
    framework: str, category: str | None = None
) -> Dict[str, Any]:
    result = get_engine().list_components(framework, category)
    if not result.ok:
        _raise_for(result.error)
    components: List[ComponentDescriptor] = result.value
    return {
        "framework": framework,
        "category": category,
        "components": [asdict(component) for component in components],
    }


@app.get("/components/by-path")
async def get_component_by_path(path: str) -> Dict[str, Any]:
    result = get_engine().get_component_detail_by_path(path)
    if not result.ok:
        _raise_for(result.error)
    return record_to_dict(result.value.record, result.value.info)


@app.get("/components/{framework}/{category}/{component_type}/{variant}")
async def get_component(
    framework: str, category: str, component_type: str, variant: str
) -> Dict[str, Any]:
    result = get_engine().get_component_detail(framework, category, component_type, variant)
    if not result.ok:
        _raise_for(result.error)
    return record_to_dict(result.value.record, result.value.info)


@app.post("/search")
async def search_components(payload: SearchPayload) -> Dict[str, Any]:
    engine = get_engine()
    result = await asyncio.to_thread(
        engine.search_components,
        payload.query,
        payload.framework,
        limit=payload.limit,
        timeout=payload.timeout,
    )
    if not result.ok:
        _raise_for(result.error)
    hits = [hit_to_dict(hit) for hit in result.value]
    return {"query": payload.query, "count": len(hits), "results": hits}


@app.get("/status")
async def catalog_status() -> Dict[str, Any]:
    return status_to_dict(get_engine().status())


@app.post("/reload")
async def reload_catalog() -> Dict[str, Any]:
    engine = get_engine()
    if engine.corpus_root is None:
        raise HTTPException(status_code=400, detail="No corpus root configured")
    result = await asyncio.to_thread(engine.reload)
    if not result.ok:
        _raise_for(result.error)
    return {"status": "ok", "catalog": status_to_dict(result.value)}
