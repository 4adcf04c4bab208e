"""Query engine serving lookups from the current catalog snapshot.

Every public operation returns a ``QueryResult``; catalog exceptions are
converted at this boundary so front-ends only ever branch on ``error.kind``.
The current catalog is a single reference that ``reload`` replaces in one
assignment. Operations read it once, so a query that overlaps a reload sees
either the old snapshot or the new one, never a mix.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Generic, List, Mapping, Tuple, TypeVar

from componentfinder.errors import CatalogError, CatalogNotReady, NotFound
from componentfinder.index.catalog import Catalog
from componentfinder.index.loader import load_corpus
from componentfinder.index.search import DEFAULT_PAGE_SIZE, SearchHit, clamp_page_size
from componentfinder.ingestion.frameworks import FrameworkInfo
from componentfinder.models import (
    CatalogStatus,
    ComponentDescriptor,
    ComponentRecord,
    FrameworkSummary,
)

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

MAX_SUGGESTIONS = 5
ALL_FRAMEWORKS = "all"


class CatalogState(str, Enum):
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True, slots=True)
class QueryError:
    kind: str
    message: str
    suggestions: Tuple[str, ...] = ()

    @classmethod
    def from_exception(cls, exc: CatalogError) -> "QueryError":
        suggestions = tuple(getattr(exc, "suggestions", ()) or ())
        return cls(kind=exc.kind, message=str(exc), suggestions=suggestions)


@dataclass(frozen=True, slots=True)
class QueryResult(Generic[T]):
    value: T | None = None
    error: QueryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "QueryResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, exc: CatalogError) -> "QueryResult[T]":
        return cls(error=QueryError.from_exception(exc))


@dataclass(frozen=True, slots=True)
class ComponentDetail:
    record: ComponentRecord
    info: FrameworkInfo


@dataclass(slots=True)
class _Snapshot:
    catalog: Catalog
    generation: int


@dataclass(slots=True)
class _ReloadState:
    lock: threading.Lock = field(default_factory=threading.Lock)
    last_error: str | None = None


class QueryEngine:
    """Read-only operations over an atomically swappable catalog."""

    def __init__(
        self,
        corpus_root: Path | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        registry: Mapping[str, FrameworkInfo] | None = None,
        catalog: Catalog | None = None,
    ) -> None:
        self.corpus_root = Path(corpus_root) if corpus_root is not None else None
        self.page_size = clamp_page_size(page_size)
        self.registry = registry
        self._snapshot: _Snapshot | None = _Snapshot(catalog, 1) if catalog is not None else None
        self._reload = _ReloadState()

    @property
    def state(self) -> CatalogState:
        return CatalogState.READY if self._snapshot is not None else CatalogState.LOADING

    @property
    def catalog(self) -> Catalog | None:
        snapshot = self._snapshot
        return snapshot.catalog if snapshot is not None else None

    @property
    def generation(self) -> int:
        snapshot = self._snapshot
        return snapshot.generation if snapshot is not None else 0

    # -- loading -----------------------------------------------------------------

    def install(self, catalog: Catalog) -> None:
        """Publish a fully built catalog to all subsequent queries."""
        with self._reload.lock:
            self._install_locked(catalog)

    def _install_locked(self, catalog: Catalog) -> None:
        self._snapshot = _Snapshot(catalog, self.generation + 1)
        self._reload.last_error = None
        LOGGER.info(
            "Catalog generation %d ready: %d components, %d warnings",
            self.generation,
            len(catalog),
            len(catalog.warnings),
        )

    def load(self) -> Catalog:
        """Build a catalog from the corpus root and install it.

        Raises ``CorpusUnavailable``; the previous snapshot, if any, keeps serving.
        """
        if self.corpus_root is None:
            raise ValueError("QueryEngine has no corpus root configured")
        with self._reload.lock:
            try:
                catalog = load_corpus(self.corpus_root, registry=self.registry)
            except CatalogError as exc:
                self._reload.last_error = str(exc)
                raise
            self._install_locked(catalog)
        return catalog

    def reload(self) -> QueryResult[CatalogStatus]:
        try:
            self.load()
        except CatalogError as exc:
            LOGGER.error("Reload failed, keeping previous catalog: %s", exc)
            return QueryResult.failure(exc)
        return QueryResult.success(self.status())

    def status(self) -> CatalogStatus:
        snapshot = self._snapshot
        root = str(self.corpus_root) if self.corpus_root is not None else None
        if snapshot is None:
            return CatalogStatus(state=CatalogState.LOADING.value, corpus_root=root)
        catalog = snapshot.catalog
        return CatalogStatus(
            state=CatalogState.READY.value,
            corpus_root=root or (str(catalog.corpus_root) if catalog.corpus_root else None),
            record_count=len(catalog),
            framework_count=len(catalog.framework_names()),
            warnings=list(catalog.warnings),
            loaded_at=catalog.loaded_at,
            generation=snapshot.generation,
        )

    @property
    def last_error(self) -> str | None:
        return self._reload.last_error

    # -- queries -----------------------------------------------------------------

    def _run(self, operation: Callable[[Catalog], T]) -> QueryResult[T]:
        snapshot = self._snapshot
        try:
            if snapshot is None:
                raise CatalogNotReady()
            return QueryResult.success(operation(snapshot.catalog))
        except CatalogError as exc:
            LOGGER.debug("Query failed: %s", exc)
            return QueryResult.failure(exc)

    def list_frameworks(self) -> QueryResult[List[FrameworkSummary]]:
        return self._run(lambda catalog: catalog.frameworks())

    def list_components(
        self, framework: str, category: str | None = None
    ) -> QueryResult[List[ComponentDescriptor]]:
        return self._run(lambda catalog: catalog.list(framework, category or None))

    def get_component(
        self, framework: str, category: str, component_type: str, variant: str
    ) -> QueryResult[ComponentRecord]:
        return self._run(
            lambda catalog: _lookup(catalog, framework, category, component_type, variant)
        )

    def get_component_by_path(self, path: str) -> QueryResult[ComponentRecord]:
        return self._run(lambda catalog: catalog.get_by_path(path))

    def get_component_detail(
        self, framework: str, category: str, component_type: str, variant: str
    ) -> QueryResult[ComponentDetail]:
        """Like ``get_component`` plus framework info, both from one snapshot."""

        def operation(catalog: Catalog) -> ComponentDetail:
            record = _lookup(catalog, framework, category, component_type, variant)
            return ComponentDetail(record, catalog.info(record.framework))

        return self._run(operation)

    def get_component_detail_by_path(self, path: str) -> QueryResult[ComponentDetail]:
        def operation(catalog: Catalog) -> ComponentDetail:
            record = catalog.get_by_path(path)
            return ComponentDetail(record, catalog.info(record.framework))

        return self._run(operation)

    def search_components(
        self,
        query: str,
        framework: str | None = None,
        *,
        limit: int | None = None,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> QueryResult[List[SearchHit]]:
        scope = None if framework in (None, "", ALL_FRAMEWORKS) else framework
        page = self.page_size if limit is None else min(clamp_page_size(limit), self.page_size)
        return self._run(
            lambda catalog: catalog.search(
                query, scope, limit=page, cancel=cancel, timeout=timeout
            )
        )

    def framework_info(self, framework: str) -> QueryResult[FrameworkInfo]:
        return self._run(lambda catalog: catalog.info(framework))


def _lookup(
    catalog: Catalog, framework: str, category: str, component_type: str, variant: str
) -> ComponentRecord:
    try:
        return catalog.get(framework, category, component_type, variant)
    except NotFound as exc:
        raise NotFound(exc.path, _suggest(catalog, framework, component_type, variant)) from exc


def _suggest(catalog: Catalog, framework: str, component_type: str, variant: str) -> List[str]:
    """Paths close to a missed lookup, searched within the same framework."""
    if not catalog.has_framework(framework):
        return []
    try:
        hits = catalog.search(
            f"{component_type} {variant}", framework, limit=MAX_SUGGESTIONS
        )
        if not hits:
            hits = catalog.search(component_type, framework, limit=MAX_SUGGESTIONS)
    except CatalogError:
        return []
    return [hit.path for hit in hits]
