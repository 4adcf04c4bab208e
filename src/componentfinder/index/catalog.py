"""Immutable in-memory catalog of component records."""

from __future__ import annotations

import logging
import re
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence

from componentfinder.errors import EmptyQuery, MalformedPath, NotFound, UnknownFramework
from componentfinder.index.search import (
    DEFAULT_PAGE_SIZE,
    SearchBudget,
    SearchHit,
    expand_prefix,
    rank,
    score_hit,
)
from componentfinder.ingestion.frameworks import FrameworkInfo, framework_info
from componentfinder.models import ComponentDescriptor, ComponentRecord, FrameworkSummary, LoadWarning
from componentfinder.utils.text import unique_tokens

LOGGER = logging.getLogger(__name__)

SEGMENT_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")

# Candidates scored between two cancellation checks.
CANCEL_CHECK_INTERVAL = 64

_Tree = Dict[str, Dict[str, Dict[str, Dict[str, ComponentRecord]]]]


def is_valid_segment(segment: str) -> bool:
    return bool(SEGMENT_RE.match(segment)) and segment not in {".", ".."}


class Catalog:
    """Snapshot of one loaded corpus.

    Holds a ``framework -> category -> component_type -> variant`` tree for
    structured lookups and an inverted ``token -> paths`` index for search.
    Nothing is mutated after construction, so one instance can be shared by
    any number of concurrent readers.
    """

    def __init__(
        self,
        records: Iterable[ComponentRecord],
        *,
        frameworks: Iterable[str] = (),
        registry: Mapping[str, FrameworkInfo] | None = None,
        warnings: Sequence[LoadWarning] = (),
        corpus_root: Path | None = None,
        loaded_at: datetime | None = None,
    ) -> None:
        self.corpus_root = corpus_root
        self.loaded_at = loaded_at or datetime.now(timezone.utc)
        self.warnings: tuple[LoadWarning, ...] = tuple(warnings)

        self._by_path: Dict[str, ComponentRecord] = {}
        self._by_source: Dict[str, ComponentRecord] = {}
        self._tree: _Tree = {name: {} for name in frameworks}
        self._info: Dict[str, FrameworkInfo] = {}
        self._path_tokens: Dict[str, frozenset[str]] = {}
        postings: Dict[str, set[str]] = {}

        for record in records:
            path = record.path
            if path in self._by_path:
                raise ValueError(f"Duplicate component path: {path}")
            self._by_path[path] = record
            self._by_source[record.source_path] = record
            (
                self._tree.setdefault(record.framework, {})
                .setdefault(record.category, {})
                .setdefault(record.component_type, {})
            )[record.variant] = record

            self._path_tokens[path] = record.path_keywords
            for token in record.keywords:
                postings.setdefault(token, set()).add(path)

        for name in self._tree:
            self._info[name] = framework_info(name, registry)

        self._postings: Dict[str, frozenset[str]] = {
            token: frozenset(paths) for token, paths in postings.items()
        }
        self._vocabulary: List[str] = sorted(self._postings)

    def __len__(self) -> int:
        return len(self._by_path)

    def __iter__(self):
        return iter(self.records())

    def __contains__(self, path: object) -> bool:
        return path in self._by_path

    def records(self) -> List[ComponentRecord]:
        return [self._by_path[path] for path in sorted(self._by_path)]

    def framework_names(self) -> List[str]:
        return sorted(self._tree)

    def has_framework(self, framework: str) -> bool:
        return framework in self._tree

    def frameworks(self) -> List[FrameworkSummary]:
        summaries: List[FrameworkSummary] = []
        for name in sorted(self._tree):
            categories = self._tree[name]
            count = sum(
                len(variants) for types in categories.values() for variants in types.values()
            )
            info = self._info[name]
            summaries.append(
                FrameworkSummary(
                    name=name,
                    display_name=info.display_name,
                    dependencies=info.dependencies,
                    count=count,
                    categories=sorted(categories),
                )
            )
        return summaries

    def info(self, framework: str) -> FrameworkInfo:
        if framework not in self._info:
            raise UnknownFramework(framework)
        return self._info[framework]

    def get(self, framework: str, category: str, component_type: str, variant: str) -> ComponentRecord:
        record = self._by_path.get("/".join((framework, category, component_type, variant)))
        if record is None:
            raise NotFound("/".join((framework, category, component_type, variant)))
        return record

    def get_by_path(self, path: str) -> ComponentRecord:
        """Resolve a canonical key or a corpus-relative source path."""
        clean = (path or "").strip()
        record = self._by_path.get(clean) or self._by_source.get(clean)
        if record is not None:
            return record

        if not clean or "\\" in clean or "\0" in clean or clean.startswith("/"):
            raise MalformedPath(path)
        segments = clean.split("/")
        if not all(is_valid_segment(segment) for segment in segments):
            raise MalformedPath(path)
        # A source path keeps its file extension on the last segment.
        if len(segments) == 4 or (len(segments) >= 2 and "." in segments[-1]):
            raise NotFound(clean)
        raise MalformedPath(path)

    def list(self, framework: str, category: str | None = None) -> List[ComponentDescriptor]:
        if framework not in self._tree:
            raise UnknownFramework(framework)
        categories = self._tree[framework]
        if category is not None:
            selected = {category: categories.get(category, {})}
        else:
            selected = categories

        descriptors = [
            ComponentDescriptor(
                category=cat,
                component_type=component_type,
                variant=variant,
                path=record.path,
            )
            for cat, types in selected.items()
            for component_type, variants in types.items()
            for variant, record in variants.items()
        ]
        descriptors.sort(key=lambda d: (d.component_type, d.variant, d.category))
        return descriptors

    def search(
        self,
        query: str,
        framework: str | None = None,
        *,
        limit: int = DEFAULT_PAGE_SIZE,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> List[SearchHit]:
        """Conjunctive keyword search ranked by path matches.

        A query token matches any indexed token it is a prefix of. Raises
        ``SearchCancelled`` rather than returning partial results.
        """
        tokens = unique_tokens([query or ""])
        if not tokens:
            raise EmptyQuery(query)
        if framework is not None and framework not in self._tree:
            raise UnknownFramework(framework)

        budget = SearchBudget(query, cancel=cancel, timeout=timeout)
        budget.check()

        expanded: Dict[str, frozenset[str]] = {}
        candidates: set[str] | None = None
        for token in tokens:
            budget.check()
            matches = frozenset(expand_prefix(self._vocabulary, token))
            expanded[token] = matches
            paths: set[str] = set()
            for match in matches:
                paths.update(self._postings[match])
            candidates = paths if candidates is None else candidates & paths
            if not candidates:
                return []

        hits: List[SearchHit] = []
        for index, path in enumerate(sorted(candidates or ())):
            if index % CANCEL_CHECK_INTERVAL == 0:
                budget.check()
            record = self._by_path[path]
            if framework is not None and record.framework != framework:
                continue
            path_tokens = self._path_tokens[path]
            path_matches = sum(1 for token in tokens if expanded[token] & path_tokens)
            hits.append(score_hit(record, path_matches, len(tokens)))

        budget.check()
        LOGGER.debug("Search %r matched %d records", query, len(hits))
        return rank(hits)[:limit]
