"""Exceptions raised while loading and querying the component catalog."""

from __future__ import annotations

from typing import Sequence


class CatalogError(Exception):
    """Base class for catalog failures; ``kind`` is the wire-level error name."""

    kind = "catalog_error"


class CorpusUnavailable(CatalogError):
    kind = "corpus_unavailable"

    def __init__(self, root: object, reason: str) -> None:
        super().__init__(f"Corpus unavailable at {root}: {reason}")
        self.root = root
        self.reason = reason


class UnknownFramework(CatalogError):
    kind = "unknown_framework"

    def __init__(self, framework: str) -> None:
        super().__init__(f"Unknown framework: {framework}")
        self.framework = framework


class NotFound(CatalogError):
    kind = "not_found"

    def __init__(self, path: str, suggestions: Sequence[str] = ()) -> None:
        super().__init__(f"Component not found: {path}")
        self.path = path
        self.suggestions = list(suggestions)


class MalformedPath(CatalogError):
    kind = "malformed_path"

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Malformed path: {path!r} (expected framework/category/component_type/variant)"
        )
        self.path = path


class EmptyQuery(CatalogError):
    kind = "empty_query"

    def __init__(self, query: str) -> None:
        super().__init__(f"Query {query!r} has no searchable tokens")
        self.query = query


class SearchCancelled(CatalogError):
    kind = "cancelled"

    def __init__(self, query: str) -> None:
        super().__init__(f"Search for {query!r} was cancelled")
        self.query = query


class CatalogNotReady(CatalogError):
    kind = "catalog_not_ready"

    def __init__(self) -> None:
        super().__init__("Catalog is still loading, retry shortly")
