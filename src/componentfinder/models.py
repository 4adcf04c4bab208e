"""Core ComponentFinder data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Tuple

from componentfinder.utils.text import tokenize


@dataclass(frozen=True, slots=True)
class ComponentRecord:
    """One retrievable component variant."""

    framework: str
    category: str
    component_type: str
    variant: str
    content: str
    source_path: str
    extension: str = ""

    @property
    def path(self) -> str:
        return "/".join((self.framework, self.category, self.component_type, self.variant))

    @property
    def key(self) -> Tuple[str, str, str, str]:
        return (self.framework, self.category, self.component_type, self.variant)

    @property
    def path_keywords(self) -> frozenset[str]:
        return frozenset(tokenize(self.path))

    @property
    def keywords(self) -> frozenset[str]:
        """Search tokens drawn from the path segments and the content."""
        return self.path_keywords | frozenset(tokenize(self.content))


@dataclass(slots=True)
class ComponentDescriptor:
    category: str
    component_type: str
    variant: str
    path: str


@dataclass(slots=True)
class FrameworkSummary:
    name: str
    display_name: str
    dependencies: str
    count: int
    categories: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LoadWarning:
    """A corpus file skipped during load."""

    source_path: str
    reason: str


@dataclass(slots=True)
class CatalogStatus:
    state: str
    corpus_root: str | None
    record_count: int = 0
    framework_count: int = 0
    warnings: List[LoadWarning] = field(default_factory=list)
    loaded_at: datetime | None = None
    generation: int = 0
