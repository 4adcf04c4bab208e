"""Per-framework directory layouts.

Each framework lays out its component files differently on disk. A
``PathScheme`` walks one framework directory and maps every file it accepts
to the uniform ``(category, component_type, variant)`` triple, so nothing
downstream of the loader needs to know which layout a framework used.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, Tuple

from componentfinder.utils.files import sorted_children

DEFAULT_TEXT_EXTENSIONS = frozenset(
    {".html", ".htm", ".css", ".scss", ".js", ".jsx", ".ts", ".tsx", ".vue", ".svelte", ".md"}
)


@dataclass(frozen=True, slots=True)
class SchemeEntry:
    category: str
    component_type: str
    variant: str
    file: Path

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.category, self.component_type, self.variant)


def _normalize_extensions(extensions: Iterable[str]) -> FrozenSet[str]:
    return frozenset(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions)


def _files_with(directory: Path, extensions: FrozenSet[str]) -> Iterator[Path]:
    for child in sorted_children(directory):
        if child.is_file() and child.suffix.lower() in extensions:
            yield child


def _subdirs(directory: Path) -> Iterator[Path]:
    for child in sorted_children(directory):
        if child.is_dir():
            yield child


class PathScheme(ABC):
    """Maps one framework directory onto catalog keys."""

    name: str = "scheme"

    def __init__(self, extensions: Iterable[str]) -> None:
        self.extensions = _normalize_extensions(extensions)

    @abstractmethod
    def discover(self, framework_dir: Path) -> Iterator[SchemeEntry]:
        """Yield entries in deterministic order."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(extensions={sorted(self.extensions)})"


class Numbered(PathScheme):
    """``<category>/<component_type>/<variant>.<ext>`` (HyperUI and the default layout)."""

    name = "numbered"

    def discover(self, framework_dir: Path) -> Iterator[SchemeEntry]:
        for category_dir in _subdirs(framework_dir):
            for type_dir in _subdirs(category_dir):
                for file in _files_with(type_dir, self.extensions):
                    yield SchemeEntry(category_dir.name, type_dir.name, file.stem, file)


class NamedVariant(PathScheme):
    """``<widget>/<ExampleName>.<ext>`` under a fixed category (HeadlessUI)."""

    name = "named-variant"

    def __init__(self, extensions: Iterable[str], *, category: str = "components") -> None:
        super().__init__(extensions)
        self.category = category

    def discover(self, framework_dir: Path) -> Iterator[SchemeEntry]:
        for widget_dir in _subdirs(framework_dir):
            for file in _files_with(widget_dir, self.extensions):
                yield SchemeEntry(self.category, widget_dir.name, file.stem, file)


class FlatNamed(PathScheme):
    """``<name>.<ext>`` directly inside the framework directory (DaisyUI)."""

    name = "flat-named"

    def __init__(
        self,
        extensions: Iterable[str],
        *,
        category: str = "components",
        component_type: str = "all",
    ) -> None:
        super().__init__(extensions)
        self.category = category
        self.component_type = component_type

    def discover(self, framework_dir: Path) -> Iterator[SchemeEntry]:
        for file in _files_with(framework_dir, self.extensions):
            yield SchemeEntry(self.category, self.component_type, file.stem, file)


class PluginFileSet(PathScheme):
    """Flat stylesheets plus per-plugin file sets (FlyonUI).

    ``css/<name>.css`` becomes ``css/all/<name>`` and
    ``plugins/<plugin>/<file>.<ext>`` becomes ``plugins/<plugin>/<file>``.
    """

    name = "plugin-file-set"

    def __init__(
        self,
        extensions: Iterable[str],
        *,
        stylesheet_dir: str = "css",
        stylesheet_extensions: Iterable[str] = (".css",),
        plugins_dir: str = "plugins",
    ) -> None:
        super().__init__(extensions)
        self.stylesheet_dir = stylesheet_dir
        self.stylesheet_extensions = _normalize_extensions(stylesheet_extensions)
        self.plugins_dir = plugins_dir

    def discover(self, framework_dir: Path) -> Iterator[SchemeEntry]:
        css_dir = framework_dir / self.stylesheet_dir
        if css_dir.is_dir():
            for file in _files_with(css_dir, self.stylesheet_extensions):
                yield SchemeEntry(self.stylesheet_dir, "all", file.stem, file)

        plugins_dir = framework_dir / self.plugins_dir
        if plugins_dir.is_dir():
            for plugin_dir in _subdirs(plugins_dir):
                for file in _files_with(plugin_dir, self.extensions):
                    yield SchemeEntry(self.plugins_dir, plugin_dir.name, file.stem, file)
