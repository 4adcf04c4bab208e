"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from componentfinder.index.search import DEFAULT_PAGE_SIZE, clamp_page_size

CORPUS_ENV = "COMPONENTFINDER_CORPUS"
PAGE_SIZE_ENV = "COMPONENTFINDER_PAGE_SIZE"
PLUGIN_ROOT_ENV = "CLAUDE_PLUGIN_ROOT"
WATCH_ENV = "COMPONENTFINDER_WATCH"


def _get_default_corpus_root() -> Path:
    """Pick the corpus directory from the environment, falling back to ./components."""
    explicit = os.environ.get(CORPUS_ENV)
    if explicit:
        return Path(explicit).expanduser()

    # Plugin installs ship the corpus next to the server.
    plugin_root = os.environ.get(PLUGIN_ROOT_ENV)
    if plugin_root:
        return Path(plugin_root).expanduser() / "components"

    return Path("components")


def _get_default_page_size() -> int:
    raw = os.environ.get(PAGE_SIZE_ENV)
    if not raw:
        return DEFAULT_PAGE_SIZE
    try:
        return clamp_page_size(int(raw))
    except ValueError:
        return DEFAULT_PAGE_SIZE


@dataclass(slots=True)
class AppConfig:
    corpus_root: Path | None = None
    page_size: int | None = None
    watch: bool | None = None
    watch_interval: float = 2.0

    def __post_init__(self) -> None:
        if self.corpus_root is None:
            self.corpus_root = _get_default_corpus_root()
        self.page_size = (
            _get_default_page_size() if self.page_size is None else clamp_page_size(self.page_size)
        )
        if self.watch is None:
            self.watch = os.environ.get(WATCH_ENV, "").strip().lower() in {"1", "true", "yes", "on"}

    def resolve_corpus_root(self, base_dir: Path | None = None) -> Path:
        if self.corpus_root is None:
            self.corpus_root = _get_default_corpus_root()
        if Path(self.corpus_root).is_absolute() or base_dir is None:
            return Path(self.corpus_root)
        return base_dir / self.corpus_root
