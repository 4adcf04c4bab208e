"""Corpus loading pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping

from componentfinder.errors import CorpusUnavailable
from componentfinder.index.catalog import Catalog, is_valid_segment
from componentfinder.ingestion.frameworks import KNOWN_FRAMEWORKS, FrameworkInfo, framework_info
from componentfinder.ingestion.schemes import SchemeEntry
from componentfinder.models import ComponentRecord, LoadWarning
from componentfinder.utils.files import is_readable_dir, sorted_children

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class LoadStats:
    loaded: int = 0
    skipped: int = 0
    warnings: List[LoadWarning] = field(default_factory=list)

    def warn(self, source_path: str, reason: str) -> None:
        LOGGER.warning("Skipping %s: %s", source_path, reason)
        self.skipped += 1
        self.warnings.append(LoadWarning(source_path=source_path, reason=reason))


def read_component(file: Path) -> str:
    """Read a component file as UTF-8 text.

    Raises ``ValueError`` for undecodable or empty files.
    """
    raw = file.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
    if not text.strip():
        raise ValueError("empty component file")
    return text


class CorpusLoader:
    """Walks a corpus root once and builds a ``Catalog``."""

    def __init__(self, root: Path, *, registry: Mapping[str, FrameworkInfo] | None = None) -> None:
        self.root = Path(root)
        self.registry = KNOWN_FRAMEWORKS if registry is None else registry

    def load(self) -> Catalog:
        if not self.root.exists():
            raise CorpusUnavailable(self.root, "directory does not exist")
        if not is_readable_dir(self.root):
            raise CorpusUnavailable(self.root, "not a readable directory")

        try:
            framework_dirs = [child for child in sorted_children(self.root) if child.is_dir()]
        except OSError as exc:
            raise CorpusUnavailable(self.root, str(exc)) from exc

        stats = LoadStats()
        for framework_dir in list(framework_dirs):
            if not is_valid_segment(framework_dir.name):
                stats.warn(framework_dir.name, "invalid framework name")
                framework_dirs.remove(framework_dir)

        records: Dict[str, ComponentRecord] = {}
        for framework_dir in framework_dirs:
            self._load_framework(framework_dir, records, stats)

        LOGGER.info(
            "Loaded %d components from %d frameworks under %s (%d skipped)",
            stats.loaded,
            len(framework_dirs),
            self.root,
            stats.skipped,
        )
        return Catalog(
            records.values(),
            frameworks=[d.name for d in framework_dirs],
            registry=self.registry,
            warnings=stats.warnings,
            corpus_root=self.root,
        )

    def _load_framework(
        self,
        framework_dir: Path,
        records: Dict[str, ComponentRecord],
        stats: LoadStats,
    ) -> None:
        framework = framework_dir.name
        info = framework_info(framework, self.registry)
        LOGGER.debug("Walking %s with %r", framework, info.scheme)

        try:
            entries = list(info.scheme.discover(framework_dir))
        except OSError as exc:
            stats.warn(framework, f"unreadable framework directory ({exc})")
            return

        for entry in entries:
            source_path = entry.file.relative_to(self.root).as_posix()
            try:
                record = self._build_record(framework, info, entry, source_path)
            except (OSError, ValueError) as exc:
                stats.warn(source_path, str(exc))
                continue

            existing = records.get(record.path)
            if existing is not None:
                stats.warn(source_path, f"duplicate of {existing.source_path} for {record.path}")
                continue
            records[record.path] = record
            stats.loaded += 1

    def _build_record(
        self, framework: str, info: FrameworkInfo, entry: SchemeEntry, source_path: str
    ) -> ComponentRecord:
        for segment in entry.key:
            if not is_valid_segment(segment):
                raise ValueError(f"invalid path segment {segment!r}")
        # Such a key could equal another file's source path and shadow it in lookups.
        if Path(entry.variant).suffix.lower() in info.scheme.extensions:
            raise ValueError(f"variant {entry.variant!r} ends in a component file extension")
        return ComponentRecord(
            framework=framework,
            category=entry.category,
            component_type=entry.component_type,
            variant=entry.variant,
            content=read_component(entry.file),
            source_path=source_path,
            extension=entry.file.suffix.lstrip(".").lower(),
        )


def load_corpus(root: Path, *, registry: Mapping[str, FrameworkInfo] | None = None) -> Catalog:
    """Load every component under root into a new catalog."""
    return CorpusLoader(root, registry=registry).load()
