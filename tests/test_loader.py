"""Tests for the corpus loader."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from componentfinder.errors import CorpusUnavailable
from componentfinder.index.loader import CorpusLoader, LoadStats, load_corpus, read_component

from conftest import CORPUS_FILES, EXPECTED_COUNTS, build_corpus


class TestLoadStats:
    """Test LoadStats tracking."""

    def test_init_defaults(self) -> None:
        stats = LoadStats()
        assert stats.loaded == 0
        assert stats.skipped == 0
        assert stats.warnings == []

    def test_warn_records_warning(self) -> None:
        stats = LoadStats()

        stats.warn("hyperui/a/b/1.html", "empty component file")

        assert stats.skipped == 1
        assert stats.warnings[0].source_path == "hyperui/a/b/1.html"


class TestReadComponent:
    """Test read_component helper."""

    def test_reads_utf8(self, tmp_path: Path) -> None:
        target = tmp_path / "1.html"
        target.write_text("<p>héllo</p>", encoding="utf-8")

        assert read_component(target) == "<p>héllo</p>"

    def test_rejects_invalid_utf8(self, tmp_path: Path) -> None:
        target = tmp_path / "1.html"
        target.write_bytes(b"\xff\xfe\x00")

        with pytest.raises(ValueError, match="UTF-8"):
            read_component(target)

    def test_rejects_blank_file(self, tmp_path: Path) -> None:
        target = tmp_path / "1.html"
        target.write_text("  \n")

        with pytest.raises(ValueError, match="empty"):
            read_component(target)


class TestCorpusLoader:
    """Test CorpusLoader."""

    def test_loads_every_framework(self, corpus_root: Path) -> None:
        catalog = load_corpus(corpus_root)

        counts = {summary.name: summary.count for summary in catalog.frameworks()}
        assert counts == EXPECTED_COUNTS
        assert catalog.warnings == ()

    def test_paths_are_unique(self, corpus_root: Path) -> None:
        """No two records share a path."""
        catalog = load_corpus(corpus_root)

        paths = [record.path for record in catalog.records()]
        sources = [record.source_path for record in catalog.records()]
        assert len(paths) == len(set(paths)) == sum(EXPECTED_COUNTS.values())
        assert len(sources) == len(set(sources))

    def test_record_fields(self, corpus_root: Path) -> None:
        catalog = load_corpus(corpus_root)

        record = catalog.get("flyonui", "plugins", "accordion", "index")
        assert record.source_path == "flyonui/plugins/accordion/index.ts"
        assert record.extension == "ts"
        assert record.content == CORPUS_FILES["flyonui/plugins/accordion/index.ts"]

        daisy = catalog.get("daisyui", "components", "all", "modal")
        assert daisy.source_path == "daisyui/modal.md"

        react = catalog.get("headlessui-react", "components", "dialog", "Basic")
        assert react.extension == "tsx"

    def test_malformed_file_is_skipped_with_one_warning(self, corrupt_corpus_root: Path) -> None:
        """One bad file leaves the other records loaded and yields one warning."""
        catalog = load_corpus(corrupt_corpus_root)

        assert len(catalog) == sum(EXPECTED_COUNTS.values())
        assert len(catalog.warnings) == 1
        assert catalog.warnings[0].source_path == "hyperui/application/badges/2.html"
        assert "UTF-8" in catalog.warnings[0].reason
        counts = {summary.name: summary.count for summary in catalog.frameworks()}
        assert counts == EXPECTED_COUNTS

    def test_invalid_segment_is_a_warning(self, tmp_path: Path) -> None:
        root = build_corpus(
            tmp_path / "c",
            {"hyperui/application/badges/1.html": "ok", "hyperui/application/badges/bad name.html": "x"},
        )

        catalog = load_corpus(root)

        assert len(catalog) == 1
        assert [w.source_path for w in catalog.warnings] == ["hyperui/application/badges/bad name.html"]

    def test_duplicate_key_keeps_first(self, tmp_path: Path) -> None:
        root = build_corpus(
            tmp_path / "c",
            {
                "flyonui/plugins/accordion/variants.css": ".a {}",
                "flyonui/plugins/accordion/variants.ts": "export {}",
            },
        )

        catalog = load_corpus(root)

        record = catalog.get("flyonui", "plugins", "accordion", "variants")
        assert record.extension == "css"
        assert len(catalog.warnings) == 1
        assert catalog.warnings[0].source_path == "flyonui/plugins/accordion/variants.ts"

    def test_variant_ending_in_extension_is_a_warning(self, tmp_path: Path) -> None:
        """A key like x/a/b/c.md would shadow the source path of c.md."""
        root = build_corpus(
            tmp_path / "c",
            {"x/a/b/c.md": "# C\n", "x/a/b/c.md.html": "<p>shadow</p>"},
        )

        catalog = load_corpus(root)

        assert catalog.get_by_path("x/a/b/c.md").content == "# C\n"
        assert catalog.get_by_path("x/a/b/c").source_path == "x/a/b/c.md"
        assert [w.source_path for w in catalog.warnings] == ["x/a/b/c.md.html"]
        assert "extension" in catalog.warnings[0].reason

    def test_empty_framework_is_listed(self, tmp_path: Path) -> None:
        root = build_corpus(tmp_path / "c", {"hyperui/application/badges/1.html": "x"})
        (root / "daisyui").mkdir()

        catalog = load_corpus(root)

        counts = {summary.name: summary.count for summary in catalog.frameworks()}
        assert counts == {"daisyui": 0, "hyperui": 1}
        assert catalog.list("daisyui") == []

    def test_unknown_framework_uses_generic_layout(self, tmp_path: Path) -> None:
        root = build_corpus(tmp_path / "c", {"custom/forms/inputs/1.vue": "<template />"})

        catalog = load_corpus(root)

        assert "custom/forms/inputs/1" in catalog

    def test_hidden_entries_are_ignored(self, tmp_path: Path) -> None:
        root = build_corpus(
            tmp_path / "c",
            {"hyperui/application/badges/1.html": "x", ".cache/a/b/c.html": "x"},
        )

        catalog = load_corpus(root)

        assert catalog.framework_names() == ["hyperui"]

    def test_missing_root_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(CorpusUnavailable):
            load_corpus(tmp_path / "missing")

    def test_file_root_is_fatal(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(CorpusUnavailable):
            CorpusLoader(target).load()

    def test_does_not_modify_sources(self, corpus_root: Path) -> None:
        before = {
            p: p.stat().st_mtime_ns for p in corpus_root.rglob("*") if p.is_file()
        }

        load_corpus(corpus_root)

        after = {
            p: p.stat().st_mtime_ns for p in corpus_root.rglob("*") if p.is_file()
        }
        assert before == after

    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions")
    def test_unreadable_root_is_fatal(self, tmp_path: Path) -> None:
        root = tmp_path / "locked"
        root.mkdir()
        root.chmod(0)
        try:
            with pytest.raises(CorpusUnavailable):
                load_corpus(root)
        finally:
            root.chmod(0o755)
