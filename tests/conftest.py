"""Shared fixtures: a small on-disk component corpus."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Union

import pytest

from componentfinder.engine import QueryEngine
from componentfinder.index.catalog import Catalog
from componentfinder.index.loader import load_corpus

CORPUS_FILES: Dict[str, Union[str, bytes]] = {
    "hyperui/application/badges/1.html": '<span class="badge">Badge</span>\n',
    "hyperui/application/badges/1-dark.html": '<span class="badge dark:bg-gray-800">Badge</span>\n',
    "hyperui/application/modals/1.html": '<div role="dialog" class="modal">Modal</div>\n',
    "hyperui/application/modals/1-dark.html": '<div role="dialog" class="modal dark:bg-gray-900">Modal</div>\n',
    "hyperui/marketing/banners/1.html": "<section>Banner with badge</section>\n",
    "hyperui/marketing/README.md": "Not a component.\n",
    "headlessui-react/dialog/Basic.tsx": "export function Basic() { return <Dialog /> }\n",
    "headlessui-vue/dialog/Basic.vue": "<template><Dialog /></template>\n",
    "daisyui/modal.md": "# Modal\n\nUse the modal class.\n",
    "daisyui/button.md": "# Button\n\nUse the btn class.\n",
    "flyonui/css/accordion.css": ".accordion { display: block; }\n",
    "flyonui/plugins/accordion/index.ts": "export class HSAccordion {}\n",
    "flyonui/plugins/accordion/types.ts": "export interface IAccordion {}\n",
    "flyonui/plugins/accordion/variants.css": ".accordion-variants { color: red; }\n",
}

EXPECTED_COUNTS = {
    "daisyui": 2,
    "flyonui": 4,
    "headlessui-react": 1,
    "headlessui-vue": 1,
    "hyperui": 5,
}


def build_corpus(root: Path, files: Dict[str, Union[str, bytes]]) -> Path:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def corpus_root(tmp_path: Path) -> Path:
    return build_corpus(tmp_path / "components", CORPUS_FILES)


@pytest.fixture
def corrupt_corpus_root(tmp_path: Path) -> Path:
    files = dict(CORPUS_FILES)
    files["hyperui/application/badges/2.html"] = b"\xff\xfe\x00<span>broken</span>"
    return build_corpus(tmp_path / "components", files)


@pytest.fixture
def catalog(corpus_root: Path) -> Catalog:
    return load_corpus(corpus_root)


@pytest.fixture
def engine(corpus_root: Path) -> QueryEngine:
    engine = QueryEngine(corpus_root)
    engine.load()
    return engine
