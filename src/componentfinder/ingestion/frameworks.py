"""Registry of known component frameworks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping

from componentfinder.ingestion.schemes import (
    DEFAULT_TEXT_EXTENSIONS,
    FlatNamed,
    NamedVariant,
    Numbered,
    PathScheme,
    PluginFileSet,
)


@dataclass(frozen=True, slots=True)
class FrameworkInfo:
    id: str
    display_name: str
    dependencies: str
    scheme: PathScheme


KNOWN_FRAMEWORKS: Dict[str, FrameworkInfo] = {
    "hyperui": FrameworkInfo(
        id="hyperui",
        display_name="HyperUI (HTML)",
        dependencies="None, pure Tailwind CSS classes (some need @tailwindcss/forms)",
        scheme=Numbered([".html"]),
    ),
    "headlessui-react": FrameworkInfo(
        id="headlessui-react",
        display_name="HeadlessUI React (TSX)",
        dependencies="npm install @headlessui/react",
        scheme=NamedVariant([".tsx"]),
    ),
    "headlessui-vue": FrameworkInfo(
        id="headlessui-vue",
        display_name="HeadlessUI Vue (SFC)",
        dependencies="npm install @headlessui/vue",
        scheme=NamedVariant([".vue"]),
    ),
    "daisyui": FrameworkInfo(
        id="daisyui",
        display_name="DaisyUI (CSS Framework)",
        dependencies="npm install daisyui",
        scheme=FlatNamed([".md"]),
    ),
    "flyonui": FrameworkInfo(
        id="flyonui",
        display_name="FlyonUI (CSS Framework)",
        dependencies="npm install flyonui",
        scheme=PluginFileSet([".css", ".ts"]),
    ),
}


def framework_info(name: str, registry: Mapping[str, FrameworkInfo] | None = None) -> FrameworkInfo:
    """Return the registry entry for a framework directory.

    Directories missing from the registry fall back to the generic
    ``<category>/<component_type>/<variant>.<ext>`` layout.
    """
    registry = KNOWN_FRAMEWORKS if registry is None else registry
    info = registry.get(name)
    if info is not None:
        return info
    return FrameworkInfo(
        id=name,
        display_name=name,
        dependencies="",
        scheme=Numbered(DEFAULT_TEXT_EXTENSIONS),
    )
