"""Feature selection and resolution.

Maps the raw multi-select answers into a fixed-shape ``FeatureFlags`` record.
Unknown identifiers are ignored silently; GSAP plugins are only honoured when
GSAP itself was selected.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, Field


class Feature(str, Enum):
    """Identifiers offered in the feature multi-select."""

    GSAP = "gsap"
    SHADERS = "shaders"
    THREE = "three"
    LENIS = "lenis"
    R3F = "r3f"


FEATURE_TITLES: dict[Feature, str] = {
    Feature.GSAP: "GSAP",
    Feature.SHADERS: "Shaders skeleton",
    Feature.THREE: "THREE.js",
    Feature.LENIS: "Lenis",
    Feature.R3F: "r3f",
}

ENTRY_SCRIPT = "main.js"
ENTRY_COMPONENT = "main.jsx"


class FeatureFlags(BaseModel):
    """Boolean per-feature selection derived from the raw answers."""

    model_config = {"frozen": True}

    shaders: bool = False
    three: bool = False
    r3f: bool = False
    gsap: bool = False
    gsap_plugins: tuple[str, ...] = Field(default=())
    lenis: bool = False

    @property
    def entry_file(self) -> str:
        """Name of the app entry file: a component file for r3f, else plain JS."""
        return ENTRY_COMPONENT if self.r3f else ENTRY_SCRIPT

    @property
    def needs_heading(self) -> bool:
        """True when nothing would otherwise be drawn on the page."""
        return not (self.shaders or self.three or self.r3f)

    def enabled(self) -> list[str]:
        """Enabled feature ids in menu order."""
        return [f.value for f in Feature if getattr(self, f.value)]


def resolve_features(
    selection: Iterable[str] | None,
    plugins: Iterable[str] | None = None,
) -> FeatureFlags:
    """Resolve raw feature ids (and GSAP plugin ids) to ``FeatureFlags``.

    Plugin order follows the order of *plugins*; duplicates are dropped.
    """
    known = {f.value for f in Feature}
    chosen = {s for s in (selection or ()) if s in known}

    gsap = Feature.GSAP.value in chosen
    ordered_plugins: list[str] = []
    if gsap:
        for plugin_id in plugins or ():
            if plugin_id not in ordered_plugins:
                ordered_plugins.append(plugin_id)

    return FeatureFlags(
        shaders=Feature.SHADERS.value in chosen,
        three=Feature.THREE.value in chosen,
        r3f=Feature.R3F.value in chosen,
        gsap=gsap,
        gsap_plugins=tuple(ordered_plugins),
        lenis=Feature.LENIS.value in chosen,
    )
