"""Hoppen configuration.

Centralised, typed configuration for the scaffolder. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.

CDN URLs, formatter options, the dev server port and the playground endpoint
all live here; a single ``Config`` instance is built by the CLI and handed to
every component that needs it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class GsapPlugin(BaseModel):
    """An optional GSAP plugin that can be injected after the core library."""

    name: str
    id: str
    src: str


def _default_gsap_plugins() -> list[GsapPlugin]:
    base = "https://cdn.jsdelivr.net/npm/gsap@latest/dist"
    return [
        GsapPlugin(name=plugin_id, id=plugin_id, src=f"{base}/{plugin_id}.min.js")
        for plugin_id in ("ScrollTrigger", "ScrollSmoother", "Draggable", "SplitText")
    ]


class CdnConfig(BaseModel):
    """External library locations embedded as text in generated projects."""

    gsap: str = Field(default="https://cdn.jsdelivr.net/npm/gsap@latest/dist/gsap.min.js")
    gsap_plugins: list[GsapPlugin] = Field(default_factory=_default_gsap_plugins)
    lenis: str = Field(
        default="https://cdn.jsdelivr.net/npm/@studio-freight/lenis@latest/dist/lenis.min.js"
    )
    three_module: str = Field(
        default="https://cdn.jsdelivr.net/npm/three@latest/build/three.module.js"
    )
    babel_standalone: str = Field(default="https://unpkg.com/@babel/standalone/babel.min.js")
    react: str = Field(default="https://esm.sh/react@18.3.1")
    react_dom: str = Field(default="https://esm.sh/react-dom@18.3.1/client")
    react_three_fiber: str = Field(
        default=(
            "https://esm.sh/@react-three/fiber@8.17.10"
            "?deps=react@18.3.1,react-dom@18.3.1,three@latest"
        )
    )

    def plugin(self, plugin_id: str) -> GsapPlugin | None:
        """Return the plugin registered under *plugin_id*, if any."""
        for plugin in self.gsap_plugins:
            if plugin.id == plugin_id:
                return plugin
        return None


class ServerConfig(BaseModel):
    """Local static dev server settings."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=2187, ge=0, le=65535)
    open_browser: bool = Field(default=True)
    startup_timeout: int = Field(
        default=10, ge=1, description="Seconds to wait for the server before opening a browser"
    )


class FormatterConfig(BaseModel):
    """Options for formatting generated sources."""

    indent: int = Field(default=2, ge=0)
    print_width: int = Field(default=100, ge=40)
    glsl_formatter: str = Field(
        default="clang-format", description="Executable used to format GLSL; optional"
    )
    glsl_style: str = Field(default="{BasedOnStyle: LLVM, IndentWidth: 2}")

    @property
    def clang_style(self) -> str:
        """The GLSL style with the configured column limit folded in."""
        style = self.glsl_style.strip()
        if "ColumnLimit" in style or not style.startswith("{"):
            return style
        return style[:-1].rstrip() + f", ColumnLimit: {self.print_width}}}"


class PlaygroundConfig(BaseModel):
    """Third-party code playground that accepts prefilled pens via form POST."""

    endpoint: str = Field(default="https://codepen.io/pen/define")
    default_title: str = Field(default="Hoppen Pen")
    editors: str = Field(default="111", pattern=r"^[01]{3}$")


class Config(BaseModel):
    """Global Hoppen configuration.

    Instances are typically created once by the CLI entry point and then
    passed explicitly to the generator, the dev server and the playground
    exporter.
    """

    workspace_dir: Path = Field(default_factory=Path.cwd)
    internal_dir_name: str = Field(default="@@internal")
    canvas_id: str = Field(default="shader-canvas")
    include_plain_shader_runtime: bool = Field(default=True)
    cdn: CdnConfig = Field(default_factory=CdnConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    formatter: FormatterConfig = Field(default_factory=FormatterConfig)
    playground: PlaygroundConfig = Field(default_factory=PlaygroundConfig)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def project_path(self, slug: str) -> Path:
        """Directory of the project named *slug* inside the workspace."""
        return self.workspace_dir / slug

    def internal_path(self, slug: str) -> Path:
        """Hidden tool-owned asset folder of the project named *slug*."""
        return self.project_path(slug) / self.internal_dir_name

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, base: "Config | None" = None) -> "Config":
        """Build a ``Config`` from environment variables.

        Values found in the environment override those of *base* (or the
        defaults when *base* is omitted).

        Recognised variables (all optional):
            HOPPEN_WORKSPACE, HOPPEN_HOST, HOPPEN_PORT, HOPPEN_NO_OPEN,
            HOPPEN_PLAYGROUND_ENDPOINT, HOPPEN_GLSL_FORMATTER.
        """
        config = base.model_copy(deep=True) if base is not None else cls()

        server_kwargs: dict[str, Any] = {}
        if os.environ.get("HOPPEN_HOST"):
            server_kwargs["host"] = os.environ["HOPPEN_HOST"]
        if os.environ.get("HOPPEN_PORT"):
            server_kwargs["port"] = int(os.environ["HOPPEN_PORT"])
        if os.environ.get("HOPPEN_NO_OPEN", "").lower() in ("1", "true", "yes"):
            server_kwargs["open_browser"] = False

        update: dict[str, Any] = {}
        if os.environ.get("HOPPEN_WORKSPACE"):
            update["workspace_dir"] = Path(os.environ["HOPPEN_WORKSPACE"])
        if server_kwargs:
            update["server"] = ServerConfig(
                **{**config.server.model_dump(), **server_kwargs}
            )
        if os.environ.get("HOPPEN_PLAYGROUND_ENDPOINT"):
            update["playground"] = config.playground.model_copy(
                update={"endpoint": os.environ["HOPPEN_PLAYGROUND_ENDPOINT"]}
            )
        if os.environ.get("HOPPEN_GLSL_FORMATTER"):
            update["formatter"] = config.formatter.model_copy(
                update={"glsl_formatter": os.environ["HOPPEN_GLSL_FORMATTER"]}
            )

        return config.model_copy(update=update) if update else config

    def ensure_workspace(self) -> Path:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)
        return self.workspace_dir
