"""Main scaffolding orchestrator.

Takes a project identity and a ``FeatureFlags`` record and materializes a
static web project: ``index.html``, ``style.css``, an entry script, optional
GLSL sources, and the hidden internal folder holding tool-owned runtimes.

Every planned file carries an explicit ``WritePolicy``: structural and
tool-owned files are regenerated on every run, while files the user is
expected to edit are only created when absent.
"""

from __future__ import annotations

import asyncio
import shutil
import textwrap
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from hoppen.config import Config
from hoppen.errors import InvalidProjectName
from hoppen.utils import ensure_dir, slugify, write_text

from .features import ENTRY_COMPONENT, ENTRY_SCRIPT, FeatureFlags
from .formatter import CodeFormatter
from .html import HtmlAssembler
from .templates import TemplateRenderer

DEFAULT_GLSL = "precision mediump float;\n"

SKELETON_TEMPLATE = "index.html.j2"
PREFILL_TEMPLATE = "codepen-prefill.js.j2"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class WritePolicy(str, Enum):
    """What to do when a planned file already exists on disk."""

    ALWAYS = "always"
    IF_MISSING = "if_missing"


class FileStatus(str, Enum):
    CREATED = "created"
    OVERWRITTEN = "overwritten"
    PRESERVED = "preserved"
    REMOVED = "removed"


class ProjectIdentity(BaseModel):
    """User-facing project name and the directory slug derived from it."""

    name: str = Field(..., description="Display name, used for the title and heading")

    @property
    def slug(self) -> str:
        return slugify(self.name)

    @classmethod
    def from_name(cls, name: str) -> "ProjectIdentity":
        """Build an identity, rejecting names that yield an empty slug."""
        identity = cls(name=name.strip())
        if not identity.slug:
            raise InvalidProjectName(name)
        return identity


@dataclass
class PlannedFile:
    """One file of the generated file set."""

    path: str
    content: str
    policy: WritePolicy
    kind: str = "raw"


@dataclass
class ProjectPlan:
    """Everything ``generate`` will write, decided without touching the disk."""

    files: list[PlannedFile] = field(default_factory=list)
    html: HtmlAssembler | None = None

    def add(self, path: str, content: str, policy: WritePolicy, kind: str = "raw") -> None:
        if any(f.path == path for f in self.files):
            raise ValueError(f"File planned twice: {path}")
        self.files.append(PlannedFile(path, content, policy, kind))

    def paths(self) -> list[str]:
        return [f.path for f in self.files]

    def get(self, path: str) -> PlannedFile | None:
        for planned in self.files:
            if planned.path == path:
                return planned
        return None


class GenerationResult(BaseModel):
    """Outcome of materializing one project."""

    project_dir: Path
    identity: ProjectIdentity
    flags: FeatureFlags
    files: dict[str, FileStatus] = Field(default_factory=dict)

    @property
    def html_path(self) -> Path:
        return self.project_dir / "index.html"

    def with_status(self, status: FileStatus) -> list[str]:
        return [path for path, s in self.files.items() if s is status]


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Materializes a project directory for one feature selection.

    Given a ``Config``, produces:
    - ``index.html`` assembled from the skeleton (always regenerated)
    - ``style.css`` and the entry script (created only when absent, unless
      the entry is seeded from a library template)
    - ``vertex.glsl`` / ``fragment.glsl`` for shader projects
    - the internal folder with the reset sheet, shader runtimes and the
      playground-prefill helper
    """

    def __init__(
        self,
        config: Config,
        renderer: TemplateRenderer | None = None,
        formatter: CodeFormatter | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self.formatter = formatter or CodeFormatter(config.formatter)

    # -- Public API --------------------------------------------------------

    def owned_paths(self) -> list[str]:
        """Files some selection generates; the ones a new selection drops are removed."""
        internal = self.config.internal_dir_name
        return [
            "vertex.glsl",
            "fragment.glsl",
            f"{internal}/shaders-hmr.js",
            f"{internal}/shaders.js",
            ENTRY_SCRIPT,
            ENTRY_COMPONENT,
        ]

    def required_templates(self, flags: FeatureFlags) -> list[str]:
        """Template files the given selection cannot be generated without."""
        names = [SKELETON_TEMPLATE, "reset.css", PREFILL_TEMPLATE]
        if flags.shaders:
            names += ["shaders.html", "shaders.css", "shaders-hmr.js"]
            if self.config.include_plain_shader_runtime:
                names.append("shaders.js")
        if flags.r3f:
            names.append("r3f.jsx.j2")
        elif flags.three:
            names.append("threejs.js.j2")
        return names

    async def plan(self, identity: ProjectIdentity, flags: FeatureFlags) -> ProjectPlan:
        """Decide the complete file set and build the HTML document.

        Raises:
            TemplateNotFoundError: If a required template is missing.
        """
        self.renderer.require(self.required_templates(flags))
        internal = self.config.internal_dir_name
        plan = ProjectPlan()

        skeleton = self.renderer.render(
            SKELETON_TEMPLATE,
            {
                "title": "Hoppen",
                "reset_href": f"{internal}/reset.css",
                "style_href": "style.css",
            },
        )
        html = HtmlAssembler(skeleton)
        plan.html = html

        reset_css = await self.renderer.aread("reset.css")
        style_css = ""

        # 1. Page content
        if flags.shaders:
            style_css = await self._plan_shaders(plan, html)
        if flags.needs_heading:
            html.append_heading(identity.name)

        # 2. Libraries, before any app script
        for src in self.library_sources(flags):
            html.append_library(src)

        # 3. App entry, always last among app scripts
        self._plan_entry(plan, flags)
        html.append_entry(flags.entry_file, jsx=flags.r3f)

        # 4. Stylesheets and the playground helper
        plan.add("style.css", style_css, WritePolicy.IF_MISSING, "css")
        plan.add(f"{internal}/reset.css", reset_css, WritePolicy.ALWAYS)
        plan.add(
            f"{internal}/codepen-prefill.js",
            self.renderer.render(
                PREFILL_TEMPLATE,
                {
                    "endpoint": self.config.playground.endpoint,
                    "default_title": self.config.playground.default_title,
                    "editors": self.config.playground.editors,
                    "internal_dir": internal,
                    "entry_file": flags.entry_file,
                    "jsx": flags.r3f,
                    "canvas_id": self.config.canvas_id,
                },
            ),
            WritePolicy.ALWAYS,
            "js",
        )
        html.set_prefill(f"{internal}/codepen-prefill.js")

        # 5. The document itself, titled with the display name
        html.set_title(identity.name)
        plan.add("index.html", html.render(), WritePolicy.ALWAYS, "html")
        return plan

    async def generate(
        self,
        identity: ProjectIdentity,
        flags: FeatureFlags,
        *,
        clean: bool = False,
    ) -> GenerationResult:
        """Generate (or merge into) the project directory.

        Args:
            identity: Project name and slug.
            flags: Resolved feature selection.
            clean: Remove an existing project directory first instead of
                merging into it.

        Returns:
            A ``GenerationResult`` with the status of every planned file, plus
            ``REMOVED`` for owned files the previous selection left behind.
        """
        plan = await self.plan(identity, flags)

        project_dir = self.config.project_path(identity.slug)
        if clean and project_dir.exists():
            await asyncio.to_thread(shutil.rmtree, project_dir)
        await asyncio.to_thread(ensure_dir, self.config.internal_path(identity.slug))

        planned_paths = set(plan.paths())
        stale = [path for path in self.owned_paths() if path not in planned_paths]
        removed = await asyncio.gather(*(self._remove(project_dir, path) for path in stale))
        statuses = await asyncio.gather(
            *(self._write(project_dir, planned) for planned in plan.files)
        )

        files = {planned.path: status for planned, status in zip(plan.files, statuses)}
        files.update({path: FileStatus.REMOVED for path, gone in zip(stale, removed) if gone})
        return GenerationResult(
            project_dir=project_dir,
            identity=identity,
            flags=flags,
            files=files,
        )

    def library_sources(self, flags: FeatureFlags) -> list[str]:
        """CDN script URLs for the selection, in injection order."""
        cdn = self.config.cdn
        sources: list[str] = []
        if flags.gsap:
            sources.append(cdn.gsap)
            for plugin_id in flags.gsap_plugins:
                plugin = cdn.plugin(plugin_id)
                if plugin is not None:
                    sources.append(plugin.src)
        if flags.lenis:
            sources.append(cdn.lenis)
        if flags.r3f:
            sources.append(cdn.babel_standalone)
        return sources

    # -- Planning helpers --------------------------------------------------

    async def _plan_shaders(self, plan: ProjectPlan, html: HtmlAssembler) -> str:
        """Plan the shader files and add the canvas; returns the stylesheet seed."""
        internal = self.config.internal_dir_name
        names = ["shaders.html", "shaders.css", "shaders-hmr.js"]
        if self.config.include_plain_shader_runtime:
            names.append("shaders.js")
        sources = dict(
            zip(names, await asyncio.gather(*(self.renderer.aread(n) for n in names)))
        )

        doc = BeautifulSoup(sources["shaders.html"], "lxml")
        canvas = doc.find("canvas", id=self.config.canvas_id)
        if canvas is None:
            canvas = doc.new_tag("canvas", attrs={"id": self.config.canvas_id})
        html.append_content(canvas)

        plan.add("vertex.glsl", _script_text(doc, "vertex-shader"), WritePolicy.ALWAYS, "glsl")
        plan.add(
            "fragment.glsl", _script_text(doc, "fragment-shader"), WritePolicy.ALWAYS, "glsl"
        )

        plan.add(f"{internal}/shaders-hmr.js", sources["shaders-hmr.js"], WritePolicy.ALWAYS)
        if "shaders.js" in sources:
            plan.add(f"{internal}/shaders.js", sources["shaders.js"], WritePolicy.ALWAYS)
        html.append_module(f"{internal}/shaders-hmr.js")
        return sources["shaders.css"]

    def _plan_entry(self, plan: ProjectPlan, flags: FeatureFlags) -> None:
        cdn = self.config.cdn
        if flags.r3f:
            content = self.renderer.render(
                "r3f.jsx.j2",
                {
                    "react_url": cdn.react,
                    "react_dom_url": cdn.react_dom,
                    "fiber_url": cdn.react_three_fiber,
                },
            )
            plan.add(flags.entry_file, content, WritePolicy.ALWAYS, "jsx")
        elif flags.three:
            content = self.renderer.render("threejs.js.j2", {"three_url": cdn.three_module})
            plan.add(ENTRY_SCRIPT, content, WritePolicy.ALWAYS, "js")
        else:
            plan.add(ENTRY_SCRIPT, "", WritePolicy.IF_MISSING, "js")

    # -- Writing -------------------------------------------------------------

    async def _write(self, project_dir: Path, planned: PlannedFile) -> FileStatus:
        target = project_dir / planned.path
        existed = await asyncio.to_thread(target.exists)
        if existed and planned.policy is WritePolicy.IF_MISSING:
            return FileStatus.PRESERVED
        content = await self.formatter.format(planned.content, planned.kind)
        await asyncio.to_thread(write_text, target, content)
        return FileStatus.OVERWRITTEN if existed else FileStatus.CREATED

    async def _remove(self, project_dir: Path, path: str) -> bool:
        target = project_dir / path
        if not await asyncio.to_thread(target.is_file):
            return False
        await asyncio.to_thread(target.unlink)
        return True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _script_text(doc: BeautifulSoup, element_id: str) -> str:
    """Dedented source of the ``<script id=...>`` block, or a minimal default."""
    script = doc.find("script", id=element_id)
    if script is None:
        return DEFAULT_GLSL
    text = textwrap.dedent(script.string or "").strip()
    return f"{text}\n" if text else DEFAULT_GLSL
