"""Export a generated project to the code playground.

Builds the same ``{title, html, css, js, editors}`` payload the in-page
prefill button sends, but from the files on disk.  The payload can be printed
as JSON or wrapped in an auto-submitting form page that POSTs it to the
playground endpoint.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any

from bs4 import BeautifulSoup

from hoppen.config import Config
from hoppen.errors import ProjectNotFoundError
from hoppen.scaffolder.features import ENTRY_COMPONENT, ENTRY_SCRIPT
from hoppen.scaffolder.templates import TemplateRenderer

PREFILL_FORM_ID = "codepen-prefill-form"
FORM_TEMPLATE = "playground-form.html.j2"


def internal_selectors(internal_dir_name: str, entry_file: str | None) -> list[str]:
    """CSS selectors of every tool-owned node that must not reach the pen."""
    selectors = [
        f"#{PREFILL_FORM_ID}",
        f'script[src="{internal_dir_name}/codepen-prefill.js"]',
        f'script[src="{internal_dir_name}/shaders-hmr.js"]',
        f'link[href="{internal_dir_name}/reset.css"]',
    ]
    if entry_file:
        selectors.append(f'script[src="{entry_file}"]')
    return selectors


def clean_html(html: str, internal_dir_name: str, entry_file: str | None) -> str:
    """Return the page body without the prefill, hot-reload, reset and entry tags."""
    soup = BeautifulSoup(html, "lxml")
    for selector in internal_selectors(internal_dir_name, entry_file):
        for node in soup.select(selector):
            node.decompose()
    if soup.body is None:
        return ""
    return "".join(str(child) for child in soup.body.contents).strip()


def detect_entry(page: BeautifulSoup) -> str | None:
    """Entry file the page actually loads, or ``None`` when it loads neither."""
    for candidate in (ENTRY_COMPONENT, ENTRY_SCRIPT):
        if page.select_one(f'script[src="{candidate}"]') is not None:
            return candidate
    return None


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def _join(parts: list[tuple[str, str]]) -> str:
    return "\n\n".join(f"/* {label} */\n{text}" for label, text in parts if text)


def build_payload(project_dir: str | Path, config: Config) -> dict[str, Any]:
    """Assemble the playground payload for *project_dir*.

    The entry script and shader sources are only included when ``index.html``
    references them, so files left over from an earlier selection are ignored.

    Raises:
        ProjectNotFoundError: If the directory has no ``index.html``.
    """
    project_dir = Path(project_dir)
    index = project_dir / "index.html"
    if not index.is_file():
        raise ProjectNotFoundError(f"No index.html in {project_dir}")

    internal = config.internal_dir_name
    page = index.read_text(encoding="utf-8")
    soup = BeautifulSoup(page, "lxml")
    entry_file = detect_entry(soup)
    has_shaders = soup.find("canvas", id=config.canvas_id) is not None

    html = clean_html(page, internal, entry_file)
    if has_shaders:
        vertex = _read(project_dir / "vertex.glsl")
        fragment = _read(project_dir / "fragment.glsl")
        if vertex:
            html += f'\n<script type="x-shader/x-vertex" id="vertex-shader">\n{vertex}\n</script>'
        if fragment:
            html += (
                f'\n<script type="x-shader/x-fragment" id="fragment-shader">\n{fragment}\n</script>'
            )

    css = _join(
        [
            ("reset.css", _read(project_dir / internal / "reset.css")),
            ("style.css", _read(project_dir / "style.css")),
        ]
    )
    js = _join(
        [
            ("shaders.js", _read(project_dir / internal / "shaders.js") if has_shaders else ""),
            (entry_file or "", _read(project_dir / entry_file) if entry_file else ""),
        ]
    )

    title = soup.title
    payload: dict[str, Any] = {
        "title": title.get_text(strip=True) if title else config.playground.default_title,
        "html": html.strip(),
        "css": css,
        "js": js,
        "editors": config.playground.editors,
    }
    if entry_file == ENTRY_COMPONENT:
        payload["js_pre_processor"] = "babel"
    return payload


def render_form(
    payload: dict[str, Any],
    config: Config,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Render a page that POSTs *payload* to the playground as soon as it loads."""
    renderer = renderer or TemplateRenderer()
    return renderer.render(
        FORM_TEMPLATE,
        {
            "title": payload.get("title") or config.playground.default_title,
            "endpoint": config.playground.endpoint,
            "data": json.dumps(payload),
        },
    )


def write_form(payload: dict[str, Any], config: Config, directory: str | Path | None = None) -> Path:
    """Write the form page to a temporary ``.html`` file and return its path."""
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        suffix=".html",
        prefix="hoppen-export-",
        dir=directory,
        delete=False,
    ) as fh:
        fh.write(render_form(payload, config))
    return Path(fh.name)
