"""Template store for project scaffolding.

Provides the TemplateRenderer class which loads templates from the
``hoppen/scaffolder/templates/`` directory.  ``.j2`` files are rendered with
Jinja2; every other file is a static asset that is read verbatim (the shader
skeleton, the reset stylesheet, the browser runtimes).
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from hoppen.errors import TemplateNotFoundError


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Reads and renders the fixed set of scaffolding templates.

    The template directory is read-only at run time.  A missing file is
    always reported as :class:`~hoppen.errors.TemplateNotFoundError`.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    # -- Lookup ------------------------------------------------------------

    def exists(self, name: str) -> bool:
        return (self.template_dir / name).is_file()

    def require(self, names: Iterable[str]) -> None:
        """Check that every template in *names* exists.

        Raises:
            TemplateNotFoundError: Listing all the missing templates.
        """
        missing = [name for name in names if not self.exists(name)]
        if missing:
            raise TemplateNotFoundError(missing, str(self.template_dir))

    # -- Rendering ---------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a Jinja2 template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"index.html.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound as exc:
            raise TemplateNotFoundError([template_path], str(self.template_dir)) from exc
        return template.render(**context)

    def read(self, name: str) -> str:
        """Return the verbatim contents of a static template file."""
        path = self.template_dir / name
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise TemplateNotFoundError([name], str(self.template_dir)) from exc

    async def aread(self, name: str) -> str:
        """Async variant of :meth:`read` that does not block the event loop."""
        return await asyncio.to_thread(self.read, name)
