"""Exceptions raised by Hoppen.

Every error the CLI knows how to report derives from ``HoppenError``; the
entry point catches it once, prints it and exits non-zero.
"""

from __future__ import annotations


class HoppenError(Exception):
    """Base class for expected, user-reportable failures."""


class TemplateNotFoundError(HoppenError):
    """Raised when one or more required template files are missing."""

    def __init__(self, names: list[str], template_dir: str = "") -> None:
        self.names = list(names)
        self.template_dir = template_dir
        location = f" in {template_dir}" if template_dir else ""
        super().__init__(f"Missing template(s){location}: {', '.join(self.names)}")


class OverwriteDeclined(HoppenError):
    """Raised when the user refuses to overwrite an existing project."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Project '{slug}' exists and was not overwritten.")


class ProjectNotFoundError(HoppenError):
    """Raised when no generated project is available in the workspace."""


class InvalidProjectName(HoppenError):
    """Raised when a project name does not yield a usable directory slug."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Project name {name!r} does not contain any letters or digits.")
