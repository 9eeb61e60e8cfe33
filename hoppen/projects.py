"""Discovery of generated projects in the workspace."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProjectEntry:
    """A generated project: directory name, path and creation timestamp."""

    name: str
    path: Path
    created: float


def _created_at(path: Path) -> float:
    stat = path.stat()
    # st_birthtime only exists on some platforms (macOS, BSD, Windows on 3.12+).
    return getattr(stat, "st_birthtime", stat.st_ctime)


def is_project(path: Path, internal_dir_name: str) -> bool:
    """A directory counts as a project when it has an index and the internal folder."""
    return (path / "index.html").is_file() and (path / internal_dir_name).is_dir()


def list_projects(workspace: str | Path, internal_dir_name: str) -> list[ProjectEntry]:
    """Return every project in *workspace*, newest first."""
    root = Path(workspace)
    if not root.is_dir():
        return []

    entries: list[ProjectEntry] = []
    with os.scandir(root) as it:
        for item in it:
            if not item.is_dir():
                continue
            path = Path(item.path)
            if not is_project(path, internal_dir_name):
                continue
            entries.append(
                ProjectEntry(name=item.name, path=path, created=_created_at(path / "index.html"))
            )

    entries.sort(key=lambda e: (e.created, e.name), reverse=True)
    return entries


def find_project(entries: list[ProjectEntry], name: str | None) -> ProjectEntry | None:
    if not name:
        return None
    for entry in entries:
        if entry.name == name:
            return entry
    return None
