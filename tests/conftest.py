"""Shared pytest fixtures for the Hoppen test suite.

Provides reusable fixtures for:
- A workspace-scoped ``Config`` (no browser, ephemeral port, no GLSL formatter)
- A scripted asker standing in for the terminal prompts
- A ``ProjectGenerator`` bound to that config
- An environment without ``HOPPEN_*`` variables
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from hoppen.config import Config, FormatterConfig, ServerConfig
from hoppen.prompts import Choice
from hoppen.scaffolder.generator import ProjectGenerator


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

_HOPPEN_ENV = (
    "HOPPEN_WORKSPACE",
    "HOPPEN_PORT",
    "HOPPEN_HOST",
    "HOPPEN_NO_OPEN",
    "HOPPEN_PLAYGROUND_ENDPOINT",
    "HOPPEN_GLSL_FORMATTER",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own HOPPEN_* settings out of every test."""
    for name in _HOPPEN_ENV:
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Config & generator
# ---------------------------------------------------------------------------


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def config(workspace: Path) -> Config:
    """Config rooted at a temporary workspace.

    The GLSL formatter points at a program that does not exist so shader
    output is deterministic whether or not clang-format is installed.
    """
    return Config(
        workspace_dir=workspace,
        server=ServerConfig(port=0, open_browser=False, startup_timeout=5),
        formatter=FormatterConfig(glsl_formatter="hoppen-test-no-such-formatter"),
    )


@pytest.fixture
def generator(config: Config) -> ProjectGenerator:
    return ProjectGenerator(config)


# ---------------------------------------------------------------------------
# Scripted prompts
# ---------------------------------------------------------------------------


class ScriptedAsker:
    """Asker that replays canned answers in order and records every question.

    Each recorded call is a ``(kind, message)`` tuple.  Running out of
    answers fails the test instead of blocking on stdin.
    """

    def __init__(self, answers: Sequence[Any] = ()) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[str, str]] = []

    def _next(self, kind: str, message: str) -> Any:
        self.calls.append((kind, message))
        if not self.answers:
            raise AssertionError(f"Unexpected {kind} prompt: {message!r}")
        return self.answers.pop(0)

    def text(self, message: str, default: str | None = None) -> str:
        return self._next("text", message)

    def multiselect(self, message: str, choices: Sequence[Choice]) -> list[str]:
        return self._next("multiselect", message)

    def select(self, message: str, choices: Sequence[Choice]) -> str:
        return self._next("select", message)

    def confirm(self, message: str, default: bool = False) -> bool:
        return self._next("confirm", message)

    @property
    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.calls]


@pytest.fixture
def scripted_asker():
    """Factory fixture: ``scripted_asker(["name", ["gsap"], []])``."""

    def factory(answers: Sequence[Any] = ()) -> ScriptedAsker:
        return ScriptedAsker(answers)

    return factory
