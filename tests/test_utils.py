"""Unit tests for utility functions (hoppen.utils).

Tests cover:
- run_command (success, stdin, failure, missing program, timeout)
- slugify
- ensure_dir / write_text
- wait_for_health (mock httpx)
- Rich output helpers
"""

from __future__ import annotations

import re
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from hoppen.utils import (
    ensure_dir,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
    slugify,
    wait_for_health,
    write_text,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command(["echo", "hello"])
        assert returncode == 0
        assert stdout == "hello\n"

    @pytest.mark.unit
    async def test_input_text_is_piped(self):
        returncode, stdout, _ = await run_command(["cat"], input_text="void main() {}\n")
        assert returncode == 0
        assert stdout == "void main() {}\n"

    @pytest.mark.unit
    async def test_failed_command(self):
        returncode, _, _ = await run_command(["false"])
        assert returncode != 0

    @pytest.mark.unit
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, _ = await run_command(["pwd"], cwd=tmp_path)
        assert returncode == 0
        assert Path(stdout.strip()).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    async def test_missing_program(self):
        with pytest.raises(FileNotFoundError):
            await run_command(["hoppen-test-definitely-not-a-program"])

    @pytest.mark.unit
    async def test_timeout(self):
        returncode, _, stderr = await run_command(["sleep", "5"], timeout=1)
        assert returncode == -1
        assert "timed out" in stderr


# ---------------------------------------------------------------------------
# slugify
# ---------------------------------------------------------------------------

_SLUG = re.compile(r"[a-z0-9]+(-[a-z0-9]+)*")


class TestSlugify:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("My  Cool!! Site", "my-cool-site"),
            ("  Shader_Test 2 ", "shader-test-2"),
            ("already-kebab", "already-kebab"),
            ("--Leading and trailing--", "leading-and-trailing"),
            ("UPPER", "upper"),
            ("Café Noir", "caf-noir"),
            ("!!!", ""),
            ("", ""),
        ],
    )
    def test_examples(self, name: str, expected: str):
        assert slugify(name) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name", ["a", "a  b", "__x__", "9 Lives!", "one/two\\three", " -- mixed -- CASE 42 -- "]
    )
    def test_shape(self, name: str):
        slug = slugify(name)
        assert _SLUG.fullmatch(slug)
        assert not slug.startswith("-")
        assert not slug.endswith("-")
        assert "--" not in slug


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


class TestFileHelpers:
    @pytest.mark.unit
    def test_ensure_dir(self, tmp_path: Path):
        target = tmp_path / "a" / "b"
        assert ensure_dir(target) == target
        assert target.is_dir()
        ensure_dir(target)

    @pytest.mark.unit
    def test_write_text_creates_parents(self, tmp_path: Path):
        target = tmp_path / "x" / "y.txt"
        write_text(target, "one\ntwo\n")
        assert target.read_bytes() == b"one\ntwo\n"


# ---------------------------------------------------------------------------
# wait_for_health
# ---------------------------------------------------------------------------


def _mock_client(**get_kwargs) -> AsyncMock:
    client = AsyncMock()
    client.get = AsyncMock(**get_kwargs)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


class TestWaitForHealth:
    @pytest.mark.unit
    async def test_immediate_success(self):
        response = MagicMock()
        response.status_code = 200

        with patch("httpx.AsyncClient", return_value=_mock_client(return_value=response)):
            result = await wait_for_health("http://127.0.0.1:2187/", timeout=2, interval=0.1)

        assert result is True

    @pytest.mark.unit
    async def test_timeout_returns_false(self):
        client = _mock_client(side_effect=httpx.ConnectError("refused"))

        with patch("httpx.AsyncClient", return_value=client):
            result = await wait_for_health("http://127.0.0.1:2187/", timeout=0.5, interval=0.1)

        assert result is False

    @pytest.mark.unit
    async def test_eventual_success(self):
        calls = 0

        async def get_side_effect(url):
            nonlocal calls
            calls += 1
            if calls < 3:
                raise httpx.ConnectError("not ready")
            response = MagicMock()
            response.status_code = 200
            return response

        with patch("httpx.AsyncClient", return_value=_mock_client(side_effect=get_side_effect)):
            result = await wait_for_health("http://127.0.0.1:2187/", timeout=5, interval=0.05)

        assert result is True
        assert calls >= 3


# ---------------------------------------------------------------------------
# Rich output helpers (smoke tests - verify they don't raise)
# ---------------------------------------------------------------------------


class TestRichOutputHelpers:
    @pytest.mark.unit
    def test_print_header(self):
        print_header("my-sketch")

    @pytest.mark.unit
    def test_print_summary_table(self):
        print_summary_table({"Features": "gsap, shaders", "Entry": "main.js"}, title="Project")

    @pytest.mark.unit
    def test_messages_with_markup_characters(self):
        print_success("Serving [my-sketch]")
        print_error("Missing template(s): [shaders.html]")
        print_warning("Project '[x]' not found")
