"""Unit tests for Config and related Pydantic models (hoppen.config).

Tests cover:
- CdnConfig defaults and plugin lookup
- ServerConfig / PlaygroundConfig validation
- FormatterConfig.clang_style
- Config derived paths, save/load, from_env, ensure_workspace
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from hoppen.config import (
    CdnConfig,
    Config,
    FormatterConfig,
    PlaygroundConfig,
    ServerConfig,
)


# ---------------------------------------------------------------------------
# CdnConfig
# ---------------------------------------------------------------------------


class TestCdnConfig:
    @pytest.mark.unit
    def test_plugin_order(self):
        cdn = CdnConfig()
        assert [p.id for p in cdn.gsap_plugins] == ["ScrollTrigger", "ScrollSmoother", "Draggable", "SplitText"]

    @pytest.mark.unit
    def test_plugin_lookup(self):
        cdn = CdnConfig()
        plugin = cdn.plugin("ScrollTrigger")
        assert plugin is not None
        assert plugin.src.endswith("/ScrollTrigger.min.js")
        assert cdn.plugin("NotAPlugin") is None

    @pytest.mark.unit
    def test_library_urls(self):
        cdn = CdnConfig()
        assert cdn.gsap.endswith("gsap.min.js")
        assert "lenis" in cdn.lenis
        assert cdn.three_module.endswith("three.module.js")
        assert "babel" in cdn.babel_standalone


# ---------------------------------------------------------------------------
# Server / formatter / playground
# ---------------------------------------------------------------------------


class TestSectionModels:
    @pytest.mark.unit
    def test_server_defaults(self):
        server = ServerConfig()
        assert server.host == "127.0.0.1"
        assert server.port == 2187
        assert server.open_browser is True

    @pytest.mark.unit
    @pytest.mark.parametrize("port", [-1, 65536])
    def test_port_out_of_range(self, port: int):
        with pytest.raises(ValidationError):
            ServerConfig(port=port)

    @pytest.mark.unit
    def test_editors_pattern(self):
        assert PlaygroundConfig(editors="101").editors == "101"
        with pytest.raises(ValidationError):
            PlaygroundConfig(editors="12")

    @pytest.mark.unit
    def test_clang_style_adds_column_limit(self):
        fmt = FormatterConfig(print_width=80)
        assert fmt.clang_style == "{BasedOnStyle: LLVM, IndentWidth: 2, ColumnLimit: 80}"

    @pytest.mark.unit
    def test_clang_style_keeps_explicit_limit(self):
        fmt = FormatterConfig(glsl_style="{BasedOnStyle: Google, ColumnLimit: 120}")
        assert fmt.clang_style == "{BasedOnStyle: Google, ColumnLimit: 120}"

    @pytest.mark.unit
    def test_clang_style_named_style_untouched(self):
        assert FormatterConfig(glsl_style="file").clang_style == "file"


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.workspace_dir == Path.cwd()
        assert config.internal_dir_name == "@@internal"
        assert config.canvas_id == "shader-canvas"
        assert config.include_plain_shader_runtime is True

    @pytest.mark.unit
    def test_derived_paths(self, tmp_path: Path):
        config = Config(workspace_dir=tmp_path)
        assert config.project_path("demo") == tmp_path / "demo"
        assert config.internal_path("demo") == tmp_path / "demo" / "@@internal"

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        config = Config(workspace_dir=tmp_path / "ws", canvas_id="stage")
        path = config.save(tmp_path / "nested" / "hoppen.json")

        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8"))["canvas_id"] == "stage"
        loaded = Config.load(path)
        assert loaded.workspace_dir == tmp_path / "ws"
        assert loaded.canvas_id == "stage"

    @pytest.mark.unit
    def test_ensure_workspace(self, tmp_path: Path):
        config = Config(workspace_dir=tmp_path / "a" / "b")
        assert config.ensure_workspace().is_dir()


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_no_env_gives_defaults(self):
        config = Config.from_env()
        assert config.server.port == 2187
        assert config.playground.endpoint == "https://codepen.io/pen/define"

    @pytest.mark.unit
    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("HOPPEN_WORKSPACE", str(tmp_path))
        monkeypatch.setenv("HOPPEN_PORT", "4000")
        monkeypatch.setenv("HOPPEN_HOST", "0.0.0.0")
        monkeypatch.setenv("HOPPEN_NO_OPEN", "1")
        monkeypatch.setenv("HOPPEN_PLAYGROUND_ENDPOINT", "http://localhost/define")
        monkeypatch.setenv("HOPPEN_GLSL_FORMATTER", "glslfmt")

        config = Config.from_env()

        assert config.workspace_dir == tmp_path
        assert config.server.port == 4000
        assert config.server.host == "0.0.0.0"
        assert config.server.open_browser is False
        assert config.playground.endpoint == "http://localhost/define"
        assert config.formatter.glsl_formatter == "glslfmt"

    @pytest.mark.unit
    def test_env_layers_over_base(self, monkeypatch: pytest.MonkeyPatch):
        base = Config(canvas_id="stage", server=ServerConfig(host="10.0.0.1", port=9000))
        monkeypatch.setenv("HOPPEN_PORT", "9100")

        config = Config.from_env(base)

        assert config.canvas_id == "stage"
        assert config.server.host == "10.0.0.1"
        assert config.server.port == 9100
        assert base.server.port == 9000

    @pytest.mark.unit
    def test_invalid_port_rejected(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HOPPEN_PORT", "99999")
        with pytest.raises(ValidationError):
            Config.from_env()
