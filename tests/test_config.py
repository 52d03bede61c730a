"""Tests for [tool.algoviz] configuration loading."""

import logging
import textwrap

from algoviz.config import AlgovizConfig, LayoutConfig, find_pyproject, load_config


def _write_pyproject(tmp_path, body):
    path = tmp_path / "pyproject.toml"
    path.write_text(textwrap.dedent(body))
    return path


class TestFindPyproject:
    def test_walks_up(self, tmp_path):
        _write_pyproject(tmp_path, "[project]\nname = 'x'\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_pyproject(nested) == (tmp_path / "pyproject.toml").resolve()


class TestLoadConfig:
    def test_defaults_without_section(self, tmp_path):
        _write_pyproject(tmp_path, "[project]\nname = 'x'\n")
        assert load_config(tmp_path) == AlgovizConfig()

    def test_default_layout_constants(self):
        cfg = LayoutConfig()
        assert cfg.iterations == 300
        assert cfg.charge_strength == -35
        assert cfg.collide_radius == 60
        assert cfg.padding == 50
        assert cfg.max_radius == 50
        assert cfg.node_gap == 15
        assert cfg.edge_offset == 5
        assert cfg.rescale_padding == 60

    def test_reads_section(self, tmp_path):
        _write_pyproject(
            tmp_path,
            """
            [tool.algoviz]
            width = 1024
            height = 768

            [tool.algoviz.layout]
            collide_radius = 40
            rescale_padding = 80
            """,
        )
        config = load_config(tmp_path)
        assert (config.width, config.height) == (1024, 768)
        assert config.layout.collide_radius == 40
        assert config.layout.rescale_padding == 80
        assert config.layout.iterations == 300

    def test_unknown_layout_key_is_ignored_with_warning(self, tmp_path, caplog):
        _write_pyproject(
            tmp_path,
            """
            [tool.algoviz.layout]
            gravity = 9.8
            """,
        )
        with caplog.at_level(logging.WARNING, logger="algoviz.config"):
            config = load_config(tmp_path)
        assert config.layout == LayoutConfig()
        assert "gravity" in caplog.text
