"""Tests for noten.yaml loading."""

from pathlib import Path

import pytest
import yaml

from noten.lib.config import NotenConfig, load_config, save_config
from noten.lib.errors import ConfigError


CONFIG = """\
skeleton_path: skeleton.html
index_id: home
input_dir: pages
output_dir: /srv/www
generators_dir: gens
constants:
  site-name: Example
  year: 2016
  draft: false
"""


class TestLoadConfig:
    def test_paths_resolve_against_config_dir(self, tmp_path):
        path = tmp_path / "noten.yaml"
        path.write_text(CONFIG)

        config = load_config(path)

        assert config.skeleton_path == tmp_path / "skeleton.html"
        assert config.input_dir == tmp_path / "pages"
        assert config.output_dir == Path("/srv/www")
        assert config.generators_dir == tmp_path / "gens"
        assert config.index_id == "home"

    def test_constant_types_survive(self, tmp_path):
        path = tmp_path / "noten.yaml"
        path.write_text(CONFIG)

        constants = load_config(path).constants

        assert constants == {"site-name": "Example", "year": 2016, "draft": False}
        assert isinstance(constants["year"], int)
        assert isinstance(constants["draft"], bool)

    def test_generators_dir_is_optional(self, tmp_path):
        path = tmp_path / "noten.yaml"
        path.write_text(
            "skeleton_path: s.html\nindex_id: index\ninput_dir: in\noutput_dir: out\n"
        )
        config = load_config(path)
        assert config.generators_dir is None
        assert config.constants == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "noten.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "noten.yaml"
        path.write_text("skeleton_path: [oops\n")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(path)

    def test_missing_required_field(self, tmp_path):
        path = tmp_path / "noten.yaml"
        path.write_text("skeleton_path: s.html\n")
        with pytest.raises(ConfigError, match="index_id"):
            load_config(path)

    def test_non_scalar_constant_rejected(self, tmp_path):
        path = tmp_path / "noten.yaml"
        path.write_text(
            "skeleton_path: s\nindex_id: i\ninput_dir: a\noutput_dir: b\n"
            "constants:\n  nested: {a: 1}\n"
        )
        with pytest.raises(ConfigError):
            load_config(path)

    def test_config_error_exit_code(self, tmp_path):
        with pytest.raises(ConfigError) as excinfo:
            load_config(tmp_path / "noten.yaml")
        assert excinfo.value.exit_code == 2


def test_save_and_load_roundtrip(tmp_path):
    config = NotenConfig(
        skeleton_path=Path("skeleton.html"),
        index_id="index",
        input_dir=Path("pages"),
        output_dir=Path("public"),
        constants={"a": 1},
    )
    path = tmp_path / "noten.yaml"
    save_config(config, path)

    with open(path) as f:
        data = yaml.safe_load(f)
    assert "generators_dir" not in data
    assert data["skeleton_path"] == "skeleton.html"

    loaded = load_config(path)
    assert loaded.index_id == "index"
    assert loaded.input_dir == tmp_path / "pages"
    assert loaded.constants == {"a": 1}
