"""Tests for project scaffolding and discovery."""

import pytest
import yaml

from noten.lib.config import load_config
from noten.lib.project import (
    AlreadyInitializedError,
    ProjectRootNotFoundError,
    check_already_initialized,
    ensure_root_gitignore_ignores_state,
    find_project_root,
    scaffold,
)
from noten.lib.site import build_site


def test_scaffold_writes_config(tmp_path):
    out = scaffold(tmp_path, name="mysite")
    assert out == tmp_path / "noten.yaml"

    with open(out) as f:
        data = yaml.safe_load(f)
    assert data["constants"]["site-name"] == "mysite"
    assert data["input_dir"] == "pages"

    config = load_config(out)
    assert config.skeleton_path.exists()
    assert (config.input_dir / "index.md").exists()


def test_scaffold_name_defaults_to_directory(tmp_path):
    root = tmp_path / "blog"
    root.mkdir()
    scaffold(root)
    assert load_config(root / "noten.yaml").constants["site-name"] == "blog"


def test_scaffolded_project_builds(tmp_path):
    scaffold(tmp_path, name="mysite")

    report = build_site(tmp_path)

    assert report.ok
    index = (tmp_path / "public" / "index.html").read_text()
    assert "<title>Welcome</title>" in index
    assert '<meta name="description" content="Start page">' in index
    assert "Welcome to mysite" in index


def test_scaffold_keeps_existing_pages(tmp_path):
    (tmp_path / "pages").mkdir()
    (tmp_path / "pages" / "index.md").write_text("# Mine")
    scaffold(tmp_path)
    assert (tmp_path / "pages" / "index.md").read_text() == "# Mine"


def test_check_already_initialized_raises(tmp_path):
    cfg_path = tmp_path / "noten.yaml"
    cfg_path.write_text("index_id: x\n")

    with pytest.raises(AlreadyInitializedError):
        check_already_initialized(cfg_path)


def test_check_already_initialized_passes_when_not_initialized(tmp_path):
    check_already_initialized(tmp_path / "noten.yaml")


class TestGitignore:
    def test_creates_gitignore(self, tmp_path):
        path = ensure_root_gitignore_ignores_state(tmp_path)
        assert path.read_text() == ".noten/\n"

    def test_appends_once(self, tmp_path):
        (tmp_path / ".gitignore").write_text("public")
        ensure_root_gitignore_ignores_state(tmp_path)
        ensure_root_gitignore_ignores_state(tmp_path)
        assert (tmp_path / ".gitignore").read_text() == "public\n.noten/\n"

    def test_existing_entry_untouched(self, tmp_path):
        (tmp_path / ".gitignore").write_text(".noten\n")
        ensure_root_gitignore_ignores_state(tmp_path)
        assert (tmp_path / ".gitignore").read_text() == ".noten\n"


class TestFindProjectRoot:
    def test_finds_parent(self, tmp_path):
        (tmp_path / "noten.yaml").write_text("")
        nested = tmp_path / "pages" / "deep"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == tmp_path.resolve()

    def test_raises_when_missing(self, tmp_path):
        with pytest.raises(ProjectRootNotFoundError):
            find_project_root(tmp_path)
