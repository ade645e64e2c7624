"""Tests for the template dependency store."""

from pathlib import Path

import pytest

from noten.lib.deps import DependencyStore, store_path
from noten.lib.errors import ParseError


def test_roundtrip_empty(tmp_path):
    path = tmp_path / "deps.yaml"
    DependencyStore().save(path)
    assert DependencyStore.load(path) == DependencyStore()


def test_roundtrip_preserves_order_and_duplicates(tmp_path):
    store = DependencyStore(
        {
            Path("pages/b.md"): [Path("gens/z/target/release/z"), Path("gens/a/x")],
            Path("pages/a.md"): [Path("dup"), Path("dup")],
            Path("pages/c.md"): [],
        }
    )
    path = tmp_path / ".noten" / "template-deps.yaml"
    store.save(path)

    loaded = DependencyStore.load(path)
    assert loaded == store
    assert loaded.get_deps(Path("pages/b.md")) == [
        Path("gens/z/target/release/z"),
        Path("gens/a/x"),
    ]


def test_load_missing_file_is_empty(tmp_path):
    assert DependencyStore.load(tmp_path / "nope.yaml").deps == {}


def test_add_and_clear():
    store = DependencyStore()
    doc = Path("pages/a.md")
    store.add_dep(doc, Path("one"))
    store.add_dep(doc, Path("two"))
    assert store.get_deps(doc) == [Path("one"), Path("two")]

    store.clear_deps(doc)
    assert store.get_deps(doc) == []

    store.add_dep(doc, Path("three"))
    assert store.get_deps(doc) == [Path("three")]


def test_clear_unknown_document_is_noop():
    store = DependencyStore()
    store.clear_deps(Path("never-seen.md"))
    assert store.deps == {}


def test_get_deps_returns_copy():
    doc = Path("a.md")
    store = DependencyStore({doc: [Path("x")]})
    store.get_deps(doc).append(Path("y"))
    assert store.get_deps(doc) == [Path("x")]


def test_yaml_format_is_plain_mapping():
    store = DependencyStore({Path("a.md"): [Path("x")]})
    assert store.to_yaml() == "a.md:\n- x\n"


@pytest.mark.parametrize("text", ["- a\n- b\n", "a.md: x\n", "a.md: [unclosed\n"])
def test_malformed_store_fails(text):
    with pytest.raises(ParseError):
        DependencyStore.from_yaml(text)


def test_store_path(tmp_path):
    assert store_path(tmp_path) == tmp_path / ".noten" / "template-deps.yaml"
