"""Template dependency store.

Records, for every document, the external files (generator executables)
its output was produced from. Persisted as YAML in .noten/template-deps.yaml:

    pages/about.md:
      - generators/clock/target/release/clock
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from noten.lib.errors import ParseError

log = logging.getLogger(__name__)

STATE_DIR = ".noten"
FILENAME = "template-deps.yaml"


class DependencyStore:
    """Mapping of document path -> ordered list of dependency paths.

    Duplicates are kept; order is discovery order.
    """

    def __init__(self, deps: dict[Path, list[Path]] | None = None):
        self.deps: dict[Path, list[Path]] = deps if deps is not None else {}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyStore):
            return NotImplemented
        return self.deps == other.deps

    def __repr__(self) -> str:
        return f"DependencyStore({self.deps!r})"

    def clear_deps(self, document: Path) -> None:
        """Forget everything recorded for `document`."""
        entry = self.deps.get(document)
        if entry is not None:
            entry.clear()

    def add_dep(self, document: Path, dependency: Path) -> None:
        log.debug(f"Added dep: {document} => {dependency}")
        self.deps.setdefault(document, []).append(dependency)

    def get_deps(self, document: Path) -> list[Path]:
        return list(self.deps.get(document, []))

    def to_yaml(self) -> str:
        data = {
            str(doc): [str(dep) for dep in deps] for doc, deps in self.deps.items()
        }
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)

    @classmethod
    def from_yaml(cls, text: str) -> "DependencyStore":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse dependency store: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ParseError("Dependency store must be a mapping")

        deps: dict[Path, list[Path]] = {}
        for doc, entries in data.items():
            if not isinstance(entries, list):
                raise ParseError(f"Dependencies of {doc} must be a list")
            deps[Path(doc)] = [Path(str(p)) for p in entries]
        return cls(deps)

    @classmethod
    def load(cls, path: Path) -> "DependencyStore":
        """Load the store from `path`; a missing file means no recorded deps."""
        if not path.exists():
            log.debug(f"No dependency store at {path}, starting empty")
            return cls()
        return cls.from_yaml(path.read_text(encoding="utf-8"))

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_yaml(), encoding="utf-8")


def store_path(root: Path) -> Path:
    """Location of the dependency store inside a project."""
    return root / STATE_DIR / FILENAME
