from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from noten.lib.config import FILENAME, NotenConfig, save_config
from noten.lib.deps import STATE_DIR
from noten.lib.errors import NotenError


class AlreadyInitializedError(NotenError):
    """Raised when trying to initialize an already initialized project."""

    def __init__(self) -> None:
        super().__init__(f"{FILENAME} already exists in this directory", exit_code=1)


class ProjectRootNotFoundError(NotenError):
    """Raised when no `noten.yaml` is found in any parent up to the FS root."""

    def __init__(self) -> None:
        super().__init__(
            f"no {FILENAME} found in any parent directories. Not a valid noten project.",
            exit_code=2,
        )


DEFAULT_SKELETON = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>%(title)</title>
%(ifdesc)<meta name="description" content="%(description)">
%(endifdesc)</head>
<body>
%(content)
</body>
</html>
"""

DEFAULT_INDEX = """{
title: Welcome
description: Start page
}
# Welcome to {{ const site-name }}

This page was generated by noten.
"""


def check_already_initialized(config_path: Path) -> None:
    """Raise AlreadyInitializedError if config exists at `config_path`."""
    if config_path.exists():
        raise AlreadyInitializedError()


def _default_config(project_name: str) -> NotenConfig:
    return NotenConfig(
        skeleton_path=Path("skeleton.html"),
        index_id="index",
        input_dir=Path("pages"),
        output_dir=Path("public"),
        constants={"site-name": project_name},
    )


# Match .noten/ or .noten at start of line or after /
_NOTEN_GITIGNORE_RE = re.compile(r"(^|/)\.noten/?$", re.MULTILINE)


def ensure_root_gitignore_ignores_state(root: Path) -> Path:
    """Ensure `<root>/.gitignore` ignores `.noten/` and return the gitignore path."""
    gitignore_path = root / ".gitignore"
    if not gitignore_path.exists():
        gitignore_path.write_text(f"{STATE_DIR}/\n")
        return gitignore_path

    content = gitignore_path.read_text()
    if _NOTEN_GITIGNORE_RE.search(content) is None:
        if not content.endswith("\n"):
            content += "\n"
        content += f"{STATE_DIR}/\n"
        gitignore_path.write_text(content)
    return gitignore_path


def scaffold(root: Path, name: Optional[str] = None) -> Path:
    """Scaffold a noten project. Returns the created noten.yaml path."""
    config = _default_config(name or root.resolve().name)
    config_path = root / FILENAME
    save_config(config, config_path)

    skeleton = root / config.skeleton_path
    if not skeleton.exists():
        skeleton.write_text(DEFAULT_SKELETON, encoding="utf-8")

    pages = root / config.input_dir
    pages.mkdir(parents=True, exist_ok=True)
    index = pages / f"{config.index_id}.md"
    if not index.exists():
        index.write_text(DEFAULT_INDEX, encoding="utf-8")

    ensure_root_gitignore_ignores_state(root)
    return config_path


def find_project_root(start: Optional[Path] = None) -> Path:
    """Search upwards from `start` (or cwd) for a directory containing `noten.yaml`.

    Raises `ProjectRootNotFoundError` instead of returning the FS root.
    """
    cur = start or Path.cwd()
    cur = cur.resolve()

    for p in [cur] + list(cur.parents):
        if (p / FILENAME).exists():
            return p

    raise ProjectRootNotFoundError()
