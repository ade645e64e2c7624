"""Build command - render every stale document"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from noten.lib.errors import handle_error
from noten.lib.project import find_project_root
from noten.lib.site import build_site

from .utils import console


def build_command(root: Optional[Path] = None, force: bool = False) -> None:
    """Build the project containing `root` (or the cwd)."""
    try:
        project_root = find_project_root(root)
        report = build_site(project_root, force=force)
    except Exception as e:
        handle_error(e)

    console.print(
        f"Built {len(report.built)}, "
        f"up to date {len(report.skipped)}, "
        f"failed {len(report.failed)}"
    )
    if not report.ok:
        for document, error in report.failed.items():
            console.print(f"[red]Failed:[/red] {document}: {error}")
        raise typer.Exit(1)
