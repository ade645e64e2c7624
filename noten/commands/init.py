"""Init command for noten."""

from pathlib import Path
from typing import Optional

import typer

from noten.lib.config import FILENAME
from noten.lib.errors import handle_error
from noten.lib.project import check_already_initialized, scaffold


def init_command(
    root: Path, name: Optional[str] = None, force: bool = False
) -> None:
    """Initialize a noten project in `root`."""
    try:
        if not force:
            check_already_initialized(root / FILENAME)
        root.mkdir(parents=True, exist_ok=True)
        config_path = scaffold(root, name=name)
        typer.echo(f"Initialized noten project in {config_path.parent}")
    except Exception as e:
        handle_error(e)
