"""Configuration management for noten.

Schema of noten.yaml:
- skeleton_path: shared outer shell every page renders into
- index_id: stem of the document that is also published as index.html
- input_dir: directory holding source documents
- output_dir: directory receiving rendered pages
- generators_dir: optional directory of generator projects used by `gen`
- constants: global constants available to every document
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from noten.lib.errors import ConfigError

FILENAME = "noten.yaml"

Scalar = Union[bool, int, float, str]


def scalar_to_string(value: Scalar) -> str:
    """Get a user-facing string out of a constant value.

    Strings come out verbatim; booleans use their YAML spelling.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class NotenConfig(BaseModel):
    """Main noten.yaml configuration."""

    skeleton_path: Path = Field(description="Path to the skeleton document")
    index_id: str = Field(description="Stem of the document copied to index.html")
    input_dir: Path = Field(description="Directory of source documents")
    output_dir: Path = Field(description="Directory of rendered pages")
    generators_dir: Path | None = Field(
        default=None, description="Directory of generator projects"
    )
    constants: dict[str, Scalar] = Field(
        default_factory=dict, description="Global constants"
    )

    def resolve_paths(self, root: Path) -> "NotenConfig":
        """Return a copy with every relative path anchored at `root`."""

        def anchor(p: Path) -> Path:
            return p if p.is_absolute() else root / p

        return self.model_copy(
            update={
                "skeleton_path": anchor(self.skeleton_path),
                "input_dir": anchor(self.input_dir),
                "output_dir": anchor(self.output_dir),
                "generators_dir": anchor(self.generators_dir)
                if self.generators_dir is not None
                else None,
            }
        )


def load_config(path: Path) -> NotenConfig:
    """Load noten.yaml from path.

    Relative paths inside the file are resolved against its directory.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}. Not a valid noten project.")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}:\n{e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")

    try:
        config = NotenConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}") from e

    return config.resolve_paths(path.parent)


def save_config(config: NotenConfig, path: Path) -> None:
    """Save config to noten.yaml."""
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_none=True)

    with open(path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)
