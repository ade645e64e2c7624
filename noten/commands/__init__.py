"""CLI commands for noten"""

from .build import build_command
from .init import init_command

__all__ = ["build_command", "init_command"]
