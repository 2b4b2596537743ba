"""Command-line interface for Scale Climber."""

from .main import cli

__all__ = ["cli"]
