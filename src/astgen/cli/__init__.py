"""Command line interface for astgen."""

from .main import main

__all__ = ["main"]
