"""Command-line entry points for quizcache."""

from .main import main

__all__ = ["main"]
