
"""
CLI package for nightingale_cms.

Provides the Typer application entrypoint and shared CLI utilities.
"""

from nightingale_cms.cli.app import app, main

__all__ = [
    "app",
    "main",
]
