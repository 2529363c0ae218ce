"""
CLI command modules for nightingale_cms.

Each command module defines a single Typer-compatible command function.
"""

from nightingale_cms.cli.commands.detect import detect_command
from nightingale_cms.cli.commands.migrate import migrate_command
from nightingale_cms.cli.commands.report import report_command

__all__ = [
    "detect_command",
    "migrate_command",
    "report_command",
]
