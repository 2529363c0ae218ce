from __future__ import annotations

from pathlib import Path

import typer

from nightingale_cms.cli.utils import console, load_or_exit, rows_table
from nightingale_cms.migration import detect_legacy_profile


def detect_command(
    path: Path = typer.Argument(..., help="Data JSON file to inspect"),
):
    """
    Preview which legacy indicators a data file trips.
    """
    profile = detect_legacy_profile(load_or_exit(path))

    table = rows_table(
        "Legacy Profile",
        ["Indicator", "Present"],
        [(k, "yes" if v else "no") for k, v in profile.indicators.items()],
    )
    console.print(table)
    console.print(f"Legacy: {profile.is_legacy}", highlight=False)
