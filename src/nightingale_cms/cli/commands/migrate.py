from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from nightingale_cms.cli.utils import console, err_console, load_or_exit, print_json, rows_table
from nightingale_cms.core.exceptions import MigrationError
from nightingale_cms.migration import run_full_migration
from nightingale_cms.services.document_io import write_document


def migrate_command(
    path: Path = typer.Argument(..., help="Data JSON file to migrate"),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write migrated data here instead of overwriting the input",
    ),
    no_fixes: bool = typer.Option(
        False,
        "--no-fixes",
        help="Only run structural transforms; skip name backfills",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Report changes without writing anything",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the migration report as JSON",
    ),
):
    """
    Migrate a legacy data file to the current schema.
    """
    data = load_or_exit(path)

    try:
        result = run_full_migration(data, apply_fixes=not no_fixes)
    except MigrationError as exc:
        err_console.print(f"Migration failed: {exc}", markup=False)
        raise typer.Exit(code=1)

    report = result.report

    if json_output:
        print_json(report.to_dict())
    else:
        console.print(f"Legacy detected: {report.legacy_detected}", highlight=False)
        console.print(
            rows_table(
                "Changes",
                ["Transform", "Records"],
                [(name, ", ".join(ids)) for name, ids in report.changes.items()],
            )
        )
        orphans = report.warnings.get("orphan_case_person_ids") or []
        if orphans:
            console.print(f"Orphan case personIds: {', '.join(orphans)}", markup=False, highlight=False)

    if dry_run:
        return
    if not report.changed and out is None:
        console.print("No changes; input left untouched.")
        return

    target = out or path
    write_document(result.migrated_data, target)
    console.print(f"Migrated data written to: {target}", markup=False, highlight=False)
