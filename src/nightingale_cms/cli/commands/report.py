from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from nightingale_cms.cli.utils import (
    console,
    default_data_path,
    load_or_exit,
    print_id_list,
    print_json,
    print_limited,
    resolve_max_rows,
    rows_table,
)
from nightingale_cms.integrity import analyze

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_ISSUES = 2


def report_command(
    path: Optional[Path] = typer.Argument(
        None,
        help="Data JSON file (default: configured data file)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the report as JSON instead of tables",
    ),
    max_rows: Optional[int] = typer.Option(
        None,
        "--max-rows",
        help="Rows shown per category before truncating",
    ),
):
    """
    Scan a data file for orphaned references and duplicate ids.

    Exit codes: 0 no issues, 1 unreadable file, 2 issues detected.
    """
    path = path or default_data_path()
    data = load_or_exit(path, require_object=False)
    report = analyze(data)

    if json_output:
        print_json(report.to_dict())
        raise typer.Exit(code=EXIT_ISSUES if report.has_issues else EXIT_OK)

    limit = resolve_max_rows(max_rows)
    details = report.details

    console.print("[bold]=== Nightingale Data Integrity Report ===[/bold]")
    console.print(f"File: {path}", markup=False, highlight=False)
    console.print(
        rows_table(
            "Summary",
            ["Metric", "Count"],
            [(k, v) for k, v in vars(report.summary).items()],
        )
    )

    if details.orphan_cases:
        print_limited(
            "Orphan Cases (personId missing)",
            ["Case ID", "Person ID"],
            ["caseId", "personId"],
            details.orphan_cases,
            limit,
        )
    if details.spouse_orphans:
        print_limited(
            "Spouse Orphans (spouseId missing)",
            ["Case ID", "Spouse ID"],
            ["caseId", "spouseId"],
            details.spouse_orphans,
            limit,
        )
    if details.orphan_authorized_reps:
        print_limited(
            "Orphan Authorized Reps",
            ["Case ID", "Rep ID"],
            ["caseId", "repId"],
            details.orphan_authorized_reps,
            limit,
        )
    if details.duplicate_person_ids:
        print_id_list("Duplicate Person IDs:", details.duplicate_person_ids, limit)
    if details.duplicate_case_ids:
        print_id_list("Duplicate Case IDs:", details.duplicate_case_ids, limit)

    if report.has_issues:
        console.print("\n[integrity] Issues detected. Exit code 2.", markup=False)
        raise typer.Exit(code=EXIT_ISSUES)

    console.print("\n[integrity] No critical issues detected.", markup=False)
