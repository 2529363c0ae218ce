from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from nightingale_cms.config import get_config
from nightingale_cms.core.exceptions import DocumentLoadError
from nightingale_cms.services.document_io import load_document

console = Console()
err_console = Console(stderr=True)


def default_data_path() -> Path:
    return Path(get_config().paths.get("data_file", "Data/nightingale-data.json"))


def load_or_exit(path: Path, *, require_object: bool = True) -> Dict[str, Any]:
    """
    Load a data document for a CLI command.
    Missing files and parse errors exit with code 1.
    """
    try:
        return load_document(path, require_object=require_object)
    except DocumentLoadError as exc:
        err_console.print(f"[integrity] {exc}", markup=False, highlight=False)
        raise typer.Exit(code=1)


def print_json(data: Dict[str, Any], *, pretty: bool = True) -> None:
    if pretty:
        payload = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    else:
        payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)
    print(payload)


def rows_table(
    title: Optional[str],
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
) -> Table:
    table = Table(title=title, title_justify="left")
    for i, name in enumerate(columns):
        table.add_column(name, style="bold" if i == 0 else None)
    for row in rows:
        table.add_row(*[Text("" if v is None else str(v)) for v in row])
    return table


def print_limited(
    title: str,
    columns: Sequence[str],
    keys: Sequence[str],
    records: List[Dict[str, Any]],
    max_rows: int,
) -> None:
    """Print at most ``max_rows`` records, then a '... N more' notice."""
    shown = records[:max_rows]
    console.print()
    console.print(f"[bold]{title}[/bold]", highlight=False)
    console.print(rows_table(None, columns, ([r.get(k) for k in keys] for r in shown)))
    remaining = len(records) - len(shown)
    if remaining > 0:
        console.print(f"... {remaining} more")


def print_id_list(title: str, ids: List[Any], max_rows: int) -> None:
    shown = ids[:max_rows]
    console.print()
    console.print(f"[bold]{title}[/bold]")
    console.print(", ".join(str(i) for i in shown), markup=False, highlight=False)
    remaining = len(ids) - len(shown)
    if remaining > 0:
        console.print(f"... {remaining} more")


def resolve_max_rows(max_rows: Optional[int]) -> int:
    if max_rows is not None:
        return max(max_rows, 0)
    return int(get_config().report.get("max_rows", 25))
