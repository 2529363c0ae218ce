
from __future__ import annotations

import typer

from nightingale_cms.cli.commands.detect import detect_command
from nightingale_cms.cli.commands.migrate import migrate_command
from nightingale_cms.cli.commands.report import report_command

app = typer.Typer(
    name="nightingale",
    help="Nightingale CMS data integrity and migration tools",
    add_completion=False,
)

app.command("report")(report_command)
app.command("migrate")(migrate_command)
app.command("detect")(detect_command)


def main():
    app()


if __name__ == "__main__":
    main()
