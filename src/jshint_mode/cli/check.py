from pathlib import Path
from typing import Annotated

import typer

from jshint_mode.core.config import ConfigCache
from jshint_mode.core.lint import default_linters, normalize_mode, render_report, run_lint


def check(
    path: Annotated[Path, typer.Argument(help="JavaScript file to lint.", exists=True, dir_okay=False)],
    mode: Annotated[str, typer.Option(help="Linter to use: 'jshint' or 'jslint'.")] = "jshint",
    show_code: Annotated[bool, typer.Option("--show-code", help="Print the offending line after each finding.")] = False,
    jshintrc: Annotated[str | None, typer.Option(help="Path to a .jshintrc configuration file.")] = None,
) -> None:
    """Lint a local file without starting the server. Exits 1 when problems are found."""
    source = path.read_text(encoding="utf-8")
    config = ConfigCache().get(jshintrc)
    findings = run_lint(default_linters(), normalize_mode(mode), source, config)
    typer.echo(render_report(findings, str(path), show_code), nl=False)
    if findings:
        raise typer.Exit(code=1)
