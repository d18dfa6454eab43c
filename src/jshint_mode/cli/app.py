import typer

from jshint_mode.cli.check import check
from jshint_mode.cli.serve import serve

app = typer.Typer(
    name="jshint-mode",
    help="HTTP interface to a JavaScript linter for editor syntax checking.",
    no_args_is_help=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.callback(invoke_without_command=True)(serve)
app.command("check")(check)


def main() -> None:
    app()
