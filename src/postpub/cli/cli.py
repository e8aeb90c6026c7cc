"""CLI entrypoint: Typer app definition and command registration"""

from typing import Annotated, Optional

import typer

from postpub.cli.commands import (
    build_cmd, convert_cmd, history_check_cmd, history_list_cmd, init_cmd, report_cmd, validate_cmd, _settings,
)
from postpub.util.logs import configure_logging


app = typer.Typer(name="postpub", no_args_is_help=True, help="Blog post quality gate and CMS converter")
history_app = typer.Typer(no_args_is_help=True, help="Inspect used post titles")


@app.callback()
def main(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")] = None,
    ):
    configure_logging(log_level or _settings().log_level)


app.command(name="validate")(validate_cmd)
app.command(name="convert")(convert_cmd)
app.command(name="report")(report_cmd)
app.command(name="build")(build_cmd)
app.command(name="init")(init_cmd)

history_app.command(name="list")(history_list_cmd)
history_app.command(name="check")(history_check_cmd)
app.add_typer(history_app, name="history")
