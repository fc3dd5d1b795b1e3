"""Command line for resolving doc comment references and rendering templates.

`xrefdoc resolve catalog.yml 'Cart::add()'` shows where a reference links to,
`xrefdoc render` writes a single template. See `xrefdoc --help`.
"""

from typing import Annotated

import typer

from .. import __version__
from .render import render, resolve

app = typer.Typer(
    name="xrefdoc",
    help="Resolve API documentation cross-references against a symbol catalog.",
    no_args_is_help=True,
)

app.command(help="Resolve a reference in the scope of a catalog entry.")(resolve)
app.command(help="Render a template with the catalog into a file.")(render)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V", help="Print the xrefdoc version and exit.", is_eager=True
        ),
    ] = False,
) -> None:
    if version:
        print(f"xrefdoc {__version__}")  # noqa: T201
        raise typer.Exit
