"""CLI commands resolving references and rendering templates."""

from pathlib import Path
from typing import Annotated

import typer

from ..catalog import read_catalog
from ..conf import config, logger
from ..exceptions import TemplateRenderError, UnknownEntryError
from ..template import Template

__all__ = ["render", "resolve"]


def resolve(
    catalog: Annotated[Path, typer.Argument(help="Catalog yaml file")],
    reference: Annotated[
        str, typer.Argument(help="Reference to resolve, e.g. 'Foo::bar()'")
    ],
    context: Annotated[
        str | None,
        typer.Option(
            help="Qualified name of the class, constant or function the reference"
            " is written in. Defaults to the first class of the catalog."
        ),
    ] = None,
) -> None:
    """Resolve a reference and print its url and label."""
    cat = read_catalog(catalog)
    try:
        if context is not None:
            ctx = cat[context]
        else:
            ctx = next(iter(cat.classes.values()))
    except (UnknownEntryError, StopIteration) as e:
        logger.critical("No context {!r} in {}", context, catalog)
        raise typer.Exit(code=2) from e

    template = Template(cat)
    element = template.resolver.resolve_element(reference, ctx)
    if element is None:
        config.console.print(f"[red]Unresolved[/red] {reference}")
        raise typer.Exit(code=1)
    config.console.print(
        f"{element.kind} [bold]{element.name}[/bold]"
        f" -> {template.urls.element_url(element)}",
        highlight=False,
    )
    config.console.print(template.resolve_link(reference, ctx), markup=False)


def render(
    catalog: Annotated[Path, typer.Argument(help="Catalog yaml file")],
    template_name: Annotated[str, typer.Argument(help="Name of the template")],
    output: Annotated[Path, typer.Argument(help="File to write the page to")],
    template_dir: Annotated[
        Path | None,
        typer.Option(help="Directory of the templates, defaults to the config"),
    ] = None,
) -> None:
    """Render one template with the catalog."""
    settings = config
    if template_dir is not None:
        settings = config.model_copy(update={"template_dir": template_dir})
    if settings.template_dir is None:
        logger.critical("No template directory configured, exiting")
        raise typer.Exit(code=2)
    template = Template(read_catalog(catalog), settings=settings)
    try:
        path = template.render_to(template_name, output)
    except TemplateRenderError as e:
        logger.critical("{}", e)
        raise typer.Exit(code=1) from e
    logger.info("Wrote {}", path)
