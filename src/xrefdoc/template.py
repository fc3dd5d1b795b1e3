"""Jinja2 templates with helpers for API documentation pages.

The [Template][xrefdoc.template.Template] owns the catalog, the reference
resolver and the url builder, and registers its methods as filters of a jinja2
environment, e.g.:

```jinja
<h1>{{ cls.name }}</h1>
{{ cls | long_description }}
{% for name, values in cls.annotations | annotation_filter | annotation_sort | dictsort %}
  {% for value in values %}{{ value | annotation(name, cls) }}{% endfor %}
{% endfor %}
```
"""

from __future__ import annotations

import html
import re
import zlib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import jinja2
from markupsafe import Markup, escape

from .conf import Settings, config, logger
from .entries import (
    ClassEntry,
    ConstantEntry,
    FunctionEntry,
    MethodEntry,
    ParameterEntry,
    PropertyEntry,
)
from .exceptions import TemplateRenderError
from .markup import TextProcessor, highlight_source
from .names import (
    NS,
    package_name,
    split_annotation,
    subnamespace_name,
    subpackage_name,
    type_name,
    value_type,
)
from .resolver import Resolver
from .urls import UrlBuilder

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from .catalog import Catalog
    from .entries import Entry

__all__ = ["ANNOTATION_ORDER", "UNSUPPORTED_ANNOTATIONS", "Template"]

SHORT_DESCRIPTION = "short_description"
LONG_DESCRIPTION = "long_description"

UNSUPPORTED_ANNOTATIONS = (
    SHORT_DESCRIPTION,
    LONG_DESCRIPTION,
    "property",
    "property-read",
    "property-write",
    "method",
    "abstract",
    "access",
    "final",
    "filesource",
    "global",
    "name",
    "static",
    "staticvar",
)
"""Annotations which are shown elsewhere on a page or not at all."""

ANNOTATION_ORDER = {
    name: i
    for i, name in enumerate(
        (
            "deprecated",
            "internal",
            "category",
            "package",
            "subpackage",
            "copyright",
            "license",
            "author",
            "version",
            "since",
            "see",
            "uses",
            "link",
            "example",
            "tutorial",
            "todo",
        )
    )
}

_INLINE_LINK = re.compile(r"{@(?:link|see)\s+([^}]+)}")
_INDENT = re.compile(r"^(?:[ ]{4}|\t)", re.MULTILINE)


def _markup(func: Callable[..., str | None]) -> Callable[..., Markup]:
    """Mark the html returned by a helper as safe for autoescaping.

    `None` renders as nothing, so `{{ ref | resolve_link(cls) or ref }}` falls
    back to the reference.
    """

    def wrapper(*args: Any, **kwargs: Any) -> Markup:
        result = func(*args, **kwargs)
        return Markup("" if result is None else result)

    wrapper.__name__ = getattr(func, "__name__", "helper")
    wrapper.__doc__ = func.__doc__
    return wrapper


class Template:
    """Renders documentation pages of a catalog.

    Args:
        catalog: Everything that can be documented and linked to.
        settings: Configuration, the global `config` if not given.
        loader: Loader for the templates. Defaults to the settings'
            `template_dir`, or no templates (only `render_string` works).
        packages: Whether the documentation has package pages, enabling links
            in `@package` annotations.
    """

    def __init__(
        self,
        catalog: Catalog,
        settings: Settings | None = None,
        loader: jinja2.BaseLoader | None = None,
        packages: bool | None = None,
    ) -> None:
        self.catalog = catalog
        self.settings = settings or config
        self.resolver = Resolver(catalog)
        self.urls = UrlBuilder(self.settings.filenames, self.settings.manual_url)
        self.processor = TextProcessor(self.settings.allowed_html)
        self.packages = bool(catalog.packages()) if packages is None else packages
        self.static_versions: dict[Path, str] = {}

        if loader is None and self.settings.template_dir is not None:
            loader = jinja2.FileSystemLoader(self.settings.template_dir)
        self.env = jinja2.Environment(
            loader=loader,
            autoescape=jinja2.select_autoescape(
                enabled_extensions=("html", "htm", "xml", "jinja", "jinja2"),
                default_for_string=True,
            ),
            extensions=["jinja2.ext.do", "jinja2.ext.loopcontrols"],
            keep_trailing_newline=True,
        )
        self._register_helpers()

    def _register_helpers(self) -> None:
        env = self.env
        filters: dict[str, Callable[..., Any]] = {
            # common operations
            "ucfirst": lambda s: s[:1].upper() + s[1:],
            "replace_re": lambda s, pattern, repl="": re.sub(pattern, repl, s),
            # source highlighting
            "highlight_source": _markup(self.highlight_source),
            "highlight_value": _markup(self.highlight_value),
            # urls
            "package_url": self.urls.package_url,
            "namespace_url": self.urls.namespace_url,
            "class_url": self.urls.class_url,
            "method_url": self.urls.method_url,
            "property_url": self.urls.property_url,
            "constant_url": self.urls.constant_url,
            "function_url": self.urls.function_url,
            "element_url": self.urls.element_url,
            "source_url": self.urls.source_url,
            "manual_url": self.urls.manual_url_of,
            # packages and namespaces
            "package_name": package_name,
            "subpackage_name": subpackage_name,
            "namespace_links": _markup(self.namespace_links),
            "subnamespace_name": subnamespace_name,
            # types
            "type_links": _markup(self.type_links),
            "type": value_type,
            # docblocks
            "resolve_link": _markup(self.resolve_link),
            "resolve_links": _markup(self.resolve_links_html),
            "description": _markup(self.description),
            "short_description": _markup(self.short_description),
            "long_description": _markup(self.long_description),
            "docblock": _markup(self.docblock),
            "docline": _markup(self.docline),
            "annotation": _markup(self.annotation),
            "annotation_filter": self.annotation_filter,
            "annotation_sort": self.annotation_sort,
            "static_file": self.static_file,
        }
        env.filters.update(filters)
        env.globals.update(
            template=self,
            config=self.settings,
            catalog=self.catalog,
            packages=self.catalog.packages() if self.packages else [],
            namespaces=self.catalog.namespaces(),
            link=_markup(self.link),
            resolve_element=self.resolver.resolve_element,
        )
        env.tests.update(
            class_entry=lambda x: isinstance(x, ClassEntry),
            method_entry=lambda x: isinstance(x, MethodEntry),
            property_entry=lambda x: isinstance(x, PropertyEntry),
            constant_entry=lambda x: isinstance(x, ConstantEntry),
            function_entry=lambda x: isinstance(x, FunctionEntry),
            parameter_entry=lambda x: isinstance(x, ParameterEntry),
            documented=lambda x: isinstance(x, ClassEntry) and x.documented,
        )

    # rendering

    def render(self, name: str, **context: Any) -> str:
        """Render the template `name` with the given variables."""
        try:
            template = self.env.get_template(name)
            return template.render(**context)
        except jinja2.TemplateError as e:
            raise TemplateRenderError(name, str(e)) from e

    def render_string(self, source: str, **context: Any) -> str:
        try:
            return self.env.from_string(source).render(**context)
        except jinja2.TemplateError as e:
            raise TemplateRenderError("<string>", str(e)) from e

    def render_to(self, name: str, path: Path | str, **context: Any) -> Path:
        """Render the template `name` into the file `path`."""
        path = Path(path)
        content = self.render(name, **context)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug("Rendered {} to {}", name, path)
        return path

    # html

    @staticmethod
    def escape(text: str) -> str:
        return html.escape(text)

    def link(self, url: str, text: str) -> str:
        return f'<a href="{url}">{self.escape(text)}</a>'

    def highlight_source(self, source: str) -> str:
        return highlight_source(str(source))

    def highlight_value(self, definition: str) -> str:
        """Highlight a default value, removing one level of indentation."""
        return self.highlight_source(_INDENT.sub("", str(definition)))

    # links

    def resolve_link(self, reference: str, context: Entry) -> str | None:
        """Link to the entry a reference points to.

        Returns:
            The html link, or `None` if the reference doesn't resolve.
        """
        if not reference:
            return None
        element = self.resolver.resolve_element(reference, context)
        if element is None:
            return None

        esc = self.escape
        match element:
            case ClassEntry():
                return self.link(self.urls.class_url(element), element.name)
            case ConstantEntry(declaring_class_name=None):
                if element.in_namespace:
                    text = (
                        f"{esc(element.namespace_name)}{NS}"
                        f"<b>{esc(element.short_name)}</b>"
                    )
                else:
                    text = f"<b>{esc(element.name)}</b>"
                return f'<a href="{self.urls.constant_url(element)}">{text}</a>'
            case FunctionEntry():
                return self.link(self.urls.function_url(element), f"{element.name}()")
            case PropertyEntry():
                url = self.urls.property_url(element)
                member = f"<var>${esc(element.name)}</var>"
            case MethodEntry():
                url = self.urls.method_url(element)
                member = f"{esc(element.name)}()"
            case ConstantEntry():
                url = self.urls.constant_url(element)
                member = f"<b>{esc(element.name)}</b>"
            case _:
                return None

        text = f"{esc(element.declaring_class_name)}::{member}"
        return f'<a href="{url}">{text}</a>'

    def resolve_links(self, text: str, context: Entry) -> str:
        """Replace `{@link ...}` and `{@see ...}` by links.

        References which don't resolve are replaced by their text.
        """

        def _link(match: re.Match[str]) -> str:
            reference = match.group(1)
            link = self.resolve_link(html.unescape(reference), context)
            if link is not None:
                return link
            return html.escape(html.unescape(reference), quote=False)

        return _INLINE_LINK.sub(_link, text)

    def resolve_links_html(self, text: str, context: Entry) -> str:
        """`resolve_links` for the template filter, plain strings are escaped first.

        Output of the other helpers is `Markup` and is passed on unchanged.
        """
        return self.resolve_links(str(escape(text)), context)

    def type_links(self, annotation: str, context: Entry) -> str:
        """Links for the types of a `@param`/`@return`/`@var` annotation."""
        types, _ = split_annotation(annotation)
        links = []
        for t in types.split("|"):
            name = type_name(t)
            links.append(self.resolve_link(name, context) or self.escape(name))
        return "|".join(links)

    def namespace_links(self, namespace: str, last: bool = True) -> str:
        r"""Links to a namespace and all its parents, e.g. `A\B\C`.

        Args:
            namespace: The namespace name.
            last: Whether the namespace itself is linked, otherwise its last
                segment is plain text.
        """
        links = []
        parent = ""
        for part in namespace.split(NS):
            parent = f"{parent}{NS}{part}".lstrip(NS)
            if last or parent != namespace:
                links.append(self.link(self.urls.namespace_url(parent), part))
            else:
                links.append(self.escape(part))
        return NS.join(links)

    # docblocks

    def docblock(self, text: str, context: Entry) -> str:
        return self.resolve_links(self.processor.process(text), context)

    def docline(self, text: str, context: Entry) -> str:
        return self.resolve_links(self.processor.process_line(text), context)

    def description(self, annotation: str, context: Entry) -> str:
        """Description part of an annotation, i.e. without the type."""
        _, description = split_annotation(annotation)
        if isinstance(context, ParameterEntry):
            description = re.sub(
                rf"^\$?{re.escape(context.name)}(?:\s+|$)",
                "",
                description,
                count=1,
                flags=re.IGNORECASE,
            )
        return self.docline(description, context)

    def short_description(self, element: Entry) -> str:
        return self.docline(element.short_description, element)

    def long_description(self, element: Entry) -> str:
        text = element.short_description
        if element.long_description:
            text = f"{text}\n\n{element.long_description}"
        return self.docblock(text, element)

    def annotation(self, value: str, name: str, context: Entry) -> str:
        """Render one annotation value of the tag `name`."""
        match name:
            case "param" | "return" | "throws":
                description = self.description(value, context)
                return "<code>{}</code>{}".format(
                    self.type_links(value, context),
                    f"<br />{description}" if description else "",
                )
            case "package":
                package, description = split_annotation(value)
                if self.packages:
                    link = self.link(self.urls.package_url(package), package)
                    return f"{link} {self.docline(description, context)}"
            case "subpackage":
                package = ""
                if context.has_annotation("package"):
                    package, _ = split_annotation(context.annotations["package"][0])
                subpackage, description = split_annotation(value)
                if self.packages and package:
                    link = self.link(
                        self.urls.package_url(f"{package}{NS}{subpackage}"), subpackage
                    )
                    return f"{link} {self.docline(description, context)}"
            case "see" | "uses":
                reference, description = split_annotation(value)
                separator = (
                    " "
                    if isinstance(context, ClassEntry) or not description
                    else "<br />"
                )
                if self.resolver.resolve_element(reference, context) is not None:
                    return (
                        f"<code>{self.type_links(reference, context)}</code>"
                        f"{separator}{description}"
                    )
        return self.docline(value, context)

    def annotation_filter(
        self,
        annotations: Mapping[str, list[str]],
        filter: Iterable[str] = (),  # noqa: A002
    ) -> dict[str, list[str]]:
        """Annotations worth showing in the annotation list of an element."""
        hidden = {*UNSUPPORTED_ANNOTATIONS, *filter}
        if not self.settings.todo:
            hidden.add("todo")
        return {k: v for k, v in annotations.items() if k not in hidden}

    @staticmethod
    def annotation_sort(annotations: Mapping[str, list[str]]) -> dict[str, list[str]]:
        """Annotations in display order, unknown ones last."""
        return dict(
            sorted(annotations.items(), key=lambda kv: ANNOTATION_ORDER.get(kv[0], 99))
        )

    # static files

    def static_file(self, name: str) -> str:
        """Static file url with a checksum query to bust browser caches."""
        filename = self.settings.output_dir / name
        if filename not in self.static_versions and filename.is_file():
            checksum = zlib.crc32(filename.read_bytes())
            self.static_versions[filename] = str(checksum)
            logger.trace("Checksum of {} is {}", filename, checksum)
        if filename in self.static_versions:
            return f"{name}?{self.static_versions[filename]}"
        return name
