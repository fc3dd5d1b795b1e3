"""xrefdoc package. Template helpers for API documentation.

Resolves cross-references in doc comments against a catalog of classes,
constants and functions and renders them as links in jinja2 templates.

"""
# The import order matters, we need to first import the important stuff.
# isort:skip_file

__version__ = "0.3.0"

from .conf import config, logger, PageKind, Settings
from .entries import (
    ClassEntry,
    ConstantEntry,
    Entry,
    ExtensionEntry,
    FunctionEntry,
    MethodEntry,
    ParameterEntry,
    PropertyEntry,
)
from .exceptions import (
    CatalogError,
    DuplicateEntryError,
    TemplateRenderError,
    UnknownEntryError,
)
from .names import urlize, resolve_qualified_name
from .catalog import Catalog, read_catalog
from .resolver import Resolver
from .urls import UrlBuilder
from .markup import TextProcessor
from .template import Template

from . import (
    catalog,
    conf,
    entries,
    markup,
    names,
    resolver,
    template,
    urls,
)

__all__ = [
    "Catalog",
    "CatalogError",
    "ClassEntry",
    "ConstantEntry",
    "DuplicateEntryError",
    "Entry",
    "ExtensionEntry",
    "FunctionEntry",
    "MethodEntry",
    "PageKind",
    "ParameterEntry",
    "PropertyEntry",
    "Resolver",
    "Settings",
    "Template",
    "TemplateRenderError",
    "TextProcessor",
    "UnknownEntryError",
    "UrlBuilder",
    "catalog",
    "conf",
    "config",
    "entries",
    "logger",
    "markup",
    "names",
    "read_catalog",
    "resolve_qualified_name",
    "resolver",
    "template",
    "urlize",
    "urls",
]
