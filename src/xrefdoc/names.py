"""Helpers for namespace qualified names and annotation values."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "NS",
    "PRIMITIVE_TYPES",
    "namespace_of",
    "package_name",
    "resolve_qualified_name",
    "short_name",
    "split_annotation",
    "subnamespace_name",
    "subpackage_name",
    "type_name",
    "urlize",
    "value_type",
]

NS = "\\"

PRIMITIVE_TYPES = frozenset(
    {
        "boolean",
        "integer",
        "float",
        "string",
        "array",
        "object",
        "resource",
        "callback",
        "null",
        "false",
        "true",
    }
)
"""Type names which are never looked up in a catalog."""

_TYPE_NAMES = {
    "int": "integer",
    "bool": "boolean",
    "double": "float",
    "void": "",
    "FALSE": "false",
    "TRUE": "true",
    "NULL": "null",
}

_NON_WORD = re.compile(r"[^\w]", re.ASCII)
_ANNOTATION_SPLIT = re.compile(r"\s+|$")


def urlize(name: str) -> str:
    r"""Replace every character outside `[A-Za-z0-9_]` by a `.`.

    Consecutive special characters give consecutive dots, e.g.
    `My\Name Space` becomes `My.Name.Space`.
    """
    return _NON_WORD.sub(".", name)


def short_name(name: str) -> str:
    """Name without its namespace."""
    return name.rsplit(NS, 1)[-1]


def namespace_of(name: str) -> str:
    """Namespace part of a qualified name, empty in the global space."""
    name = name.lstrip(NS)
    if NS not in name:
        return ""
    return name.rsplit(NS, 1)[0]


def resolve_qualified_name(
    name: str, aliases: Mapping[str, str], namespace: str = ""
) -> str:
    r"""Resolve a class reference like the language does for `use` statements.

    A leading backslash marks an already fully qualified name. Otherwise the
    first segment is replaced if it is an imported alias, and names without a
    matching alias are taken relative to `namespace`.

    Args:
        name: The name as written in the source, e.g. `Http\Request`.
        aliases: Imported aliases of the current file, alias -> qualified name.
        namespace: The namespace the name is used in.
    """
    if not name:
        return name
    if name.startswith(NS):
        return name.lstrip(NS)

    first, sep, rest = name.partition(NS)
    if first in aliases:
        alias = aliases[first].lstrip(NS)
        return f"{alias}{NS}{rest}" if sep else alias

    if namespace:
        return f"{namespace}{NS}{name}"
    return name


def split_annotation(value: str) -> tuple[str, str]:
    """Split an annotation value into its first word and the rest.

    `"int|null The count"` gives `("int|null", "The count")`.
    """
    first, rest = _ANNOTATION_SPLIT.split(value, maxsplit=1)
    return first, rest


def type_name(name: str) -> str:
    """Unified type name, aliases mapped to their long form.

    Anything which is not a known simple type is treated as a class, constant
    or function name and returned without a leading backslash.
    """
    if name in _TYPE_NAMES:
        return _TYPE_NAMES[name]
    return name.lstrip(NS)


def value_type(value: Any) -> str:
    """Type name of a default value as shown in the documentation."""
    match value:
        case None:
            return ""
        case bool():
            return "boolean"
        case int():
            return "integer"
        case float():
            return "float"
        case str():
            return "string"
        case list() | tuple() | dict():
            return "array"
        case _:
            return "object"


def package_name(name: str) -> str:
    """Top level package of a `Package\\Subpackage` name."""
    pos = name.find(NS)
    if pos > 0:
        return name[:pos]
    return name


def subpackage_name(name: str) -> str:
    """Subpackage part of a `Package\\Subpackage` name."""
    pos = name.find(NS)
    if pos > 0:
        return name[pos + 1 :]
    return ""


def subnamespace_name(name: str) -> str:
    """Last segment of a namespace name."""
    pos = name.rfind(NS)
    if pos > 0:
        return name[pos + 1 :]
    return name
