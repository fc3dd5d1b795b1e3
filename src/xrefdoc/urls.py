"""Urls of generated pages and of the language manual."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .conf import DEFAULT_FILENAMES, DEFAULT_MANUAL_URL, PageKind
from .entries import (
    ClassEntry,
    ConstantEntry,
    ExtensionEntry,
    FunctionEntry,
    MethodEntry,
    PropertyEntry,
)
from .names import urlize

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .entries import Entry

__all__ = ["RESERVED_CLASSES", "UrlBuilder"]

RESERVED_CLASSES = frozenset({"stdClass", "Closure", "Directory"})


class UrlBuilder:
    """Builds relative urls from the filename pattern of each page kind.

    Args:
        filenames: `%s` pattern per page kind, e.g. `{"class": "class-%s.html"}`.
            Missing kinds use the defaults.
        manual_url: Base url of the language manual.
    """

    def __init__(
        self,
        filenames: Mapping[PageKind, str] | None = None,
        manual_url: str = DEFAULT_MANUAL_URL,
    ) -> None:
        self.filenames = {**DEFAULT_FILENAMES, **(filenames or {})}
        self.manual_url = manual_url

    def page(self, kind: PageKind, name: str) -> str:
        return self.filenames[kind] % urlize(name)

    def namespace_url(self, name: str) -> str:
        return self.page(PageKind.NAMESPACE, name)

    def package_url(self, name: str) -> str:
        return self.page(PageKind.PACKAGE, name)

    def class_url(self, cls: ClassEntry | str) -> str:
        name = cls.name if isinstance(cls, ClassEntry) else cls
        return self.page(PageKind.CLASS, name)

    def method_url(self, method: MethodEntry) -> str:
        return f"{self.class_url(method.declaring_class_name)}#_{method.name}"

    def property_url(self, prop: PropertyEntry) -> str:
        return f"{self.class_url(prop.declaring_class_name)}#${prop.name}"

    def constant_url(self, constant: ConstantEntry) -> str:
        """Anchor in the class page, or the constant's own page."""
        if constant.declaring_class_name:
            return f"{self.class_url(constant.declaring_class_name)}#{constant.name}"
        return self.page(PageKind.CONSTANT, constant.name)

    def function_url(self, function: FunctionEntry) -> str:
        return self.page(PageKind.FUNCTION, function.name)

    def element_url(self, entry: Entry) -> str | None:
        """Url of any linkable entry."""
        match entry:
            case ClassEntry():
                return self.class_url(entry)
            case MethodEntry():
                return self.method_url(entry)
            case PropertyEntry():
                return self.property_url(entry)
            case ConstantEntry():
                return self.constant_url(entry)
            case FunctionEntry():
                return self.function_url(entry)
            case _:
                return None

    def source_url(self, entry: Entry, with_line: bool = True) -> str:
        """Url of the highlighted source of an entry.

        Classes, functions and free constants have their own source page, members
        point into the page of their declaring class. The line points at the
        start of the doc comment if there is one.
        """
        match entry:
            case FunctionEntry():
                file = f"function-{urlize(entry.name)}"
            case ConstantEntry(declaring_class_name=None):
                file = f"constant-{urlize(entry.name)}"
            case ClassEntry():
                file = urlize(entry.name)
            case _:
                declaring = getattr(entry, "declaring_class_name", None)
                file = urlize(declaring or entry.name)

        url = self.filenames[PageKind.SOURCE] % file
        if with_line and entry.start_line is not None:
            line = entry.start_line
            if entry.doc_comment:
                line -= entry.doc_comment.count("\n") + 1
            url = f"{url}#{line}"
        return url

    def manual_url_of(self, entry: Entry) -> str | None:
        """Link into the language manual for internal elements."""
        manual = self.manual_url
        if isinstance(entry, ExtensionEntry):
            extension = entry.name.lower()
            if extension == "core":
                return manual
            if extension == "date":
                extension = "datetime"
            return f"{manual}/book.{extension}.php"

        if isinstance(entry, ClassEntry):
            class_name = entry.name
        else:
            declaring = getattr(entry, "declaring_class_name", None)
            if declaring is None:
                return None
            class_name = declaring

        if class_name in RESERVED_CLASSES:
            return f"{manual}/reserved.classes.php"

        lower = class_name.lower()
        class_url = f"{manual}/class.{lower}.php"
        member = entry.name.lstrip("_").replace("_", "-").lower()

        match entry:
            case ClassEntry():
                return class_url
            case MethodEntry():
                return f"{manual}/{lower}.{member}.php"
            case PropertyEntry():
                return f"{class_url}#{lower}.props.{member}"
            case ConstantEntry():
                return f"{class_url}#{lower}.constants.{member}"
            case _:
                return None
