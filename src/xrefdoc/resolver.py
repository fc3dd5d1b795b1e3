"""Resolution of textual references against a catalog.

References come from doc comments (`@see Foo::bar()`, `{@link $items}`) and
type hints (`Http\\Request|null`). Resolution is best effort: any reference
which can't be matched resolves to `None` and callers fall back to the plain
text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .conf import logger
from .entries import (
    ClassEntry,
    ConstantEntry,
    FunctionEntry,
    MethodEntry,
    ParameterEntry,
    PropertyEntry,
)
from .names import PRIMITIVE_TYPES, resolve_qualified_name

if TYPE_CHECKING:
    from .catalog import Catalog
    from .entries import Entry

__all__ = ["Resolver"]

MEMBER_SEPARATORS = ("::", "->")


def split_member_reference(reference: str) -> tuple[str, str] | None:
    """Split `Class::member` or `Class->member` into class and member part.

    `::` is looked for first. A separator at the very start has no class part
    and doesn't split.
    """
    for separator in MEMBER_SEPARATORS:
        pos = reference.find(separator)
        if pos > 0:
            return reference[:pos], reference[pos + len(separator) :]
    return None


class Resolver:
    """Resolves references to catalog entries.

    Args:
        catalog: The catalog references are looked up in.
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def scope_of(
        self, context: Entry
    ) -> ClassEntry | ConstantEntry | FunctionEntry | None:
        """The class, function or free constant a context entry belongs to.

        Members and parameters of methods are scoped to their declaring class,
        parameters of free functions to their function.
        """
        match context:
            case ParameterEntry(declaring_class_name=None):
                return self.catalog.find_function(context.declaring_function_name)
            case (
                MethodEntry()
                | PropertyEntry()
                | ParameterEntry()
                | ConstantEntry(declaring_class_name=str())
            ):
                assert context.declaring_class_name is not None
                return self.catalog.find_class(context.declaring_class_name)
            case ClassEntry() | ConstantEntry() | FunctionEntry():
                return context
            case _:
                return None

    def _class(
        self, reference: str, scope: ClassEntry | ConstantEntry | FunctionEntry
    ) -> ClassEntry | None:
        namespace = scope.namespace_name
        qualified = resolve_qualified_name(
            reference, scope.namespace_aliases, namespace
        )
        entry = self.catalog.lookup_class(qualified, namespace)
        if entry is None:
            entry = self.catalog.lookup_class(reference, namespace)
        return entry

    def _member(
        self, cls: ClassEntry, reference: str
    ) -> PropertyEntry | MethodEntry | ConstantEntry | None:
        catalog = self.catalog
        if (prop := catalog.get_property(cls, reference)) is not None:
            return prop
        if reference.startswith("$") and (
            prop := catalog.get_property(cls, reference[1:])
        ) is not None:
            return prop
        if (method := catalog.get_method(cls, reference)) is not None:
            return method
        if reference.endswith("()") and (
            method := catalog.get_method(cls, reference[:-2])
        ) is not None:
            return method
        return catalog.get_constant_member(cls, reference)

    def resolve_element(self, reference: str, context: Entry) -> Entry | None:
        """Find the entry a reference points to.

        Lookups are tried in order: class, constant and function in the scope of
        `context`, then `Class::member`/`Class->member`, then a member of the
        context's class. A matching class which is not documented resolves to
        `None` without trying constants or functions of the same name.

        Args:
            reference: Reference text, e.g. `Foo`, `Foo::bar()`, `$baz`.
            context: The entry whose documentation contains the reference.

        Returns:
            The referenced entry, or `None` if nothing matches.
        """
        if not reference or reference in PRIMITIVE_TYPES:
            return None

        scope = self.scope_of(context)
        if scope is None:
            logger.trace(
                "No scope for context {} of reference {!r}", context.name, reference
            )
            return None
        namespace = scope.namespace_name

        cls = self._class(reference, scope)
        if cls is not None:
            if not cls.documented:
                logger.trace("Reference {!r} is an undocumented class", reference)
                return None
            return cls
        if (constant := self.catalog.get_constant(reference, namespace)) is not None:
            return constant
        if (function := self.catalog.get_function(reference, namespace)) is not None:
            return function

        target: ClassEntry | ConstantEntry | FunctionEntry = scope
        member = reference
        if (split := split_member_reference(reference)) is not None:
            class_ref, member = split
            found = self.catalog.get_class(
                resolve_qualified_name(class_ref, scope.namespace_aliases, namespace)
            ) or self.catalog.get_class(class_ref, namespace)
            if found is None:
                logger.trace("Unknown class {!r} in {!r}", class_ref, reference)
                return None
            target = found

        match target:
            case ClassEntry(documented=True):
                element = self._member(target, member)
            case _:
                # constants, functions and undocumented classes have no members
                return None

        if element is None:
            logger.trace("Unresolved reference {!r} in {}", reference, context.name)
        return element
