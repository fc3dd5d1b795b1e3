"""Symbol catalog of all classes, constants and functions."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, field_validator
from ruamel.yaml import YAML

from .conf import logger
from .entries import (
    ClassEntry,
    ConstantEntry,
    FunctionEntry,
    MethodEntry,
    PropertyEntry,
)
from .exceptions import DuplicateEntryError, UnknownEntryError
from .names import NS, resolve_qualified_name, split_annotation

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

__all__ = ["Catalog", "read_catalog", "resolve_qualified_name"]

yaml = YAML(typ="safe")


def _by_name(value: Any) -> Any:
    if isinstance(value, list | tuple):
        indexed: dict[str, Any] = {}
        for item in value:
            name = item.name if isinstance(item, BaseModel) else item["name"]
            name = name.lstrip(NS)
            if name in indexed:
                raise DuplicateEntryError("entry", name)
            indexed[name] = item
        return indexed
    return value


class Catalog(BaseModel, extra="forbid"):
    """Read-only lookup of everything that can be linked to.

    Classes, constants and functions are keyed by their fully qualified name
    without a leading backslash.
    """

    classes: dict[str, ClassEntry] = Field(default_factory=dict)
    constants: dict[str, ConstantEntry] = Field(default_factory=dict)
    functions: dict[str, FunctionEntry] = Field(default_factory=dict)

    @field_validator("classes", "constants", "functions", mode="before")
    @classmethod
    def _entries_by_name(cls, value: Any) -> Any:
        return _by_name(value)

    @classmethod
    def from_entries(
        cls, entries: Iterable[ClassEntry | ConstantEntry | FunctionEntry]
    ) -> Catalog:
        """Build a catalog from a mixed iterable of top level entries."""
        classes: dict[str, ClassEntry] = {}
        constants: dict[str, ConstantEntry] = {}
        functions: dict[str, FunctionEntry] = {}
        for entry in entries:
            match entry:
                case ClassEntry():
                    target: dict[str, Any] = classes
                case ConstantEntry(declaring_class_name=None):
                    target = constants
                case FunctionEntry():
                    target = functions
                case _:
                    raise TypeError(
                        f"Only classes, free constants and functions can be added"
                        f" to a catalog, got {entry!r}"
                    )
            if entry.name in target:
                raise DuplicateEntryError(entry.kind, entry.name)
            target[entry.name] = entry
        return cls(classes=classes, constants=constants, functions=functions)

    def find_class(self, name: str) -> ClassEntry | None:
        return self.classes.get(name)

    def find_constant(self, name: str) -> ConstantEntry | None:
        return self.constants.get(name)

    def find_function(self, name: str) -> FunctionEntry | None:
        return self.functions.get(name)

    def __getitem__(self, name: str) -> ClassEntry | ConstantEntry | FunctionEntry:
        """Top level entry by qualified name, classes first."""
        name = name.lstrip(NS)
        entry = (
            self.find_class(name)
            or self.find_constant(name)
            or self.find_function(name)
        )
        if entry is None:
            raise UnknownEntryError(name)
        return entry

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        name = name.lstrip(NS)
        return name in self.classes or name in self.constants or name in self.functions

    def lookup_class(self, name: str, namespace: str = "") -> ClassEntry | None:
        """Class by name relative to `namespace`, documented or not."""
        if (entry := self.classes.get(f"{namespace}{NS}{name}")) is not None:
            return entry
        return self.classes.get(name)

    def get_class(self, name: str, namespace: str = "") -> ClassEntry | None:
        """Documented class by name relative to `namespace`.

        The namespace qualified name is tried before the name as given.
        """
        entry = self.lookup_class(name, namespace)
        if entry is None or not entry.documented:
            return None
        return entry

    def get_constant(self, name: str, namespace: str = "") -> ConstantEntry | None:
        if (entry := self.constants.get(f"{namespace}{NS}{name}")) is not None:
            return entry
        return self.constants.get(name)

    def get_function(self, name: str, namespace: str = "") -> FunctionEntry | None:
        if (entry := self.functions.get(f"{namespace}{NS}{name}")) is not None:
            return entry
        return self.functions.get(name)

    def ancestors(self, entry: ClassEntry) -> Iterator[ClassEntry]:
        """The class itself followed by its known parents."""
        seen: set[str] = set()
        current: ClassEntry | None = entry
        while current is not None and current.name not in seen:
            seen.add(current.name)
            yield current
            if current.parent_name is None:
                break
            current = self.classes.get(current.parent_name)

    def get_property(self, entry: ClassEntry, name: str) -> PropertyEntry | None:
        for cls in self.ancestors(entry):
            if name in cls.properties:
                return cls.properties[name]
        return None

    def get_method(self, entry: ClassEntry, name: str) -> MethodEntry | None:
        for cls in self.ancestors(entry):
            if name in cls.methods:
                return cls.methods[name]
        return None

    def get_constant_member(
        self, entry: ClassEntry, name: str
    ) -> ConstantEntry | None:
        for cls in self.ancestors(entry):
            if name in cls.constants:
                return cls.constants[name]
        return None

    def has_property(self, entry: ClassEntry, name: str) -> bool:
        return self.get_property(entry, name) is not None

    def has_method(self, entry: ClassEntry, name: str) -> bool:
        return self.get_method(entry, name) is not None

    def has_constant(self, entry: ClassEntry, name: str) -> bool:
        return self.get_constant_member(entry, name) is not None

    def namespaces(self) -> list[str]:
        """All namespaces with documented elements, including parents."""
        names: set[str] = set()
        elements = [c for c in self.classes.values() if c.documented]
        for entry in [*elements, *self.constants.values(), *self.functions.values()]:
            parts = entry.namespace_name.split(NS) if entry.namespace_name else []
            for i in range(1, len(parts) + 1):
                names.add(NS.join(parts[:i]))
        return sorted(names)

    def packages(self) -> list[str]:
        """All `Package` and `Package\\Subpackage` names used in annotations."""
        names: set[str] = set()
        elements = [c for c in self.classes.values() if c.documented]
        for entry in [*elements, *self.constants.values(), *self.functions.values()]:
            if not entry.has_annotation("package"):
                continue
            package, _ = split_annotation(entry.annotations["package"][0])
            names.add(package)
            if entry.has_annotation("subpackage"):
                subpackage, _ = split_annotation(entry.annotations["subpackage"][0])
                names.add(f"{package}{NS}{subpackage}")
        return sorted(names)


def read_catalog(file: Path | str) -> Catalog:
    """Load a catalog from a yaml file.

    The file has the top level keys `classes`, `constants` and `functions`,
    each a list of entries.
    """
    file = Path(file).resolve()
    if not file.is_file():
        raise ValueError(f"{file=} is either not a file or does not exist.")
    with file.open(mode="rt") as f:
        yaml_dict = yaml.load(f) or {}
    catalog = Catalog.model_validate(yaml_dict)
    logger.debug(
        "Loaded catalog {} with {} classes, {} constants, {} functions",
        file,
        len(catalog.classes),
        len(catalog.constants),
        len(catalog.functions),
    )
    return catalog
