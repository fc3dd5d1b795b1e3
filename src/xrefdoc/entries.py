"""Catalog entries.

Every entry carries a `kind` literal, so a mixed list of entries can be
validated through the discriminated union [Entry][xrefdoc.entries.Entry].
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, TypeAlias

from pydantic import BaseModel, Field, field_validator, model_validator

from .names import NS, namespace_of, short_name

__all__ = [
    "ClassEntry",
    "ConstantEntry",
    "Entry",
    "ExtensionEntry",
    "FunctionEntry",
    "MemberEntry",
    "MethodEntry",
    "ParameterEntry",
    "PropertyEntry",
]


def _index_by_name(
    value: Any, defaults: dict[str, Any]
) -> dict[str, Any] | Any:
    """Turn a list or mapping of member definitions into a dict by name.

    Members may be written as a list (`[{name: foo}, ...]`) or a mapping
    (`{foo: {...}}`, `{foo: null}`). `defaults` are filled in where the member
    doesn't define them, e.g. the declaring class name.
    """
    if value is None:
        return {}
    items: list[Any]
    if isinstance(value, dict):
        items = []
        for key, item in value.items():
            if isinstance(item, BaseModel):
                items.append(item)
            else:
                items.append({"name": key, **(item or {})})
    elif isinstance(value, list | tuple):
        items = list(value)
    else:
        return value

    indexed: dict[str, Any] = {}
    for item in items:
        data = item.model_dump() if isinstance(item, BaseModel) else dict(item)
        for key, default in defaults.items():
            if data.get(key) is None:
                data[key] = default
        indexed[data["name"]] = data
    return indexed


class BaseEntry(BaseModel, extra="forbid", frozen=True):
    """Common documentation data of all entries."""

    name: str
    short_description: str = ""
    long_description: str = ""
    annotations: dict[str, list[str]] = Field(default_factory=dict)
    doc_comment: str | None = None
    file_name: str | None = None
    start_line: int | None = None

    @field_validator("annotations", mode="before")
    @classmethod
    def _annotation_lists(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                k: [v] if isinstance(v, str) else list(v or [""])
                for k, v in value.items()
            }
        return value

    def has_annotation(self, name: str) -> bool:
        return bool(self.annotations.get(name))

    def __str__(self) -> str:
        return self.name


class NamespacedEntry(BaseEntry):
    """Entry living in a namespace with its own `use` aliases."""

    namespace_name: str = ""
    namespace_aliases: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _qualify(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("name"), str):
            data = dict(data)
            if data.get("declaring_class_name") is None:
                data["name"] = data["name"].lstrip(NS)
            if data.get("namespace_name") is None:
                data["namespace_name"] = namespace_of(data["name"])
        return data

    @property
    def short_name(self) -> str:
        return short_name(self.name)

    @property
    def in_namespace(self) -> bool:
        return bool(self.namespace_name)


class ParameterEntry(BaseEntry):
    """Parameter of a method or of a free function."""

    kind: Literal["parameter"] = "parameter"
    declaring_function_name: str
    declaring_class_name: str | None = None
    type_hint: str | None = None
    default_value: Any = None


class PropertyEntry(BaseEntry):
    kind: Literal["property"] = "property"
    declaring_class_name: str
    type_hint: str | None = None
    default_value: Any = None


class MethodEntry(BaseEntry):
    kind: Literal["method"] = "method"
    declaring_class_name: str
    parameters: dict[str, ParameterEntry] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _parameters_by_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and "parameters" in data:
            data = dict(data)
            data["parameters"] = _index_by_name(
                data["parameters"],
                {
                    "declaring_function_name": data.get("name"),
                    "declaring_class_name": data.get("declaring_class_name"),
                },
            )
        return data


class ConstantEntry(NamespacedEntry):
    """Class constant or a constant in a namespace/the global space.

    Namespace and global constants have a qualified `name` and no declaring
    class.
    """

    kind: Literal["constant"] = "constant"
    declaring_class_name: str | None = None
    value: Any = None


class FunctionEntry(NamespacedEntry):
    kind: Literal["function"] = "function"
    parameters: dict[str, ParameterEntry] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _parameters_by_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and "parameters" in data:
            data = dict(data)
            data["parameters"] = _index_by_name(
                data["parameters"],
                {"declaring_function_name": str(data.get("name", "")).lstrip(NS)},
            )
        return data


class ClassEntry(NamespacedEntry):
    """Class, interface or trait.

    Classes which are not `documented` are known to the catalog (e.g. parents of
    documented classes) but are never linked to.
    """

    kind: Literal["class"] = "class"
    documented: bool = True
    internal: bool = False
    parent_name: str | None = None
    properties: dict[str, PropertyEntry] = Field(default_factory=dict)
    methods: dict[str, MethodEntry] = Field(default_factory=dict)
    constants: dict[str, ConstantEntry] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _members_by_name(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            return data
        data = dict(data)
        class_name = data["name"].lstrip(NS)
        for key in ("properties", "methods", "constants"):
            if key in data:
                data[key] = _index_by_name(
                    data[key], {"declaring_class_name": class_name}
                )
        if isinstance(data.get("parent_name"), str):
            data["parent_name"] = data["parent_name"].lstrip(NS)
        return data


class ExtensionEntry(BaseEntry):
    """Language extension, only used for links into the manual."""

    kind: Literal["extension"] = "extension"


MemberEntry: TypeAlias = PropertyEntry | MethodEntry | ConstantEntry

Entry: TypeAlias = Annotated[
    ClassEntry
    | MethodEntry
    | PropertyEntry
    | ConstantEntry
    | FunctionEntry
    | ParameterEntry
    | ExtensionEntry,
    Field(discriminator="kind"),
]
