from __future__ import annotations

__all__ = [
    "CatalogError",
    "DuplicateEntryError",
    "TemplateRenderError",
    "UnknownEntryError",
]


class CatalogError(ValueError):
    """Raised when a catalog cannot be built from the given entries."""


class DuplicateEntryError(CatalogError):
    """Raised when two entries of the same kind share a qualified name."""

    def __init__(self, kind: str, name: str) -> None:
        """Throw error for the duplicated `name`."""
        self.kind = kind
        self.name = name
        super().__init__(
            f"Duplicate {kind} {name!r}. Classes, constants and functions must be "
            "unique by their namespace qualified name."
        )


class UnknownEntryError(CatalogError, LookupError):
    """Raised when an entry is looked up by name and is not in the catalog."""

    def __init__(self, name: str) -> None:
        """Throw error for the missing `name`."""
        super().__init__(f"No class, constant or function named {name!r}.")


class TemplateRenderError(RuntimeError):
    """Raised when a jinja2 template fails to load or render."""

    def __init__(self, template_name: str, reason: str) -> None:
        """Throw error for the template `template_name`."""
        self.template_name = template_name
        super().__init__(f"Failed to render template {template_name!r}: {reason}")
