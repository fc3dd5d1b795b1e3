from pathlib import Path

import pytest
from pydantic import ValidationError

import xrefdoc as xd


def test_read_catalog(catalog: xd.Catalog) -> None:
    assert len(catalog.classes) == 6
    assert set(catalog.constants) == {"Shop\\VERSION", "Shop\\Hidden", "DEBUG"}
    assert set(catalog.functions) == {"Shop\\checkout", "strlen"}


def test_read_missing_catalog(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not a file"):
        xd.read_catalog(tmp_path / "nope.yml")


def test_read_empty_catalog(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("")
    catalog = xd.read_catalog(path)
    assert not catalog.classes


def test_duplicate_in_file(tmp_path: Path) -> None:
    path = tmp_path / "dup.yml"
    path.write_text("functions:\n  - name: foo\n  - name: \\foo\n")
    with pytest.raises(ValidationError, match="Duplicate"):
        xd.read_catalog(path)


def test_from_entries() -> None:
    catalog = xd.Catalog.from_entries(
        [
            xd.ClassEntry(name="Foo"),
            xd.ConstantEntry(name="BAR"),
            xd.FunctionEntry(name="baz"),
        ]
    )
    assert "Foo" in catalog
    assert "\\BAR" in catalog
    assert "baz" in catalog
    assert "qux" not in catalog
    assert 1 not in catalog


def test_from_entries_duplicate() -> None:
    with pytest.raises(xd.DuplicateEntryError) as e:
        xd.Catalog.from_entries([xd.ClassEntry(name="Foo"), xd.ClassEntry(name="Foo")])
    assert e.value.name == "Foo"


def test_from_entries_rejects_members() -> None:
    constant = xd.ConstantEntry(name="MAX", declaring_class_name="Foo")
    with pytest.raises(TypeError):
        xd.Catalog.from_entries([constant])


def test_getitem(catalog: xd.Catalog) -> None:
    assert catalog["\\Shop\\Cart"].kind == "class"
    # a class shadows a constant of the same name
    assert catalog["Shop\\Hidden"].kind == "class"
    assert catalog["DEBUG"].kind == "constant"
    with pytest.raises(xd.UnknownEntryError):
        catalog["Nope"]
    with pytest.raises(LookupError):
        catalog["Nope"]


def test_get_class(catalog: xd.Catalog) -> None:
    assert catalog.get_class("Cart", "Shop") is catalog.classes["Shop\\Cart"]
    assert catalog.get_class("Exception", "Shop") is catalog.classes["Exception"]
    assert catalog.get_class("Hidden", "Shop") is None
    assert catalog.lookup_class("Hidden", "Shop") is catalog.classes["Shop\\Hidden"]


def test_namespace_first(catalog: xd.Catalog) -> None:
    assert catalog.get_constant("VERSION", "Shop") is not None
    assert catalog.get_constant("VERSION") is None
    assert catalog.get_function("strlen", "Shop") is catalog.functions["strlen"]


def test_inherited_members(catalog: xd.Catalog, cart: xd.ClassEntry) -> None:
    assert catalog.has_method(cart, "count")
    assert catalog.has_property(cart, "elements")
    assert not catalog.has_constant(cart, "DEFAULT_CODE")
    assert catalog.get_method(cart, "add") is cart.methods["add"]


def test_ancestors_cycle() -> None:
    catalog = xd.Catalog.from_entries(
        [xd.ClassEntry(name="A", parent_name="B"), xd.ClassEntry(name="B", parent_name="A")]
    )
    names = [c.name for c in catalog.ancestors(catalog.classes["A"])]
    assert names == ["A", "B"]


def test_ancestors_unknown_parent(catalog: xd.Catalog) -> None:
    cls = xd.ClassEntry(name="Orphan", parent_name="Gone")
    assert [c.name for c in catalog.ancestors(cls)] == ["Orphan"]


def test_namespaces(catalog: xd.Catalog) -> None:
    # Shop\Internal only holds an undocumented class
    assert catalog.namespaces() == ["Billing", "Shop"]


def test_packages(catalog: xd.Catalog) -> None:
    assert catalog.packages() == ["Billing", "Shop", "Shop\\Orders"]
