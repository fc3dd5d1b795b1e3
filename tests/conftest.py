from pathlib import Path

import pytest

import xrefdoc as xd

CATALOG_YAML = r"""
classes:
  - name: Shop\Collection
    properties:
      - name: elements
    methods:
      - name: count
  - name: Shop\Cart
    parent_name: Shop\Collection
    namespace_aliases:
      Money: Billing\Money
    short_description: Shopping cart.
    long_description: 'Holds {@link Cart::$items} until {@see checkout()}.'
    doc_comment: "/**\n * Shopping cart.\n */"
    start_line: 12
    annotations:
      package: Shop
      subpackage: Orders
      author: Jane Doe
      todo: Persist the cart
    properties:
      - name: items
        start_line: 20
    methods:
      - name: add
        parameters:
          - name: item
      - name: clear
      - name: __construct
    constants:
      - name: MAX_ITEMS
  - name: Shop\Hidden
    documented: false
  - name: Shop\Internal\Secret
    documented: false
    methods:
      - name: reveal
  - name: Billing\Money
    annotations:
      package: Billing
    methods:
      - name: format
  - name: Exception
    internal: true
    properties:
      - name: message
    methods:
      - name: __construct
      - name: getMessage
    constants:
      - name: DEFAULT_CODE
constants:
  - name: Shop\VERSION
  - name: Shop\Hidden
  - name: DEBUG
functions:
  - name: Shop\checkout
    start_line: 40
    parameters:
      - name: cart
  - name: strlen
"""


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    path = tmp_path / "catalog.yml"
    path.write_text(CATALOG_YAML)
    return path


@pytest.fixture
def catalog(catalog_file: Path) -> xd.Catalog:
    return xd.read_catalog(catalog_file)


@pytest.fixture
def cart(catalog: xd.Catalog) -> xd.ClassEntry:
    return catalog.classes["Shop\\Cart"]


@pytest.fixture
def money(catalog: xd.Catalog) -> xd.ClassEntry:
    return catalog.classes["Billing\\Money"]


@pytest.fixture
def checkout(catalog: xd.Catalog) -> xd.FunctionEntry:
    return catalog.functions["Shop\\checkout"]


@pytest.fixture
def resolver(catalog: xd.Catalog) -> xd.Resolver:
    return xd.Resolver(catalog)


@pytest.fixture
def settings(tmp_path: Path) -> xd.Settings:
    return xd.Settings(destination=tmp_path / "api")


@pytest.fixture
def template(catalog: xd.Catalog, settings: xd.Settings) -> xd.Template:
    return xd.Template(catalog, settings=settings)
