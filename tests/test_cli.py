from pathlib import Path

from typer.testing import CliRunner

from xrefdoc import __version__
from xrefdoc.cli import app

runner = CliRunner()


def test_version_callback() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"xrefdoc {__version__}"


def test_resolve(catalog_file: Path) -> None:
    result = runner.invoke(
        app, ["resolve", str(catalog_file), "Cart::add", "--context", "Shop\\Cart"]
    )
    assert result.exit_code == 0, result.output
    assert "class-Shop.Cart.html#_add" in result.output
    assert "Shop\\Cart::add()</a>" in result.output


def test_resolve_unresolved(catalog_file: Path) -> None:
    result = runner.invoke(
        app, ["resolve", str(catalog_file), "Nope", "--context", "Shop\\Cart"]
    )
    assert result.exit_code == 1
    assert "Unresolved" in result.output


def test_resolve_unknown_context(catalog_file: Path) -> None:
    result = runner.invoke(
        app, ["resolve", str(catalog_file), "Cart", "--context", "Shop\\Nope"]
    )
    assert result.exit_code == 2


def test_render(catalog_file: Path, tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "overview.html").write_text(
        "{% for ns in namespaces %}{{ ns | namespace_url }}\n{% endfor %}"
    )
    output = tmp_path / "api" / "overview.html"

    result = runner.invoke(
        app,
        [
            "render",
            str(catalog_file),
            "overview.html",
            str(output),
            "--template-dir",
            str(templates),
        ],
    )
    assert result.exit_code == 0, result.output
    assert output.read_text() == "namespace-Billing.html\nnamespace-Shop.html\n"


def test_render_missing_template(catalog_file: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        [
            "render",
            str(catalog_file),
            "missing.html",
            str(tmp_path / "out.html"),
            "--template-dir",
            str(tmp_path),
        ],
    )
    assert result.exit_code == 1
    assert not (tmp_path / "out.html").exists()
