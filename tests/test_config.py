from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

import xrefdoc as xd
from xrefdoc.conf import DEFAULT_FILENAMES, LogFilter, LogLevel


def test_defaults(settings: xd.Settings, tmp_path: Path) -> None:
    assert settings.filenames == DEFAULT_FILENAMES
    assert settings.manual_url == "http://php.net/manual"
    assert "var" in settings.allowed_html
    assert not settings.todo
    assert settings.output_dir == tmp_path / "api"


def test_output_dir_in_project() -> None:
    settings = xd.Settings()
    assert settings.output_dir == settings.project_dir / "build/api"


def test_filenames_merged_with_defaults() -> None:
    settings = xd.Settings(filenames={"class": "api/%s.html"})
    assert settings.filenames[xd.PageKind.CLASS] == "api/%s.html"
    assert settings.filenames[xd.PageKind.SOURCE] == "source-%s.html"


@pytest.mark.parametrize("pattern", ["class.html", "class-%s-%s.html"])
def test_filename_needs_one_placeholder(pattern: str) -> None:
    with pytest.raises(ValidationError, match="exactly one"):
        xd.Settings(filenames={"class": pattern})


def test_unknown_page_kind() -> None:
    with pytest.raises(ValidationError):
        xd.Settings(filenames={"tree": "tree-%s.html"})


def test_manual_url_stripped() -> None:
    assert xd.Settings(manual_url="https://php.net/manual/").manual_url == (
        "https://php.net/manual"
    )


def test_allowed_html_lowercase() -> None:
    assert xd.Settings(allowed_html=["B", "Code"]).allowed_html == ["b", "code"]


def test_validate_assignment(settings: xd.Settings) -> None:
    with pytest.raises(ValidationError):
        settings.filenames = {xd.PageKind.CLASS: "class.html"}
    settings.todo = True
    assert settings.todo


def test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XREFDOC_TODO", "true")
    monkeypatch.setenv("XREFDOC_MANUAL_URL", "https://example.org/manual")
    settings = xd.Settings()
    assert settings.todo
    assert settings.manual_url == "https://example.org/manual"


def test_logfilter() -> None:
    logfilter = LogFilter(level=LogLevel.WARNING, regex="^ignore")
    warning = xd.logger.level("WARNING")
    info = xd.logger.level("INFO")
    assert logfilter({"level": warning, "message": "keep me"})  # type: ignore[arg-type]
    assert not logfilter({"level": warning, "message": "ignore me"})  # type: ignore[arg-type]
    assert not logfilter({"level": info, "message": "keep me"})  # type: ignore[arg-type]


def test_traceback_extra() -> None:
    xd.Settings()
    records: list[dict[str, Any]] = []
    handler = xd.logger.add(lambda m: records.append(m.record), level="DEBUG")
    try:
        xd.logger.bind(with_traceback=True).debug("with stack")
        xd.logger.debug("without stack")
    finally:
        xd.logger.remove(handler)

    assert records[0]["extra"]["traceback"].startswith("\n")
    assert "test_traceback_extra" in records[0]["extra"]["traceback"]
    assert records[1]["extra"]["traceback"] == ""
