"""xrefdoc configuration."""

from __future__ import annotations

import re
import sys
import traceback
from enum import Enum
from functools import cached_property
from itertools import takewhile
from pathlib import Path
from typing import Any

import git
import loguru
import rich.console
from dotenv import find_dotenv
from loguru import logger as logger  # noqa: PLC0414
from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["LogLevel", "PageKind", "Settings", "config", "logger"]


DEFAULT_ALLOWED_HTML = [
    "b",
    "i",
    "a",
    "ul",
    "ol",
    "li",
    "p",
    "br",
    "var",
    "samp",
    "kbd",
    "tt",
]
DEFAULT_MANUAL_URL = "http://php.net/manual"


def add_traceback(record: loguru.Record) -> None:
    """Add a traceback to the logger."""
    extra = record["extra"]
    if extra.get("with_traceback", False):
        extra["traceback"] = "\n" + "".join(traceback.format_stack())
    else:
        extra["traceback"] = ""


def tracing_formatter(record: loguru.Record) -> str:
    """Traceback filtering.

    Filter out frames coming from Loguru internals.
    """
    frames = takewhile(
        lambda f: "/loguru/" not in f.filename, traceback.extract_stack()
    )
    stack = " > ".join(f"{f.filename}:{f.name}:{f.lineno}" for f in frames)
    record["extra"]["stack"] = stack

    if record["extra"].get("with_backtrace", False):
        return (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level>"
            " | <cyan>{extra[stack]}</cyan> - <level>{message}</level>"
            "{extra[traceback]}\n{exception}"
        )

    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}"
        "</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
        " - <level>{message}</level>{extra[traceback]}\n{exception}"
    )


class LogLevel(str, Enum):
    """xrefdoc logger levels."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class PageKind(str, Enum):
    """Kinds of generated pages with their own filename pattern."""

    CLASS = "class"
    NAMESPACE = "namespace"
    PACKAGE = "package"
    CONSTANT = "constant"
    FUNCTION = "function"
    SOURCE = "source"


DEFAULT_FILENAMES: dict[PageKind, str] = {
    PageKind.CLASS: "class-%s.html",
    PageKind.NAMESPACE: "namespace-%s.html",
    PageKind.PACKAGE: "package-%s.html",
    PageKind.CONSTANT: "constant-%s.html",
    PageKind.FUNCTION: "function-%s.html",
    PageKind.SOURCE: "source-%s.html",
}


class LogFilter(BaseModel):
    """Filter certain messages by log level or regex.

    Filtered messages are not evaluated and discarded.
    """

    level: LogLevel = LogLevel.INFO
    regex: str | None = None

    def __call__(self, record: loguru.Record) -> bool:
        """Loguru needs the filter to be callable."""
        levelno = logger.level(self.level).no
        if self.regex is None:
            return record["level"].no >= levelno
        return record["level"].no >= levelno and not bool(
            re.search(self.regex, record["message"])
        )


def find_project_dir() -> Path:
    """Root of the enclosing git work tree, or the working directory."""
    try:
        repo = git.repo.Repo(".", search_parent_directories=True)
        wtd = repo.working_tree_dir
        return Path(wtd) if wtd is not None else Path.cwd()
    except git.InvalidGitRepositoryError:
        return Path.cwd()


dotenv_path = find_dotenv(usecwd=True)


class Settings(BaseSettings):
    """xrefdoc settings object.

    Attrs:
        logfilter: The filter to use. Can be configured to set log level and filter
            messages by regex.
        console: The rich console to use for displaying rich content.
        destination: Directory the documentation is written to. Static files
            are looked up here for versioning.
        template_dir: Directory with the jinja2 templates of the theme.
        filenames: Filename pattern per page kind. Each pattern contains a single
            `%s` which is replaced by the urlized name.
        allowed_html: HTML tags allowed verbatim in doc comments.
        todo: Whether `@todo` annotations are rendered.
        manual_url: Base url of the language manual for internal elements.
    """

    model_config = SettingsConfigDict(
        arbitrary_types_allowed=True,
        env_prefix="xrefdoc_",
        env_nested_delimiter="__",
        extra="allow",
        validate_assignment=True,
        env_file=dotenv_path,
    )

    logfilter: LogFilter = Field(default_factory=LogFilter, validate_default=True)
    """Can configure the logger to ignore certain levels or by regex."""
    # console for printing
    console: rich.console.Console = Field(default_factory=rich.console.Console)

    destination: Path | None = None
    template_dir: Path | None = None
    filenames: dict[PageKind, str] = Field(
        default_factory=lambda: dict(DEFAULT_FILENAMES)
    )
    allowed_html: list[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_HTML))
    todo: bool = False
    manual_url: str = DEFAULT_MANUAL_URL

    @field_validator("logfilter")
    @classmethod
    def _validate_logfilter(cls, logfilter: LogFilter) -> LogFilter:
        logger.remove()
        logger.configure(patcher=add_traceback)
        logger.add(
            sys.stdout,
            format=tracing_formatter,
            filter=logfilter,
            backtrace=True,
        )
        logger.debug("LogLevel: {}", logfilter.level)

        return logfilter

    @field_validator("filenames")
    @classmethod
    def _validate_filenames(cls, filenames: dict[PageKind, str]) -> dict[PageKind, str]:
        for kind, pattern in filenames.items():
            if pattern.count("%s") != 1:
                raise ValueError(
                    f"Filename pattern for {kind.value!r} must contain exactly one"
                    f" '%s', got {pattern!r}."
                )
        return {**DEFAULT_FILENAMES, **filenames}

    @field_validator("allowed_html")
    @classmethod
    def _lowercase_tags(cls, tags: list[str]) -> list[str]:
        return [tag.lower() for tag in tags]

    @field_validator("todo")
    @classmethod
    def _debug_info_on_global_setting(cls, v: Any, info: ValidationInfo) -> Any:
        logger.bind(with_traceback=True).debug(
            "'{}' set globally to '{}'", info.field_name, v
        )
        return v

    @field_validator("manual_url")
    @classmethod
    def _strip_manual_url(cls, url: str) -> str:
        if url.endswith("/"):
            logger.warning(
                "'manual_url' should not end with a slash, stripping it from {!r}",
                url,
            )
        return url.rstrip("/")

    @cached_property
    def project_dir(self) -> Path:
        return find_project_dir()

    @property
    def output_dir(self) -> Path:
        """Destination directory, `build/api` in the project if not set."""
        if self.destination is not None:
            return self.destination
        return self.project_dir / "build/api"


config = Settings()
