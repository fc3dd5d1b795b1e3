"""Doc comment text to HTML.

Markdown is rendered with mistune. Source in `<code>` blocks is highlighted with
Pygments, `<pre>` blocks are kept verbatim (escaped), and raw HTML is limited to
an allow-list of tags.
"""

from __future__ import annotations

import html
import re
from typing import TYPE_CHECKING

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import PhpLexer, TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from .conf import DEFAULT_ALLOWED_HTML

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["TextProcessor", "highlight_source"]

_TAG = re.compile(r"<(/?)([A-Za-z][\w-]*)\b[^>]*>|<!--.*?-->", re.DOTALL)
_CODE_BLOCK = re.compile(r"<(code|pre)>(.+?)</\1>", re.DOTALL)
_PARAGRAPH = re.compile(r"\A<p>(.*)</p>\s*\Z", re.DOTALL)
_PLACEHOLDER = "XREFDOCBLOCK{}X"
_PLACEHOLDER_RE = re.compile(r"(?:<p>)?XREFDOCBLOCK(\d+)X(?:</p>)?")


def highlight_source(source: str, language: str = "php") -> str:
    """Highlighted source as HTML spans, without a wrapping element."""
    if language == "php":
        lexer = PhpLexer(startinline=True)
    else:
        try:
            lexer = get_lexer_by_name(language, stripall=True)
        except ClassNotFound:
            lexer = TextLexer()
    return highlight(source, lexer, HtmlFormatter(nowrap=True)).rstrip("\n")


class _DocRenderer(mistune.HTMLRenderer):
    def __init__(self, allowed_html: Iterable[str]) -> None:
        super().__init__(escape=False)
        self.allowed_html = frozenset(tag.lower() for tag in allowed_html)

    def _filter_tags(self, text: str) -> str:
        def _tag(match: re.Match[str]) -> str:
            name = match.group(2)
            if name is not None and name.lower() in self.allowed_html:
                return match.group(0)
            return html.escape(match.group(0), quote=False)

        return _TAG.sub(_tag, text)

    def inline_html(self, html: str) -> str:
        return self._filter_tags(html)

    def block_html(self, html: str) -> str:
        return self._filter_tags(html) + "\n"

    def block_code(self, code: str, info: str | None = None) -> str:
        language = info.split()[0] if info and info.strip() else ""
        if language:
            return f'<pre class="{language}">{highlight_source(code, language)}</pre>\n'
        return f"<pre><code>{html.escape(code, quote=False)}</code></pre>\n"


class TextProcessor:
    """Renders doc comment text.

    Args:
        allowed_html: Tags which may be written directly in doc comments.
            Any other tag is shown escaped.
    """

    def __init__(self, allowed_html: Iterable[str] = DEFAULT_ALLOWED_HTML) -> None:
        self.allowed_html = list(allowed_html)
        self._markdown = mistune.create_markdown(
            renderer=_DocRenderer(self.allowed_html),
            plugins=["strikethrough", "table"],
        )

    def _protect(self, text: str) -> tuple[str, list[str]]:
        """Replace code blocks by placeholders mistune leaves alone."""
        blocks: list[str] = []

        def _block(match: re.Match[str]) -> str:
            kind, content = match.group(1), match.group(2)
            if kind == "code":
                body = highlight_source(content)
            else:
                body = html.escape(content, quote=False)
            blocks.append(f"<pre>{body}</pre>")
            return _PLACEHOLDER.format(len(blocks) - 1)

        return _CODE_BLOCK.sub(_block, text), blocks

    @staticmethod
    def _restore(text: str, blocks: list[str]) -> str:
        if not blocks:
            return text
        return _PLACEHOLDER_RE.sub(lambda m: blocks[int(m.group(1))], text)

    def process(self, text: str) -> str:
        """Render a multi paragraph doc block."""
        if not text:
            return ""
        protected, blocks = self._protect(text)
        protected = re.sub(
            r"XREFDOCBLOCK\d+X", lambda m: f"\n\n{m.group(0)}\n\n", protected
        )
        rendered = str(self._markdown(protected))
        return self._restore(rendered, blocks).strip()

    def process_line(self, text: str) -> str:
        """Render a single line without the paragraph around it."""
        if not text:
            return ""
        protected, blocks = self._protect(text)
        rendered = str(self._markdown(protected)).strip()
        if (match := _PARAGRAPH.match(rendered)) and "<p>" not in match.group(1):
            rendered = match.group(1)
        return self._restore(rendered, blocks)
