import pytest

import xrefdoc as xd


@pytest.fixture
def processor() -> xd.TextProcessor:
    return xd.TextProcessor()


def test_process_paragraphs(processor: xd.TextProcessor) -> None:
    assert processor.process("One.\n\nTwo *words*.") == (
        "<p>One.</p>\n<p>Two <em>words</em>.</p>"
    )
    assert processor.process("") == ""


def test_process_line(processor: xd.TextProcessor) -> None:
    assert processor.process_line("Just a line.") == "Just a line."
    assert processor.process_line("With `code`.") == "With <code>code</code>."
    assert processor.process_line("") == ""


def test_process_line_keeps_multiple_paragraphs(processor: xd.TextProcessor) -> None:
    assert processor.process_line("One.\n\nTwo.") == "<p>One.</p>\n<p>Two.</p>"


def test_allowed_tags(processor: xd.TextProcessor) -> None:
    assert processor.process_line("Some <b>bold</b> text") == "Some <b>bold</b> text"
    assert processor.process_line("A <var>$x</var>") == "A <var>$x</var>"


def test_disallowed_tags_escaped(processor: xd.TextProcessor) -> None:
    line = processor.process_line("Bad <script>alert(1)</script> here")
    assert "<script>" not in line
    assert "&lt;script&gt;" in line
    assert "&lt;/script&gt;" in line


def test_custom_allowed_tags() -> None:
    processor = xd.TextProcessor(["EM"])
    assert processor.process_line("<em>x</em> <b>y</b>") == (
        "<em>x</em> &lt;b&gt;y&lt;/b&gt;"
    )


def test_code_block_highlighted(processor: xd.TextProcessor) -> None:
    text = processor.process("Example:\n<code>\n$cart->add($item);\n</code>\nDone.")
    assert text.startswith("<p>Example:</p>")
    assert text.endswith("<p>Done.</p>")
    assert "<pre>" in text
    assert '<span class="nv">$cart</span>' in text


def test_pre_block_escaped(processor: xd.TextProcessor) -> None:
    text = processor.process("<pre>if (a < b) {}</pre>")
    assert text == "<pre>if (a &lt; b) {}</pre>"


def test_fenced_code(processor: xd.TextProcessor) -> None:
    text = processor.process("```\n<b>raw</b>\n```")
    assert text == "<pre><code>&lt;b&gt;raw&lt;/b&gt;\n</code></pre>"


def test_inline_links_untouched(processor: xd.TextProcessor) -> None:
    assert processor.process_line("See {@link Foo::bar()}.") == "See {@link Foo::bar()}."


def test_highlight_source() -> None:
    assert "<span" in xd.markup.highlight_source("echo 1;")
    assert "x = 1" in xd.markup.highlight_source("x = 1", "nolanguage")
