"""Unit tests for core/scan.py"""

import pytest

from vaultpress.core.scan import (
    code_spans,
    find_comments,
    find_marks,
    find_tags,
    find_wikilinks,
    is_in_code,
    match_callout_header,
    scan,
)


def test_code_spans_cover_fences_and_inline_code():
    """Fenced blocks and inline code are both reported."""
    text = "a `b` c\n```\nd\n```\n"
    spans = code_spans(text)
    assert (2, 5) in spans
    assert any(text[s:e].startswith("```") for s, e in spans)


def test_is_in_code():
    """Offsets inside code are detected; offsets outside are not."""
    text = "before `[[x]]` after"
    assert is_in_code(text, text.index("[[x]]"))
    assert not is_in_code(text, text.index("after"))


def test_find_wikilinks_groups():
    """Target and display are split at the pipe and stripped."""
    spans = find_wikilinks("See [[ Target Note | shown ]] and ![[img.png]].")
    assert [(s.kind, s.groups) for s in spans] == [
        ("wikilink", ("Target Note", "shown")),
        ("image_wikilink", ("img.png", "")),
    ]


def test_find_wikilinks_skips_code():
    """Wikilinks inside inline code or fences are ignored."""
    text = "`[[a]]`\n```\n[[b]]\n```\n[[c]]"
    assert [s.groups[0] for s in find_wikilinks(text)] == ["c"]


@pytest.mark.parametrize("text,expected", [
    ("see #intro-guide.", ["intro-guide"]),
    ("#start of line", ["start"]),
    ("(#paren)", ["paren"]),
    ("foo#bar", []),
    ("`#code`", []),
    ("#one #two", ["one", "two"]),
    ("#über", []),
])
def test_find_tags(text, expected):
    """Tags need a boundary before '#' and use ASCII word characters."""
    assert [s.groups[0] for s in find_tags(text)] == expected


def test_find_marks():
    """==text== spans are found outside code."""
    spans = find_marks("a ==hot== b `==cold==`")
    assert [s.groups[0] for s in spans] == ["hot"]


def test_find_comments_multiline():
    """Comments may span lines; an opener inside code is not a comment."""
    text = "keep %%gone\nstill gone%% keep `%%code%%`"
    spans = find_comments(text)
    assert len(spans) == 1
    assert text[spans[0].start:spans[0].end] == "%%gone\nstill gone%%"


@pytest.mark.parametrize("text,keyword,collapse,title,own_line", [
    ("[!note]", "note", "", None, False),
    ("[!tip]+ Custom", "tip", "+", "Custom", False),
    ("[!warning]-\nBody", "warning", "-", None, True),
    ("[!my-type] Title here", "my-type", "", "Title here", False),
])
def test_match_callout_header(text, keyword, collapse, title, own_line):
    """Keyword, fold marker, title and own-line flag are parsed."""
    header = match_callout_header(text)
    assert (header.keyword, header.collapse, header.title, header.own_line) == (keyword, collapse, title, own_line)


def test_match_callout_header_rejects_plain_text():
    """Text without a leading [!type] is not a callout."""
    assert match_callout_header("Just a quote") is None


def test_scan_orders_spans_by_position():
    """scan reports every recognized span in document order."""
    text = "> [!note] Hi\n\nA [[link]] with #tag and ==mark== and `code`."
    kinds = [s.kind for s in scan(text)]
    assert kinds == ["callout", "wikilink", "tag", "mark", "inline_code"]


def test_scan_ignores_tags_inside_wikilinks():
    """A #word inside wikilink display text is not a tag."""
    kinds = [s.kind for s in scan("[[Note|see #Section]] text")]
    assert kinds == ["wikilink"]
