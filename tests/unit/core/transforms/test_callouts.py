"""Unit tests for core/transforms/callouts.py"""

import pytest

from vaultpress.core.transforms.callouts import CalloutState, callout_style, parse_callout


@pytest.mark.parametrize("text,blocks,state,title,remaining", [
    ("[!note] Title\nBody", 2, CalloutState.multi_para, "Note", None),
    ("[!note]\nBody text", 1, CalloutState.header_own_line, "Note", "Body text"),
    ("[!tip]", 1, CalloutState.header_only, "Tip", None),
    ("[!tip]+", 1, CalloutState.header_only, "Tip", None),
    ("[!tip] Custom", 1, CalloutState.inline_title, "Custom", None),
    ("[!warning]- Custom Title\nBody", 1, CalloutState.inline_title, "Custom Title", "Body"),
])
def test_parse_callout_states(text, blocks, state, title, remaining):
    """The title state is chosen in precedence order."""
    callout, rest = parse_callout(text, blocks)
    assert callout.state == state
    assert callout.title == title
    assert rest == remaining


def test_parse_callout_fold_markers():
    """'+' is collapsible and open, '-' is collapsible and collapsed."""
    opened, _ = parse_callout("[!note]+ A", 1)
    closed, _ = parse_callout("[!note]- A", 1)
    plain, _ = parse_callout("[!note] A", 1)
    assert (opened.collapsible, opened.collapsed) == (True, False)
    assert (closed.collapsible, closed.collapsed) == (True, True)
    assert (plain.collapsible, plain.collapsed) == (False, False)


def test_parse_callout_not_a_callout():
    """Ordinary quote text is not a callout."""
    assert parse_callout("Just words", 1) is None


@pytest.mark.parametrize("keyword,style_type,title", [
    ("warning", "warning", "Warning"),
    ("DANGER", "caution", "Danger"),
    ("tldr", "important", "TL;DR"),
    ("custom", "note", "Custom"),
])
def test_callout_style(keyword, style_type, title):
    """Known keywords map to their style; unknown ones render as notes."""
    style = callout_style(keyword)
    assert (style.type, style.title) == (style_type, title)


def test_collapsed_callout_markup(render):
    """A collapsed callout carries the toggle, hidden content and its custom title."""
    html = render("> [!warning]- Custom Title\n> Body\n")
    assert 'class="callout callout-warning callout-collapsible callout-collapsed"' in html
    assert "<span>Custom Title</span>" in html
    assert 'aria-expanded="false"' in html
    assert '<div class="callout-content" style="display: none;">' in html
    assert "<p>Body</p>" in html
    assert "<blockquote>" not in html
    assert "[!warning]" not in html


def test_header_own_line_callout(render):
    """The header line is stripped and the mapped title used."""
    html = render("> [!note]\n> Body text\n")
    assert "<span>Note</span>" in html
    assert "<p>Body text</p>" in html


def test_multi_paragraph_callout_drops_first_block(render):
    """With several blocks the header paragraph is removed."""
    html = render("> [!info] Ignored\n>\n> Second paragraph\n")
    assert "<span>Info</span>" in html
    assert "Ignored" not in html
    assert "<p>Second paragraph</p>" in html


def test_header_only_callout_has_empty_content(render):
    """A bare header leaves no paragraph behind."""
    html = render("> [!tip]\n")
    assert "<span>Tip</span>" in html
    assert "<p>" not in html


def test_callout_title_escaped(render):
    """Custom titles are HTML-escaped."""
    assert "<span>A &lt;b&gt; title</span>" in render("> [!note] A <b> title\n")


def test_plain_blockquote_untouched(render):
    """Blockquotes without a header stay blockquotes."""
    assert "<blockquote>" in render("> just a quote\n")
