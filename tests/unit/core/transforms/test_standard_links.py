"""Unit tests for core/transforms/standard_links.py"""

import pytest
from markdown_it.token import Token

from vaultpress.core.transforms.standard_links import is_heading_link


@pytest.mark.parametrize("text,anchor", [
    ("[Post](posts/my-post.md)", '<a href="/posts/my-post" class="wikilink">'),
    ("[Post](other-note.md#Part%20Two)", '<a href="/posts/other-note#part-two" class="wikilink">'),
    ("[Folder](posts/my-post/index.md)", '<a href="/posts/my-post" class="wikilink">'),
    ("[Spaces](<Some Note.md>)", '<a href="/posts/some-note" class="wikilink">'),
    ("[About](pages/about.md)", '<a href="/about">'),
    ("[Tool](projects/tool/index.md)", '<a href="/projects/tool">'),
    ("[Jump](#Getting%20Started)", '<a href="#getting-started" class="wikilink">'),
])
def test_internal_links_rewritten(render, text, anchor):
    """Internal targets resolve to canonical URLs; post links get the wikilink class."""
    assert anchor in render(text + "\n")


@pytest.mark.parametrize("text,anchor", [
    ("[Ext](https://example.com/a.md)", '<a href="https://example.com/a.md">'),
    ("[Mail](mailto:me@example.com)", '<a href="mailto:me@example.com">'),
    ("[File](files/report.txt)", '<a href="files/report.txt">'),
])
def test_other_links_untouched(render, text, anchor):
    """External and non-content links keep their href."""
    assert anchor in render(text + "\n")


@pytest.mark.parametrize("classes,expected", [
    ("header-anchor", True),
    ("anchor-link other", True),
    ("my-header-anchor-x", False),
    ("", False),
])
def test_is_heading_link(classes, expected):
    """Heading self-links are recognized by whole class names."""
    token = Token("link_open", "a", 1)
    if classes:
        token.attrSet("class", classes)
    assert is_heading_link(token) is expected
