"""Unit tests for core/transforms/tags.py"""

import pytest

from vaultpress.core.models import RenderContext
from vaultpress.themes import get_theme


def test_tag_becomes_pill_link(render):
    """An inline tag links to its archive page with the theme's pill classes."""
    html = render("Tagged #intro here\n")
    assert f'<a href="/posts/tag/intro" class="{get_theme().tag_class}">#intro</a>' in html


def test_tag_before_punctuation(render):
    """Trailing punctuation is not part of the tag."""
    html = render("see #intro-guide.\n")
    assert 'href="/posts/tag/intro-guide"' in html
    assert "#intro-guide</a>." in html


@pytest.mark.parametrize("text", ["foo#bar\n", "`#code`\n", "[#linked](https://example.com)\n"])
def test_non_tags_untouched(render, text):
    """Mid-word hashes, code and link text are not tags."""
    assert "/posts/tag/" not in render(text)


def test_tag_base_url_and_theme_from_context(render):
    """Tag URLs and classes follow the render context."""
    ctx = RenderContext(tag_base_url="/tags/", theme=get_theme("minimal"))
    assert '<a href="/tags/draft" class="tag-pill">#draft</a>' in render("#draft\n", ctx)


def test_heading_is_not_tag(render):
    """ATX headings are headings, not tags."""
    html = render("# Title\n")
    assert "<h1" in html
    assert "/posts/tag/" not in html
