"""Unit tests for core/transforms/anchors.py"""

from vaultpress.config import Settings
from vaultpress.core.pipeline import build_parser, render_markdown


def test_heading_gets_slug_id_and_permalink(render):
    """Heading IDs use the shared slugifier and carry a permalink."""
    html = render("# Hello World!\n")
    assert '<h1 id="hello-world">' in html
    assert '<a class="header-anchor" href="#hello-world">' in html


def test_duplicate_headings_get_unique_ids(render):
    """Repeated headings are disambiguated."""
    html = render("## Notes\n\n## Notes\n")
    assert 'id="notes"' in html
    assert 'id="notes-1"' in html


def test_anchor_link_matches_heading_id(render):
    """An encoded anchor link targets the same ID its heading receives."""
    html = render("# Getting Started\n\n[jump](#Getting%20Started) and [[#Getting Started]]\n")
    assert 'id="getting-started"' in html
    assert html.count('href="#getting-started"') == 3


def test_max_level_and_permalinks_configurable():
    """Settings control the deepest anchored level and the permalink."""
    parser = build_parser(Settings(anchor_max_level=2, heading_permalinks=False))
    html = render_markdown("## Kept\n\n### Skipped\n", parser=parser)
    assert '<h2 id="kept">' in html
    assert "<h3>Skipped</h3>" in html
    assert "header-anchor" not in html
