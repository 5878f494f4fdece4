"""Shared fixtures for core unit tests"""

import pytest
from markdown_it import MarkdownIt

from vaultpress.core.models import Collection, Document, RenderContext
from vaultpress.core.pipeline import build_parser, render_markdown


SAMPLE_POSTS = (
    Document(id="hello-world", body="Hi.", frontmatter={"title": "Hello World"}),
    Document(id="deep-dive", body="Long.", frontmatter={"title": "A Deep Dive Into Parsers"}),
)


@pytest.fixture(name="parser")
def parser_fixture():
    return build_parser()


@pytest.fixture(name="bare_parser")
def bare_parser_fixture():
    """Plain gfm-like parser with none of the vault transforms."""
    return MarkdownIt("gfm-like", options_update={"linkify": False})


@pytest.fixture(name="post_context")
def post_context_fixture(tmp_path):
    """Context for rendering a folder-based post against a two-post corpus."""
    return RenderContext(
        source_path="content/posts/my-post/index.md",
        collection=Collection.posts,
        current_slug="my-post",
        posts=SAMPLE_POSTS,
        bases_dir=tmp_path / "bases",
    )


@pytest.fixture(name="render")
def render_fixture(parser, post_context):
    """Render Markdown through the full pipeline with the post context."""
    def _render(text: str, context: RenderContext | None = None) -> str:
        return render_markdown(text, context or post_context, parser)
    return _render
