"""Heading IDs and the final same-page anchor normalization"""

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from mdit_py_plugins.anchors import anchors_plugin

from vaultpress.core.transforms.standard_links import is_heading_link
from vaultpress.core.utils.slug import anchor_slug, slugify
from vaultpress.core.utils.tokens import add_class, iter_inline


def _normalize_anchors_rule(state: StateCore) -> None:
    tokens = state.tokens
    for idx, inline in iter_inline(tokens):
        if idx and tokens[idx - 1].type == 'heading_open':
            continue
        for child in inline.children:
            if child.type != 'link_open' or is_heading_link(child):
                continue
            href = str(child.attrGet('href') or '')
            if href.startswith('#') and len(href) > 1:
                child.attrSet('href', f"#{anchor_slug(href[1:])}")
                add_class(child, 'wikilink')


def heading_anchors_plugin(md: MarkdownIt, max_level: int = 6, permalink: bool = True) -> None:
    """Assign heading IDs with the link slugifier, then normalize '#anchor' hrefs to match."""
    anchors_plugin(
        md,
        min_level=1,
        max_level=max_level,
        slug_func=slugify,
        permalink=permalink,
    )
    md.core.ruler.push("normalize_anchors", _normalize_anchors_rule)
