"""Standard [text](target) links: same-page anchors and internal targets to site URLs"""

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from vaultpress.core.links.resolve import is_internal_link, resolve_link
from vaultpress.core.models import RenderContext, context_from_env
from vaultpress.core.utils.slug import anchor_slug, decode_anchor
from vaultpress.core.utils.tokens import add_class, has_class, iter_inline


HEADING_LINK_CLASSES = ('header-anchor', 'anchor-link')


def is_heading_link(token: Token) -> bool:
    return any(has_class(token, name) for name in HEADING_LINK_CLASSES)


def rewrite_link(token: Token, ctx: RenderContext) -> None:
    href = str(token.attrGet('href') or '')
    if href.startswith('#'):
        if len(href) > 1:
            token.attrSet('href', f"#{anchor_slug(href[1:])}")
            add_class(token, 'wikilink')
        return
    target = decode_anchor(href)
    if not is_internal_link(target):
        return
    resolved = resolve_link(target, ctx.collection, ctx.current_slug)
    if not resolved.is_internal:
        return
    token.attrSet('href', resolved.url)
    if resolved.url.startswith('/posts/'):
        add_class(token, 'wikilink')


def _standard_links_rule(state: StateCore) -> None:
    ctx = context_from_env(state.env)
    for _, inline in iter_inline(state.tokens):
        for child in inline.children:
            if child.type != 'link_open' or child.meta.get('wikilink') or is_heading_link(child):
                continue
            rewrite_link(child, ctx)


def standard_links_plugin(md: MarkdownIt) -> None:
    md.core.ruler.push("standard_links", _standard_links_rule)
