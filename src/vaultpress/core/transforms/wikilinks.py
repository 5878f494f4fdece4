"""Wikilink inline syntax: [[target|display]] links and ![[file|alt]] embeds"""

import logging

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

from vaultpress.core.links.extract import resolve_wikilink
from vaultpress.core.links.resolve import resolve_wikilink_target
from vaultpress.core.models import RenderContext, context_from_env
from vaultpress.core.scan import WIKILINK_RE
from vaultpress.core.utils.slug import slugify, split_anchor


log = logging.getLogger(__name__)


def _corpus_url(ctx: RenderContext, url: str, data: str) -> str:
    """Prefer the id of a corpus post matched by title over the slugified text."""
    if not ctx.posts or '/' in data:
        return url
    post = resolve_wikilink(ctx.posts, data)
    if post is None:
        log.debug("Unresolved wikilink [[%s]] in %s", data, ctx.source_path or ctx.current_slug)
        return url
    if post.id == slugify(data):
        return url
    _, sep, fragment = url.partition('#')
    return f"/posts/{post.id}{sep}{fragment}"


def _push_image(state: StateInline, target: str, alt: str) -> None:
    token = state.push('image', 'img', 0)
    token.attrs = {'src': target, 'alt': ''}
    token.content = alt
    token.meta = {'wikilink': True}
    child = Token('text', '', 0, content=alt)
    token.children = [child] if alt else []


def _push_link(state: StateInline, url: str, data: str, label: str, display: str | None) -> None:
    token = state.push('link_open', 'a', 1)
    token.attrs = {'href': url, 'class': 'wikilink', 'data-wikilink': data}
    if display:
        token.attrs['data-display-override'] = display
    token.meta = {'wikilink': True}
    text = state.push('text', '', 0)
    text.content = label
    state.push('link_close', 'a', -1)


def wikilink_rule(state: StateInline, silent: bool) -> bool:
    """Parse a wikilink at state.pos; paths that wikilinks cannot address stay text."""
    if state.src[state.pos] not in '![':
        return False
    m = WIKILINK_RE.match(state.src, state.pos, state.posMax)
    if m is None:
        return False

    target, sep, display = m.group(2).partition('|')
    target = target.strip()
    display = display.strip() if sep else None
    if not target.lstrip('#').strip():
        return False

    if m.group(1):
        if not silent:
            _push_image(state, target, display or '')
        state.pos = m.end()
        return True

    resolved = resolve_wikilink_target(target)
    if resolved is None:
        return False
    if not silent:
        url, data = resolved
        ctx = context_from_env(state.env)
        if data:
            url = _corpus_url(ctx, url, data)
            label = split_anchor(target)[0].strip()
        else:
            label = target.lstrip('#')
        _push_link(state, url, data, display or label, display)
    state.pos = m.end()
    return True


def wikilinks_plugin(md: MarkdownIt) -> None:
    """Register the wikilink inline rule ahead of standard link parsing."""
    md.inline.ruler.before("link", "wikilink", wikilink_rule)
