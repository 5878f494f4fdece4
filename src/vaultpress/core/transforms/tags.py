"""Inline #tag spans -> tag archive pill links"""

from urllib.parse import quote

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from vaultpress.core.models import RenderContext, context_from_env
from vaultpress.core.scan import find_tags
from vaultpress.core.utils.tokens import html_inline, iter_inline, text_token


def tag_html(tag: str, ctx: RenderContext) -> str:
    href = f"{ctx.tag_base_url.rstrip('/')}/{quote(tag, safe='')}"
    return f'<a href="{href}" class="{ctx.theme.tag_class}">#{tag}</a>'


def split_tags(token: Token, ctx: RenderContext) -> list[Token]:
    """Split a text token around its tags; returns [token] when there are none."""
    text = token.content
    spans = find_tags(text)
    if not spans:
        return [token]
    out, last = [], 0
    for span in spans:
        if span.start > last:
            out.append(text_token(text[last:span.start], token.level))
        out.append(html_inline(tag_html(span.groups[0], ctx)))
        last = span.end
    if last < len(text):
        out.append(text_token(text[last:], token.level))
    return out


def _inline_tags_rule(state: StateCore) -> None:
    ctx = context_from_env(state.env)
    for _, inline in iter_inline(state.tokens):
        if '#' not in inline.content:
            continue
        children, link_depth = [], 0
        for child in inline.children:
            if child.type == 'link_open':
                link_depth += 1
            elif child.type == 'link_close':
                link_depth -= 1
            if child.type == 'text' and not link_depth and '#' in child.content:
                children.extend(split_tags(child, ctx))
            else:
                children.append(child)
        inline.children = children


def inline_tags_plugin(md: MarkdownIt) -> None:
    md.core.ruler.push("inline_tags", _inline_tags_rule)
