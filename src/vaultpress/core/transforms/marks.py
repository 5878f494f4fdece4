"""==highlight== -> <mark>"""

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from vaultpress.core.scan import MARK_RE
from vaultpress.core.utils.tokens import iter_inline, text_token


def split_marks(token: Token) -> list[Token]:
    text = token.content
    out, last = [], 0
    for m in MARK_RE.finditer(text):
        if m.start() > last:
            out.append(text_token(text[last:m.start()], token.level))
        out.append(Token('mark_open', 'mark', 1, markup='=='))
        out.append(text_token(m.group(1), token.level + 1))
        out.append(Token('mark_close', 'mark', -1, markup='=='))
        last = m.end()
    if not out:
        return [token]
    if last < len(text):
        out.append(text_token(text[last:], token.level))
    return out


def _mark_rule(state: StateCore) -> None:
    for _, inline in iter_inline(state.tokens):
        if '==' not in inline.content:
            continue
        children, in_mark = [], 0
        for child in inline.children:
            if child.type == 'mark_open':
                in_mark += 1
            elif child.type == 'mark_close':
                in_mark -= 1
            if child.type == 'text' and not in_mark and '==' in child.content:
                children.extend(split_marks(child))
            else:
                children.append(child)
        inline.children = children


def mark_plugin(md: MarkdownIt) -> None:
    """Highlight marks in text; code spans and raw HTML are separate tokens and stay untouched."""
    md.core.ruler.push("mark", _mark_rule)
