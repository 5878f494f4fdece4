"""Obsidian comment stripping (%%...%%)"""

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore

from vaultpress.core.scan import find_comments
from vaultpress.core.utils.tokens import TokenEdits


def strip_comments(text: str) -> str:
    """Remove %%comments%% from text, leaving inline code untouched."""
    for span in reversed(find_comments(text)):
        text = text[:span.start] + text[span.end:]
    return text


def _comments_rule(state: StateCore) -> None:
    edits = TokenEdits()
    tokens = state.tokens
    for idx, token in enumerate(tokens):
        if token.type != 'inline' or '%%' not in token.content:
            continue
        token.content = strip_comments(token.content)
        if token.content.strip():
            continue
        # drop the paragraph the comment emptied (headings etc. keep their shell)
        if 0 < idx < len(tokens) - 1 and tokens[idx - 1].type == 'paragraph_open':
            edits.remove(idx - 1, idx + 2)
    edits.commit(tokens)


def comments_plugin(md: MarkdownIt) -> None:
    """Strip comments from inline source before inline parsing runs."""
    md.core.ruler.after("block", "obsidian_comments", _comments_rule)
