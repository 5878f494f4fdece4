"""Shared markdown-it token utilities and the collect-then-commit edit primitive"""

import logging
from dataclasses import dataclass, field
from typing import Iterator

from markdown_it.token import Token


log = logging.getLogger(__name__)


@dataclass
class TokenEdits:
    """Planned replacements over a token list, applied in one reverse-order splice.

    Passes record edits while walking a list read-only, then call commit().
    Overlapping edits are dropped (first recorded wins) so a region is never
    rewritten twice in the same pass.
    """
    _edits: list[tuple[int, int, list[Token]]] = field(default_factory=list)

    def replace(self, start: int, end: int, tokens: list[Token]) -> None:
        """Replace tokens[start:end] with the given tokens."""
        self._edits.append((start, end, list(tokens)))

    def remove(self, start: int, end: int) -> None:
        self.replace(start, end, [])

    def __len__(self) -> int:
        return len(self._edits)

    def commit(self, tokens: list[Token]) -> list[Token]:
        """Apply all edits to tokens in place and return it."""
        accepted: list[tuple[int, int, list[Token]]] = []
        taken: list[tuple[int, int]] = []
        for start, end, new in self._edits:
            if any(start < e and s < end or start == s == end for s, e in taken):
                log.debug("Dropping overlapping token edit at %d:%d", start, end)
                continue
            taken.append((start, end))
            accepted.append((start, end, new))
        for start, end, new in sorted(accepted, key=lambda x: (x[0], x[1]), reverse=True):
            tokens[start:end] = new
        self._edits.clear()
        return tokens


def iter_inline(tokens: list[Token]) -> Iterator[tuple[int, Token]]:
    """Yield (index, token) for every inline token that has children."""
    for idx, token in enumerate(tokens):
        if token.type == 'inline' and token.children is not None:
            yield idx, token


def closing_index(tokens: list[Token], open_idx: int) -> int:
    """Index of the token closing the block opened at open_idx."""
    depth = 0
    for idx in range(open_idx, len(tokens)):
        depth += tokens[idx].nesting
        if depth == 0:
            return idx
    raise ValueError(f"Unbalanced token stream at {open_idx}")


def child_blocks(tokens: list[Token], open_idx: int, close_idx: int) -> list[tuple[int, int]]:
    """Return (start, end) ranges (end exclusive) of direct child blocks."""
    blocks = []
    idx = open_idx + 1
    while idx < close_idx:
        end = closing_index(tokens, idx) if tokens[idx].nesting == 1 else idx
        blocks.append((idx, end + 1))
        idx = end + 1
    return blocks


def text_token(content: str, level: int = 0) -> Token:
    token = Token('text', '', 0, content=content)
    token.level = level
    return token


def html_inline(content: str) -> Token:
    return Token('html_inline', '', 0, content=content)


def html_block(content: str, level: int = 0) -> Token:
    token = Token('html_block', '', 0, content=content if content.endswith('\n') else content + '\n')
    token.block = True
    token.level = level
    return token


def add_class(token: Token, name: str) -> None:
    """Append a CSS class to token's class attribute unless already present."""
    current = str(token.attrGet('class') or '')
    if name not in current.split():
        token.attrJoin('class', name)


def has_class(token: Token, name: str) -> bool:
    return name in str(token.attrGet('class') or '').split()


def is_blank(token: Token) -> bool:
    """True for whitespace-only text and line breaks."""
    if token.type in ('softbreak', 'hardbreak'):
        return True
    return token.type == 'text' and not token.content.strip()
