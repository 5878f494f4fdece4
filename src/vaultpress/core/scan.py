"""Pattern matchers for Obsidian syntax over raw Markdown text

Every matcher skips spans that fall inside fenced or inline code.
"""

import re
import unicodedata
from dataclasses import dataclass, field


CODE_BLOCK_RE = re.compile(r'```[\s\S]*?```')
INLINE_CODE_RE = re.compile(r'`[^`]*`')
WIKILINK_RE = re.compile(r'(!?)\[\[([^\]]+)\]\]')
TAG_RE = re.compile(r'#([\w-]+)', re.ASCII)
MARK_RE = re.compile(r'==(.+?)==')
COMMENT_RE = re.compile(r'%%[\s\S]*?%%')
MARKDOWN_LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)]+)\)')
CALLOUT_RE = re.compile(r'^\[!([\w-]+)\]([+-]?)(?:[ \t]+([^\n]+))?')
CALLOUT_OWN_LINE_RE = re.compile(r'^\[![\w-]+\][+-]?[ \t]*\n[ \t]*')


@dataclass(frozen=True)
class MatchSpan:
    """A recognized syntax span: content[start:end] with its captured groups."""
    start: int
    end: int
    kind: str
    groups: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CalloutHeader:
    keyword: str
    collapse: str               # '', '+' or '-'
    title: str | None
    end: int                    # offset just past the header match
    own_line: bool              # header is immediately followed by a newline


def code_spans(content: str) -> list[tuple[int, int]]:
    """Return (start, end) ranges of fenced code blocks and inline code."""
    spans = [m.span() for m in CODE_BLOCK_RE.finditer(content)]
    spans += [m.span() for m in INLINE_CODE_RE.finditer(content)
              if not _inside(m.start(), spans)]
    return spans


def _inside(index: int, spans: list[tuple[int, int]]) -> bool:
    return any(start <= index < end for start, end in spans)


def is_in_code(content: str, index: int) -> bool:
    """True if index falls inside a fenced code block or an inline code span."""
    return _inside(index, code_spans(content))


def _overlaps(start: int, end: int, spans: list[tuple[int, int]]) -> bool:
    return any(start < e and s < end for s, e in spans)


def find_wikilinks(content: str) -> list[MatchSpan]:
    """Find [[link]] and ![[embed]] spans; groups are (target, display or '')."""
    code = code_spans(content)
    spans = []
    for m in WIKILINK_RE.finditer(content):
        if _overlaps(m.start(), m.end(), code):
            continue
        target, _, display = m.group(2).partition('|')
        kind = 'image_wikilink' if m.group(1) else 'wikilink'
        spans.append(MatchSpan(m.start(), m.end(), kind, (target.strip(), display.strip())))
    return spans


def is_tag_boundary(prev: str | None) -> bool:
    """Tags may follow start-of-text, whitespace or punctuation only."""
    if prev is None or prev.isspace():
        return True
    return unicodedata.category(prev).startswith('P')


def find_tags(text: str) -> list[MatchSpan]:
    """Find inline #tag spans; groups are (tag,)."""
    code = code_spans(text)
    spans = []
    for m in TAG_RE.finditer(text):
        prev = text[m.start() - 1] if m.start() else None
        if not is_tag_boundary(prev) or _overlaps(m.start(), m.end(), code):
            continue
        spans.append(MatchSpan(m.start(), m.end(), 'tag', (m.group(1),)))
    return spans


def find_marks(text: str) -> list[MatchSpan]:
    """Find ==highlight== spans; groups are (inner text,)."""
    code = code_spans(text)
    return [MatchSpan(m.start(), m.end(), 'mark', (m.group(1),))
            for m in MARK_RE.finditer(text)
            if not _overlaps(m.start(), m.end(), code)]


def find_comments(text: str) -> list[MatchSpan]:
    """Find %%comment%% spans (possibly multi-line) whose opener is not in code."""
    code = code_spans(text)
    spans = []
    pos = 0
    while (m := COMMENT_RE.search(text, pos)) is not None:
        if _inside(m.start(), code):
            pos = m.start() + 2
            continue
        spans.append(MatchSpan(m.start(), m.end(), 'comment'))
        pos = m.end()
    return spans


def match_callout_header(text: str) -> CalloutHeader | None:
    """Parse a leading '[!type][+-] optional title' callout header."""
    m = CALLOUT_RE.match(text)
    if not m:
        return None
    own = CALLOUT_OWN_LINE_RE.match(text)
    return CalloutHeader(
        keyword=m.group(1),
        collapse=m.group(2),
        title=None if own or not m.group(3) else m.group(3).strip(),
        end=own.end() if own else m.end(),
        own_line=own is not None,
    )


def scan(content: str) -> list[MatchSpan]:
    """All recognized spans in content, ordered by position."""
    code = code_spans(content)
    spans = [MatchSpan(s, e, 'code_block' if content.startswith('```', s) else 'inline_code')
             for s, e in code]
    spans += find_wikilinks(content)
    for span in find_tags(content) + find_marks(content):
        if not any(w.start <= span.start < w.end for w in spans if w.kind.endswith('wikilink')):
            spans.append(span)
    for m in re.finditer(r'(?m)^(?:>[ \t]*)+(\[![\w-]+\][+-]?[^\n]*)', content):
        if not _inside(m.start(), code):
            spans.append(MatchSpan(m.start(1), m.end(1), 'callout', (m.group(1),)))
    return sorted(spans, key=lambda s: (s.start, s.end))
