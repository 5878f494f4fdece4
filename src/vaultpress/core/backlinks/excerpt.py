"""Backlink excerpts: a cleaned, bounded context window around a link occurrence"""

import html
import math
import re

from vaultpress.core.links.resolve import is_internal_link, post_link_text, resolve_link, resolve_wikilink_target
from vaultpress.core.models import Excerpt
from vaultpress.core.scan import CODE_BLOCK_RE, MARKDOWN_LINK_RE, is_in_code
from vaultpress.core.utils.slug import split_anchor


CONTEXT_LENGTH = 100
MIN_CONTEXT_LENGTH = 60
MAX_EXCERPT_LENGTH = 200
NEAR_END_CONTEXT = 250
MIN_CLEANED_WORDS = 10
MIN_CLEANED_LENGTH = 60
CLEANUP_PASSES = 5

FRONTMATTER_RE = re.compile(r'^---\n[\s\S]*?\n---\n')
FULL_WIKILINK_RE = re.compile(r'\[\[([^\]]+)(?:\|([^\]]+))?\]\]')
TRAILING_MD_LINK_RE = re.compile(r'[^\]]*\][^)]*\)')
LINK_TOKEN_RE = re.compile(r'\[\[[^\]]+\]\]|\[[^\]]+\]\([^)]+\)')
EXCERPT_LINK_RE = re.compile(r'\[\[([^\]|]+)(?:\|([^\]]+))?\]\]|\[([^\]]+)\]\(([^)]+)\)')
# pieces of a link left at the edges of a raw window
LEADING_LINK_TAIL_RE = re.compile(r'^[^\[\]]*(?:\]\]|\]\([^)]*\))\s*')
TRAILING_LINK_HEAD_RE = re.compile(r'\s*(?:\[\[[^\]]*\]?|\[[^\]]*\]\([^)]*)$')

# (pattern, replacement) applied in order
MARKDOWN_STRIP = [
    (re.compile(r'```[\s\S]*?```'), ' '),
    (re.compile(r'```[\s\S]*$'), ' '),
    (re.compile(r'^[\s\S]*?```'), ' '),
    (re.compile(r'```+'), ' '),
    (re.compile(r'`([^`\n]+)`'), ' '),
    (re.compile(r'\*\*([^*]+?)\*\*'), r'\1'),
    (re.compile(r'\*([^*\s][^*]*?[^*\s])\*'), r'\1'),
    (re.compile(r'\*([^*\s]+)\*'), r'\1'),
    (re.compile(r'_{1,2}([^_]+)_{1,2}'), r'\1'),
    (re.compile(r'~~([^~]+)~~'), r'\1'),
    (re.compile(r'#{1,6}\s+'), ''),
    (re.compile(r'\s*>\s*\[![\w-]+\]\s*'), ' '),
    (re.compile(r'\s*>\s*'), ' '),
    (re.compile(r'\s*---+\s*'), ' '),
    (re.compile(r'\s*\[![\w-]+\]\s*'), ' '),
    (re.compile(r'^-\s+', re.MULTILINE), ''),
    (re.compile(r'^\d+\.\s+', re.MULTILINE), ''),
    (re.compile(r'\*\*+'), ''),
]

_LABEL = r'[A-Z][a-z]+(?:\s+[a-z]+)?'

FRAGMENT_CLEANUP = [
    (re.compile(r'([A-Z][a-z]+):\s*-\s*([A-Z][a-z]+):'), ''),
    (re.compile(r'\b([A-Z][a-z]+):\s*-\s*(?=[A-Z][a-z]+:|$)'), ''),
    (re.compile(rf'\b({_LABEL}):\s*$'), ''),
    (re.compile(rf'([a-z\s]+)\s+-\s+({_LABEL}):\s*(?=[A-Z]|\[|$)'), r'\1 '),
    (re.compile(rf'\s*-\s*(?=({_LABEL}):)'), ' '),
    (re.compile(r':\s*$'), ''),
    (re.compile(r'\s*-\s*$'), ''),
]

FINAL_CLEANUP = [
    (re.compile(r'\s*```+\s*'), ' '),
    (re.compile(rf'\b({_LABEL}):\s+(?=({_LABEL}):|$)'), ' '),
    (re.compile(rf'\b({_LABEL}):\s*$'), ''),
]

DUPLICATE_LINKS = [
    (re.compile(r'(\[\[[^\]]+\]\])\s+\1(?=\s|$)'), r'\1'),
    (re.compile(r'(\[[^\]]+\]\([^)]+\))\s+\1(?=\s|$)'), r'\1'),
]


def _squash(text: str) -> str:
    return re.sub(r'\s+', ' ', text).strip()


def _apply(rules, text: str) -> str:
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


def strip_markdown(text: str) -> str:
    """Flatten text to one line and drop formatting syntax, keeping link syntax."""
    return _squash(_apply(MARKDOWN_STRIP, _squash(text)))


def clean_fragments(text: str) -> str:
    """Drop orphaned 'Label:' fragments and dangling dashes until stable."""
    for _ in range(CLEANUP_PASSES):
        cleaned = _squash(_apply(FRAGMENT_CLEANUP, text))
        if cleaned == text:
            break
        text = cleaned
    return text


def dedupe_links(text: str) -> str:
    """Collapse a link repeated back to back (a leftover of code stripping)."""
    for _ in range(2):
        text = _squash(_apply(DUPLICATE_LINKS, text))
    return text


def clean_excerpt(raw: str) -> str:
    text = clean_fragments(strip_markdown(raw))
    text = _squash(_apply(FINAL_CLEANUP, text))
    return dedupe_links(text)


def truncate_excerpt(text: str, max_length: int = MAX_EXCERPT_LENGTH) -> str:
    """Cut text to at most max_length at a word boundary, never inside a link."""
    if len(text) <= max_length:
        return text
    pos = max_length
    while pos > 0:
        link = next((m for m in LINK_TOKEN_RE.finditer(text) if m.start() < pos < m.end()), None)
        if link is not None:
            pos = link.start()
            continue
        if text[pos].isspace() or text[pos - 1].isspace():
            break
        pos = max(text.rfind(' ', 0, pos), 0)
    return text[:pos].rstrip()


def _trim_front(text: str, link: str, max_length: int) -> str:
    """Drop leading words so that link still ends within max_length."""
    idx = text.find(link)
    if idx <= 0 or idx + len(link) <= max_length:
        return text
    cut = min(idx + len(link) - max_length, idx)
    for m in LINK_TOKEN_RE.finditer(text, 0, idx):
        if m.start() < cut < m.end():
            cut = m.end()
    if not text[cut - 1].isspace():
        space = text.find(" ", cut, idx)
        cut = space + 1 if space != -1 else idx
    return text[cut:].lstrip()


def _code_blocks(content: str) -> list[tuple[int, int]]:
    return [m.span() for m in CODE_BLOCK_RE.finditer(content)]


def _window_text(content: str, start: int, end: int, link_start: int, link_end: int) -> str:
    """Cleaned content[start:end] with partial words and link pieces removed from both edges."""
    if 0 < start < link_start and not content[start - 1].isspace():
        space = re.search(r'\s', content[start:link_start])
        start = start + space.end() if space else link_start
    if link_end < end < len(content) and not content[end].isspace():
        space = content.rfind(' ', link_end, end)
        end = space if space != -1 else link_end
    text = clean_excerpt(content[start:end])
    if start > 0:
        text = LEADING_LINK_TAIL_RE.sub('', text, count=1)
    if end < len(content):
        text = TRAILING_LINK_HEAD_RE.sub('', text, count=1)
    return text


def extract_excerpt_at_position(content: str, position: int, link_length: int, *,
                                context: int = CONTEXT_LENGTH,
                                min_context: int = MIN_CONTEXT_LENGTH,
                                max_length: int = MAX_EXCERPT_LENGTH) -> Excerpt:
    """Excerpt around content[position:position + link_length].

    The raw window never crosses into a code block that does not hold the link;
    a link inside a code block yields an empty excerpt.
    """
    length = len(content)
    blocks = _code_blocks(content)
    if any(s <= position < e for s, e in blocks):
        return Excerpt("", False, False)

    near_end = length - (position + link_length) < min_context
    before = max(context * 2, NEAR_END_CONTEXT) if near_end else context
    start = max(0, position - before)
    end = min(length, position + link_length + (0 if near_end else context))

    for block_start, block_end in blocks:
        if start < block_start < end and block_start > position:
            end = block_start
        if start < block_end < position and block_start < start:
            start = block_end

    context_before = position - start
    context_after = end - (position + link_length)
    if context_before < min_context and start > 0:
        desired = max(0, start - (min_context - context_before))
        if not any(desired < e <= start for _, e in blocks):
            start = desired
    if context_after < min_context and end < length:
        desired = min(length, end + (min_context - context_after))
        if not any(end <= s < desired for s, _ in blocks):
            end = desired

    if m := FULL_WIKILINK_RE.match(content, position):
        if len(m.group(0)) > link_length:
            link_length = len(m.group(0))
            end = min(length, position + link_length + context)

    after = content[position + link_length:]
    for pattern in (TRAILING_MD_LINK_RE, FULL_WIKILINK_RE):
        m = pattern.match(after)
        if m and end < position + link_length + len(m.group(0)):
            end = min(length, position + link_length + len(m.group(0)) + 50)

    excerpt = _window_text(content, start, end, position, position + link_length)

    words = [w for w in excerpt.split() if re.search(r'[a-zA-Z0-9]', w)]
    if (len(words) < MIN_CLEANED_WORDS or len(excerpt) < MIN_CLEANED_LENGTH) and start > 0:
        ratio = (end - start) / len(excerpt) if excerpt else 3
        needed = max(MIN_CLEANED_LENGTH - len(excerpt), (MIN_CLEANED_WORDS - len(words)) * 8)
        new_start = max(0, start - math.ceil(needed * max(ratio, 2) * 1.5))
        if new_start < start and not any(new_start < e <= start for _, e in blocks):
            start = new_start
            excerpt = _window_text(content, start, end, position, position + link_length)

    fitted = _trim_front(excerpt, content[position:position + link_length], max_length)
    return Excerpt(truncate_excerpt(fitted, max_length), start == 0 and fitted == excerpt, end >= length)


def create_excerpt_around_link(content: str, link_text: str, **options) -> str:
    """Excerpt around the first occurrence of a link to link_text outside code.

    Wikilinks are tried first, then standard Markdown links addressing the same post.
    """
    body = FRONTMATTER_RE.sub('', content, count=1)
    wikilink = re.compile(rf'\[\[{re.escape(link_text)}(?:[#|][^\]]*)?\]\]', re.IGNORECASE)
    for m in wikilink.finditer(body):
        if not is_in_code(body, m.start()):
            return extract_excerpt_at_position(body, m.start(), len(m.group(0)), **options).excerpt

    wanted = re.sub(r'/index$', '', link_text)
    for m in MARKDOWN_LINK_RE.finditer(body):
        if is_in_code(body, m.start()):
            continue
        found = post_link_text(m.group(2))
        if found and re.sub(r'/index$', '', found) == wanted:
            return extract_excerpt_at_position(body, m.start(), len(m.group(0)), **options).excerpt
    return ""


def _excerpt_link(m: re.Match) -> str:
    if m.group(1) is not None:
        target = m.group(1).strip()
        display = (m.group(2) or split_anchor(target)[0] or target.lstrip('#')).strip()
        resolved = resolve_wikilink_target(target)
        if resolved is None:
            return html.escape(display)
        return f'<a href="{html.escape(resolved[0])}" class="wikilink">{html.escape(display)}</a>'
    text, url = m.group(3), m.group(4).strip()
    if is_internal_link(url) or url.startswith('#'):
        resolved = resolve_link(url)
        if resolved.is_internal:
            return f'<a href="{html.escape(resolved.url)}" class="wikilink">{html.escape(text)}</a>'
        url = resolved.url
    return f'<a href="{html.escape(url)}">{html.escape(text)}</a>'


def render_excerpt_html(excerpt: str) -> str:
    """Escape an excerpt and turn its links into anchors."""
    out, last = [], 0
    for m in EXCERPT_LINK_RE.finditer(excerpt):
        out.append(html.escape(excerpt[last:m.start()]))
        out.append(_excerpt_link(m))
        last = m.end()
    out.append(html.escape(excerpt[last:]))
    return "".join(out)
