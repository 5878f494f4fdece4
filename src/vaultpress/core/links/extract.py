"""Internal link extraction from raw Markdown (posts only) and wikilink validation"""

from typing import Iterable

from vaultpress.core.links.resolve import post_link_text
from vaultpress.core.models import Document, LinkMatch
from vaultpress.core.scan import MARKDOWN_LINK_RE, code_spans, find_wikilinks
from vaultpress.core.utils.slug import slugify, split_anchor, strip_folder_index


def wikilink_slug(link: str) -> str:
    """Canonical post slug for a wikilink target (anchor already removed)."""
    if link.startswith('posts/'):
        link = link[len('posts/'):]
    return slugify(strip_folder_index(link))


def extract_wikilinks(content: str) -> list[LinkMatch]:
    """Return link wikilinks outside code; embeds and same-page anchors are skipped."""
    matches = []
    for span in find_wikilinks(content):
        if span.kind != 'wikilink':
            continue
        target, display = span.groups
        base, _ = split_anchor(target)
        if target.startswith('#') or not base:
            continue
        matches.append(LinkMatch(link=base, display=display or target, slug=wikilink_slug(base)))
    return matches


def extract_standard_links(content: str) -> list[LinkMatch]:
    """Return [text](url) links outside code that address a post."""
    code = code_spans(content)
    matches = []
    for m in MARKDOWN_LINK_RE.finditer(content):
        if any(s <= m.start() < e for s, e in code):
            continue
        if m.start() and content[m.start() - 1] == '!':
            continue
        link_text = post_link_text(m.group(2))
        if link_text is None:
            continue
        matches.append(LinkMatch(link=link_text, display=m.group(1).strip(), slug=slugify(link_text)))
    return matches


def extract_all_internal_links(content: str) -> list[LinkMatch]:
    """Wikilinks and standard post links, de-duplicated by slug (first wins)."""
    seen: set[str] = set()
    unique = []
    for match in extract_wikilinks(content) + extract_standard_links(content):
        if match.slug not in seen:
            seen.add(match.slug)
            unique.append(match)
    return unique


def resolve_wikilink(posts: Iterable[Document], link_text: str) -> Document | None:
    """Find the post a wikilink names: exact id first, then slugified title."""
    posts = list(posts)
    target = slugify(link_text)
    for post in posts:
        if post.id == target:
            return post
    for post in posts:
        if slugify(post.title) == target:
            return post
    return None


def validate_wikilinks(posts: Iterable[Document], content: str) -> tuple[list[LinkMatch], list[LinkMatch]]:
    """Split content's wikilinks into (valid, invalid) against posts."""
    posts = list(posts)
    valid, invalid = [], []
    for match in extract_wikilinks(content):
        (valid if resolve_wikilink(posts, match.slug) else invalid).append(match)
    return valid, invalid
