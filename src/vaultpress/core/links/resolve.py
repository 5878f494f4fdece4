"""Link resolution: raw wikilink / Markdown targets to canonical site URLs"""

import logging
import re

from vaultpress.core.models import ResolvedLink
from vaultpress.core.utils.slug import (
    anchor_slug,
    collection_url,
    normalize_url,
    slugify,
    split_anchor,
    strip_folder_index,
)


log = logging.getLogger(__name__)

COLLECTIONS = ("posts", "pages", "projects", "docs", "special")
_SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')


def is_external(url: str) -> bool:
    """True for any URL carrying a scheme (http, https, mailto, ...)."""
    return bool(_SCHEME_RE.match(url.strip()))


def _collection_prefix(link: str) -> str | None:
    first = link.lstrip('/').split('/', 1)[0]
    if first in COLLECTIONS and '/' in link.lstrip('/'):
        return first
    return None


def is_internal_link(url: str) -> bool:
    """True if url points at site content: *.md, a collection path or a bare slug."""
    url = url.strip()
    if not url or is_external(url) or url.startswith('#'):
        return False
    link, _ = split_anchor(url)
    return link.endswith('.md') or _collection_prefix(link) is not None or '/' not in link


def post_link_text(url: str) -> str | None:
    """Logical link text of a URL addressing a post (prefix, .md and folder index removed).

    Returns None for external URLs and for other collections.
    """
    if not is_internal_link(url):
        return None
    link, _ = split_anchor(url.strip())
    prefix = _collection_prefix(link)
    if prefix and prefix != "posts":
        return None
    path = link.lstrip("/")[len("posts/"):] if prefix else link
    if path.endswith(".md"):
        path = path[:-len(".md")]
    return strip_folder_index(path) or None


def resolve_link(target: str, collection: str | None = None, current_slug: str | None = None) -> ResolvedLink:
    """Resolve a raw link target to a site URL.

    External and unrecognized targets come back unchanged with is_internal=False.
    A pure '#anchor' target resolves on the current page.
    """
    target = target.strip()
    if target.startswith('#'):
        if len(target) == 1:
            return ResolvedLink(target, False)
        slug = anchor_slug(target[1:])
        return ResolvedLink(f"#{slug}", False, slug)
    if not is_internal_link(target):
        return ResolvedLink(target, False)

    link, anchor = split_anchor(target)
    prefix = _collection_prefix(link)
    path = link.lstrip('/') if prefix else link
    if path.endswith('.md'):
        path = path[:-len('.md')]

    if prefix:
        rest = path[len(prefix) + 1:]
        if prefix == 'pages' and (rest == 'index' or rest.endswith('/index')):
            rest = rest[:-len('index')].rstrip('/')
        url = collection_url(prefix, strip_folder_index(rest))
    elif '/' in path:
        url = f"/posts/{strip_folder_index(path)}"
    elif path:
        url = collection_url("posts", slugify(path))
    else:
        log.debug("Unresolvable link target %r (in %s)", target, current_slug or collection)
        return ResolvedLink(target, False)

    url = normalize_url(url)
    fragment = slugify(anchor) if anchor else None
    if fragment:
        url = f"{url}#{fragment}"
    return ResolvedLink(url, True, fragment or None)


def resolve_wikilink_target(text: str) -> tuple[str, str] | None:
    """Resolve wikilink text (without display) to (url, data-wikilink value).

    Wikilinks only address posts. Returns None for slash paths that are neither
    'posts/...' nor a '<folder>/index' pair; those stay plain text.
    """
    text = text.strip()
    link, anchor = split_anchor(text)
    if text.startswith('#') or link == '':
        return f"#{anchor_slug(text.lstrip('#'))}", ''
    if link.startswith('posts/'):
        data = strip_folder_index(link[len('posts/'):])
        url = f"/posts/{data}"
    elif '/' in link:
        if not (link.endswith('/index') and len(link.split('/')) == 2):
            return None
        data = strip_folder_index(link)
        url = f"/posts/{data}"
    else:
        data = link.strip()
        url = f"/posts/{slugify(link)}"
    url = normalize_url(url)
    if anchor and (fragment := slugify(anchor)):
        url = f"{url}#{fragment}"
    return url, data
