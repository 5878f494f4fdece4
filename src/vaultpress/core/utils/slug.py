"""Slug and URL helpers shared by heading IDs, anchors and link targets"""

import re
from urllib.parse import unquote


_INVALID_ESCAPE_RE = re.compile(r'%(?![0-9A-Fa-f]{2})')
_TRAILING_INDEX_RE = re.compile(r'(?:/index)+$')


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug (ASCII only)."""
    text = text.lower()
    text = re.sub(r'[^a-z0-9\s-]', '', text)
    text = re.sub(r'\s+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def decode_anchor(text: str) -> str:
    """URL-decode anchor text; malformed escapes return the input unchanged."""
    if _INVALID_ESCAPE_RE.search(text):
        return text
    try:
        return unquote(text, errors='strict')
    except UnicodeDecodeError:
        return text


def anchor_slug(text: str) -> str:
    """Decode then slugify an anchor fragment (without the leading '#')."""
    return slugify(decode_anchor(text))


def split_anchor(target: str) -> tuple[str, str | None]:
    """Split 'link#anchor' at the first '#'; the anchor is URL-decoded."""
    link, sep, anchor = target.partition('#')
    if not sep:
        return target, None
    return link, decode_anchor(anchor) if anchor else None


def strip_folder_index(path: str) -> str:
    """Drop a trailing '/index' from a two-segment '<slug>/index' path."""
    if path.endswith('/index') and len(path.split('/')) == 2:
        return path[:-len('/index')]
    return path


def normalize_url(url: str) -> str:
    """Strip any residual '/index' suffix from a site URL (idempotent)."""
    base, sep, fragment = url.partition('#')
    if not base:
        return url
    base = _TRAILING_INDEX_RE.sub('', base) or '/'
    return f"{base}{sep}{fragment}"


def collection_url(collection: str, slug: str) -> str:
    """Public URL for a document slug within a collection."""
    if collection == 'pages':
        return '/' if slug in ('', 'index') else normalize_url(f"/{slug}")
    if collection == 'special':
        return {'home': '/', '404': '/404'}.get(slug, normalize_url(f"/{slug}"))
    return normalize_url(f"/{collection}/{slug}")
