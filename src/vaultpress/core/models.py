"""Data models shared by the parse, link, backlink and render stages"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from vaultpress.core.utils.slug import collection_url
from vaultpress.themes import ThemeProvider, get_theme


class Collection(str, Enum):
    posts = "posts"
    pages = "pages"
    projects = "projects"
    docs = "docs"
    special = "special"


class Document(BaseModel):
    """A content document; identity is `id` within its collection."""
    id: str
    body: str
    frontmatter: dict[str, Any] = {}
    collection: Collection = Collection.posts
    path: Optional[str] = None      # source file path, when loaded from disk

    @property
    def title(self) -> str:
        return str(self.frontmatter.get("title") or self.id)

    @property
    def draft(self) -> bool:
        return self.frontmatter.get("draft") is True

    @property
    def url(self) -> str:
        return collection_url(self.collection.value, self.id)


@dataclass(frozen=True)
class LinkMatch:
    """A logical internal link found in raw text."""
    link:    str            # raw target text (anchor removed)
    display: str            # text shown to the reader
    slug:    str            # canonical slug the link resolves to


@dataclass(frozen=True)
class ResolvedLink:
    url:         str
    is_internal: bool
    anchor:      Optional[str] = None   # slugified anchor, if any


@dataclass(frozen=True)
class Excerpt:
    excerpt:     str
    is_at_start: bool
    is_at_end:   bool


@dataclass(frozen=True)
class Backlink:
    title:   str
    slug:    str
    excerpt: str


@dataclass(frozen=True)
class RenderContext:
    """Per-render inputs threaded through markdown-it's env; never mutated while rendering."""
    source_path:  Optional[str] = None
    collection:   Optional[Collection] = None
    current_slug: Optional[str] = None
    posts:        tuple[Document, ...] = ()
    bases_dir:    Optional[Path] = None
    tag_base_url: str = "/posts/tag"
    theme:        ThemeProvider = field(default_factory=get_theme)


ENV_KEY = "vaultpress"


def context_from_env(env: dict | None) -> RenderContext:
    """Return the RenderContext stored in env, or an empty default."""
    ctx = (env or {}).get(ENV_KEY)
    return ctx if isinstance(ctx, RenderContext) else RenderContext()
