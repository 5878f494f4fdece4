"""Render pipeline: parser construction, per-document rendering, and base resolution"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from markdown_it import MarkdownIt

from vaultpress.config import Settings
from vaultpress.core.bases.resolve import BaseEmbedResolver, CorpusItemSource
from vaultpress.core.links.extract import extract_all_internal_links
from vaultpress.core.models import ENV_KEY, Collection, Document, LinkMatch, RenderContext
from vaultpress.core.transforms.anchors import heading_anchors_plugin
from vaultpress.core.transforms.callouts import callouts_plugin
from vaultpress.core.transforms.comments import comments_plugin
from vaultpress.core.transforms.embeds import embeds_plugin
from vaultpress.core.transforms.grids import image_grids_plugin
from vaultpress.core.transforms.images import folder_images_plugin, image_attributes_plugin
from vaultpress.core.transforms.marks import mark_plugin
from vaultpress.core.transforms.standard_links import standard_links_plugin
from vaultpress.core.transforms.tags import inline_tags_plugin
from vaultpress.core.transforms.wikilinks import wikilinks_plugin
from vaultpress.themes import get_theme


@dataclass
class RenderedDoc:
    html:  str
    links: list[LinkMatch] = field(default_factory=list)


def build_parser(settings: Settings | None = None) -> MarkdownIt:
    """MarkdownIt instance with every vault transform registered in pipeline order.

    Block-level passes (comments, callouts) run before inline parsing; the
    wikilink rule runs during it; the rest rewrite the finished token stream.
    """
    settings = settings or Settings()
    md = MarkdownIt(settings.parser_config, options_update={"linkify": False})
    (md
     .use(comments_plugin)
     .use(callouts_plugin)
     .use(wikilinks_plugin)
     .use(folder_images_plugin)
     .use(embeds_plugin)
     .use(image_attributes_plugin)
     .use(inline_tags_plugin)
     .use(mark_plugin)
     .use(image_grids_plugin)
     .use(standard_links_plugin)
     .use(heading_anchors_plugin, max_level=settings.anchor_max_level, permalink=settings.heading_permalinks))
    return md


def render_context(doc: Document | None = None, posts: Iterable[Document] = (),
                   settings: Settings | None = None) -> RenderContext:
    settings = settings or Settings()
    return RenderContext(
        source_path=doc.path if doc else None,
        collection=doc.collection if doc else None,
        current_slug=doc.id if doc else None,
        posts=tuple(p for p in posts if p.collection == Collection.posts),
        bases_dir=Path(settings.bases_dir),
        tag_base_url=settings.tag_base_url,
        theme=get_theme(settings.theme),
    )


def render_markdown(text: str, context: RenderContext | None = None, parser: MarkdownIt | None = None) -> str:
    """Render Markdown text to HTML with an optional per-document context."""
    parser = parser or build_parser()
    env = {ENV_KEY: context} if context is not None else {}
    return parser.render(text, env)


def render_document(doc: Document, posts: Iterable[Document] = (), settings: Settings | None = None,
                    parser: MarkdownIt | None = None) -> RenderedDoc:
    """Render one document against the corpus; also returns its internal links."""
    settings = settings or Settings()
    context = render_context(doc, posts, settings)
    html = render_markdown(doc.body, context, parser or build_parser(settings))
    return RenderedDoc(html=html, links=extract_all_internal_links(doc.body))


def resolve_bases(html: str, documents: Iterable[Document], settings: Settings | None = None) -> str:
    """Replace base-embed placeholders in html with tables built from documents."""
    settings = settings or Settings()
    content_dir = Path(settings.content_dir)
    source = CorpusItemSource(documents, content_dir if content_dir.is_dir() else None)
    resolver = BaseEmbedResolver(
        source,
        theme=get_theme(settings.theme),
        files_limit=settings.files_limit,
        max_workers=settings.base_workers,
    )
    return resolver.resolve(html)
