"""Obsidian embeds: media players, PDF viewers, YouTube / X posts and base tables"""

import logging
import re

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from vaultpress.core.bases.config import ParseFailure, ParseResult, load_base_file, parse_base_block
from vaultpress.core.bases.render import render_error
from vaultpress.core.links.resolve import is_external
from vaultpress.core.models import RenderContext, context_from_env
from vaultpress.core.transforms.images import AUDIO_EXTENSIONS, VIDEO_EXTENSIONS, resolve_media_path
from vaultpress.core.utils.tokens import TokenEdits, closing_index, html_block, html_inline, is_blank


log = logging.getLogger(__name__)

YOUTUBE_PATTERNS = (
    re.compile(r'^https?://(?:www\.)?youtube\.com/watch\?v=([^&\n?#]+)'),
    re.compile(r'^https?://youtu\.be/([^&\n?#]+)'),
    re.compile(r'^https?://(?:www\.)?youtube\.com/embed/([^&\n?#]+)'),
)
TWITTER_PATTERNS = (
    re.compile(r'^https?://(?:www\.)?twitter\.com/\w+/status/(\d+)'),
    re.compile(r'^https?://(?:www\.)?x\.com/\w+/status/(\d+)'),
)


def _match_id(url: str, patterns) -> str | None:
    for pattern in patterns:
        if m := pattern.match(url):
            return m.group(1)
    return None


def youtube_id(url: str) -> str | None:
    return _match_id(url, YOUTUBE_PATTERNS)


def twitter_id(url: str) -> str | None:
    return _match_id(url, TWITTER_PATTERNS)


def file_extension(url: str) -> str:
    path = re.split(r'[?#]', url, maxsplit=1)[0]
    name = path.rsplit('/', 1)[-1]
    return name[name.rfind('.'):].lower() if '.' in name else ''


def youtube_html(video_id: str, title: str = '') -> str:
    return (
        '<div class="youtube-embed aspect-video overflow-hidden rounded-xl my-8">'
        f'<iframe src="https://www.youtube.com/embed/{escapeHtml(video_id)}?rel=0&modestbranding=1" '
        f'title="{escapeHtml(title or "YouTube video player")}" '
        'allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture; web-share" '
        'allowfullscreen loading="lazy" class="w-full h-full"></iframe></div>'
    )


def twitter_html(post_id: str, title: str = '') -> str:
    return (
        '<blockquote class="twitter-tweet" data-twitter-embed data-theme="preferred_color_scheme" '
        f'data-conversation="none" title="{escapeHtml(title or "Twitter post")}">'
        f'<a href="https://twitter.com/user/status/{post_id}"></a></blockquote>'
    )


def audio_html(src: str, title: str) -> str:
    return (
        f'<div class="audio-embed"><audio class="audio-player" controls '
        f'src="{escapeHtml(src)}" title="{escapeHtml(title)}"></audio></div>'
    )


def video_html(src: str, title: str) -> str:
    return (
        f'<div class="video-embed"><video class="video-player" controls '
        f'src="{escapeHtml(src)}" title="{escapeHtml(title)}"></video></div>'
    )


def pdf_html(src: str, filename: str, title: str) -> str:
    src = escapeHtml(src)
    return (
        f'<div class="pdf-embed"><iframe class="pdf-viewer" src="{src}" title="{escapeHtml(title)}"></iframe>'
        f'<div class="pdf-info"><span class="pdf-filename">{escapeHtml(filename)}</span>'
        f'<a href="{src}" download class="pdf-download-link" target="_blank" rel="noopener noreferrer">'
        'Download PDF</a></div></div>'
    )


def svg_html(src: str, alt: str) -> str:
    return f'<div class="svg-embed"><img src="{escapeHtml(src)}" alt="{escapeHtml(alt)}" class="svg-image" /></div>'


def base_placeholder(result: ParseResult, ctx: RenderContext) -> str:
    """Loading placeholder carrying the config, or the failure box for a bad config."""
    if isinstance(result, ParseFailure):
        log.warning("Base directive in %s: %s", ctx.source_path or 'document', result.reason)
        return render_error(ctx.theme)
    data = result.config.to_json().replace("'", "&apos;")
    return (
        f"<div class=\"base-embed base-embed--table\" data-base-config='{data}'>"
        '<div class="prose w-full overflow-x-auto">'
        f'<div class="{ctx.theme.placeholder_class}"><strong>Loading base…</strong></div>'
        '</div></div>'
    )


def image_embed_html(src: str, alt: str, ctx: RenderContext) -> str | None:
    """Embed markup for an image-syntax reference, or None if it stays an image."""
    url = src.split('|', 1)[0]
    path = url.split('#', 1)[0]
    if is_external(path):
        if post_id := twitter_id(path):
            return twitter_html(post_id, alt)
        if video_id := youtube_id(path):
            return youtube_html(video_id, alt)

    extension = file_extension(path)
    if extension == '.base':
        return base_placeholder(load_base_file(path, ctx.bases_dir, alt), ctx)
    if extension not in AUDIO_EXTENSIONS + VIDEO_EXTENSIONS + ('.pdf', '.svg'):
        return None

    resolved = resolve_media_path(path, ctx.source_path) or path
    filename = path.rsplit('/', 1)[-1]
    if extension in AUDIO_EXTENSIONS:
        return audio_html(resolved, alt or filename or 'Audio file')
    if extension in VIDEO_EXTENSIONS:
        return video_html(resolved, alt or filename or 'Video file')
    if extension == '.pdf':
        fragment = url[len(path):]
        return pdf_html(resolved + fragment, filename or 'document.pdf', alt or filename)
    return svg_html(resolved, alt)


def _embed_token(content: str) -> Token:
    token = html_inline(content)
    token.meta = {'embed': True}
    return token


def _embed_children(children: list[Token], ctx: RenderContext) -> list[Token]:
    edits = TokenEdits()
    for idx, child in enumerate(children):
        if child.type == 'image':
            embed = image_embed_html(str(child.attrGet('src') or ''), child.content, ctx)
            if embed is not None:
                edits.replace(idx, idx + 1, [_embed_token(embed)])
        elif child.type == 'link_open' and not child.meta.get('wikilink'):
            video_id = youtube_id(str(child.attrGet('href') or ''))
            if video_id is not None:
                close = closing_index(children, idx)
                title = str(child.attrGet('title') or '')
                edits.replace(idx, close + 1, [_embed_token(youtube_html(video_id, title))])
    return edits.commit(children)


def _sole_embed(children: list[Token]) -> Token | None:
    meaningful = [c for c in children if not is_blank(c)]
    if len(meaningful) == 1 and meaningful[0].meta.get('embed'):
        return meaningful[0]
    return None


def _embeds_rule(state: StateCore) -> None:
    ctx = context_from_env(state.env)
    tokens = state.tokens
    edits = TokenEdits()
    for idx, token in enumerate(tokens):
        if token.type == 'fence' and token.info.strip().lower().split(' ')[0] == 'base':
            edits.replace(idx, idx + 1, [html_block(base_placeholder(parse_base_block(token.content), ctx), token.level)])
            continue
        if token.type != 'inline' or not token.children:
            continue
        token.children = _embed_children(token.children, ctx)
        embed = _sole_embed(token.children)
        if embed is not None and 0 < idx < len(tokens) - 1 and tokens[idx - 1].type == 'paragraph_open':
            edits.replace(idx - 1, idx + 2, [html_block(embed.content, tokens[idx - 1].level)])
    edits.commit(tokens)


def embeds_plugin(md: MarkdownIt) -> None:
    md.core.ruler.push("obsidian_embeds", _embeds_rule)
