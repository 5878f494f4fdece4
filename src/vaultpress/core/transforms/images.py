"""Image passes: public path resolution, captions and <img> loading attributes"""

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore

from vaultpress.core.links.resolve import is_external
from vaultpress.core.models import context_from_env
from vaultpress.core.utils.tokens import iter_inline


AUDIO_EXTENSIONS = ('.mp3', '.wav', '.ogg', '.m4a', '.3gp', '.flac', '.aac')
VIDEO_EXTENSIONS = ('.mp4', '.webm', '.ogv', '.mov', '.mkv', '.avi')
EMBED_ONLY_EXTENSIONS = AUDIO_EXTENSIONS + VIDEO_EXTENSIONS + ('.pdf', '.base')

# folder name in the source path -> collection whose public path serves its assets
_SOURCE_COLLECTIONS = (
    ('posts', 'posts'),
    ('projects', 'projects'),
    ('docs', 'docs'),
    ('pages', 'pages'),
    ('special', 'pages'),
)


def source_location(source_path: str | None) -> tuple[str | None, str | None]:
    """Return (collection, folder slug) for a document's source path.

    The slug is only set for folder-based documents (<collection>/<slug>/index.md).
    """
    if not source_path:
        return None, None
    path = '/' + source_path.replace('\\', '/').lstrip('/')
    parts = path.split('/')
    for folder, collection in _SOURCE_COLLECTIONS:
        if f'/{folder}/' not in path:
            continue
        if path.endswith('/index.md'):
            position = parts.index(folder)
            return collection, parts[position + 1]
        return collection, None
    return None, None


def resolve_media_path(url: str, source_path: str | None) -> str | None:
    """Map a relative media reference to its public URL, or None to leave it alone."""
    if not url or url.startswith('/') or is_external(url):
        return None
    path = url[2:] if url.startswith('./') else url
    collection, slug = source_location(source_path)
    if collection is None and path.startswith('attachments/'):
        collection = 'pages'
    if collection is None:
        return None

    if slug:
        for prefix in ('images/', 'attachments/'):
            if path.startswith(prefix):
                path = path[len(prefix):]
                break
        return f"/{collection}/{slug}/{path}"
    if path.startswith('attachments/'):
        return f"/{collection}/{path}"
    return f"/{collection}/attachments/{path}"


def _folder_images_rule(state: StateCore) -> None:
    source_path = context_from_env(state.env).source_path
    for _, inline in iter_inline(state.tokens):
        for child in inline.children:
            if child.type != 'image':
                continue
            src = str(child.attrGet('src') or '')
            if src.lower().endswith(EMBED_ONLY_EXTENSIONS):
                continue
            resolved = resolve_media_path(src, source_path)
            if resolved:
                child.attrSet('src', resolved)


def _image_attributes_rule(state: StateCore) -> None:
    for _, inline in iter_inline(state.tokens):
        for child in inline.children:
            if child.type != 'image':
                continue
            title = child.attrGet('title')
            if title:
                child.attrSet('data-caption', title)
            if not child.attrGet('loading'):
                child.attrSet('loading', 'lazy')
            if not child.attrGet('decoding'):
                child.attrSet('decoding', 'async')
            if child.attrGet('alt') is None:
                child.attrSet('alt', '')


def folder_images_plugin(md: MarkdownIt) -> None:
    md.core.ruler.push("folder_images", _folder_images_rule)


def image_attributes_plugin(md: MarkdownIt) -> None:
    """Captions from image titles plus lazy loading defaults for every <img>."""
    md.core.ruler.push("image_attributes", _image_attributes_rule)
