"""File discovery, frontmatter extraction, and corpus loading"""

import re
from pathlib import Path
from typing import Any

import yaml

from vaultpress.core.models import Collection, Document
from vaultpress.core.utils.slug import slugify


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
MD_EXTENSIONS = {'.md', '.mdx'}
SKIPPED_DIRS = {'bases', '.obsidian'}


def strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS)


def document_id(relative: Path, frontmatter: dict[str, Any]) -> str:
    """Slug from frontmatter, else the slugified path; '<slug>/index' collapses to '<slug>'."""
    if frontmatter.get('slug'):
        return slugify(str(frontmatter['slug']))
    parts = list(relative.with_suffix('').parts)
    if len(parts) > 1 and parts[-1] == 'index':
        parts.pop()
    return '/'.join(slugify(p) for p in parts)


def parse_file(path: Path, root: Path, collection: Collection | None = None) -> Document:
    """Read one document; root is its collection folder (e.g. content/posts) unless collection is given."""
    raw = path.read_text(encoding='utf-8')
    frontmatter, body = strip_frontmatter(raw)
    return Document(
        id=document_id(path.relative_to(root), frontmatter),
        body=body,
        frontmatter=frontmatter,
        collection=collection or Collection(root.name),
        path=str(path),
    )


def load_corpus(content_dir: Path, include_drafts: bool = False) -> list[Document]:
    """Load every collection folder present under content_dir."""
    documents = []
    for collection in Collection:
        root = Path(content_dir) / collection.value
        if not root.is_dir():
            continue
        for p in discover_files(root):
            if any(part in SKIPPED_DIRS for part in p.relative_to(root).parts):
                continue
            doc = parse_file(p, root)
            if doc.draft and not include_drafts:
                continue
            documents.append(doc)
    return documents


def list_vault_files(content_dir: Path) -> list[str]:
    """File names under the vault (notes without their .md suffix), for base files mode."""
    root = Path(content_dir)
    names = []
    for p in sorted(root.rglob('*')):
        if not p.is_file() or any(part in SKIPPED_DIRS for part in p.relative_to(root).parts):
            continue
        names.append(p.stem if p.suffix.lower() == '.md' else p.name)
    return names
