"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from vaultpress.config import Settings, load_config
from vaultpress.core.backlinks.excerpt import render_excerpt_html
from vaultpress.core.backlinks.mentions import find_backlinks
from vaultpress.core.links.extract import extract_all_internal_links, validate_wikilinks
from vaultpress.core.models import Collection, Document
from vaultpress.core.parse import load_corpus, parse_file
from vaultpress.core.pipeline import render_document, resolve_bases


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _corpus(settings: Settings) -> list[Document]:
    """Load the vault, exiting 1 on unreadable documents."""
    try:
        return load_corpus(Path(settings.content_dir), settings.include_drafts)
    except (ValueError, OSError) as e:
        _fail("Could not load content", e)


def _document(path: Path, settings: Settings) -> Document:
    """Parse path as a member of its collection when it lives under the content dir, else as a post."""
    content_dir = Path(settings.content_dir).resolve()
    path = path.resolve()
    try:
        if path.is_relative_to(content_dir):
            top = path.relative_to(content_dir).parts[0]
            if top in Collection._value2member_map_:
                return parse_file(path, content_dir / top)
        return parse_file(path, path.parent, Collection.posts)
    except (ValueError, OSError) as e:
        _fail(f"Could not read {path}", e)


def render_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to render")],
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Vault root used to resolve links")] = None,
    theme: Annotated[Optional[str], typer.Option("--theme", help="Theme providing CSS classes")] = None,
    bases: Annotated[bool, typer.Option("--resolve-bases/--no-resolve-bases", help="Replace base placeholders with tables")] = True,
    out: Annotated[Optional[Path], typer.Option("--out", help="Write HTML here instead of stdout")] = None,
    ):
    """Render one document to HTML."""
    settings = _settings(overrides={"content_dir": content, "theme": theme})
    doc = _document(path, settings)
    corpus = _corpus(settings)

    html = render_document(doc, corpus, settings).html
    if bases:
        html = resolve_bases(html, corpus, settings)

    if out is None:
        typer.echo(html, nl=False)
        return
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(html, encoding="utf-8")
    except OSError as e:
        _fail(f"Could not write {out}", e)
    typer.echo(f"  {path} -> {out}")


def links_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to scan")],
    ):
    """List the internal links a document makes, as slug, link and display text."""
    settings = _settings()
    doc = _document(path, settings)
    for match in extract_all_internal_links(doc.body):
        typer.echo(f"{match.slug}\t{match.link}\t{match.display}")


def backlinks_cmd(
    slug: Annotated[str, typer.Argument(help="Slug of the post being linked to")],
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Vault root")] = None,
    length: Annotated[Optional[int], typer.Option("--excerpt-length", help="Maximum excerpt length")] = None,
    as_html: Annotated[bool, typer.Option("--html", help="Render excerpts as HTML")] = False,
    ):
    """Show the posts that link to SLUG, each with an excerpt around the link."""
    settings = _settings(overrides={"content_dir": content, "excerpt_length": length})
    backlinks = find_backlinks(_corpus(settings), slug, **settings.excerpt_options())
    if not backlinks:
        typer.echo(f"No backlinks found for: {slug}.")
        return
    for backlink in backlinks:
        typer.echo(f"{backlink.slug}: {backlink.title}")
        excerpt = render_excerpt_html(backlink.excerpt) if as_html else backlink.excerpt
        if excerpt:
            typer.echo(f"    {excerpt}")


def check_cmd(
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Vault root")] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Exit 1 when any wikilink is unresolved")] = False,
    ):
    """Validate wikilinks across all posts."""
    settings = _settings(overrides={"content_dir": content})
    posts = [d for d in _corpus(settings) if d.collection == Collection.posts]

    checked = unresolved = 0
    for post in posts:
        valid, invalid = validate_wikilinks(posts, post.body)
        checked += len(valid) + len(invalid)
        unresolved += len(invalid)
        for match in invalid:
            typer.echo(f"  Warning: {post.id}: unresolved wikilink [[{match.link}]]")

    typer.echo(f"Checked {checked} wikilink(s) in {len(posts)} post(s) - {unresolved} unresolved")
    if strict and unresolved:
        raise typer.Exit(1)
