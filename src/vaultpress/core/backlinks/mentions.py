"""Linked mentions: which posts link to a target post, with an excerpt for each"""

from typing import Iterable

from vaultpress.core.backlinks.excerpt import create_excerpt_around_link
from vaultpress.core.links.extract import extract_standard_links, extract_wikilinks
from vaultpress.core.models import Backlink, Collection, Document


def find_backlinks(documents: Iterable[Document], target_slug: str, **excerpt_options) -> list[Backlink]:
    """Posts (other than the target) linking to target_slug, in corpus order.

    The excerpt surrounds the first matching link in each post.
    """
    backlinks = []
    for doc in documents:
        if doc.collection != Collection.posts or doc.id == target_slug or not doc.body:
            continue
        matches = [m for m in extract_wikilinks(doc.body) + extract_standard_links(doc.body)
                   if m.slug == target_slug]
        if not matches:
            continue
        excerpt = create_excerpt_around_link(doc.body, matches[0].link, **excerpt_options)
        backlinks.append(Backlink(title=doc.title, slug=doc.id, excerpt=excerpt))
    return backlinks
