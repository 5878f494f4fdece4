"""Paragraphs made only of images become image grids"""

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from vaultpress.core.utils.tokens import add_class, is_blank


MAX_GRID_COLUMNS = 6


def count_grid_images(children: list[Token]) -> int | None:
    """Number of images when they are the paragraph's only meaningful content, else None.

    Links, including linked images, count as other content.
    """
    images = 0
    for child in children:
        if child.type == 'image':
            images += 1
        elif not is_blank(child):
            return None
    return images


def _image_grids_rule(state: StateCore) -> None:
    tokens = state.tokens
    for idx, token in enumerate(tokens[:-1]):
        if token.type != 'paragraph_open':
            continue
        inline = tokens[idx + 1]
        if inline.type != 'inline' or not inline.children:
            continue
        images = count_grid_images(inline.children)
        if images is not None and images >= 2:
            add_class(token, 'image-grid')
            add_class(token, f'image-grid-{min(images, MAX_GRID_COLUMNS)}')


def image_grids_plugin(md: MarkdownIt) -> None:
    md.core.ruler.push("image_grids", _image_grids_rule)
