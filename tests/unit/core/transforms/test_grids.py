"""Unit tests for core/transforms/grids.py"""

import pytest


def test_two_images_form_grid(render):
    """A paragraph of only images gets grid classes."""
    html = render("![a](a.png)\n![b](b.png)\n")
    assert '<p class="image-grid image-grid-2">' in html


def test_grid_columns_capped(render):
    """More than six images still use the six column class."""
    text = " ".join(f"![{n}]({n}.png)" for n in range(8)) + "\n"
    assert '<p class="image-grid image-grid-6">' in render(text)


@pytest.mark.parametrize("text", [
    "![a](a.png)\n",
    "![a](a.png) caption text ![b](b.png)\n",
    "![a](a.png) [link](https://example.com) ![b](b.png)\n",
])
def test_not_a_grid(render, text):
    """Single images and images mixed with other content are not grids."""
    assert "image-grid" not in render(text)
