"""Root test configuration: a small on-disk vault shared by loader, pipeline and CLI tests"""

from pathlib import Path

import pytest


VAULT_FILES = {
    "posts/hello-world.md": """\
---
title: Hello World
date: 2024-01-15
tags: [intro]
---

# Hello World

The first post. It links forward to [[second-post|the second post]] and is tagged #intro.
""",
    "posts/second-post/index.md": """\
---
title: Second Post
date: 2024-03-02
---

This post follows up on an earlier write up. Back in January I published
[[Hello World]] as a short introduction to the site and its goals, and it
still covers the basics well enough to be worth a read.

![[diagram.png]]
""",
    "posts/draft-notes.md": """\
---
title: Draft Notes
draft: true
---

Unfinished thoughts linking to [[Hello World]].
""",
    "posts/broken.md": """\
---
title: Broken Links
date: 2023-12-01
---

This one points at [[Missing Post]] and at [[hello-world]].
""",
    "pages/about.md": """\
---
title: About
---

About this site. See [the first post](posts/hello-world.md).
""",
    "bases/posts.base": """\
properties:
  note.title:
    displayName: Title
  note.date:
    displayName: Published
views:
  - type: table
    name: Posts
    filters:
      and:
        - file.folder.startsWith("posts")
        - file.ext == "md"
    order:
      - note.title
      - note.date
    sort:
      - property: date
        direction: DESC
""",
}


def write_vault(root: Path, files: dict[str, str] = VAULT_FILES) -> Path:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture(name="vault")
def vault_fixture(tmp_path):
    """Content root with posts, a page, a draft and a .base file."""
    return write_vault(tmp_path / "content")
