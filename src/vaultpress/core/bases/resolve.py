"""Resolve base-embed placeholders in rendered HTML into tables"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Protocol

from bs4 import BeautifulSoup, Tag

from vaultpress.core.bases.config import BaseConfig
from vaultpress.core.bases.render import (
    FILES_LIMIT,
    parse_date,
    render_error,
    render_files,
    render_table,
    select_sources,
)
from vaultpress.core.models import Document
from vaultpress.core.parse import list_vault_files
from vaultpress.themes import ThemeProvider, get_theme


log = logging.getLogger(__name__)

BUSY_ATTR = "data-base-processing"
ITEM_TYPES = {"posts": "post", "pages": "page", "projects": "project", "docs": "doc"}


class ItemSource(Protocol):
    """Where base tables read their rows from."""

    def items(self, source: str) -> list[dict[str, Any]]: ...

    def file_names(self) -> list[str]: ...


def _date_key(item: dict[str, Any]) -> float:
    parsed = parse_date(item.get("date"))
    try:
        return parsed.timestamp() if parsed else 0.0
    except (OverflowError, OSError, ValueError):
        return 0.0


class CorpusItemSource:
    """Item source over loaded documents; items are newest first per collection."""

    def __init__(self, documents: Iterable[Document], content_dir: Path | None = None):
        self.documents = list(documents)
        self.content_dir = content_dir

    def items(self, source: str) -> list[dict[str, Any]]:
        if source not in ITEM_TYPES:
            return []
        items = []
        for doc in self.documents:
            if doc.collection.value != source:
                continue
            value = doc.frontmatter.get("date")
            items.append({
                **doc.frontmatter,
                "id": doc.id,
                "title": doc.title,
                "url": doc.url,
                "date": value.isoformat() if isinstance(value, (date, datetime)) else value,
                "type": ITEM_TYPES[source],
            })
        return sorted(items, key=_date_key, reverse=True)

    def file_names(self) -> list[str]:
        if self.content_dir is not None:
            return list_vault_files(self.content_dir)
        return [doc.id.split("/")[-1] for doc in self.documents]


class BaseEmbedResolver:
    """Replace each `.base-embed[data-base-config]` element's contents with its table.

    Tables may be built on a thread pool; the parsed document is only touched
    from the calling thread.
    """

    def __init__(self, source: ItemSource, theme: ThemeProvider | None = None,
                 files_limit: int = FILES_LIMIT, max_workers: int = 1):
        self.source = source
        self.theme = theme or get_theme()
        self.files_limit = files_limit
        self.max_workers = max(1, max_workers)
        self._lock = threading.Lock()

    def build(self, config: BaseConfig) -> str:
        """Table HTML for one config."""
        if config.files and not config.source:
            return render_files(self.source.file_names(), self.theme, self.files_limit)
        items = [item for source in select_sources(config) for item in self.source.items(source)]
        return render_table(config, items, self.theme)

    def build_from_json(self, raw: str) -> str:
        """Table HTML for a serialized config; any failure yields the error placeholder."""
        try:
            return self.build(BaseConfig.model_validate_json(raw or "{}"))
        except Exception as e:
            log.warning("Failed to render base table: %s", e)
            return render_error(self.theme)

    def _claim(self, element: Tag) -> bool:
        with self._lock:
            if element.get(BUSY_ATTR) == "true":
                return False
            element[BUSY_ATTR] = "true"
            return True

    def _release(self, element: Tag) -> None:
        with self._lock:
            if element.has_attr(BUSY_ATTR):
                del element[BUSY_ATTR]

    def resolve_soup(self, soup: BeautifulSoup) -> int:
        """Resolve placeholders in a parsed document in place; returns how many."""
        elements = [el for el in soup.select(".base-embed[data-base-config]") if self._claim(el)]
        if not elements:
            return 0
        try:
            configs = [str(el.get("data-base-config") or "{}") for el in elements]
            if self.max_workers > 1 and len(configs) > 1:
                with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                    tables = list(pool.map(self.build_from_json, configs))
            else:
                tables = [self.build_from_json(c) for c in configs]
            for element, table in zip(elements, tables):
                element.clear()
                element.append(BeautifulSoup(table, "html.parser"))
        finally:
            for element in elements:
                self._release(element)
        return len(elements)

    def resolve(self, html: str) -> str:
        if "base-embed" not in html:
            return html
        soup = BeautifulSoup(html, "html.parser")
        if not self.resolve_soup(soup):
            return html
        return str(soup)
