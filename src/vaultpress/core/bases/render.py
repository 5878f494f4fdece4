"""Base table rendering: items + BaseConfig -> themed HTML table"""

import functools
import html
from datetime import date, datetime
from typing import Any, Iterable, Mapping
from urllib.parse import urlparse

from vaultpress.core.bases.config import SOURCES, BaseConfig, SortSpec
from vaultpress.themes import ThemeProvider


DEFAULT_COLUMNS = ["file name"]
FILES_LIMIT = 36
FAILED_MESSAGE = "Failed to load base."


def parse_date(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_date(value: Any) -> str:
    """Render a date as M/D/YYYY; unparseable values render empty."""
    parsed = parse_date(value)
    if parsed is None:
        return ""
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def _timestamp(value: Any) -> float:
    parsed = parse_date(value)
    if parsed is None:
        return 0.0
    try:
        return parsed.timestamp()
    except (OverflowError, OSError, ValueError):
        return 0.0


def _compare(a: Any, b: Any) -> int:
    if isinstance(a, str) and isinstance(b, str):
        return (a > b) - (a < b)
    a = 0 if a is None else a
    b = 0 if b is None else b
    try:
        return (a > b) - (a < b)
    except TypeError:
        return 0


def sort_items(items: list[Mapping[str, Any]], sort: SortSpec | None) -> list[Mapping[str, Any]]:
    """Stable sort by one property; date-like properties compare as timestamps."""
    if sort is None or not sort.property:
        return list(items)
    prop = sort.property
    reverse = sort.direction == "DESC"
    if "date" in prop.lower():
        return sorted(items, key=lambda item: _timestamp(item.get(prop)), reverse=reverse)
    key = functools.cmp_to_key(lambda a, b: _compare(a.get(prop), b.get(prop)))
    return sorted(items, key=key, reverse=reverse)


def file_name(item: Mapping[str, Any]) -> str:
    if isinstance(item.get("id"), str):
        return item["id"].split("/")[-1]
    if isinstance(item.get("url"), str):
        return urlparse(item["url"]).path.rstrip("/").split("/")[-1]
    return ""


def cell_value(item: Mapping[str, Any], column: str) -> Any:
    """Raw value shown for one column of an item."""
    name = column.lower()
    if name == "file name":
        return file_name(item)
    if name == "path":
        return urlparse(item["url"]).path if isinstance(item.get("url"), str) else ""
    if name == "date" and item.get("date"):
        return format_date(item["date"])
    return item.get(column)


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (list, tuple)):
        return html.escape(",".join(str(v) for v in value))
    if isinstance(value, (date, datetime)):
        return format_date(value)
    return html.escape(str(value))


def _wrap(inner: str) -> str:
    return f'<div class="table-wrapper"><div class="overflow-x-auto">{inner}</div></div>'


def build_table_html(columns: list[str], rows: list[list[Any]], theme: ThemeProvider,
                     labels: list[str] | None = None) -> str:
    headers = labels if labels and len(labels) == len(columns) else columns
    thead = "".join(f'<th class="{theme.th_class}">{html.escape(str(h))}</th>' for h in headers)
    body = "".join(
        f'<tr class="{theme.row_class}">'
        + "".join(f'<td class="{theme.td_class}">{format_cell(v)}</td>' for v in row)
        + "</tr>"
        for row in rows
    )
    return _wrap(
        f'<table class="{theme.table_class}">'
        f'<thead><tr class="{theme.thead_row_class}">{thead}</tr></thead>'
        f'<tbody>{body}</tbody></table>'
    )


def render_error(theme: ThemeProvider) -> str:
    return _wrap(f'<div class="{theme.message_class}">{FAILED_MESSAGE}</div>')


def render_files(names: Iterable[str], theme: ThemeProvider, files_limit: int = FILES_LIMIT) -> str:
    """Single 'file name' column over vault file names, case-insensitively sorted."""
    listed = sorted(names, key=str.lower)[:files_limit]
    return build_table_html(["file name"], [[n] for n in listed], theme)


def select_sources(config: BaseConfig) -> list[str]:
    """Collections a table draws items from; all of them when none is set."""
    return [config.source] if config.source else list(SOURCES)


def render_table(config: BaseConfig, items: list[Mapping[str, Any]], theme: ThemeProvider) -> str:
    """Sort, then limit, then project the selected columns."""
    columns = [c for c in (config.select or DEFAULT_COLUMNS) if c]
    ordered = sort_items(items, config.sort)
    if config.limit and config.limit > 0:
        ordered = ordered[:config.limit]
    rows = [[cell_value(item, c) for c in columns] for item in ordered]
    return build_table_html(columns, rows, theme, config.header_labels)
