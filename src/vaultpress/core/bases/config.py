"""Base directive configuration: ```base blocks, .base view files and embed params"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


log = logging.getLogger(__name__)

SOURCES = ("posts", "pages", "projects", "docs")
FOLDER_SOURCES = SOURCES + ("special",)

_REQUIRE_MD_RE = re.compile(r'file\.ext\s*==\s*"md"')
_FOLDER_FILTER_RE = re.compile(r'file\.folder\.startsWith\(\s*["\']([^"\']+)["\']\s*\)')

# property key in a .base view -> column name the renderer understands
COLUMN_ALIASES = {
    "formula.slug": "path",
    "note.pubdate": "date",
    "note.date": "date",
    "date": "date",
    "note.title": "title",
    "title": "title",
}

# column -> property key conventionally carrying its displayName
_LABEL_KEYS = {"path": "formula.Slug", "date": "note.date", "title": "note.title"}


class SortSpec(BaseModel):
    property: str
    direction: Literal["ASC", "DESC"] = "ASC"


class BaseConfig(BaseModel):
    """Table directive; serialized into the placeholder's data-base-config attribute."""
    model_config = ConfigDict(populate_by_name=True)

    view: str = "table"
    source: Optional[str] = None
    select: Optional[list[str]] = None
    limit: Optional[int] = None
    sort: Optional[SortSpec] = None
    files: Optional[bool] = None
    view_name: Optional[str] = Field(default=None, alias="viewName")
    header_labels: Optional[list[str]] = Field(default=None, alias="headerLabels")
    require_md: Optional[bool] = Field(default=None, alias="requireMd")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class ParseOk:
    config: BaseConfig


@dataclass(frozen=True)
class ParseFailure:
    reason: str


ParseResult = Union[ParseOk, ParseFailure]


@dataclass
class BaseView:
    name:   str = ""
    folder: str = ""
    order:  list[str] = field(default_factory=list)
    sort:   Optional[SortSpec] = None
    limit:  Optional[int] = None


def _positive_int(value: Any) -> int | None:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _folder_filter(node: Any) -> str:
    """First file.folder.startsWith("X") argument found anywhere in a filter tree."""
    if isinstance(node, str):
        m = _FOLDER_FILTER_RE.search(node)
        return m.group(1) if m else ""
    children = node.values() if isinstance(node, dict) else node if isinstance(node, list) else ()
    for child in children:
        if folder := _folder_filter(child):
            return folder
    return ""


def _sort_spec(raw: Any) -> SortSpec | None:
    if isinstance(raw, list):
        raw = raw[0] if raw else None
    if not isinstance(raw, dict) or not raw.get("property"):
        return None
    direction = "DESC" if str(raw.get("direction", "")).strip().upper() == "DESC" else "ASC"
    return SortSpec(property=str(raw["property"]).strip(), direction=direction)


def _load_mapping(text: str) -> dict:
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"expected a mapping, got {type(data).__name__}")
    return data


def parse_views(text: str) -> tuple[list[BaseView], dict[str, str]]:
    """Parse a views-form document into its views and the displayName map.

    Raises ValueError when the text is not a YAML mapping.
    """
    try:
        data = _load_mapping(text)
    except yaml.YAMLError as e:
        raise ValueError(f"invalid YAML: {e}") from e

    display_names = {}
    properties = data.get("properties") or {}
    if isinstance(properties, dict):
        for key, value in properties.items():
            if isinstance(value, dict) and value.get("displayName"):
                display_names[str(key)] = str(value["displayName"]).strip()

    views = []
    raw_views = data.get("views") or []
    if not isinstance(raw_views, list):
        raise ValueError("'views' must be a list")
    for raw in raw_views:
        if not isinstance(raw, dict):
            continue
        views.append(BaseView(
            name=str(raw.get("name") or "").strip(),
            folder=_folder_filter(raw.get("filters")),
            order=[str(o).strip() for o in raw.get("order") or [] if o is not None],
            sort=_sort_spec(raw.get("sort")),
            limit=_positive_int(raw.get("limit")),
        ))
    return views, display_names


def choose_view(views: list[BaseView], name: str | None = None) -> BaseView | None:
    """Requested view (case-insensitive), else the one named "Posts", else the first."""
    if not views:
        return None
    wanted = (name or "posts").lower()
    for view in views:
        if view.name.lower() == wanted:
            return view
    if name:
        return choose_view(views)
    return views[0]


def header_labels(columns: list[str], originals: list[str], display_names: dict[str, str]) -> list[str]:
    labels = []
    for column, original in zip(columns, originals):
        label = display_names.get(original) or display_names.get(_LABEL_KEYS.get(column, column))
        labels.append(label or column)
    return labels


def apply_view(config: BaseConfig, view: BaseView | None, display_names: dict[str, str]) -> BaseConfig:
    """Fill unset config fields from a parsed view; explicit settings win."""
    if view is None:
        return config
    updates: dict[str, Any] = {}
    folder = view.folder
    if not config.source and folder.split("/")[0] in FOLDER_SOURCES:
        updates["source"] = folder.split("/")[0]
    if folder.lower().startswith("posts"):
        updates["source"] = "posts"

    select = config.select
    if not select and view.order:
        select = [COLUMN_ALIASES.get(o.lower(), o) for o in view.order]
        updates["select"] = select
        updates["header_labels"] = header_labels(select, view.order, display_names)
    elif select:
        updates["header_labels"] = header_labels(select, select, display_names)

    if view.sort and not config.sort:
        updates["sort"] = view.sort
    if view.limit and not config.limit:
        updates["limit"] = view.limit
    return config.model_copy(update=updates)


def parse_views_config(text: str, config: BaseConfig | None = None) -> ParseResult:
    """Resolve a views-form document against an optional partial config."""
    config = config or BaseConfig()
    try:
        views, display_names = parse_views(text)
    except ValueError as e:
        return ParseFailure(str(e))
    if _REQUIRE_MD_RE.search(text):
        config = config.model_copy(update={"require_md": True})
    return ParseOk(apply_view(config, choose_view(views, config.view_name), display_names))


def parse_shallow_config(text: str) -> ParseResult:
    """Parse the shallow block form (source / select / limit / view); defaults to files mode."""
    try:
        data = _load_mapping(text)
    except (yaml.YAMLError, ValueError) as e:
        return ParseFailure(f"invalid base block: {e}")

    values: dict[str, Any] = {"files": True}
    source = str(data.get("source") or "").strip()
    if source in SOURCES:
        values["source"] = source
    select = data.get("select")
    if isinstance(select, str):
        select = select.strip("[]").split(",")
    if isinstance(select, list):
        values["select"] = [str(s).strip() for s in select if str(s).strip()] or None
    if limit := _positive_int(data.get("limit")):
        values["limit"] = limit
    try:
        return ParseOk(BaseConfig(**values))
    except ValidationError as e:
        return ParseFailure(str(e))


def parse_base_block(text: str) -> ParseResult:
    """Parse the body of a ```base fenced block in whichever form it uses."""
    if re.search(r'^views:\s*$', text, re.MULTILINE):
        return parse_views_config(text)
    return parse_shallow_config(text)


def parse_embed_params(params: str) -> BaseConfig:
    """Parse 'source=posts;select=title,date;limit=5;view=Posts' embed parameters."""
    values: dict[str, Any] = {}
    for pair in params.split(";"):
        key, _, value = pair.partition("=")
        key, value = key.strip().lower(), value.strip()
        if not key or not value:
            continue
        if key == "source" and value in SOURCES:
            values["source"] = value
        elif key == "limit" and (limit := _positive_int(value)):
            values["limit"] = limit
        elif key == "select":
            values["select"] = [s.strip() for s in value.split(",") if s.strip()]
        elif key == "view":
            values["view_name"] = value
    return BaseConfig(**values)


def load_base_file(target: str, bases_dir: Path | None, params: str = "") -> ParseResult:
    """Build the config for a ![[name.base|params]] embed from bases_dir/<name>.base.

    A missing file leaves just the embed parameters.
    """
    config = parse_embed_params(params)
    name = re.sub(r'\.base$', '', target.split("/")[-1], flags=re.IGNORECASE) or "home"
    if bases_dir is None:
        return ParseOk(config)
    path = Path(bases_dir) / f"{name}.base"
    if not path.is_file():
        log.debug("Base file %s not found", path)
        return ParseOk(config)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        log.warning("Could not read base file %s: %s", path, e)
        return ParseFailure(f"unreadable base file {path}: {e}")
    result = parse_views_config(text, config)
    if isinstance(result, ParseFailure):
        log.warning("Invalid base file %s: %s", path, result.reason)
    return result
