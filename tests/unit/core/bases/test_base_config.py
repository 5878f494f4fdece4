"""Unit tests for core/bases/config.py"""

import pytest

from vaultpress.core.bases.config import (
    BaseConfig,
    BaseView,
    ParseFailure,
    ParseOk,
    SortSpec,
    apply_view,
    choose_view,
    load_base_file,
    parse_base_block,
    parse_embed_params,
    parse_shallow_config,
    parse_views,
    parse_views_config,
)


VIEWS_TEXT = """\
properties:
  note.title:
    displayName: Title
  formula.Slug:
    displayName: Link
views:
  - type: table
    name: Everything
    order: [file.name]
  - type: table
    name: Posts
    filters:
      and:
        - file.folder.startsWith("posts")
        - file.ext == "md"
    order:
      - note.title
      - formula.Slug
      - note.date
    sort:
      - property: date
        direction: desc
    limit: 5
"""


def test_parse_views():
    """Views carry folder filter, order, sort and limit; displayNames are collected."""
    views, names = parse_views(VIEWS_TEXT)
    posts = views[1]
    assert posts.name == "Posts"
    assert posts.folder == "posts"
    assert posts.order == ["note.title", "formula.Slug", "note.date"]
    assert posts.sort == SortSpec(property="date", direction="DESC")
    assert posts.limit == 5
    assert names == {"note.title": "Title", "formula.Slug": "Link"}


@pytest.mark.parametrize("text", ["views: [unclosed", "- a\n- b\n", "views: nope\n"])
def test_parse_views_invalid(text):
    """Bad YAML, non-mappings and non-list views raise ValueError."""
    with pytest.raises(ValueError):
        parse_views(text)


@pytest.mark.parametrize("name,expected", [
    ("everything", "Everything"),
    ("missing", "Posts"),
    (None, "Posts"),
])
def test_choose_view(name, expected):
    """Requested view, then "Posts", then the first."""
    views = [BaseView(name="Everything"), BaseView(name="Posts")]
    assert choose_view(views, name).name == expected


def test_choose_view_falls_back_to_first():
    """Without a Posts view the first view is used."""
    assert choose_view([BaseView(name="A"), BaseView(name="B")], "zzz").name == "A"
    assert choose_view([]) is None


def test_views_config_maps_columns_and_labels():
    """Order keys map to renderer columns with labels from displayName."""
    result = parse_views_config(VIEWS_TEXT)
    assert isinstance(result, ParseOk)
    config = result.config
    assert config.select == ["title", "path", "date"]
    assert config.header_labels == ["Title", "Link", "date"]
    assert config.source == "posts"
    assert config.require_md is True
    assert config.limit == 5


def test_views_config_explicit_settings_win():
    """Embed parameters take precedence over the view."""
    config = parse_views_config(VIEWS_TEXT, BaseConfig(select=["title"], limit=2)).config
    assert config.select == ["title"]
    assert config.limit == 2
    assert config.header_labels == ["Title"]


def test_views_config_named_view():
    """viewName picks a specific view."""
    config = parse_views_config(VIEWS_TEXT, BaseConfig(view_name="Everything")).config
    assert config.select == ["file.name"]
    assert config.source is None


def test_apply_view_none_is_identity():
    """No view leaves the config alone."""
    config = BaseConfig(source="docs")
    assert apply_view(config, None, {}) is config


def test_shallow_config_defaults_to_files():
    """The shallow form defaults to files mode and validates its fields."""
    config = parse_shallow_config("source: posts\nselect: title, date\nlimit: 0\n").config
    assert config.files is True
    assert config.source == "posts"
    assert config.select == ["title", "date"]
    assert config.limit is None


def test_shallow_config_ignores_unknown_source():
    """Unknown sources are dropped."""
    assert parse_shallow_config("source: elsewhere\n").config.source is None


@pytest.mark.parametrize("text,form", [
    ("views:\n  - name: Posts\n", "views"),
    ("source: posts\n", "shallow"),
])
def test_parse_base_block_dispatch(text, form):
    """A views: key selects the views form; anything else is shallow."""
    config = parse_base_block(text).config
    assert (config.files is True) == (form == "shallow")


def test_parse_base_block_failure():
    """A non-mapping body is a parse failure."""
    assert isinstance(parse_base_block("just a string"), ParseFailure)


def test_parse_embed_params():
    """Semicolon separated key=value pairs become a config."""
    config = parse_embed_params("source=posts; select=title,date ;limit=5;view=Posts;bogus=1;limit2")
    assert config == BaseConfig(source="posts", select=["title", "date"], limit=5, view_name="Posts")


def test_to_json_uses_aliases():
    """Serialized configs use camelCase keys and drop unset fields."""
    config = BaseConfig(view_name="Posts", header_labels=["A"], require_md=True)
    assert config.to_json() == '{"view":"table","viewName":"Posts","headerLabels":["A"],"requireMd":true}'


def test_load_base_file(tmp_path):
    """Files are read from the bases directory by basename."""
    (tmp_path / "posts.base").write_text(VIEWS_TEXT)
    result = load_base_file("some/folder/posts.base", tmp_path, "limit=1")
    assert result.config.limit == 1
    assert result.config.select == ["title", "path", "date"]


def test_load_base_file_missing(tmp_path):
    """A missing file keeps the parameters only."""
    result = load_base_file("nothing.base", tmp_path, "source=docs")
    assert result == ParseOk(BaseConfig(source="docs"))


def test_load_base_file_invalid(tmp_path):
    """An invalid file is a parse failure."""
    (tmp_path / "bad.base").write_text("views: [unclosed\n")
    assert isinstance(load_base_file("bad.base", tmp_path), ParseFailure)
