"""Unit tests for config.py"""

import pytest
from pydantic import ValidationError

from vaultpress.config import Settings, load_config


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test in an empty directory so a stray config.yaml is never read."""
    monkeypatch.chdir(tmp_path)


def test_load_config_defaults(monkeypatch):
    """Settings defaults apply when no config.yaml, env var, or CLI override exists."""
    monkeypatch.delenv("VAULTPRESS_THEME", raising=False)
    settings = load_config()
    assert settings.parser_config == "gfm-like"
    assert settings.theme == "default"
    assert settings.tag_base_url == "/posts/tag"
    assert settings.excerpt_length == 200


def test_load_config_reads_config_yaml(tmp_path):
    """Values in config.yaml are applied."""
    (tmp_path / "config.yaml").write_text("theme: minimal\nfiles_limit: 10\n")
    settings = load_config()
    assert settings.theme == "minimal"
    assert settings.files_limit == 10


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """VAULTPRESS_<FIELD> takes precedence over config.yaml."""
    (tmp_path / "config.yaml").write_text("content_dir: 'vault'\n")
    monkeypatch.setenv("VAULTPRESS_CONTENT_DIR", "notes")
    assert load_config().content_dir == "notes"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var."""
    monkeypatch.setenv("VAULTPRESS_THEME", "minimal")
    assert load_config(overrides={"theme": "default"}).theme == "default"


def test_load_config_ignores_none_overrides(monkeypatch):
    """None overrides leave the lower-precedence value in place."""
    monkeypatch.setenv("VAULTPRESS_THEME", "minimal")
    assert load_config(overrides={"theme": None}).theme == "minimal"


@pytest.mark.parametrize("name,raw,expected", [
    ("VAULTPRESS_EXCERPT_LENGTH", "120", 120),
    ("VAULTPRESS_ANCHOR_MAX_LEVEL", "3", 3),
    ("VAULTPRESS_BASE_WORKERS", "4", 4),
])
def test_load_config_env_coerces_ints(monkeypatch, name, raw, expected):
    """Numeric env vars are coerced by the settings model."""
    monkeypatch.setenv(name, raw)
    field = name[len("VAULTPRESS_"):].lower()
    assert getattr(load_config(), field) == expected


def test_load_config_env_coerces_bool(monkeypatch):
    """Boolean env vars are coerced by the settings model."""
    monkeypatch.setenv("VAULTPRESS_HEADING_PERMALINKS", "false")
    assert load_config().heading_permalinks is False


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_settings_rejects_out_of_range_anchor_level():
    """anchor_max_level is bounded to heading levels 1-6."""
    with pytest.raises(ValidationError):
        Settings(anchor_max_level=7)


def test_excerpt_options_maps_settings():
    """excerpt_options exposes the excerpt keyword arguments."""
    settings = Settings(excerpt_length=150, excerpt_context=80, excerpt_min_context=40)
    assert settings.excerpt_options() == {"context": 80, "min_context": 40, "max_length": 150}
