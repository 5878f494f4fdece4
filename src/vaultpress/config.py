"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "VAULTPRESS_"


class Settings(BaseModel):
    app_name:            str  = "vaultpress"
    parser_config:       str  = Field(default="gfm-like",      description="MarkdownIt parser preset name")
    content_dir:         str  = Field(default="content",       description="Vault root holding posts/, pages/, projects/, docs/, special/")
    bases_dir:           str  = Field(default="content/bases", description="Directory of .base view files")
    tag_base_url:        str  = Field(default="/posts/tag",    description="URL prefix for inline #tag links")
    theme:               str  = Field(default="default",       description="Registered theme providing CSS classes")
    heading_permalinks:  bool = Field(default=True,            description="Append a ¶ self-link to headings")
    anchor_max_level:    int  = Field(default=6, ge=1, le=6,   description="Deepest heading level that gets an id")
    excerpt_length:      int  = Field(default=200, ge=20,      description="Maximum backlink excerpt length")
    excerpt_context:     int  = Field(default=100, ge=0,       description="Desired context on each side of a link")
    excerpt_min_context: int  = Field(default=60,  ge=0,       description="Minimum context on each side of a link")
    files_limit:         int  = Field(default=36,  ge=1,       description="Rows shown by a base in files mode")
    include_drafts:      bool = Field(default=False,           description="Load documents marked draft: true")
    base_workers:        int  = Field(default=1,   ge=1,       description="Threads used to build base tables")

    def excerpt_options(self) -> dict[str, int]:
        return {
            "context": self.excerpt_context,
            "min_context": self.excerpt_min_context,
            "max_length": self.excerpt_length,
        }


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then VAULTPRESS_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
