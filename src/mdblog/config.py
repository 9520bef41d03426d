"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDBLOG_"


class Settings(BaseModel):
    app_name:      str  = "mdblog"
    db_url:        str  = "sqlite:///mdblog.db"
    max_versions:  int  = Field(default=10, ge=0, description="Max stored revisions per doc; 0 disables pruning")
    output_dir:    str  = Field(default="dist", description="Directory for normalized documents and catalog.json")
    parser_config: str  = Field(default="gfm-like", description="MarkdownIt parser preset name")
    staging_dir:   str  = Field(default=".mdblog/staging", description="Staging directory for extracted JSON")
    strict:        bool = Field(default=False, description="Treat lint warnings as failures")
    check_images:  bool = Field(default=True, description="Report local image references missing on disk")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDBLOG_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
