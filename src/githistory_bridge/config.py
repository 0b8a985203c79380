"""Controller configuration.

Settings come from code defaults, an optional YAML file, and finally
environment variables prefixed with ``GITHISTORY_BRIDGE_`` (e.g.
``GITHISTORY_BRIDGE_DEFAULT_STOP_INDEX=50``).
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

ENV_PREFIX = "GITHISTORY_BRIDGE_"


class BridgeSettings(BaseModel):
    """Tunable behavior of the controller."""

    default_start_index: int = Field(default=0, ge=0)
    default_stop_index: int = Field(default=30, ge=0)

    commit_action_command: str = "git.commit.doSomething"
    file_select_command: str = "git.commit.file.select"

    # Keep the out-of-band {"cmd": "getAvatarsResult", "error": ...} push
    # instead of a correlated error response.
    legacy_avatar_error_push: bool = False

    github_api_url: str = "https://api.github.com"
    github_token: str | None = None
    http_timeout: float = Field(default=10.0, gt=0)

    log_level: str = "WARNING"

    @model_validator(mode="after")
    def _check_window(self) -> BridgeSettings:
        if self.default_stop_index < self.default_start_index:
            raise ValueError("default_stop_index must not be smaller than default_start_index")
        return self


def _from_environ(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field in BridgeSettings.model_fields:
        key = ENV_PREFIX + field.upper()
        if key in environ:
            values[field] = environ[key]
    return values


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> BridgeSettings:
    """Build settings from an optional YAML file plus environment overrides.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        pydantic.ValidationError: If a value is invalid
    """
    values: dict[str, Any] = {}
    if path is not None:
        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        values.update(loaded)

    values.update(_from_environ(os.environ if environ is None else environ))
    return BridgeSettings.model_validate(values)


def configure_logging(level: str | int = logging.WARNING) -> None:
    """Log to stderr; stdout is left to the host."""
    logging.basicConfig(
        level=level.upper() if isinstance(level, str) else level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
