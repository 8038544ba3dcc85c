"""
config/settings.py — Canonical configuration contract for check_up.

Uses pydantic-settings to load, validate, and type-check the environment
variables that provide defaults for the CLI. Command-line flags always win
over anything loaded here.

Two usage modes:
  Production / CLI:
      cfg = load_settings()              # reads from .env + os.environ
      cfg = load_settings("env/ci.env")  # override env file path

  Tests (isolated — no env file, no os.environ bleed):
      cfg = Settings(CHECK_UP_INTERVAL_SECONDS=0, ...)
      # All values come exclusively from kwargs → clean, reproducible.
"""
from __future__ import annotations

import os
import re
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

_EXPORT_RE = re.compile(r"^export\s+")
_INLINE_COMMENT_RE = re.compile(r"\s+#.*$")


class Settings(BaseSettings):
    # Settings() reads purely from kwargs so unit tests never pick up a
    # developer's shell environment. load_settings() is the explicit entry
    # point that reads both the env file and os.environ.
    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)

    # -------------------------------------------------------------------------
    # Service manifest
    # -------------------------------------------------------------------------
    CHECK_UP_FILE: str = "check_up.yml"

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------
    CHECK_UP_SHELL: str = "bash"
    # Delay between the end of a failed round and the start of the next one.
    # Only used when the manifest declares no interval of its own.
    CHECK_UP_INTERVAL_SECONDS: float = 1.0

    # -------------------------------------------------------------------------
    # Behaviour toggles (same meaning as --wait / --verbose)
    # -------------------------------------------------------------------------
    CHECK_UP_WAIT: bool = False
    CHECK_UP_VERBOSE: bool = False

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("CHECK_UP_FILE", "CHECK_UP_SHELL", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Env files and CI variables often carry stray spaces around paths."""
        if isinstance(v, str):
            v = v.strip()
        return v

    @field_validator("CHECK_UP_FILE", "CHECK_UP_SHELL")
    @classmethod
    def non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must be a non-empty string")
        return v

    @field_validator("CHECK_UP_INTERVAL_SECONDS")
    @classmethod
    def interval_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("CHECK_UP_INTERVAL_SECONDS must be >= 0")
        return v


def _read_env_file(path: str | Path) -> dict[str, str]:
    """Parse KEY=value lines. Accepts `export KEY=value`, quotes and # comments."""
    values: dict[str, str] = {}
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return values
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        line = _EXPORT_RE.sub("", line)
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        value = value.strip()
        if value[:1] in ("'", '"') and value.endswith(value[0]) and len(value) > 1:
            value = value[1:-1]
        else:
            value = _INLINE_COMMENT_RE.sub("", value)
        values[key] = value
    return values


def load_settings(env_file: str | Path = ".env") -> Settings:
    """Build Settings from an env file overlaid with CHECK_UP_* environment variables.

    The env file is optional; every field has a default. Only names that are
    Settings fields are passed through, so unrelated variables are ignored.

    Raises:
        ValidationError: if any value fails validation.
    """
    merged = {**_read_env_file(env_file), **os.environ}
    known = {k: v for k, v in merged.items() if k in Settings.model_fields}
    return Settings(**known)
