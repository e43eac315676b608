"""Configuration management for citemark."""

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python < 3.11

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _find_repo_root(start_dir: Path) -> Path:
    """Find repository root by walking upward looking for .git or pyproject.toml."""
    current_dir = start_dir

    while True:
        if (current_dir / ".git").exists() or (current_dir / "pyproject.toml").exists():
            return current_dir

        parent_dir = current_dir.parent

        # Stop if we reach filesystem root
        if parent_dir == current_dir:
            return start_dir

        current_dir = parent_dir


def _load_repo_config_data(repo_root: Path) -> Optional[dict]:
    """Load the [citemark] table from .citemark/config.toml if it exists."""
    config_file = repo_root / ".citemark" / "config.toml"

    if not config_file.exists():
        return None

    with open(config_file, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config file {config_file}: {e}") from e

    section = data.get("citemark", {})
    if not isinstance(section, dict):
        raise ValueError(f"Invalid config: [citemark] in {config_file} must be a table")
    return section


def _as_bool(value: Any, *, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "y", "on"}:
            return True
        if lowered in {"0", "false", "no", "n", "off"}:
            return False
    raise ValueError(f"Invalid config: {name} must be a boolean")


def _as_log_level(value: Any, *, name: str) -> str:
    if isinstance(value, str) and value.strip().upper() in _LOG_LEVELS:
        return value.strip().upper()
    raise ValueError(f"Invalid config: {name} must be one of {sorted(_LOG_LEVELS)}")


class CitemarkConfig(BaseModel):
    """Settings for citation parsing and CLI rendering."""

    relocate_markers: bool = Field(
        default=True,
        description="Search for markers whose claimed offsets do not match the text",
    )
    log_level: str = Field(default="WARNING")
    show_quotes: bool = Field(default=True)
    group_by_source: bool = Field(default=False)

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, start_dir: Optional[Path] = None) -> "CitemarkConfig":
        """Load configuration with the following precedence:

        1. CITEMARK_* environment variables
        2. repo-local .citemark/config.toml [citemark] table
        3. defaults

        Args:
            start_dir: Directory to search upward from for the repo config (default: CWD)

        Raises:
            ValueError: If a configured value is invalid
        """
        repo_root = _find_repo_root(start_dir or Path.cwd())
        file_values = _load_repo_config_data(repo_root) or {}
        defaults = cls()

        def pick(key: str, env_name: str) -> tuple[Any, str]:
            env_value = os.environ.get(env_name)
            if env_value is not None:
                return env_value, env_name
            if key in file_values:
                return file_values[key], f"[citemark].{key}"
            return getattr(defaults, key), key

        relocate, relocate_name = pick("relocate_markers", "CITEMARK_RELOCATE_MARKERS")
        level, level_name = pick("log_level", "CITEMARK_LOG_LEVEL")
        quotes, quotes_name = pick("show_quotes", "CITEMARK_SHOW_QUOTES")
        group, group_name = pick("group_by_source", "CITEMARK_GROUP_BY_SOURCE")

        return cls(
            relocate_markers=_as_bool(relocate, name=relocate_name),
            log_level=_as_log_level(level, name=level_name),
            show_quotes=_as_bool(quotes, name=quotes_name),
            group_by_source=_as_bool(group, name=group_name),
        )
