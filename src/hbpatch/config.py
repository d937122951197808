"""Configuration management for hbpatch."""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from hbpatch.exceptions import ConfigError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def default_config_path() -> Path:
    """Config file location: $HBPATCH_CONFIG, else ~/.hbpatch.cfg."""
    env_path = os.environ.get("HBPATCH_CONFIG")
    if env_path:
        return Path(env_path)
    return Path.home() / ".hbpatch.cfg"


def load_config_file(
    profile: str = "DEFAULT", path: Optional[Path] = None
) -> dict[str, str]:
    """Load settings for one profile from an ini-style config file.

    Args:
        profile: Section name to load (default: "DEFAULT")
        path: File to read (default: see default_config_path)

    Returns:
        Dict of raw string settings; empty if the file does not exist

    Raises:
        ConfigError: If the profile doesn't exist in the file
    """
    cfg_path = path or default_config_path()
    if not cfg_path.exists():
        return {}

    config = configparser.ConfigParser()
    try:
        config.read(cfg_path)
    except configparser.Error as e:
        raise ConfigError(f"Cannot parse {cfg_path}: {e}") from e

    if profile not in config:
        available = config.sections() or ["DEFAULT"]
        raise ConfigError(
            f"Profile '{profile}' not found in {cfg_path}. "
            f"Available profiles: {', '.join(available)}"
        )

    return {key: value.strip() for key, value in config[profile].items()}


def parse_bool(value: str, name: str) -> bool:
    """Parse a boolean setting such as HBPATCH_SORT_TABLES."""
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"Invalid boolean for {name}: '{value}'")


@dataclass
class Config:
    """Configuration for hbpatch."""

    changes_path: Optional[str] = None
    output_path: Optional[str] = None
    description: Optional[str] = None
    sort_tables: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls,
        *,
        changes_path: Optional[str] = None,
        output_path: Optional[str] = None,
        description: Optional[str] = None,
        sort_tables: Optional[bool] = None,
        log_level: Optional[str] = None,
        profile: Optional[str] = None,
        config_path: Optional[Path] = None,
    ) -> "Config":
        """Load configuration from the config file, env vars, with CLI overrides.

        Priority (highest to lowest):
        1. Explicit parameters (CLI args)
        2. Environment variables
        3. Config file profile
        """
        profile_name = profile or os.environ.get("HBPATCH_PROFILE", "DEFAULT")
        file_cfg = load_config_file(profile_name, config_path)

        def resolve(explicit, env_key, cfg_key):
            if explicit is not None:
                return explicit
            env_val = os.environ.get(env_key)
            if env_val is not None:
                return env_val
            return file_cfg.get(cfg_key)

        sort_value = resolve(sort_tables, "HBPATCH_SORT_TABLES", "sort_tables")
        if isinstance(sort_value, str):
            sort_value = parse_bool(sort_value, "sort_tables")

        level = resolve(log_level, "HBPATCH_LOG_LEVEL", "log_level") or "INFO"

        return cls(
            changes_path=resolve(changes_path, "HBPATCH_CHANGES", "changes"),
            output_path=resolve(output_path, "HBPATCH_OUTPUT", "output"),
            description=resolve(description, "HBPATCH_DESCRIPTION", "description"),
            sort_tables=bool(sort_value),
            log_level=level.upper(),
        )

    def validate_for_generate(self) -> None:
        """Validate that everything needed to generate a script is present.

        Raises:
            ConfigError: If the change list location is missing or the log
                level is not a known logging level.
        """
        problems = []
        if not self.changes_path:
            problems.append("changes_path (use --changes or HBPATCH_CHANGES)")
        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            problems.append(f"log_level '{self.log_level}' is not a logging level")

        if problems:
            raise ConfigError(
                "Invalid configuration:\n  - " + "\n  - ".join(problems)
            )
