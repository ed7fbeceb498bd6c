"""
CLI Configuration

Configuration management for the Merkle CLI.
Supports environment variables (and a .env file) and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv


# Environment variable prefix
ENV_PREFIX = "MERKLE_"

OUTPUT_FORMATS = ("human", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"
    json_indent: int = 2

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _validated(config: CLIConfig) -> CLIConfig:
    """Reject values the CLI cannot act on."""
    if config.default_output_format not in OUTPUT_FORMATS:
        raise ValueError(
            f"Invalid output format {config.default_output_format!r}, "
            f"expected one of {list(OUTPUT_FORMATS)}"
        )
    if config.log_level.upper() not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level {config.log_level!r}, expected one of {list(LOG_LEVELS)}"
        )
    if config.json_indent < 0:
        raise ValueError(f"json_indent must be non-negative, got {config.json_indent}")
    config.log_level = config.log_level.upper()
    return config


def load_config_from_env(base: CLIConfig | None = None) -> CLIConfig:
    """
    Load configuration from environment variables.

    Only variables that are set override the values in base.
    """
    config = base or CLIConfig()

    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", config.log_level)
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = os.getenv(
            f"{ENV_PREFIX}OUTPUT_FORMAT", config.default_output_format
        ).lower()
    if os.getenv(f"{ENV_PREFIX}JSON_INDENT"):
        config.json_indent = int(os.getenv(f"{ENV_PREFIX}JSON_INDENT", "2"))

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")

    config = CLIConfig()

    # Logging
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    # Output
    config.default_output_format = data.get("default_output_format", config.default_output_format)
    config.json_indent = data.get("json_indent", config.json_indent)

    return config


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "merkle.json",
        Path.cwd() / ".merkle.json",
        Path.home() / ".config" / "merkle" / "config.json",
    ]


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. A .env file (found by
    python-dotenv's usual search) is loaded first; it never overrides variables that
    are already set.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If config_path is given and does not exist
        ValueError: If a setting has an unsupported value
    """
    load_dotenv()

    # Start with defaults
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Environment takes precedence
    config = load_config_from_env(config)

    return _validated(config)


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "WARNING",
  "log_file": null,
  "default_output_format": "human",
  "json_indent": 2
}
"""
