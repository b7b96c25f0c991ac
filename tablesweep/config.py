"""
Configuration management for tablesweep.

Loads ``config.yaml`` from the tablesweep home directory
(``$TABLESWEEP_HOME`` or ``~/.config/tablesweep``). Project and dataset act
as defaults for the CLI; everything else tunes logging and BigQuery jobs.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from tablesweep.errors import TableSweepError


class ConfigError(TableSweepError):
    """Configuration validation error."""
    pass


@dataclass
class TableSweepConfig:
    """Settings read from config.yaml."""
    project: Optional[str] = None
    dataset: Optional[str] = None
    location: Optional[str] = None
    log_level: str = "INFO"
    log_format: str = "pretty"
    log_file: Optional[str] = None
    env_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableSweepConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path, if file logging is enabled."""
        if not self.log_file:
            return None
        return Path(self.log_file).expanduser()


def get_tablesweep_home() -> Path:
    """Return the tablesweep home directory."""
    home = os.environ.get("TABLESWEEP_HOME")
    if home:
        return Path(home)
    return Path("~/.config/tablesweep").expanduser()


def load_config(config_path: Optional[Path] = None) -> TableSweepConfig:
    """
    Load tablesweep configuration from YAML.

    Args:
        config_path: Path to config file. Defaults to <home>/config.yaml

    Returns:
        TableSweepConfig instance

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If the file is not a YAML mapping or has unknown keys
    """
    if config_path is None:
        config_path = get_tablesweep_home() / "config.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"tablesweep config.yaml not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {config_path}")

    config = TableSweepConfig.from_dict(data)

    if config.env_file:
        env_path = Path(config.env_file).expanduser()
        if env_path.exists():
            load_dotenv(env_path)

    return config
