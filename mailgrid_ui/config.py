"""
Configuration management for mailgrid-ui.

Loads config.yaml from the mailgrid-ui home directory
($MAILGRID_UI_HOME, default ~/.mailgrid-ui). A missing file means defaults.
"""

import os
from datetime import datetime
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from mailgrid_ui.errors import ConfigError

LOG_FORMATS = ("structured", "pretty")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_mailgrid_ui_home() -> Path:
    """Return the home directory for config and logs."""
    home = os.environ.get("MAILGRID_UI_HOME")
    if home:
        return Path(home).expanduser()
    return Path.home() / ".mailgrid-ui"


@dataclass
class MailgridUIConfig:
    """
    Application configuration.

    Attributes:
        temp_dir: Directory for inline template/CSV temp files (None = platform temp dir)
        log_file: Log file path, {date} is replaced with today's date
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: "structured" (JSON) or "pretty" (rich console)
    """
    temp_dir: Optional[str] = None
    log_file: str = "logs/mailgrid-ui-{date}.log"
    log_level: str = "INFO"
    log_format: str = "pretty"

    def __post_init__(self):
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Invalid log_level: {self.log_level}")
        if self.log_format not in LOG_FORMATS:
            raise ConfigError(f"Invalid log_format: {self.log_format} (expected one of {', '.join(LOG_FORMATS)})")

    def get_log_file_path(self, home: Optional[Path] = None) -> Path:
        """Get log file path with date interpolation, relative to home."""
        path = Path(self.log_file.replace("{date}", datetime.now().strftime("%Y-%m-%d"))).expanduser()
        if not path.is_absolute():
            path = (home or get_mailgrid_ui_home()) / path
        return path

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(config_path: Optional[Path] = None) -> MailgridUIConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. Defaults to <home>/config.yaml

    Returns:
        MailgridUIConfig instance (defaults if the file does not exist)

    Raises:
        ConfigError: If the file is not valid YAML, not a mapping, or has unknown keys
    """
    if config_path is None:
        config_path = get_mailgrid_ui_home() / "config.yaml"

    if not config_path.exists():
        return MailgridUIConfig()

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}")

    if data is None:
        return MailgridUIConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must be a mapping: {config_path}")

    known = {f.name for f in fields(MailgridUIConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    return MailgridUIConfig(**data)
