"""Configuration management for trashday."""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

TRASHDAY_HOME = Path(os.environ.get("TRASHDAY_HOME", Path.home() / "trashday"))
CONFIG_FILE = TRASHDAY_HOME / "config" / "trashday.conf"
DATA_DIR = TRASHDAY_HOME / "data"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """trashday configuration."""

    timezone: str = "America/Toronto"
    schedule_file: str = ""
    log_level: str = "WARNING"

    def schedule_path(self) -> Path:
        """Where the schedule calendar lives."""
        if self.schedule_file:
            return Path(self.schedule_file).expanduser()
        return DATA_DIR / "schedule.ics"

    def now(self) -> datetime:
        """Current wall-clock time in the configured zone, without tzinfo."""
        return datetime.now(ZoneInfo(self.timezone)).replace(second=0, microsecond=0, tzinfo=None)


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from trashday.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Quoted values may be followed by an inline comment: "value" # comment
        if value[:1] in ('"', "'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "timezone":
                config.timezone = value
            case "schedule_file":
                config.schedule_file = value
            case "log_level":
                if value.upper() in LOG_LEVELS:
                    config.log_level = value.upper()
                else:
                    logger.warning(f"Ignoring unknown LOG_LEVEL: {value}")
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
