"""
Configuration for the RDA auction house.

Defines operational paths, logging and persistence switches, and input
limits. Values come from defaults, overridden by ``RDA_*`` environment
variables (optionally loaded from a ``.env`` file).
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from rda.utils.validation import MAX_NAME_LENGTH, MAX_STRING_LENGTH

ENV_PREFIX = "RDA_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class AuctionHouseConfig:
    """Auction house configuration parameters"""

    # Paths
    data_dir: Path = Path("data")
    log_dir: Path = Path("logs")
    db_name: str = "auctions.db"

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False

    # Persistence
    persist: bool = False       # Back the repository with SQLite

    # Input limits
    max_name_length: int = MAX_NAME_LENGTH
    max_description_length: int = MAX_STRING_LENGTH

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    @property
    def logging_level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        return level

    def ensure_directories(self) -> None:
        """Create data and log directories"""
        self.data_dir.mkdir(exist_ok=True, parents=True)
        if self.log_to_file:
            self.log_dir.mkdir(exist_ok=True, parents=True)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _coerce(name: str, default, raw: str):
    if isinstance(default, bool):
        return _parse_bool(name, raw)
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if isinstance(default, Path):
        return Path(raw).expanduser()
    return raw


def load_config(env_file: Optional[str] = None) -> AuctionHouseConfig:
    """
    Load configuration from the environment.

    Args:
        env_file: Optional path to a .env file. Variables already present
            in the process environment take precedence over the file.

    Returns:
        AuctionHouseConfig instance
    """
    if env_file:
        load_dotenv(env_file, override=False)

    config = AuctionHouseConfig()
    for f in fields(config):
        env_name = ENV_PREFIX + f.name.upper()
        raw = os.environ.get(env_name)
        if raw is None or raw == "":
            continue
        setattr(config, f.name, _coerce(env_name, getattr(config, f.name), raw))

    return config
