"""
Logging for the auction house.

Every module logs through a child of the ``rda`` logger named after its
subsystem:

- ``rda.house``: creations, settlements, withdrawals and rejections
- ``rda.pricing``: price evaluations (debug)
- ``rda.custody``: vault transfers and rollbacks (debug)
- ``rda.events``: one line per emitted event, subscriber failures
- ``rda.repository`` / ``rda.storage.*``: record store and SQLite

The first logger handed out installs a colored console handler at INFO.
The CLI reconfigures it once its settings are known (``--debug``,
``RDA_LOG_LEVEL``, ``RDA_LOG_TO_FILE``), optionally adding ``rda.log``.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog


class RDALogger:
    """Owns the handlers of the ``rda`` logger tree."""

    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
        force: bool = False,
    ):
        """
        Install console (and optionally file) handlers on ``rda``.

        Existing handlers are closed and replaced, so calling this again
        with ``force`` changes the level without duplicating output.

        Args:
            level: Logging level for every rda.* logger
            log_dir: Directory for rda.log. If None, uses ./logs
            log_to_file: Whether to also write rda.log
            force: Reconfigure even if already set up
        """
        if cls._initialized and not force:
            return

        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            cls._log_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger("rda")
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers.clear()

        # Console handler with colors
        console_handler = colorlog.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

        if log_to_file and cls._log_dir:
            file_handler = logging.FileHandler(cls._log_dir / "rda.log")
            file_handler.setLevel(level)
            file_formatter = logging.Formatter(
                "%(asctime)s [%(name)s] %(levelname)-8s %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Logger for one subsystem, e.g. ``get_logger("custody")``.

        Args:
            name: Subsystem name ('house', 'pricing', 'custody', 'storage.sqlite', ...)

        Returns:
            Logger instance
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"rda.{name}")


# Convenience functions
def get_logger(name: str) -> logging.Logger:
    """``rda.<name>`` logger, setting up defaults on first use"""
    return RDALogger.get_logger(name)


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """Reconfigure rda logging from CLI settings"""
    RDALogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file, force=True)
