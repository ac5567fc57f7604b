"""Configures application-wide logging."""

from __future__ import annotations

import logging
import logging.handlers

from photo_tagger.config.config import ConfigManager

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: ConfigManager, verbose: bool = False) -> None:
    """Setup logging from the ``logging`` config section."""
    if verbose:
        level = logging.DEBUG
    else:
        level_name = str(config.get("logging.level", "INFO")).upper()
        level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)

    if config.get("logging.log_to_file", False):
        handler = logging.handlers.RotatingFileHandler(
            config.get("logging.log_file", "photo_tagger.log"),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logging.getLogger().addHandler(handler)

    logging.getLogger("PIL").setLevel(logging.INFO)
