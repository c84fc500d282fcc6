# skillsync/utils/logger.py

import logging
import sys

from skillsync.core import config


def setup_logger(level: str | None = None) -> None:
    """Configure the root logger once with a timestamped stdout handler."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel((level or config.LOG_LEVEL).upper())
    root_logger.addHandler(handler)

    # Quiet chatty libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
