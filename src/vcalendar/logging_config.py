import logging
import sys
from typing import Optional

from vcalendar.config import LOG_LEVEL


def setup_logging(level: Optional[str] = None):
    level = (level or LOG_LEVEL).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(formatter)

    if not root_logger.hasHandlers():
        root_logger.addHandler(console_handler)

    logging.getLogger("vcalendar").setLevel(level)
