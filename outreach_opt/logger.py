# outreach_opt/logger.py
from __future__ import annotations

import logging
from typing import Union

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Root logger setup for scripts and the API process."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
