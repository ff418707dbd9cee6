from __future__ import annotations

import logging
import sys
from typing import Optional

from .config import get_engine_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Basic stderr logging for command-line use. The library itself never calls this."""
    level_name = (level or get_engine_settings().log_level).upper()
    logging.basicConfig(
        format=LOG_FORMAT,
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.WARNING),
    )
