import logging
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging from settings (DEBUG when settings.debug)."""
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
