# storefront/utils/logging.py
import logging
import sys

from storefront.utils.settings import LOG_LEVEL, LOG_FORMAT

_configured = False


def setup_logging(level: str | None = None) -> None:
    global _configured
    if _configured:
        return

    numeric_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # biblioteki http sa zbyt gadatliwe na INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
