"""
Storefront logging.

Every service module logs through a child of the "storefront" logger
(`get_logger("cart")` -> "storefront.cart"): cart mutations and rejected
requests at INFO, cart rollbacks at WARNING. Output goes to stdout at the
LOG_LEVEL from config.
"""
import logging
import sys

from config import settings

logger = logging.getLogger("storefront")
logger.setLevel(settings.log_level)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(settings.log_level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)

# uvicorn installs its own root handler
logger.propagate = False


def get_logger(name: str = None) -> logging.Logger:
    """Return the "storefront" logger, or its child `storefront.<name>`."""
    if name:
        return logger.getChild(name)
    return logger
