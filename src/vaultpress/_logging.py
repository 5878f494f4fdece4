"""Package logging setup; level from VAULTPRESS_LOG_LEVEL (default WARNING)"""

import logging
import os
import sys


LOG_LEVEL_ENV = "VAULTPRESS_LOG_LEVEL"


def configure_logging() -> None:
    """Attach a stderr handler to the vaultpress logger once; later calls are no-ops."""
    logger = logging.getLogger("vaultpress")
    if logger.handlers:
        return

    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))

    logger.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
