"""
Logging setup - one stream handler on the root logger, installed at startup.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    # idempotent: uvicorn reload and tests may call this more than once
    for handler in root.handlers:
        if getattr(handler, "_portal_handler", False):
            return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._portal_handler = True
    root.addHandler(handler)
