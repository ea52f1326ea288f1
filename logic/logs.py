"""
Logging setup.

Configures the root logger once for the server process. Modules log through
logging.getLogger(__name__).
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the root logger if it has none.

    Args:
        level: Level name such as "INFO" or "DEBUG". Unknown names fall back to INFO.

    Returns:
        The root logger.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    root.setLevel(resolved)
    return root
