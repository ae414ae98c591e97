"""Logging helpers shared by all engines."""

import logging

ROOT_LOGGER = "maskseg"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Return a logger under the ``maskseg`` hierarchy.

    The package root logger gets a single stream handler the first time any
    module asks for a logger; child loggers propagate to it.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return root.getChild(name)


__all__ = ["get_logger", "DEFAULT_FORMAT", "ROOT_LOGGER"]
