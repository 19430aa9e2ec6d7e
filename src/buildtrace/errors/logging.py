from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from .config import LoggerConfig

LOGGER_NAME = "buildtrace"


def configure_logging(*, cfg: LoggerConfig) -> logging.Logger:
    """
    Configure the internal ``buildtrace`` diagnostics logger.

    This is not the task console output (see ``buildtrace.tasks``); it carries
    library-level conditions such as failing event subscribers or which config
    file was picked up. Nothing is written to disk.

    Returns
    -------
    logger
        The configured "buildtrace" logger.

    Usage example
    -------------
        logger = configure_logging(cfg=LoggerConfig(debug=True))
        logger.debug("Hello")
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    console_handler = RichHandler(
        console=Console(file=sys.stderr),
        rich_tracebacks=cfg.debug,
        show_path=False,
    )
    console_handler.setLevel(logging.DEBUG if cfg.debug else cfg.console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    logger.debug("Logging configured (debug=%s, max_width=%s)", cfg.debug, cfg.max_width)
    return logger
