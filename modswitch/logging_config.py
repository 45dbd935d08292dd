import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "modswitch"


def configure_logging(level: str | int = "WARNING", console: Console | None = None) -> logging.Logger:
    """Route the package's loggers to a rich handler on stderr."""
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)

    for h in logger.handlers:
        if isinstance(h, RichHandler):
            h.setLevel(level)
            return logger

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
