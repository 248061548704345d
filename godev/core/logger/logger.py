"""Console and file logging for GoDev.

Pipeline status lines go through the ``godev`` logger tree. Third-party
loggers stay at WARNING so ``--debug`` shows only GoDev's own decisions.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from godev.core.config.settings import LoggingSettings

PACKAGE_LOGGER = "godev"

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(settings: LoggingSettings | None = None, debug: bool = False) -> None:
    """Configure logging for a GoDev run.

    Args:
        settings: Logging settings. Defaults are used if not provided.
        debug: Force DEBUG level and show timestamps and source locations
            on the console.
    """
    settings = settings or LoggingSettings()
    level = logging.DEBUG if debug else getattr(logging, settings.level)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)

    console_handler: logging.Handler
    if settings.use_rich:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_path=debug,
            show_time=debug,
            rich_tracebacks=True,
            markup=False,
        )
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(settings.format))
    root_logger.addHandler(console_handler)

    if settings.file:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)

    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger, configuring defaults on first use.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)

