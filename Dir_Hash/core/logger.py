import logging
from typing import Callable

LOGGER_NAME = "Dir_Hash"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(component: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{component}")


def log(level: str, component: str, message: str) -> None:
    """
    Log `message` for `component` at a level given by name
    ("DEBUG", "INFO", "WARNING", ...).
    """
    levelno = logging.getLevelName(level.upper())
    if not isinstance(levelno, int):
        levelno = logging.INFO
    get_logger(component).log(levelno, message)


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure default logging if no handlers are present."""
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler()],
    )


def default_warning_sink(component: str = "scanner") -> Callable[[str], None]:
    """Return a warning callback that forwards to the `Dir_Hash` logger."""

    def _sink(message: str) -> None:
        log("WARNING", component, message)

    return _sink
