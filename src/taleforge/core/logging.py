"""Logging setup shared by the API entry point."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single stream handler.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG"
    """
    resolved = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("taleforge").setLevel(resolved)
