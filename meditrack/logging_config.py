import sys

from loguru import logger

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}"


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with one at the configured level"""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
