# refer - https://loguru.readthedocs.io/en/stable/api/logger.html
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from filemeta.core.enums import LogLevel

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

logger.remove() # remove default stuff
logger.configure(extra={"name": "filemeta"})

_console_sink_id = logger.add(
    sys.stderr,
    format=LOG_FORMAT,
    level="INFO",
    colorize=True,
)


# Function to get logger with context
def get_logger(name: Optional[str] = None):
    if name:
        return logger.bind(name=name)
    return logger


def add_log_file(filepath: Union[str, Path], level: str = "INFO", **kwargs) -> int:
    Path(filepath).parent.mkdir(parents=True, exist_ok=True)
    return logger.add(
        filepath,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}",
        level=level,
        **kwargs,
    )


def set_log_level(level: Union[str, LogLevel]) -> None:
    global _console_sink_id
    if isinstance(level, LogLevel):
        level = level.value
    logger.remove(_console_sink_id)
    _console_sink_id = logger.add(sys.stderr, format=LOG_FORMAT, level=level.upper(), colorize=True)
