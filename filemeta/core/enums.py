"""Core enums for filemeta."""

from enum import Enum


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class TikaMode(Enum):
    """How the Tika backend is reached."""
    SERVER = "server"
    APP = "app"


class PostProcessor(Enum):
    """Post-processors that can be suggested for a metadata key."""
    TIMESTAMP = "filemeta.processing.post_processors.timestamp"
    GPS_DECIMAL = "filemeta.processing.post_processors.gps_to_decimal"
