"""Core configuration, errors, logging and result types."""

from filemeta.core.config import ExtractorConfig, StorageLocation
from filemeta.core.enums import LogLevel, PostProcessor, TikaMode
from filemeta.core.errors import (
    ConfigurationError,
    ExtractionError,
    FilemetaError,
    UnsupportedBackendError,
)
from filemeta.core.result import ExtractionResult, MetadataTree

__all__ = [
    "ExtractorConfig",
    "StorageLocation",
    "LogLevel",
    "PostProcessor",
    "TikaMode",
    "FilemetaError",
    "ConfigurationError",
    "ExtractionError",
    "UnsupportedBackendError",
    "ExtractionResult",
    "MetadataTree",
]
