"""filemeta - metadata extraction through pluggable external tools."""

__version__ = "0.1.0"

from filemeta.core.config import ExtractorConfig
from filemeta.core.errors import (
    ConfigurationError,
    ExtractionError,
    FilemetaError,
    UnsupportedBackendError,
)
from filemeta.core.result import ExtractionResult
from filemeta.facade import RequestFacade
from filemeta.processing.renderer import MetadataRenderer
from filemeta.services.selector import ServiceSelector
from filemeta.storage.resolver import FileResolver

__all__ = [
    "ExtractorConfig",
    "ExtractionResult",
    "RequestFacade",
    "MetadataRenderer",
    "ServiceSelector",
    "FileResolver",
    "FilemetaError",
    "ConfigurationError",
    "ExtractionError",
    "UnsupportedBackendError",
]
