"""Exception hierarchy for filemeta.

Unresolvable file references use the builtin ``FileNotFoundError``.
"""


class FilemetaError(Exception):
    """Base class for all filemeta errors."""


class ConfigurationError(FilemetaError):
    """A tool path or service endpoint is missing or unusable."""


class UnsupportedBackendError(FilemetaError):
    """The requested backend name is not registered."""


class ExtractionError(FilemetaError):
    """A tool or service failed, or its output could not be parsed."""
