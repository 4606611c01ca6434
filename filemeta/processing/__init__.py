"""Post-processing hints and rendering of metadata trees."""

from filemeta.processing.post_processors import (
    gps_to_decimal,
    resolve_property,
    suggest_post_processor,
    timestamp,
)
from filemeta.processing.renderer import MetadataRenderer

__all__ = [
    "MetadataRenderer",
    "gps_to_decimal",
    "resolve_property",
    "suggest_post_processor",
    "timestamp",
]
