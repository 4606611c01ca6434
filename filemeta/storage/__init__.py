"""File handles and reference resolution."""

from filemeta.storage.base import FileHandle
from filemeta.storage.resolver import ASSET_PREFIX, FileResolver

__all__ = ["ASSET_PREFIX", "FileHandle", "FileResolver"]
