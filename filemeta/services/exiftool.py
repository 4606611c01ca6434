"""Metadata extraction with Phil Harvey's ExifTool."""

import json
from pathlib import Path
from typing import Optional, Union

from filemeta.core.config import ExtractorConfig
from filemeta.core.errors import ExtractionError
from filemeta.core.result import MetadataTree
from filemeta.core.utils import CommandUtils, PathUtils
from filemeta.services.base import CommandServiceBase, normalize_value

SUPPORTED_FILE_TYPES = frozenset({
    # images
    "jpg", "jpeg", "png", "gif", "tif", "tiff", "bmp", "webp", "heic", "heif",
    "psd", "svg", "ico",
    # raw camera formats
    "cr2", "cr3", "crw", "nef", "nrw", "arw", "dng", "orf", "raf", "rw2", "pef", "srw",
    # audio / video
    "mp3", "m4a", "flac", "ogg", "wav", "aiff", "mp4", "m4v", "mov", "avi", "mkv", "webm", "3gp",
    # documents
    "pdf", "ai", "eps", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "odt", "ods", "odp", "rtf",
})


def parse_grouped_json(output: str) -> MetadataTree:
    """Parse the output of ``exiftool -json -g``.

    ExifTool prints an array with one object per file; tags are grouped by
    family-0 group name (``File``, ``EXIF``, ``GPS``...).
    """
    try:
        payload = json.loads(output)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Cannot parse ExifTool output: {e}")

    if isinstance(payload, list):
        if not payload:
            return {}
        payload = payload[0]
    if not isinstance(payload, dict):
        raise ExtractionError(f"Unexpected ExifTool output of type {type(payload).__name__}")

    payload.pop("SourceFile", None)
    return normalize_value(payload)


class ExifToolService(CommandServiceBase):
    """An ExifTool service implementation."""

    name = "exiftool"

    def __init__(self, config: Optional[ExtractorConfig] = None) -> None:
        super().__init__(config)
        self.executable = PathUtils.require_executable(self.config.tools_exiftool, "tools_exiftool", "ExifTool")

    def get_supported_file_types(self) -> set[str]:
        return set(SUPPORTED_FILE_TYPES)

    def build_command(self, file_name: Union[str, Path]) -> list[str]:
        return CommandUtils.build_command(self.executable, "-json", "-g", Path(file_name).resolve())

    def extract_metadata_from_local_file(self, file_name: Union[str, Path]) -> MetadataTree:
        command = self.build_command(file_name)
        exit_code, lines = self._run(command)

        output = "\n".join(lines).strip()
        metadata = parse_grouped_json(output) if output else {}
        return self._check_output(exit_code, metadata, command)
