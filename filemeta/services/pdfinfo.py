"""Metadata extraction with poppler's pdfinfo."""

from pathlib import Path
from typing import Iterable, Optional, Union

from filemeta.core.config import ExtractorConfig
from filemeta.core.result import MetadataTree
from filemeta.core.utils import CommandUtils, PathUtils
from filemeta.services.base import CommandServiceBase


def parse_colon_lines(lines: Iterable[str]) -> MetadataTree:
    """Parse ``key: value`` lines.

    Each line is split on its first colon and both parts are trimmed. Lines
    without a colon or with an empty key are dropped; a later duplicate key
    overrides an earlier one.
    """
    metadata: MetadataTree = {}
    for line in lines:
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        if not key:
            continue
        metadata[key] = value.strip()
    return metadata


class PdfinfoService(CommandServiceBase):
    """A pdfinfo service implementation."""

    name = "pdfinfo"

    def __init__(self, config: Optional[ExtractorConfig] = None) -> None:
        super().__init__(config)
        self.executable = PathUtils.require_executable(self.config.tools_pdfinfo, "tools_pdfinfo", "Pdfinfo")

    def get_supported_file_types(self) -> set[str]:
        return {"pdf"}

    def build_command(self, file_name: Union[str, Path]) -> list[str]:
        return CommandUtils.build_command(self.executable, Path(file_name).resolve())

    def extract_metadata_from_local_file(self, file_name: Union[str, Path]) -> MetadataTree:
        command = self.build_command(file_name)
        exit_code, lines = self._run(command)
        metadata = parse_colon_lines(lines)
        return self._check_output(exit_code, metadata, command)
