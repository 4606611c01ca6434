"""Base class and interface for extraction services."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from filemeta.core.config import ExtractorConfig
from filemeta.core.errors import ExtractionError
from filemeta.core.logging import get_logger
from filemeta.core.result import MetadataTree
from filemeta.core.utils import CommandUtils
from filemeta.storage.base import FileHandle


def normalize_value(value: Any) -> Any:
    """Coerce decoded JSON into the MetadataTree shape.

    Mappings and lists are kept and normalized recursively, every other
    value becomes a string.
    """
    if isinstance(value, dict):
        return {str(k): normalize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_value(v) for v in value]
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


class ServiceBase(ABC):
    """Base class for all extraction services.

    A service declares the file extensions it understands and turns a local
    file into a nested metadata mapping. Tool paths and endpoints are
    validated in the constructor; a service that was constructed is ready
    to extract.
    """

    name: str = "base"

    def __init__(self, config: Optional[ExtractorConfig] = None) -> None:
        self.config = config or ExtractorConfig()
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def get_supported_file_types(self) -> set[str]:
        """Returns the set of supported file extensions (lowercase, without dots)."""

    @abstractmethod
    def extract_metadata_from_local_file(self, file_name: Union[str, Path]) -> MetadataTree:
        """Extract metadata from a local file.

        Args:
            file_name: Absolute path to the file.

        Returns:
            Nested metadata mapping, in the order the tool reported it.

        Raises:
            ExtractionError: If the tool fails or its output cannot be parsed.
        """

    def can_extract(self, file: FileHandle) -> bool:
        return file.extension in self.get_supported_file_types()

    def extract_metadata(self, file: FileHandle) -> MetadataTree:
        """Takes a file handle and extracts its metadata.

        Args:
            file: Resolved file.

        Returns:
            Nested metadata mapping.
        """
        if not file.path.is_file():
            raise ExtractionError(f"File is not readable: {file.path}")

        self.logger.debug(f"Extracting metadata from {file.path} with {self.name}")
        return self.extract_metadata_from_local_file(file.path)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class CommandServiceBase(ServiceBase):
    """Service backed by an external command line tool."""

    def _run(self, command: list[str]) -> tuple[int, list[str]]:
        return CommandUtils.run_command(command, timeout=self.config.timeout)

    def _check_output(self, exit_code: int, metadata: MetadataTree, command: list[str]) -> MetadataTree:
        """Apply the exit-code policy.

        A non-zero exit code is tolerated as long as something was parsed.
        """
        if exit_code != 0:
            if not metadata:
                raise ExtractionError(
                    f"{Path(command[0]).name} exited with code {exit_code} and produced no metadata",
                )
            self.logger.warning(
                f"{Path(command[0]).name} exited with code {exit_code}, keeping {len(metadata)} parsed entries",
            )
        return metadata
