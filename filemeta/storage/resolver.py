"""Resolution of file references to local files and public URLs."""

import re
from pathlib import Path
from typing import Optional

from filemeta.core.config import ExtractorConfig
from filemeta.core.logging import get_logger
from filemeta.storage.base import FileHandle

ASSET_PREFIX = "EXT:filemeta/Resources/Public/"
STORAGE_REFERENCE = re.compile(r"^file:(\d+):(.*)$")


class FileResolver:
    """Turn a reference string into a FileHandle.

    Two shapes are understood:

    - ``EXT:filemeta/Resources/Public/<path>``: a file shipped as a public
      package asset, looked up below ``config.asset_root``.
    - ``file:<storage-id>:<path>``: a file inside one of the configured
      storages.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None) -> None:
        self.config = config or ExtractorConfig()
        self.logger = get_logger(self.__class__.__name__)

    def resolve(self, reference: str) -> tuple[FileHandle, str]:
        """Resolve a reference.

        Args:
            reference: Asset or storage reference.

        Returns:
            Tuple of (FileHandle, public URL).

        Raises:
            FileNotFoundError: If the reference cannot be resolved to an existing file.
        """
        if not reference:
            raise FileNotFoundError("No file reference given")

        if reference.startswith(ASSET_PREFIX):
            relative = reference[len(ASSET_PREFIX):]
            handle = self._build_handle(
                Path(self.config.asset_root),
                relative,
                self.config.asset_base_url,
                reference,
            )
        else:
            match = STORAGE_REFERENCE.match(reference)
            if match is None:
                raise FileNotFoundError(f"Unsupported file reference: {reference}")

            storage_id = int(match.group(1))
            storage = self.config.storages.get(storage_id)
            if storage is None:
                raise FileNotFoundError(f"Unknown storage {storage_id} in reference: {reference}")

            handle = self._build_handle(
                Path(storage.base_path),
                match.group(2),
                storage.base_url,
                reference,
            )

        self.logger.debug(f"Resolved {reference} to {handle.path}")
        return handle, handle.public_url

    def _build_handle(self, root: Path, relative: str, base_url: str, reference: str) -> FileHandle:
        root = root.expanduser().resolve()
        relative = relative.lstrip("/")
        path = (root / relative).resolve()

        # Reject references escaping the storage root
        if root != path and root not in path.parents:
            raise FileNotFoundError(f"File reference points outside of its storage: {reference}")
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {reference}")

        return FileHandle(
            path=path,
            identifier=reference,
            public_url=f"{base_url}/{relative}",
        )
