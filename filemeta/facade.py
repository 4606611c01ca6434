"""Single entry point for metadata extraction requests."""

import time
from typing import Optional

from filemeta.core.config import ExtractorConfig
from filemeta.core.errors import FilemetaError
from filemeta.core.logging import get_logger
from filemeta.core.result import ExtractionResult
from filemeta.processing.renderer import MetadataRenderer
from filemeta.services.selector import ServiceSelector
from filemeta.storage.resolver import FileResolver

PREVIEW_FILE_TYPES = frozenset({"jpg", "jpeg", "png", "gif"})


class RequestFacade:
    """Resolve a file, pick a service, extract and render its metadata.

    ``extract`` never raises: every failure ends up as an unsuccessful
    ExtractionResult. Its ``html`` holds a readable message, except for
    unknown service names, which render nothing.
    """

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        resolver: Optional[FileResolver] = None,
        selector: Optional[ServiceSelector] = None,
        renderer: Optional[MetadataRenderer] = None,
    ) -> None:
        self.config = config or ExtractorConfig()
        self.resolver = resolver or FileResolver(self.config)
        self.selector = selector or ServiceSelector(self.config)
        self.renderer = renderer or MetadataRenderer()
        self.logger = get_logger(self.__class__.__name__)

    def extract(self, reference: str, service_name: str, caller_is_authorized: bool) -> ExtractionResult:
        """Run one extraction request end to end.

        Args:
            reference: File reference (asset path or ``file:<id>:<path>``).
            service_name: Name of the service to use.
            caller_is_authorized: Authorization decision of the host.

        Returns:
            ExtractionResult; ``success`` tells whether metadata was extracted.
        """
        start_time = time.time()
        try:
            result = self._extract(reference, service_name, caller_is_authorized)
        except Exception as e:
            self.logger.exception(f"Unexpected error extracting {reference} with {service_name}: {e}")
            result = ExtractionResult.failure(f"Unexpected error: {e}", backend=service_name)

        result.processing_time = time.time() - start_time
        return result

    def _extract(self, reference: str, service_name: str, caller_is_authorized: bool) -> ExtractionResult:
        if not caller_is_authorized:
            self.logger.warning(f"Refused unauthorized extraction request for {reference}")
            return ExtractionResult.failure("Access denied", backend=service_name)

        try:
            file, public_url = self.resolver.resolve(reference)
        except FileNotFoundError as e:
            self.logger.error(f"Cannot resolve {reference}: {e}")
            return ExtractionResult.failure(str(e), backend=service_name)

        selection = self.selector.select(service_name)
        if not selection.is_success:
            if selection.unsupported:
                # Unknown service names render nothing
                return ExtractionResult(success=False, message=selection.error, backend=service_name)
            return ExtractionResult.failure(selection.error or f"Service '{service_name}' is not available", backend=service_name)

        service = selection.service
        if not service.can_extract(file):
            self.logger.info(f"{service.name} does not declare support for .{file.extension} files, trying anyway")

        try:
            metadata = service.extract_metadata(file)
        except FilemetaError as e:
            self.logger.error(f"Extraction failed for {file.path} with {service.name}: {e}")
            return ExtractionResult.failure(str(e), backend=service_name)

        preview = ""
        if file.extension in PREVIEW_FILE_TYPES:
            preview = f'<img src="{public_url}" alt="" width="{self.config.preview_width}" />'

        self.logger.info(f"Extracted {len(metadata)} entries from {file.name} with {service.name}")
        return ExtractionResult(
            success=True,
            tree=metadata,
            html=self.renderer.render(metadata),
            preview=preview,
            backend=service_name,
        )
