"""Selection of extraction services by name."""

from dataclasses import dataclass
from typing import Callable, Optional

from filemeta.core.config import ExtractorConfig
from filemeta.core.errors import FilemetaError, UnsupportedBackendError
from filemeta.core.logging import get_logger
from filemeta.services.base import ServiceBase
from filemeta.services.exiftool import ExifToolService
from filemeta.services.native import NativeService
from filemeta.services.pdfinfo import PdfinfoService
from filemeta.services.tika import TikaServiceFactory

ServiceConstructor = Callable[[ExtractorConfig], ServiceBase]


@dataclass
class SelectionResult:
    """Outcome of a service selection: a service, or the reason there is none."""

    service: Optional[ServiceBase] = None
    error: Optional[str] = None
    unsupported: bool = False

    @property
    def is_success(self) -> bool:
        return self.service is not None


class ServiceSelector:
    """Registry mapping service names to service constructors."""

    # Default service mapping
    _SERVICES: dict[str, ServiceConstructor] = {
        "exiftool": ExifToolService,
        "pdfinfo": PdfinfoService,
        "native": NativeService,
        "php": NativeService,
        "tika": TikaServiceFactory.get_tika,
    }

    def __init__(self, config: Optional[ExtractorConfig] = None) -> None:
        self.config = config or ExtractorConfig()
        self.logger = get_logger(self.__class__.__name__)
        self._custom_services: dict[str, ServiceConstructor] = {}

    def register(self, name: str, constructor: ServiceConstructor) -> None:
        """Register a custom service; it takes precedence over a default of the same name.

        Args:
            name: Service name used in requests.
            constructor: Callable receiving the config and returning a ServiceBase.
        """
        self._custom_services[name.lower()] = constructor

    def available_services(self) -> list[str]:
        return sorted(set(self._SERVICES) | set(self._custom_services))

    def create(self, name: str) -> ServiceBase:
        """Build the service registered under ``name``.

        Raises:
            UnsupportedBackendError: If no service is registered under that name.
            ConfigurationError: If the service cannot be used with the current configuration.
        """
        key = (name or "").lower()
        constructor = self._custom_services.get(key) or self._SERVICES.get(key)
        if constructor is None:
            raise UnsupportedBackendError(
                f"Unsupported service: {name!r}. Available: {', '.join(self.available_services())}",
            )
        return constructor(self.config)

    def select(self, name: str) -> SelectionResult:
        """Build the service registered under ``name`` without raising.

        Unknown names and construction failures yield no service and a
        displayable message.
        """
        try:
            service = self.create(name)
        except UnsupportedBackendError as e:
            self.logger.warning(str(e))
            return SelectionResult(error=str(e), unsupported=True)
        except FilemetaError as e:
            self.logger.error(f"Service '{name}' is not available: {e}")
            return SelectionResult(error=str(e))
        except Exception as e:
            self.logger.error(f"Failed to initialize service '{name}': {e}")
            return SelectionResult(error=f"Failed to initialize service '{name}': {e}")

        self.logger.debug(f"Selected {service!r}")
        return SelectionResult(service=service)
