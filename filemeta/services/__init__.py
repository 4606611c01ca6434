"""Extraction services for the supported external tools."""

from filemeta.services.base import ServiceBase
from filemeta.services.exiftool import ExifToolService
from filemeta.services.native import NativeService
from filemeta.services.pdfinfo import PdfinfoService
from filemeta.services.selector import SelectionResult, ServiceSelector
from filemeta.services.tika import TikaAppService, TikaServerService, TikaServiceFactory

__all__ = [
    "ServiceBase",
    "ExifToolService",
    "NativeService",
    "PdfinfoService",
    "TikaAppService",
    "TikaServerService",
    "TikaServiceFactory",
    "SelectionResult",
    "ServiceSelector",
]
