"""Metadata extraction with Apache Tika.

Tika is reached in one of two ways, selected by ``tika_mode``:

1. **server**: a running ``tika-server`` instance. The file is sent with
   ``PUT /meta`` and the metadata comes back as JSON (or XML).
2. **app**: the ``tika-app`` jar, started through java for every file.

``TikaServiceFactory.get_tika`` validates the chosen mode before handing
out a service: the server must answer on ``/version``, the java binary and
the jar must exist.
"""

import json
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Optional, Union

import requests

from filemeta.core.config import ExtractorConfig
from filemeta.core.enums import TikaMode
from filemeta.core.errors import ConfigurationError, ExtractionError
from filemeta.core.logging import get_logger
from filemeta.core.result import MetadataTree
from filemeta.core.utils import CommandUtils, PathUtils
from filemeta.services.base import CommandServiceBase, ServiceBase, normalize_value

SUPPORTED_FILE_TYPES = frozenset({
    "pdf", "doc", "docx", "dot", "dotx", "xls", "xlsx", "ppt", "pptx", "pps", "ppsx",
    "odt", "ods", "odp", "odg", "rtf", "txt", "csv", "html", "htm", "xml", "epub",
    "msg", "eml", "jpg", "jpeg", "png", "gif", "tif", "tiff", "bmp", "webp",
    "mp3", "mp4", "m4a", "ogg", "flac", "wav", "zip",
})


def _flatten(value: Any) -> Any:
    """Single-element lists become their only element."""
    if isinstance(value, list) and len(value) == 1:
        return _flatten(value[0])
    return value


def parse_json_metadata(output: str) -> MetadataTree:
    """Parse Tika JSON metadata.

    The recursive endpoints return a list of objects, the first one
    describing the container document itself.
    """
    try:
        payload = json.loads(output)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Cannot parse Tika JSON output: {e}")

    if isinstance(payload, list):
        payload = payload[0] if payload else {}
    if not isinstance(payload, dict):
        raise ExtractionError(f"Unexpected Tika output of type {type(payload).__name__}")

    return {str(key): normalize_value(_flatten(value)) for key, value in payload.items()}


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _element_to_tree(element: ET.Element) -> Union[str, MetadataTree]:
    children = list(element)
    if not children:
        return (element.text or "").strip()

    tree: MetadataTree = {}
    for child in children:
        key = child.get("name") or _local_name(child.tag)
        if child.get("content") is not None:
            value: Any = child.get("content", "")
        else:
            value = _element_to_tree(child)

        # Repeated keys are collected in a list
        if key in tree:
            existing = tree[key]
            tree[key] = (existing if isinstance(existing, list) else [existing]) + [value]
        else:
            tree[key] = value
    return tree


def parse_xml_metadata(output: str) -> MetadataTree:
    """Parse Tika XML metadata.

    XHTML ``<meta name=".." content=".."/>`` elements are read from their
    attributes; any other element contributes its tag name and text,
    nested elements becoming nested mappings.
    """
    try:
        root = ET.fromstring(output)
    except ET.ParseError as e:
        raise ExtractionError(f"Cannot parse Tika XML output: {e}")

    metas = [el for el in root.iter() if _local_name(el.tag) == "meta" and el.get("name")]
    if metas:
        tree: MetadataTree = {}
        for meta in metas:
            tree[meta.get("name")] = meta.get("content", "")
        return tree

    tree = _element_to_tree(root)
    return tree if isinstance(tree, dict) else {_local_name(root.tag): tree}


class TikaServerService(ServiceBase):
    """A Tika service implementation talking to tika-server."""

    name = "tika"

    def __init__(self, config: Optional[ExtractorConfig] = None, session: Optional[requests.Session] = None) -> None:
        super().__init__(config)
        self.base_url = self.config.service_tika_url
        self.session = session or requests.Session()
        self.version = self.ping()

    def ping(self) -> str:
        """Check that the server answers and return its version string.

        Raises:
            ConfigurationError: If the server is unreachable or misbehaves.
        """
        if not self.base_url:
            raise ConfigurationError("No Tika server URL configured (setting 'service_tika_url')")
        try:
            response = self.session.get(f"{self.base_url}/version", timeout=self.config.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ConfigurationError(f"Tika server is not reachable at {self.base_url}: {e}")

        version = response.text.strip()
        self.logger.debug(f"Connected to {version or 'Tika'} at {self.base_url}")
        return version

    def get_supported_file_types(self) -> set[str]:
        return set(SUPPORTED_FILE_TYPES)

    def extract_metadata_from_local_file(self, file_name: Union[str, Path]) -> MetadataTree:
        with open(file_name, "rb") as f:
            data = f.read()

        try:
            response = self.session.put(
                f"{self.base_url}/meta",
                data=data,
                headers={"Accept": "application/json"},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout:
            raise ExtractionError(f"Tika server timed out after {self.config.timeout:g}s")
        except requests.exceptions.RequestException as e:
            raise ExtractionError(f"Tika request failed: {e}")

        content_type = response.headers.get("Content-Type", "")
        if "xml" in content_type:
            return parse_xml_metadata(response.text)
        return parse_json_metadata(response.text)


class TikaAppService(CommandServiceBase):
    """A Tika service implementation running the tika-app jar."""

    name = "tika"

    def __init__(self, config: Optional[ExtractorConfig] = None) -> None:
        super().__init__(config)
        self.java = PathUtils.require_executable(self.config.tools_java, "tools_java", "Java")
        self.jar = PathUtils.require_executable(self.config.tools_tika, "tools_tika", "Tika app")

    def get_supported_file_types(self) -> set[str]:
        return set(SUPPORTED_FILE_TYPES)

    def build_command(self, file_name: Union[str, Path]) -> list[str]:
        return CommandUtils.build_command(
            self.java, "-jar", self.jar, "--json", "--metadata", Path(file_name).resolve(),
        )

    def extract_metadata_from_local_file(self, file_name: Union[str, Path]) -> MetadataTree:
        command = self.build_command(file_name)
        exit_code, lines = self._run(command)

        output = "\n".join(lines).strip()
        metadata = parse_json_metadata(output) if output else {}
        return self._check_output(exit_code, metadata, command)


class TikaServiceFactory:
    """Factory handing out the Tika service matching the configuration."""

    logger = get_logger("TikaServiceFactory")

    @staticmethod
    def get_tika(config: Optional[ExtractorConfig] = None) -> ServiceBase:
        """Get a ready-to-use Tika service.

        Args:
            config: Extractor configuration.

        Returns:
            TikaServerService or TikaAppService.

        Raises:
            ConfigurationError: If the selected mode cannot be used.
        """
        config = config or ExtractorConfig()
        TikaServiceFactory.logger.debug(f"Using Tika in {config.tika_mode.value} mode")
        if config.tika_mode == TikaMode.APP:
            return TikaAppService(config)
        return TikaServerService(config)
