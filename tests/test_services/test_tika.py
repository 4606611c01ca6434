"""Tests for the Tika services."""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from filemeta.core.enums import TikaMode
from filemeta.core.errors import ConfigurationError, ExtractionError
from filemeta.services.tika import (
    TikaAppService,
    TikaServerService,
    TikaServiceFactory,
    parse_json_metadata,
    parse_xml_metadata,
)

TIKA_JSON = json.dumps({
    "Content-Type": "application/pdf",
    "dc:title": ["Annual Report"],
    "dc:creator": ["Jane Doe", "John Doe"],
    "dcterms:created": "2015-10-19T10:34:56Z",
    "xmpTPg:NPages": "12",
    "pdf:encrypted": False,
})

TIKA_XHTML = """<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<head>
<meta name="dc:title" content="Annual Report"/>
<meta name="Content-Type" content="application/pdf"/>
<title>Annual Report</title>
</head>
<body/>
</html>"""


@pytest.fixture
def tika_session():
    """Mock requests session for a healthy Tika server."""
    session = Mock()
    session.get.return_value = Mock(text="Apache Tika 2.9.1\n", raise_for_status=Mock())
    session.put.return_value = Mock(
        text=TIKA_JSON,
        headers={"Content-Type": "application/json"},
        raise_for_status=Mock(),
    )
    return session


class TestTikaParsers:
    """Test cases for Tika output parsing."""

    def test_single_element_lists_are_flattened(self):
        tree = parse_json_metadata(TIKA_JSON)

        assert tree["dc:title"] == "Annual Report"
        assert tree["dc:creator"] == ["Jane Doe", "John Doe"]
        assert tree["pdf:encrypted"] == ""

    def test_recursive_output_uses_container(self):
        payload = json.dumps([{"dc:title": "Container"}, {"dc:title": "Attachment"}])
        assert parse_json_metadata(payload) == {"dc:title": "Container"}

    def test_invalid_json(self):
        with pytest.raises(ExtractionError, match="Cannot parse Tika JSON output"):
            parse_json_metadata("<html>")

    def test_xhtml_meta_elements(self):
        tree = parse_xml_metadata(TIKA_XHTML)
        assert tree == {"dc:title": "Annual Report", "Content-Type": "application/pdf"}

    def test_generic_xml_is_nested(self):
        tree = parse_xml_metadata(
            "<metadata><title>Report</title><author><name>Jane</name></author>"
            "<keyword>a</keyword><keyword>b</keyword></metadata>",
        )
        assert tree == {"title": "Report", "author": {"name": "Jane"}, "keyword": ["a", "b"]}

    def test_invalid_xml(self):
        with pytest.raises(ExtractionError, match="Cannot parse Tika XML output"):
            parse_xml_metadata("<unclosed>")


class TestTikaServerService:
    """Test cases for TikaServerService."""

    def test_ping_on_construction(self, config, tika_session):
        service = TikaServerService(config, session=tika_session)

        assert service.version == "Apache Tika 2.9.1"
        tika_session.get.assert_called_once_with("http://tika.test:9998/version", timeout=config.timeout)

    def test_unreachable_server(self, config, tika_session):
        tika_session.get.side_effect = requests.exceptions.ConnectionError("Connection refused")

        with pytest.raises(ConfigurationError, match="not reachable"):
            TikaServerService(config, session=tika_session)

    def test_extract_metadata(self, config, tika_session, sample_pdf):
        tree = TikaServerService(config, session=tika_session).extract_metadata_from_local_file(sample_pdf)

        assert tree["dc:title"] == "Annual Report"
        args, kwargs = tika_session.put.call_args
        assert args == ("http://tika.test:9998/meta",)
        assert kwargs["data"] == sample_pdf.read_bytes()
        assert kwargs["headers"] == {"Accept": "application/json"}
        assert kwargs["timeout"] == config.timeout

    def test_xml_response(self, config, tika_session, sample_pdf):
        tika_session.put.return_value = Mock(
            text=TIKA_XHTML,
            headers={"Content-Type": "application/xhtml+xml"},
            raise_for_status=Mock(),
        )

        tree = TikaServerService(config, session=tika_session).extract_metadata_from_local_file(sample_pdf)
        assert tree["dc:title"] == "Annual Report"

    def test_request_timeout(self, config, tika_session, sample_pdf):
        tika_session.put.side_effect = requests.exceptions.Timeout()

        with pytest.raises(ExtractionError, match="timed out"):
            TikaServerService(config, session=tika_session).extract_metadata_from_local_file(sample_pdf)

    def test_http_error(self, config, tika_session, sample_pdf):
        response = Mock(headers={})
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("422 Unprocessable Entity")
        tika_session.put.return_value = response

        with pytest.raises(ExtractionError, match="Tika request failed"):
            TikaServerService(config, session=tika_session).extract_metadata_from_local_file(sample_pdf)


class TestTikaAppService:
    """Test cases for TikaAppService."""

    def test_missing_jar(self, config):
        config.tools_tika = None

        with pytest.raises(ConfigurationError, match="Tika app"):
            TikaAppService(config)

    def test_build_command(self, config, sample_pdf):
        service = TikaAppService(config)

        assert service.build_command(sample_pdf) == [
            str(service.java), "-jar", str(service.jar), "--json", "--metadata", str(sample_pdf.resolve()),
        ]

    @patch("filemeta.services.base.CommandUtils.run_command")
    def test_extract_metadata(self, mock_run, config, sample_pdf):
        mock_run.return_value = (0, TIKA_JSON.splitlines())

        tree = TikaAppService(config).extract_metadata_from_local_file(sample_pdf)
        assert tree["xmpTPg:NPages"] == "12"


class TestTikaServiceFactory:
    """Test cases for TikaServiceFactory."""

    @patch("filemeta.services.tika.requests.Session")
    def test_server_mode(self, mock_session_cls, config, tika_session):
        mock_session_cls.return_value = tika_session

        service = TikaServiceFactory.get_tika(config)
        assert isinstance(service, TikaServerService)

    def test_app_mode(self, config):
        config.tika_mode = TikaMode.APP

        assert isinstance(TikaServiceFactory.get_tika(config), TikaAppService)
