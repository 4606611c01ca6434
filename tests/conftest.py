"""Pytest configuration and fixtures for filemeta tests."""

import os
import stat
import sys
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from PIL import Image

from filemeta.core.config import ExtractorConfig, StorageLocation
from filemeta.core.logging import set_log_level


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Set up logging for tests."""
    set_log_level("DEBUG")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


def make_script(path: Path, body: str) -> Path:
    """Write an executable shell script."""
    path.write_text(f"#!/bin/sh\n{body}\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_tools(temp_dir) -> dict[str, Path]:
    """Placeholder tool binaries; tests mock or replace their behaviour."""
    tools_dir = temp_dir / "bin"
    tools_dir.mkdir()
    return {
        name: make_script(tools_dir / name, "exit 0")
        for name in ("pdfinfo", "exiftool", "java", "tika-app.jar")
    }


@pytest.fixture
def storage_dir(temp_dir) -> Path:
    """Directory mounted as storage 1."""
    path = temp_dir / "storage"
    path.mkdir()
    return path


@pytest.fixture
def asset_dir(temp_dir) -> Path:
    """Directory used as the public asset root."""
    path = temp_dir / "assets"
    path.mkdir()
    return path


@pytest.fixture
def config(fake_tools, storage_dir, asset_dir) -> ExtractorConfig:
    """Configuration pointing at the fake tools and temporary storages."""
    return ExtractorConfig(
        tools_exiftool=str(fake_tools["exiftool"]),
        tools_pdfinfo=str(fake_tools["pdfinfo"]),
        tools_java=str(fake_tools["java"]),
        tools_tika=str(fake_tools["tika-app.jar"]),
        service_tika_url="http://tika.test:9998/",
        timeout=5,
        asset_root=str(asset_dir),
        asset_base_url="/assets/",
        storages={1: StorageLocation(base_path=str(storage_dir), base_url="https://cdn.test/storage/")},
    )


@pytest.fixture
def sample_image(storage_dir) -> Path:
    """JPEG with a few EXIF and GPS tags."""
    path = storage_dir / "photo.jpg"
    img = Image.new("RGB", (32, 16), "red")
    exif = Image.Exif()
    exif[0x010F] = "Canon"  # Make
    exif[0x0110] = "Canon EOS 5D"  # Model
    exif[0x0132] = "2015:10:19 12:34:56"  # DateTime
    exif[0x8825] = {  # GPSInfo
        1: "N",
        2: (47.0, 22.0, 12.0),
        3: "E",
        4: (8.0, 32.0, 0.0),
    }
    img.save(path, exif=exif.tobytes())
    return path


@pytest.fixture
def sample_pdf(storage_dir) -> Path:
    """File with a .pdf extension; PDF parsing is mocked where it matters."""
    path = storage_dir / "document.pdf"
    path.write_bytes(b"%PDF-1.4\n%%EOF\n")
    return path


skip_on_windows = pytest.mark.skipif(
    sys.platform == "win32" or os.name != "posix",
    reason="requires a POSIX shell",
)
