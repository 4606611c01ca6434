"""In-process metadata extraction.

Fallback used when no external tool is configured. Images are read with
Pillow, PDF documents with pdfplumber; nothing is executed outside the
current process.
"""

from pathlib import Path
from typing import Any, Union

from PIL import ExifTags, Image, TiffImagePlugin

from filemeta.core.errors import ExtractionError
from filemeta.core.result import MetadataTree
from filemeta.services.base import ServiceBase

IMAGE_FILE_TYPES = frozenset({"jpg", "jpeg", "png", "gif", "tif", "tiff", "webp"})
PDF_FILE_TYPES = frozenset({"pdf"})

# Sub-IFD pointers, replaced by their decoded content
_IFD_POINTERS = {"ExifOffset", "GPSInfo", "InteropOffset"}


def _format_value(value: Any) -> Any:
    """Turn a Pillow / pdfminer value into a display string or list."""
    if isinstance(value, bytes):
        return value.decode("latin-1").rstrip("\x00").strip()
    if isinstance(value, TiffImagePlugin.IFDRational):
        if value.denominator == 0:
            return ""
        return f"{float(value):g}"
    if isinstance(value, float):
        return f"{value:g}"
    if isinstance(value, (tuple, list)):
        return ", ".join(str(_format_value(v)) for v in value)
    # pdfminer PSLiteral and friends expose .name
    if hasattr(value, "name") and not isinstance(value, str):
        return str(value.name)
    return str(value)


def _named_tags(ifd: Any, names: dict) -> MetadataTree:
    tags: MetadataTree = {}
    for tag_id, value in ifd.items():
        name = names.get(tag_id, str(tag_id))
        if name in _IFD_POINTERS or name == "MakerNote":
            continue
        tags[name] = _format_value(value)
    return tags


def read_image_metadata(path: Union[str, Path]) -> MetadataTree:
    """Build an ExifTool-like grouped tree for an image."""
    with Image.open(path) as img:
        tree: MetadataTree = {
            "File": {
                "FileType": img.format or "",
                "MIMEType": Image.MIME.get(img.format or "", ""),
                "ImageWidth": str(img.width),
                "ImageHeight": str(img.height),
                "ColorMode": img.mode,
            },
        }

        info = {
            str(key): _format_value(value)
            for key, value in (img.info or {}).items()
            if isinstance(value, (str, int, float, tuple)) and key not in ("exif", "icc_profile")
        }
        if info:
            tree["Info"] = info

        exif = img.getexif()
        exif_tags = _named_tags(exif, ExifTags.TAGS)
        exif_tags.update(_named_tags(exif.get_ifd(ExifTags.IFD.Exif), ExifTags.TAGS))
        if exif_tags:
            tree["EXIF"] = exif_tags

        gps_tags = _named_tags(exif.get_ifd(ExifTags.IFD.GPSInfo), ExifTags.GPSTAGS)
        if gps_tags:
            tree["GPS"] = gps_tags

    return tree


def read_pdf_metadata(path: Union[str, Path]) -> MetadataTree:
    """Read the document information dictionary of a PDF."""
    import pdfplumber

    with pdfplumber.open(path) as pdf:
        tree: MetadataTree = {
            str(key): _format_value(value)
            for key, value in (pdf.metadata or {}).items()
        }
        tree["Pages"] = str(len(pdf.pages))
    return tree


class NativeService(ServiceBase):
    """A service implementation that needs no external tool."""

    name = "native"

    def get_supported_file_types(self) -> set[str]:
        return set(IMAGE_FILE_TYPES | PDF_FILE_TYPES)

    def extract_metadata_from_local_file(self, file_name: Union[str, Path]) -> MetadataTree:
        extension = Path(file_name).suffix.lower().lstrip(".")
        if extension not in self.get_supported_file_types():
            raise ExtractionError(f"Unsupported file type for native extraction: {extension or '(none)'}")

        try:
            if extension in PDF_FILE_TYPES:
                return read_pdf_metadata(file_name)
            return read_image_metadata(file_name)
        except Exception as e:
            self.logger.error(f"Native extraction failed for {file_name}: {e}")
            raise ExtractionError(f"Cannot read metadata from {Path(file_name).name}: {e}") from e
