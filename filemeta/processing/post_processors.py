"""Post-processors suggested for metadata keys.

Rendering only attaches the name of a post-processor to a key. The
functions in this module do the decoding when a client asks for the value
of an annotated property.
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional, Union

from filemeta.core.enums import PostProcessor
from filemeta.core.result import MetadataTree

# Evaluated top to bottom, first match wins
RULES: tuple[tuple[tuple[str, ...], PostProcessor], ...] = (
    (("date", "modified", "created"), PostProcessor.TIMESTAMP),
    (("gps",), PostProcessor.GPS_DECIMAL),
)

_PDF_DATE = re.compile(
    r"^D:(?P<year>\d{4})(?P<month>\d{2})?(?P<day>\d{2})?(?P<hour>\d{2})?(?P<minute>\d{2})?(?P<second>\d{2})?"
    r"(?P<tz>[Zz]|[+-]\d{2}'?\d{2}'?)?"
)
_EXIF_DATE = re.compile(
    r"^(?P<date>\d{4}:\d{2}:\d{2}) (?P<time>\d{2}:\d{2}:\d{2})(?:\.\d+)?(?P<tz>Z|[+-]\d{2}:\d{2})?$"
)
_NUMBER = re.compile(r"[-+]?\d+(?:\.\d+)?(?:/\d+(?:\.\d+)?)?")
_TEXT_FORMATS = (
    "%a %b %d %H:%M:%S %Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y",
)


def suggest_post_processor(key: str) -> Optional[str]:
    """Suggests a post-processor for a metadata key.

    Args:
        key: Leaf key segment, matched case-insensitively.

    Returns:
        Post-processor identifier, or None when no rule matches.
    """
    lowered = str(key).lower()
    for needles, processor in RULES:
        if any(needle in lowered for needle in needles):
            return processor.value
    return None


def _offset_seconds(tz: Optional[str]) -> int:
    if not tz or tz in ("Z", "z"):
        return 0
    digits = tz[1:].replace("'", "").replace(":", "")
    seconds = int(digits[:2]) * 3600 + int(digits[2:4] or 0) * 60
    return -seconds if tz[0] == "-" else seconds


def _to_timestamp(dt: datetime, offset: int = 0) -> int:
    # Naive values are taken as UTC
    if dt.tzinfo is None:
        return int(dt.replace(tzinfo=timezone.utc).timestamp()) - offset
    return int(dt.timestamp())


def timestamp(value: Any) -> Optional[int]:
    """Convert a date string to a Unix timestamp.

    Understood formats: EXIF (``2015:10:19 12:34:56+02:00``), PDF
    (``D:20151019123456+02'00'``), ISO 8601, pdfinfo
    (``Mon Oct 19 12:34:56 2015 CEST``) and plain numbers.

    Returns:
        Seconds since the epoch, or None if the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)

    text = str(value).strip()
    if not text:
        return None
    if re.fullmatch(r"-?\d+", text):
        return int(text)

    match = _PDF_DATE.match(text)
    if match:
        parts = match.groupdict()
        try:
            dt = datetime(
                int(parts["year"]),
                int(parts["month"] or 1),
                int(parts["day"] or 1),
                int(parts["hour"] or 0),
                int(parts["minute"] or 0),
                int(parts["second"] or 0),
            )
        except ValueError:
            return None
        return _to_timestamp(dt, _offset_seconds(parts["tz"]))

    match = _EXIF_DATE.match(text)
    if match:
        # Unset EXIF dates read 0000:00:00 00:00:00
        try:
            dt = datetime.strptime(f"{match.group('date')} {match.group('time')}", "%Y:%m:%d %H:%M:%S")
        except ValueError:
            return None
        return _to_timestamp(dt, _offset_seconds(match.group("tz")))

    try:
        return _to_timestamp(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    # pdfinfo appends a timezone abbreviation that strptime cannot resolve
    candidates = [text]
    tokens = text.split()
    if len(tokens) > 1 and tokens[-1].isalpha():
        candidates.append(" ".join(tokens[:-1]))
    for candidate in candidates:
        for fmt in _TEXT_FORMATS:
            try:
                return _to_timestamp(datetime.strptime(candidate, fmt))
            except ValueError:
                continue
    return None


def _to_number(token: str) -> float:
    if "/" in token:
        numerator, denominator = token.split("/", 1)
        if float(denominator) == 0:
            return 0.0
        return float(numerator) / float(denominator)
    return float(token)


def gps_to_decimal(value: Any, ref: Optional[str] = None) -> Optional[float]:
    """Convert a GPS coordinate to decimal degrees.

    Accepts decimal numbers, degree/minute/second strings such as
    ``47 deg 22' 12.00" N`` and rational triples (``47/1 22/1 1200/100``).
    The hemisphere comes from ``ref`` or from a trailing/leading N, S, E, W;
    south and west are negative.

    Returns:
        Decimal degrees rounded to 7 places, or None if nothing numeric was found.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        decimal = float(value)
    else:
        text = str(value).strip()
        numbers = [_to_number(token) for token in _NUMBER.findall(text)]
        if not numbers:
            return None

        degrees = numbers[0]
        minutes = numbers[1] if len(numbers) > 1 else 0.0
        seconds = numbers[2] if len(numbers) > 2 else 0.0
        decimal = abs(degrees) + minutes / 60 + seconds / 3600
        if degrees < 0:
            decimal = -decimal

        if ref is None:
            hemisphere = re.search(r"(?:^|[\s\d\"'])([NSEW])\b", text.upper())
            if hemisphere:
                ref = hemisphere.group(1)

    if ref and str(ref).strip().upper()[:1] in ("S", "W"):
        decimal = -abs(decimal)
    return round(decimal, 7)


_PROCESSORS = {
    PostProcessor.TIMESTAMP.value: timestamp,
    PostProcessor.GPS_DECIMAL.value: gps_to_decimal,
    "timestamp": timestamp,
    "gps_to_decimal": gps_to_decimal,
}


def apply(identifier: str, value: Any, **kwargs: Any) -> Any:
    """Apply a post-processor by identifier.

    Raises:
        KeyError: If the identifier is unknown.
    """
    try:
        processor = _PROCESSORS[identifier]
    except KeyError:
        raise KeyError(f"Unknown post-processor: {identifier}")
    return processor(value, **kwargs)


def _child(node: Any, segment: str) -> Any:
    if isinstance(node, dict):
        return node[segment]
    if isinstance(node, list):
        return node[int(segment)]
    raise KeyError(segment)


def resolve_property(tree: MetadataTree, property_path: str) -> Any:
    """Fetch the value designated by an annotated property path.

    Args:
        tree: Metadata tree the path was rendered from.
        property_path: ``Group|Key`` optionally followed by ``->processor``.

    Returns:
        The raw value, or the decoded value when a processor is given.

    Raises:
        KeyError: If the path does not exist in the tree.
    """
    path, _, processor = property_path.partition("->")
    segments = path.split("|")

    parent: Union[MetadataTree, list] = tree
    try:
        for segment in segments[:-1]:
            parent = _child(parent, segment)
        value = _child(parent, segments[-1])
    except (KeyError, IndexError, ValueError):
        raise KeyError(property_path)

    if not processor:
        return value

    kwargs = {}
    if processor in (PostProcessor.GPS_DECIMAL.value, "gps_to_decimal") and isinstance(parent, dict):
        ref = parent.get(f"{segments[-1]}Ref")
        if isinstance(ref, str):
            kwargs["ref"] = ref
    return apply(processor, value, **kwargs)
