"""Result of a single extraction request."""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

MetadataTree = dict[str, Union[str, "MetadataTree", list]]


@dataclass
class ExtractionResult:
    """Outcome of one extraction request.

    Built once per request and discarded after the response is sent.
    """

    success: bool = False
    tree: MetadataTree = field(default_factory=dict)
    html: str = ""
    preview: str = ""
    message: Optional[str] = None
    backend: Optional[str] = None
    processing_time: float = 0.0

    @classmethod
    def failure(cls, message: str, backend: Optional[str] = None) -> "ExtractionResult":
        """Failed result that displays the message in place of metadata."""
        return cls(success=False, html=message, message=message, backend=backend)

    def to_dict(self) -> dict[str, Any]:
        """Response payload for the host application."""
        return {
            "success": self.success,
            "preview": self.preview,
            "html": self.html,
        }

    def __repr__(self) -> str:
        return f"ExtractionResult(success={self.success}, backend={self.backend!r}, keys={list(self.tree.keys())})"
