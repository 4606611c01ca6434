"""Rendering of metadata trees into a browsable, annotated text tree."""

from typing import Any, Optional

from filemeta.core.result import MetadataTree
from filemeta.processing.post_processors import suggest_post_processor

INDENT = "  "


def escape_html(value: str) -> str:
    """Escape ``& < > "`` like PHP's htmlspecialchars with ENT_COMPAT."""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _scalar_to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


class MetadataRenderer:
    """Render a metadata tree as a nested ``array(...)`` listing.

    Every key is wrapped in a link carrying its property path, i.e. the
    ``|``-joined path from the root, followed by ``->processor`` when a
    post-processor is suggested for the key. The client uses the path to
    fetch a decoded value on demand.
    """

    def __init__(self, annotate: bool = True, css_class: str = "filemeta-property") -> None:
        self.annotate = annotate
        self.css_class = css_class

    def render(self, metadata: MetadataTree, indent: int = 0, parent: Optional[str] = None) -> str:
        """HTML-izes a metadata tree.

        Args:
            metadata: Tree to render; lists are rendered as index-keyed mappings.
            indent: Nesting level of the opening line.
            parent: Property path of the enclosing key, if any.

        Returns:
            The rendered text, one line per entry plus the bracket lines.
        """
        lines = ["array("]
        items = enumerate(metadata) if isinstance(metadata, list) else metadata.items()

        for key, value in items:
            key = str(key)
            key_name = f"{parent}|{key}" if parent else key
            post_processor = suggest_post_processor(key)
            property_path = key_name + (f"->{post_processor}" if post_processor else "")

            if isinstance(value, (dict, list)):
                rendered_value = self.render(value, indent + 1, key_name)
            else:
                rendered_value = "'" + escape_html(_scalar_to_str(value).replace("'", "\\'")) + "'"

            lines.append(f"{INDENT * (indent + 1)}{self._render_key(key, property_path)} => {rendered_value},")

        lines.append(f"{INDENT * indent})")
        return "\n".join(lines)

    def _render_key(self, key: str, property_path: str) -> str:
        if not self.annotate:
            return f"'{escape_html(key)}'"
        return (
            f"'<a class=\"{self.css_class}\" href=\"#\" data-property=\"{escape_html(property_path)}\">"
            f"{escape_html(key)}</a>'"
        )

    @staticmethod
    def property_paths(metadata: MetadataTree, parent: Optional[str] = None) -> list[str]:
        """List the annotated property paths of every key, in render order."""
        paths = []
        items = enumerate(metadata) if isinstance(metadata, list) else metadata.items()
        for key, value in items:
            key_name = f"{parent}|{key}" if parent else str(key)
            post_processor = suggest_post_processor(str(key))
            paths.append(key_name + (f"->{post_processor}" if post_processor else ""))
            if isinstance(value, (dict, list)):
                paths.extend(MetadataRenderer.property_paths(value, key_name))
        return paths
