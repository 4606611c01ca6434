"""Tests for the metadata renderer."""

import pytest

from filemeta.core.enums import PostProcessor
from filemeta.processing.renderer import MetadataRenderer, escape_html


@pytest.fixture
def plain():
    return MetadataRenderer(annotate=False)


class TestMetadataRenderer:
    """Test cases for MetadataRenderer."""

    def test_single_entry(self, plain):
        assert plain.render({"Title": "My Document"}) == "array(\n  'Title' => 'My Document',\n)"

    def test_empty_tree(self, plain):
        assert plain.render({}) == "array(\n)"
        assert MetadataRenderer().render({}) == "array(\n)"

    def test_nested_tree(self, plain):
        rendered = plain.render({"EXIF": {"Make": "Canon"}})

        assert rendered == (
            "array(\n"
            "  'EXIF' => array(\n"
            "    'Make' => 'Canon',\n"
            "  ),\n"
            ")"
        )

    def test_nested_property_path(self):
        rendered = MetadataRenderer().render({"EXIF": {"Make": "Canon"}})

        assert 'data-property="EXIF|Make"' in rendered
        assert 'data-property="EXIF"' in rendered
        assert rendered.count("array(") == 2

    def test_annotated_key(self):
        rendered = MetadataRenderer().render({"Title": "My Document"})

        assert rendered == (
            "array(\n"
            "  '<a class=\"filemeta-property\" href=\"#\" data-property=\"Title\">Title</a>' => 'My Document',\n"
            ")"
        )

    def test_post_processor_in_property_path(self):
        rendered = MetadataRenderer().render({
            "EXIF": {"DateTimeOriginal": "2015:10:19 12:34:56"},
            "GPS": {"GPSLatitude": "47 deg 22' 12.00\""},
        })

        assert f'data-property="EXIF|DateTimeOriginal->{PostProcessor.TIMESTAMP.value}"' in rendered
        assert f'data-property="GPS->{PostProcessor.GPS_DECIMAL.value}"' in rendered
        assert f'data-property="GPS|GPSLatitude->{PostProcessor.GPS_DECIMAL.value}"' in rendered

    def test_values_are_escaped(self, plain):
        rendered = plain.render({"Comment": "<b>Tom & Jerry's \"show\"</b>"})

        assert "'&lt;b&gt;Tom &amp; Jerry\\'s &quot;show&quot;&lt;/b&gt;'" in rendered

    def test_keys_are_escaped(self):
        rendered = MetadataRenderer().render({"<key>": "v"})

        assert ">&lt;key&gt;</a>" in rendered
        assert 'data-property="&lt;key&gt;"' in rendered

    def test_lists_are_indexed(self, plain):
        rendered = plain.render({"Keywords": ["alps", "lake"]})

        assert rendered == (
            "array(\n"
            "  'Keywords' => array(\n"
            "    '0' => 'alps',\n"
            "    '1' => 'lake',\n"
            "  ),\n"
            ")"
        )

    def test_non_string_scalars(self, plain):
        rendered = plain.render({"Pages": 12, "Encrypted": False, "Missing": None})

        assert "'Pages' => '12'," in rendered
        assert "'Encrypted' => ''," in rendered
        assert "'Missing' => ''," in rendered

    def test_insertion_order_is_kept(self, plain):
        rendered = plain.render({"b": "2", "a": "1", "c": "3"})

        assert rendered.index("'b'") < rendered.index("'a'") < rendered.index("'c'")

    def test_rendering_is_deterministic(self):
        tree = {"File": {"Name": "x.jpg"}, "EXIF": {"Make": "Canon", "Date": "2015:10:19 12:34:56"}}
        renderer = MetadataRenderer()

        assert renderer.render(tree) == renderer.render(tree)

    def test_indent_and_parent(self, plain):
        rendered = plain.render({"Make": "Canon"}, indent=1, parent="EXIF")
        assert rendered == "array(\n    'Make' => 'Canon',\n  )"

        annotated = MetadataRenderer().render({"Make": "Canon"}, parent="EXIF")
        assert 'data-property="EXIF|Make"' in annotated

    def test_property_paths(self):
        paths = MetadataRenderer.property_paths({"EXIF": {"Make": "Canon", "ModifyDate": "x"}, "Tags": ["a"]})

        assert paths == [
            "EXIF",
            "EXIF|Make",
            f"EXIF|ModifyDate->{PostProcessor.TIMESTAMP.value}",
            "Tags",
            "Tags|0",
        ]


def test_escape_html():
    assert escape_html("a & b < c > d \"e\" 'f'") == "a &amp; b &lt; c &gt; d &quot;e&quot; 'f'"
