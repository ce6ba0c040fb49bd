"""Tests for SVG loading and entity group indexing."""

import pytest

from erdhull.models import Point


CARLOS_CENTRES = {
    (80.0, 50.0),   # rect and line
    (55.0, 38.0),   # text, baseline at y=45
    (80.0, 110.0),  # ellipse
    (80.0, 150.0),  # path
    (130.0, 100.0),  # circle
    (40.0, 95.0),   # polygon
}


class TestLoadSvg:
    """Tests for reading documents from disk."""

    def test_load_returns_root_and_text(self, sample_svg_file, sample_svg_text):
        from erdhull.io.load_svg import load_svg, local_name

        root, text = load_svg(sample_svg_file)

        assert local_name(root.tag) == "svg"
        assert text == sample_svg_text

    def test_missing_file(self, temp_dir):
        """Test that a missing file raises NotFoundError."""
        import os

        from erdhull.errors import NotFoundError
        from erdhull.io.load_svg import load_svg

        with pytest.raises(NotFoundError) as exc_info:
            load_svg(os.path.join(temp_dir, "nope.svg"))

        assert "nope.svg" in str(exc_info.value)

    def test_malformed_file(self, write_file):
        """Test that broken markup raises MalformedDocumentError."""
        from erdhull.errors import MalformedDocumentError
        from erdhull.io.load_svg import load_svg

        path = write_file("broken.svg", "<svg><g data-entity='A'></svg>")

        with pytest.raises(MalformedDocumentError):
            load_svg(path)

    def test_comments_preserved(self, sample_svg_text):
        from erdhull.io.load_svg import local_name, parse_svg_text

        root = parse_svg_text(sample_svg_text)

        # Comment nodes have a non-string tag
        assert any(local_name(child.tag) == "" for child in root)


class TestElementBbox:
    """Tests for per-element bounding boxes."""

    def _parse(self, markup):
        from xml.etree import ElementTree as ET
        return ET.fromstring(markup)

    def test_rect(self):
        from erdhull.diagram.bbox import element_bbox

        bbox = element_bbox(self._parse('<rect x="10" y="20" width="30px" height="40"/>'))

        assert (bbox.x, bbox.y, bbox.width, bbox.height) == (10, 20, 30, 40)
        assert bbox.center == Point(x=25, y=40)

    def test_text_with_estimated_width(self):
        """Test that text width falls back to a per-character estimate."""
        from erdhull.diagram.bbox import element_bbox

        bbox = element_bbox(self._parse('<text x="100" y="50" font-size="10" text-anchor="middle">abcd</text>'))

        assert bbox.width == pytest.approx(24.0)
        assert bbox.x == pytest.approx(88.0)
        assert bbox.y == pytest.approx(40.0)
        assert bbox.height == pytest.approx(10.0)

    def test_path_with_curves(self):
        from erdhull.diagram.bbox import element_bbox

        bbox = element_bbox(self._parse('<path d="M 0 0 Q 50 100 100 0"/>'))

        assert bbox.x == pytest.approx(0.0)
        assert bbox.width == pytest.approx(100.0)
        assert bbox.y == pytest.approx(0.0)
        assert bbox.height == pytest.approx(50.0)

    def test_empty_path_has_no_bbox(self):
        from erdhull.diagram.bbox import element_bbox

        assert element_bbox(self._parse('<path d=""/>')) is None

    def test_unknown_tag(self):
        from erdhull.diagram.bbox import element_bbox

        assert element_bbox(self._parse('<title>Diagram</title>')) is None


class TestDiagramDocument:
    """Tests for entity group lookup."""

    def test_group_names(self, sample_svg_file):
        from erdhull.diagram.groups import DiagramDocument

        document = DiagramDocument.from_file(sample_svg_file)

        assert document.group_names() == ["Carlos", "Carl", "Luca"]

    def test_group_contents(self, sample_svg_file):
        """Test that every shape in a group is recorded."""
        from erdhull.diagram.groups import DiagramDocument

        group = DiagramDocument.from_file(sample_svg_file).get_group("Carlos")

        assert [e.tag for e in group.elements] == ["rect", "text", "line", "ellipse", "path", "circle", "polygon"]
        assert (group.bbox.x, group.bbox.y, group.bbox.max_x, group.bbox.max_y) == (20, 20, 140, 160)

    def test_representative_points(self, sample_svg_file):
        """Test that points are element bbox centres."""
        from erdhull.diagram.groups import DiagramDocument

        document = DiagramDocument.from_file(sample_svg_file)
        points = document.groups_by_names(["Carlos"])

        assert len(points) == 7
        assert {p.as_tuple() for p in points} == CARLOS_CENTRES

    def test_exact_name_does_not_match_prefix(self, sample_svg_file):
        """Test that "Carl" does not pull in "Carlos"."""
        from erdhull.diagram.groups import DiagramDocument

        document = DiagramDocument.from_file(sample_svg_file)

        assert document.match("Carl") == ["Carl"]
        assert all(p.x > 260 for p in document.groups_by_names(["Carl"]))

    def test_wildcard_match(self, sample_svg_file):
        from erdhull.diagram.groups import DiagramDocument

        document = DiagramDocument.from_file(sample_svg_file)

        assert document.match("Car*") == ["Carlos", "Carl"]
        assert len(document.groups_by_names(["Car*", "Carl"])) == 14

    def test_unknown_names_skipped(self, sample_svg_file):
        from erdhull.diagram.groups import DiagramDocument

        document = DiagramDocument.from_file(sample_svg_file)

        assert document.groups_by_names(["Nobody"]) == []
        assert len(document.groups_by_names(["Nobody", "Luca"])) == 7

    def test_get_group_missing(self, sample_svg_file):
        from erdhull.diagram.groups import DiagramDocument
        from erdhull.errors import NotFoundError

        document = DiagramDocument.from_file(sample_svg_file)

        with pytest.raises(NotFoundError):
            document.get_group("Nobody")

    def test_require_groups_lists_missing(self, sample_svg_file):
        from erdhull.diagram.groups import DiagramDocument
        from erdhull.errors import NotFoundError

        document = DiagramDocument.from_file(sample_svg_file)
        document.require_groups(["Carlos", "Lu*"])

        with pytest.raises(NotFoundError) as exc_info:
            document.require_groups(["Carlos", "Ghost", "Phantom*"])

        message = str(exc_info.value)
        assert "Ghost" in message
        assert "Phantom*" in message
        assert "Carlos" not in message

    def test_duplicate_group_name(self, write_file):
        """Test that two groups with the same name are rejected."""
        from erdhull.diagram.groups import DiagramDocument
        from erdhull.errors import MalformedDocumentError

        path = write_file("dup.svg", (
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<g data-entity="A"><rect x="0" y="0" width="1" height="1"/></g>'
            '<g data-entity="A"><rect x="5" y="5" width="1" height="1"/></g>'
            '</svg>'
        ))

        with pytest.raises(MalformedDocumentError):
            DiagramDocument.from_file(path)

    def test_custom_group_attribute(self, write_file):
        from erdhull.diagram.groups import DiagramDocument

        path = write_file("ids.svg", (
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<g id="Orders"><rect x="0" y="0" width="10" height="10"/></g>'
            '</svg>'
        ))

        document = DiagramDocument.from_file(path, group_attribute="id")

        assert document.group_names() == ["Orders"]
        assert document.groups_by_names(["Orders"]) == [Point(x=5, y=5)]
