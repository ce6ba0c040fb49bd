"""
Bounding geometry for individual SVG elements.

Transforms are not resolved: coordinates are taken as written, which is
how diagram renderers lay out entity boxes.
"""

import re

from svgpathtools import parse_path

from erdhull.io.load_svg import local_name
from erdhull.models import BoundingBox, bbox_from_points
from erdhull.tracer import get_tracer


SHAPE_TAGS = ("rect", "circle", "ellipse", "line", "polyline", "polygon", "path", "text", "image")

# Average glyph width relative to font size, for text without textLength
TEXT_WIDTH_FACTOR = 0.6
DEFAULT_FONT_SIZE = 12.0

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def to_float(value, default=0.0):
    """Parse a length attribute such as "12", "12.5px" or "1e2"."""
    if value is None:
        return default
    match = _NUMBER_RE.search(str(value))
    if not match:
        return default
    return float(match.group(0))


def element_bbox(elem):
    """
    Compute the bounding box of a single shape element.

    Returns None for elements that carry no geometry (unknown tags, empty
    or unparseable path data).
    """
    tag = local_name(elem.tag)
    a = elem.attrib

    if tag in ("rect", "image"):
        return BoundingBox(
            x=to_float(a.get("x")),
            y=to_float(a.get("y")),
            width=to_float(a.get("width")),
            height=to_float(a.get("height")),
        )

    if tag == "circle":
        r = to_float(a.get("r"))
        return BoundingBox(x=to_float(a.get("cx")) - r, y=to_float(a.get("cy")) - r, width=2 * r, height=2 * r)

    if tag == "ellipse":
        rx = to_float(a.get("rx"))
        ry = to_float(a.get("ry"))
        return BoundingBox(x=to_float(a.get("cx")) - rx, y=to_float(a.get("cy")) - ry, width=2 * rx, height=2 * ry)

    if tag == "line":
        return bbox_from_points([
            (to_float(a.get("x1")), to_float(a.get("y1"))),
            (to_float(a.get("x2")), to_float(a.get("y2"))),
        ])

    if tag in ("polyline", "polygon"):
        numbers = [float(n) for n in _NUMBER_RE.findall(a.get("points", ""))]
        if len(numbers) < 2:
            return None
        return bbox_from_points(zip(numbers[0::2], numbers[1::2]))

    if tag == "path":
        return _path_bbox(a.get("d", ""))

    if tag == "text":
        return _text_bbox(elem)

    return None


def _path_bbox(d):
    if not d.strip():
        return None

    try:
        path = parse_path(d)
    except (ValueError, IndexError) as e:
        get_tracer().event(f"Skipping unparseable path data: {e}", level="WARN")
        return None

    if len(path) == 0:
        return None

    xmin, xmax, ymin, ymax = path.bbox()
    return BoundingBox(x=xmin, y=ymin, width=xmax - xmin, height=ymax - ymin)


def _text_bbox(elem):
    """
    Approximate text extent.

    Uses textLength when the renderer emitted it, otherwise estimates the
    width from the character count. y is the baseline.
    """
    a = elem.attrib
    content = "".join(elem.itertext())
    font_size = to_float(a.get("font-size"), DEFAULT_FONT_SIZE)

    if "textLength" in a:
        width = to_float(a.get("textLength"))
    else:
        width = len(content) * font_size * TEXT_WIDTH_FACTOR

    x = to_float(a.get("x"))
    anchor = a.get("text-anchor", "start")
    if anchor == "middle":
        x -= width / 2
    elif anchor == "end":
        x -= width

    y = to_float(a.get("y")) - font_size
    return BoundingBox(x=x, y=y, width=width, height=font_size)
