"""
SVG document loading for erd-hull.

Reads the diagram from disk and parses it into an ElementTree.
"""

import os
from xml.etree import ElementTree as ET

from erdhull.errors import MalformedDocumentError, NotFoundError
from erdhull.tracer import get_tracer, trace


SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

# Keep the default namespace unprefixed when documents are written back out
ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)


@trace(label="load_svg")
def load_svg(path):
    """
    Load an SVG document from disk.

    Returns a tuple of (root, text) where root is the parsed ElementTree
    element and text is the raw document content.

    Raises NotFoundError if path does not exist.
    Raises MalformedDocumentError if the content is not well-formed markup.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise NotFoundError(f"SVG file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        text = f.read()

    root = parse_svg_text(text, source=path)

    tracer.event(f"Loaded SVG: {len(text)} chars", root=root)

    return root, text


def parse_svg_text(text, source="<string>"):
    """Parse SVG markup, raising MalformedDocumentError on failure."""
    # Comments are kept so a rewritten diagram loses as little as possible
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    try:
        return ET.fromstring(text, parser=parser)
    except ET.ParseError as e:
        raise MalformedDocumentError(f"Failed to parse SVG \"{source}\": {e}") from e


def local_name(tag):
    """Strip the namespace from an ElementTree tag."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]
