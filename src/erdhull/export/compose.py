"""
Output composition for erd-hull.

Builds the hull layers and labels as svgwrite elements and either emits
them as standalone fragments or inserts them into the original diagram:
layer groups become the first children of the root <svg> (drawn beneath
the diagram) and labels the last children (drawn above everything).
"""

from xml.etree import ElementTree as ET

import svgwrite

from erdhull.config import RenderStyle
from erdhull.curves.spline import generate_spline
from erdhull.errors import InvalidDocumentError, MalformedDocumentError
from erdhull.io.load_svg import XLINK_NS, local_name, parse_svg_text
from erdhull.render.labels import build_label, place_labels
from erdhull.render.watercolor import render_layers
from erdhull.tracer import get_tracer, trace


XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


@trace(label="compose")
def compose(results, spline_config, style=None, base_document=None):
    """
    Render all results and serialize the output document.

    Args:
        results: list of RenderResult, drawn in this order
        spline_config: SplineConfig used to smooth every hull
        style: RenderStyle for layers and labels
        base_document: original SVG text, or None for fragments only

    Returns:
        SVG markup as a string

    Raises InvalidDocumentError if base_document has no root <svg> element.
    """
    tracer = get_tracer()
    style = style or RenderStyle()

    dwg = svgwrite.Drawing(debug=False)
    positions = place_labels(results, style)

    layer_elements = []
    label_elements = []
    for result, position in zip(results, positions):
        spline = generate_spline(result.points, spline_config)
        layers = render_layers(spline.path_data, result.color, style.layer_count, style)

        group = dwg.g(class_="hull-layers")
        group["data-hull-entity"] = result.name
        group["data-curve-type"] = spline_config.type
        for layer in layers:
            group.add(dwg.path(
                d=layer.path_data,
                fill=layer.color,
                fill_opacity=layer.opacity,
                stroke="none",
            ))

        label = build_label(dwg, result.label, position, style)
        label["data-hull-entity"] = result.name

        layer_elements.append(_wrap_link(dwg, group, result.url).get_xml())
        label_elements.append(_wrap_link(dwg, label, result.url).get_xml())

    if base_document is None:
        fragments = []
        for layer_xml, label_xml in zip(layer_elements, label_elements):
            fragments.append(_serialize(_qualify(layer_xml, "")))
            fragments.append(_serialize(_qualify(label_xml, "")))
        tracer.event(f"Composed {len(results)} groups as fragments")
        return "\n".join(fragments)

    root = _parse_base(base_document)
    namespace = _namespace_of(root)

    for index, layer_xml in enumerate(layer_elements):
        root.insert(index, _qualify(layer_xml, namespace))
    for label_xml in label_elements:
        root.append(_qualify(label_xml, namespace))

    output = _serialize(root)
    if base_document.lstrip().startswith("<?xml"):
        output = f"{XML_DECLARATION}\n{output}"

    tracer.event(f"Composed {len(results)} groups into base document")

    return output


def _wrap_link(dwg, element, url):
    if not url:
        return element
    link = dwg.a(href=url)
    link.add(element)
    return link


def _parse_base(base_document):
    try:
        root = parse_svg_text(base_document, source="base document")
    except MalformedDocumentError as e:
        raise InvalidDocumentError(f"Invalid SVG: {e}") from e

    if local_name(root.tag) != "svg":
        raise InvalidDocumentError("Invalid SVG: missing opening <svg> tag")

    return root


def _namespace_of(elem):
    if isinstance(elem.tag, str) and elem.tag.startswith("{"):
        return elem.tag[1:].split("}", 1)[0]
    return ""


def _qualify(elem, namespace):
    """Put generated elements in the document's namespace."""
    for node in elem.iter():
        if namespace and not node.tag.startswith("{"):
            node.tag = f"{{{namespace}}}{node.tag}"
        for key in list(node.attrib):
            if key.startswith("xlink:"):
                node.attrib[f"{{{XLINK_NS}}}{key[len('xlink:'):]}"] = node.attrib.pop(key)
    return elem


def _serialize(elem):
    return ET.tostring(elem, encoding="unicode")
