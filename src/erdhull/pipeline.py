"""
Main pipeline orchestrator for erd-hull.

Parses the diagram once, then for every requested group: resolve points,
build the concave hull and pad it. The output stage smooths, layers and
labels all groups and emits a single document.
"""

from dataclasses import dataclass
from typing import List, Optional

from erdhull.config import OUTPUT_FORMATS, load_config
from erdhull.curves.spline import validate_curve_type
from erdhull.diagram.groups import DiagramDocument
from erdhull.errors import InsufficientPointsError
from erdhull.export.compose import compose
from erdhull.export.report import format_json, format_text
from erdhull.geometry.hull import compute_hull
from erdhull.geometry.padding import add_padding
from erdhull.io.focus_areas import find_focus_area, list_names, load_focus_areas
from erdhull.io.load_svg import load_svg
from erdhull.models import RenderResult, compute_centroid
from erdhull.tracer import get_tracer, trace


@dataclass
class GroupRequest:
    """One hull to draw: which entity groups it covers and how it looks."""
    name: str
    label: str
    color: str
    patterns: List[str]
    url: Optional[str] = None
    strict: bool = False  # every pattern must match a group


def validate_request(names, focus_areas_path, config):
    """
    Reject invalid invocations before any file is parsed.

    Raises ValueError when there is nothing to draw or the output format
    is unknown, InvalidCurveTypeError for an unknown curve family.
    """
    if not names and not focus_areas_path:
        raise ValueError("Provide at least one entity group name or a focus areas file")

    validate_curve_type(config.spline.type)

    if config.output.format not in OUTPUT_FORMATS:
        raise ValueError(
            f"Invalid output format: {config.output.format}. Must be one of: {', '.join(OUTPUT_FORMATS)}"
        )


def build_requests(names, focus_areas_path, config):
    """
    Turn CLI input into group requests.

    With a focus areas file, names select areas (all areas when empty).
    Without one, every name is a group name or wildcard pattern drawn in
    a palette colour.
    """
    if focus_areas_path:
        focus_areas = load_focus_areas(focus_areas_path)
        selected = names or list_names(focus_areas)
        requests = []
        for area_name in selected:
            area = find_focus_area(focus_areas, area_name)
            requests.append(GroupRequest(
                name=area.name,
                label=area.label,
                color=area.color,
                patterns=list(area.areas),
                url=area.url,
                strict=True,
            ))
        return requests

    return [
        GroupRequest(name=name, label=name, color=config.style.color_for_name(name), patterns=[name])
        for name in names
    ]


@trace(label="resolve_group")
def resolve_group(document, request, hull_config):
    """Hull, padding and centroid for one request."""
    tracer = get_tracer()

    if request.strict:
        document.require_groups(request.patterns)

    points = document.groups_by_names(request.patterns)
    if not points:
        raise InsufficientPointsError(f"No points found for entity group \"{request.name}\"")

    hull = compute_hull(
        points,
        concavity=hull_config.concavity,
        length_threshold=hull_config.length_threshold,
    )
    padded = add_padding(hull.points, hull_config.padding)

    tracer.event(f"Group {request.name}: {len(points)} points -> {hull.point_count} hull vertices")

    return RenderResult(
        name=request.name,
        label=request.label,
        points=padded,
        color=request.color,
        url=request.url,
        centroid=compute_centroid(padded),
        hull=hull,
    )


@trace(label="run_pipeline")
def run_pipeline(svg_path, names=None, focus_areas_path=None, config=None, config_path=None, verbose=False):
    """
    Run the full pipeline for one invocation.

    Args:
        svg_path: diagram to read
        names: group names/patterns, or focus area names with focus_areas_path
        focus_areas_path: optional focus areas YAML file
        config: PipelineConfig object (optional)
        config_path: path to YAML config file (optional)
        verbose: include hull vertices in the text report

    Returns:
        tuple of (output text, list of RenderResult)
    """
    tracer = get_tracer()
    names = list(names or [])

    if config is None:
        config = load_config(config_path)

    validate_request(names, focus_areas_path, config)

    requests = build_requests(names, focus_areas_path, config)

    with tracer.span("parse_diagram", module="pipeline"):
        root, svg_text = load_svg(svg_path)
        document = DiagramDocument(root, config.parser.group_attribute)

    results = []
    with tracer.span("resolve_groups", module="pipeline"):
        for request in requests:
            results.append(resolve_group(document, request, config.hull))

    with tracer.span("output", module="pipeline", format=config.output.format):
        if config.output.format == "json":
            output = format_json(results, config.spline)
        elif config.output.format == "text":
            output = format_text(results, config.spline, verbose=verbose)
        else:
            base_document = None if config.output.fragments_only else svg_text
            output = compose(results, config.spline, config.style, base_document=base_document)

    tracer.event(f"Pipeline complete: {len(results)} groups")

    return output, results
