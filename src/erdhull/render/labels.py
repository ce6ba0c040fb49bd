"""
Text labels for hull groups.

Each label sits on its group's centroid. With collision avoidance on, a
label that would overlap an earlier one is moved to the first free spot
among 8 compass directions at growing distances, falling back to the
centroid when every candidate is taken.
"""

import math

from shapely.geometry import box

from erdhull.config import RenderStyle
from erdhull.models import Point
from erdhull.tracer import get_tracer, trace


# Average glyph width relative to font size
GLYPH_WIDTH_FACTOR = 0.6

DIRECTIONS = [(math.cos(math.radians(a)), math.sin(math.radians(a))) for a in range(0, 360, 45)]


@trace(label="place_labels")
def place_labels(results, style=None):
    """
    Choose a position for every result's label.

    Returns list of Point, one per result, in the same order.
    """
    tracer = get_tracer()
    style = style or RenderStyle()

    positions = []
    placed_boxes = []
    moved = 0

    for result in results:
        position = result.centroid
        if style.avoid_label_collisions:
            position = find_free_position(result.label, result.centroid, placed_boxes, style)
            if position != result.centroid:
                moved += 1
        positions.append(position)
        placed_boxes.append(label_box(result.label, position, style))

    tracer.event(f"Placed {len(positions)} labels, {moved} moved to avoid overlap")

    return positions


def find_free_position(text, centroid, obstacles, style):
    """
    First candidate position whose label box touches no obstacle.

    Candidates are the centroid, then each of 8 directions at
    style.label_step, 2 * style.label_step, ... up to style.label_max_radius.
    """
    for candidate in candidate_positions(centroid, style):
        candidate_box = label_box(text, candidate, style)
        if not any(candidate_box.intersects(obstacle) for obstacle in obstacles):
            return candidate

    return centroid


def candidate_positions(centroid, style):
    yield centroid

    if style.label_step <= 0:
        return

    steps = int(style.label_max_radius // style.label_step)
    for step in range(1, steps + 1):
        radius = step * style.label_step
        for dx, dy in DIRECTIONS:
            yield Point(x=centroid.x + dx * radius, y=centroid.y + dy * radius)


def label_box(text, position, style):
    """Estimated extent of a centred label as a shapely box."""
    half_width = len(text) * style.font_size * GLYPH_WIDTH_FACTOR / 2
    half_height = style.font_size / 2
    return box(position.x - half_width, position.y - half_height, position.x + half_width, position.y + half_height)


def build_label(dwg, text, position, style=None):
    """
    Create the svgwrite text element for a label.

    Centred horizontally and vertically on position.
    """
    style = style or RenderStyle()

    return dwg.text(
        text,
        insert=(round(position.x, 2), round(position.y, 2)),
        class_="hull-label",
        font_family=style.font_family,
        font_size=style.font_size,
        font_weight=style.font_weight,
        fill=style.label_fill,
        fill_opacity=style.label_opacity,
        text_anchor="middle",
        dominant_baseline="middle",
    )
