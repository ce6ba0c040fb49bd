"""
Hull padding for erd-hull.

Expands a polygon radially away from its centroid. This is a uniform
radial scaling rather than a true buffer: concave inlets grow less
precisely than convex outlets.
"""

import math

from erdhull.models import Point, compute_centroid
from erdhull.tracer import trace


@trace(label="add_padding", arg_names=["distance"])
def add_padding(points, distance):
    """
    Move every point `distance` units further from the centroid.

    Args:
        points: sequence of Point
        distance: padding in document units; <= 0 returns the input

    Returns:
        list of padded Point objects
    """
    if distance <= 0:
        return points

    centroid = compute_centroid(points)

    padded = []
    for point in points:
        dx = point.x - centroid.x
        dy = point.y - centroid.y
        length = math.hypot(dx, dy)

        if length == 0:
            padded.append(point)
            continue

        scale = (length + distance) / length
        padded.append(Point(x=centroid.x + dx * scale, y=centroid.y + dy * scale))

    return padded
