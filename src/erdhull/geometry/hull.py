"""
Concave hull construction for erd-hull.

The hull itself comes from the concave_hull package, an implementation of
the concaveman algorithm. concavity is relative: 1 gives a detailed
shape, larger values give straighter edges and infinity the convex hull.
length_threshold keeps edges shorter than the threshold from being
refined further, which reduces jaggedness.
"""

import numpy as np
from concave_hull import concave_hull_indexes
from shapely.geometry import MultiPoint, Polygon

from erdhull.errors import InsufficientPointsError
from erdhull.models import HullResult, Point
from erdhull.tracer import get_tracer, trace


MIN_HULL_POINTS = 3


@trace(label="compute_hull", arg_names=["concavity", "length_threshold"])
def compute_hull(points, concavity=2.0, length_threshold=0.0):
    """
    Compute a concave hull around a point set.

    Args:
        points: sequence of Point
        concavity: concaveman concavity (lower = tighter fit)
        length_threshold: minimum edge length considered for refinement

    Returns:
        HullResult with vertices in the order the algorithm produced them

    Raises InsufficientPointsError for fewer than 3 distinct points or a
    point set without spatial extent.
    """
    tracer = get_tracer()

    coords = _distinct_coords(points)
    if len(coords) < MIN_HULL_POINTS:
        raise InsufficientPointsError(
            f"At least {MIN_HULL_POINTS} distinct points are required to build a hull, got {len(coords)}"
        )

    if MultiPoint(coords.tolist()).convex_hull.area <= 0:
        raise InsufficientPointsError("Points are collinear; the hull would have no area")

    indexes = concave_hull_indexes(
        coords,
        concavity=concavity,
        length_threshold=length_threshold,
    )
    ring = coords[np.asarray(indexes, dtype=int)]

    # The closing edge is implicit
    if len(ring) > 1 and np.array_equal(ring[0], ring[-1]):
        ring = ring[:-1]

    if len(ring) < MIN_HULL_POINTS:
        raise InsufficientPointsError(f"Hull degenerated to {len(ring)} vertices")

    polygon = Polygon(ring.tolist())
    result = HullResult(
        points=[Point(x=float(x), y=float(y)) for x, y in ring],
        area=float(polygon.area),
        perimeter=float(polygon.exterior.length),
    )

    tracer.event(
        f"Hull: {result.point_count} of {len(coords)} points, "
        f"area={result.area:.2f}, perimeter={result.perimeter:.2f}"
    )

    return result


def convex_hull_area(points):
    """Area of the convex hull of a point set (0 for degenerate input)."""
    if not points:
        return 0.0
    return float(MultiPoint([p.as_tuple() for p in points]).convex_hull.area)


def _distinct_coords(points):
    """Points as an (N, 2) float array, duplicates removed, order kept."""
    if not points:
        return np.empty((0, 2), dtype=np.float64)

    coords = np.array([[p.x, p.y] for p in points], dtype=np.float64)
    _, first_index = np.unique(coords, axis=0, return_index=True)
    return np.ascontiguousarray(coords[np.sort(first_index)])
