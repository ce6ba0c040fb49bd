"""
Spline smoothing of hull polygons for erd-hull.

Turns polygon vertices into a path of cubic Bezier (or line) segments
using the same curve families as the d3-shape library:

    linear        straight edges, closed with Z
    catmull-rom   interpolating, closed; alpha 0 = uniform, 0.5 = centripetal
    cardinal      interpolating, closed; tension 0 = Catmull-Rom, 1 = straight
    basis         approximating B-spline, open
    basis-closed  approximating B-spline, closed
"""

import numpy as np

from erdhull.config import CURVE_TYPES
from erdhull.errors import InsufficientPointsError, InvalidCurveTypeError
from erdhull.models import CubicBezier, LineSegment, SplineResult
from erdhull.tracer import get_tracer, trace


EPSILON = 1e-12

CLOSED_CURVES = {"linear", "catmull-rom", "cardinal", "basis-closed"}


def validate_curve_type(curve_type):
    """Raise InvalidCurveTypeError for an unknown curve family."""
    if curve_type not in CURVE_TYPES:
        raise InvalidCurveTypeError(
            f"Invalid curve type: {curve_type}. Must be one of: {', '.join(CURVE_TYPES)}"
        )


@trace(label="generate_spline")
def generate_spline(points, config):
    """
    Generate a smooth path through or around polygon vertices.

    Args:
        points: sequence of Point (polygon vertices, closing edge implicit)
        config: SplineConfig with type, tension and alpha

    Returns:
        SplineResult with segments and SVG path data
    """
    tracer = get_tracer()

    validate_curve_type(config.type)

    if len(points) < 2:
        raise InsufficientPointsError(f"At least 2 points are required for a spline, got {len(points)}")

    pts = [np.array([p.x, p.y], dtype=float) for p in points]
    closed = config.type in CLOSED_CURVES

    if len(pts) == 2:
        segments = [_line(pts[0], pts[1])]
        if closed:
            segments.append(_line(pts[1], pts[0]))
    elif config.type == "linear":
        segments = _linear_closed(pts)
    elif config.type == "cardinal":
        segments = _cardinal_closed(pts, config.tension)
    elif config.type == "catmull-rom":
        segments = _catmull_rom_closed(pts, config.alpha)
    elif config.type == "basis":
        segments = _basis_open(pts)
    else:
        segments = _basis_closed(pts)

    result = SplineResult(
        curve_type=config.type,
        segments=segments,
        closed=closed,
        path_data=segments_to_svg_path(segments, closed),
    )

    tracer.event(f"Spline {config.type}: {len(points)} points -> {len(segments)} segments")

    return result


def _line(p0, p1):
    return LineSegment(p0=p0.tolist(), p1=p1.tolist())


def _cubic(p0, p1, p2, p3):
    return CubicBezier(p0=p0.tolist(), p1=p1.tolist(), p2=p2.tolist(), p3=p3.tolist())


def _linear_closed(pts):
    n = len(pts)
    return [_line(pts[i], pts[(i + 1) % n]) for i in range(n)]


def _cardinal_closed(pts, tension):
    n = len(pts)
    k = (1 - tension) / 6
    segments = []
    for i in range(n):
        p0, p1, p2, p3 = pts[i - 1], pts[i], pts[(i + 1) % n], pts[(i + 2) % n]
        segments.append(_cubic(p1, p1 + k * (p2 - p0), p2 + k * (p1 - p3), p2))
    return segments


def _catmull_rom_closed(pts, alpha):
    if not alpha:
        return _cardinal_closed(pts, 0.0)

    n = len(pts)
    segments = []
    for i in range(n):
        p0, p1, p2, p3 = pts[i - 1], pts[i], pts[(i + 1) % n], pts[(i + 2) % n]
        segments.append(_catmull_rom_segment(p0, p1, p2, p3, alpha))
    return segments


def _catmull_rom_segment(p0, p1, p2, p3, alpha):
    """
    Bezier form of the p1 -> p2 Catmull-Rom span.

    Uses the parameterized control points of Yuksel et al., as d3 does.
    """
    l01_2a = float(np.sum((p1 - p0) ** 2)) ** alpha
    l12_2a = float(np.sum((p2 - p1) ** 2)) ** alpha
    l23_2a = float(np.sum((p3 - p2) ** 2)) ** alpha
    l01_a = np.sqrt(l01_2a)
    l12_a = np.sqrt(l12_2a)
    l23_a = np.sqrt(l23_2a)

    c1 = p1
    if l01_a > EPSILON:
        a = 2 * l01_2a + 3 * l01_a * l12_a + l12_2a
        n = 3 * l01_a * (l01_a + l12_a)
        c1 = (p1 * a - p0 * l12_2a + p2 * l01_2a) / n

    c2 = p2
    if l23_a > EPSILON:
        b = 2 * l23_2a + 3 * l23_a * l12_a + l12_2a
        m = 3 * l23_a * (l23_a + l12_a)
        c2 = (p2 * b + p1 * l23_2a - p3 * l12_2a) / m

    return _cubic(p1, c1, c2, p2)


def _basis_open(pts):
    """Uniform cubic B-spline clamped to the first and last vertex."""
    n = len(pts)
    start = (5 * pts[0] + pts[1]) / 6
    segments = [_line(pts[0], start)]

    def span(x0, x1, x):
        return (2 * x0 + x1) / 3, (x0 + 2 * x1) / 3, (x0 + 4 * x1 + x) / 6

    current = start
    for i in range(2, n + 1):
        nxt = pts[i] if i < n else pts[n - 1]
        c1, c2, end = span(pts[i - 2], pts[i - 1], nxt)
        segments.append(_cubic(current, c1, c2, end))
        current = end

    segments.append(_line(current, pts[n - 1]))
    return segments


def _basis_closed(pts):
    """Periodic uniform cubic B-spline."""
    n = len(pts)
    segments = []
    for i in range(n):
        a, b, c, d = pts[i - 1], pts[i], pts[(i + 1) % n], pts[(i + 2) % n]
        segments.append(_cubic((a + 4 * b + c) / 6, (2 * b + c) / 3, (b + 2 * c) / 3, (b + 4 * c + d) / 6))
    return segments


def evaluate_segment(segment, t):
    """
    Evaluate a path segment at parameter t in [0, 1].

    Returns [x, y].
    """
    if isinstance(segment, LineSegment):
        p0 = np.array(segment.p0)
        p1 = np.array(segment.p1)
        return (p0 + t * (p1 - p0)).tolist()

    p0, p1, p2, p3 = (np.array(p) for p in (segment.p0, segment.p1, segment.p2, segment.p3))
    mt = 1 - t
    point = mt ** 3 * p0 + 3 * mt ** 2 * t * p1 + 3 * mt * t ** 2 * p2 + t ** 3 * p3
    return point.tolist()


def segments_to_svg_path(segments, closed):
    """
    Convert connected segments to an SVG path d attribute.

    A closed path whose last segment is a straight line back to the start
    ends in Z instead of an explicit line.
    """
    if not segments:
        return ""

    start = segments[0].p0
    parts = [f"M {start[0]:.2f} {start[1]:.2f}"]

    body = segments
    last = segments[-1]
    if closed and isinstance(last, LineSegment) and np.allclose(last.p1, start):
        body = segments[:-1]

    for seg in body:
        if isinstance(seg, LineSegment):
            parts.append(f"L {seg.p1[0]:.2f} {seg.p1[1]:.2f}")
        else:
            parts.append(
                f"C {seg.p1[0]:.2f} {seg.p1[1]:.2f} {seg.p2[0]:.2f} {seg.p2[1]:.2f} {seg.p3[0]:.2f} {seg.p3[1]:.2f}"
            )

    if closed:
        parts.append("Z")

    return " ".join(parts)
