"""
Report formats and file output for erd-hull.

Besides the composed SVG, results can be reported as JSON or as a
human-readable text summary, and the SVG can be rasterised to PNG.
"""

import json
import os

from erdhull.tracer import get_tracer, trace


def format_json(results, spline_config):
    """One JSON object per group with hull geometry and spline settings."""
    payload = []
    for result in results:
        payload.append({
            "entityName": result.name,
            "label": result.label,
            "color": result.color,
            "url": result.url,
            "hull": {
                "points": [{"x": p.x, "y": p.y} for p in result.hull.points],
                "area": result.hull.area,
                "perimeter": result.hull.perimeter,
                "pointCount": result.hull.point_count,
            },
            "padded": [{"x": p.x, "y": p.y} for p in result.points],
            "centroid": {"x": result.centroid.x, "y": result.centroid.y},
            "spline": {
                "curveType": spline_config.type,
                "tension": spline_config.tension,
                "alpha": spline_config.alpha,
            },
        })
    return json.dumps(payload, indent=2)


def format_text(results, spline_config, verbose=False):
    """Human-readable summary; lists hull vertices when verbose."""
    blocks = []
    for result in results:
        title = f"Smooth Spline Hull for Entity: {result.name}"
        lines = [
            title,
            "=" * len(title),
            f"Label: {result.label}",
            f"Points: {result.hull.point_count}",
            f"Area: {result.hull.area:.2f} square units",
            f"Perimeter: {result.hull.perimeter:.2f} units",
            f"Curve Type: {spline_config.type}",
        ]
        if spline_config.type == "cardinal":
            lines.append(f"Tension: {spline_config.tension}")
        if spline_config.type == "catmull-rom":
            lines.append(f"Alpha: {spline_config.alpha}")

        if verbose:
            lines.append("")
            lines.append("Hull Points:")
            for index, point in enumerate(result.hull.points, start=1):
                lines.append(f"  {index}: ({point.x:.2f}, {point.y:.2f})")

        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


@trace(label="render_png")
def render_png(svg_text, png_path, dpi=96):
    """Rasterise SVG markup to a PNG file with cairosvg."""
    import cairosvg

    tracer = get_tracer()

    directory = os.path.dirname(png_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    cairosvg.svg2png(bytestring=svg_text.encode("utf-8"), write_to=png_path, dpi=dpi)

    tracer.event(f"Saved PNG: {png_path}")
