"""
Watercolor layering for hull fills.

A hull is drawn as several translucent, slightly displaced copies of its
path with small colour shifts, which reads as a painted wash. All the
"randomness" is a fixed function of layer and coordinate index so the
same input always produces byte-identical output.
"""

import math
import re

from PIL import ImageColor

from erdhull.config import RenderStyle
from erdhull.models import RenderLayer
from erdhull.tracer import get_tracer, trace


_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")

LAYER_SEED = 123.456


@trace(label="render_layers", arg_names=["layer_count"])
def render_layers(path_data, base_color, layer_count=5, style=None):
    """
    Build watercolor layers for one path.

    Layer 0 is the path itself at style.base_opacity. Every further layer
    jitters each coordinate pair, shifts the colour a little and is more
    transparent than the one before, down to style.min_opacity.

    Returns list of RenderLayer.
    """
    tracer = get_tracer()
    style = style or RenderStyle()

    layers = [RenderLayer(path_data=path_data, opacity=style.base_opacity, color=base_color)]

    for index in range(1, layer_count):
        layers.append(RenderLayer(
            path_data=create_path_variation(path_data, index, style),
            opacity=layer_opacity(index, style),
            color=vary_color(base_color, index, style),
        ))

    tracer.event(f"Rendered {len(layers)} watercolor layers")

    return layers


def layer_opacity(index, style):
    """Opacity of layer index >= 1: decreasing, floored at style.min_opacity."""
    return round(max(style.min_opacity, style.layer_opacity - index * style.opacity_step), 4)


def jitter_magnitude(index, style):
    """Maximum displacement for a layer, growing with index up to a cap."""
    return min(style.max_jitter, index * style.jitter_step)


def seeded_random(seed):
    """Deterministic value in [0, 1) derived from a seed."""
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def create_path_variation(path_data, index, style):
    """
    Displace every coordinate pair of a path.

    Coordinates are taken in order of appearance; pair k of layer index
    moves by seeded_random(index * 123.456 + 2k [+ 1]) scaled to the
    layer's jitter magnitude and centred on zero.
    """
    numbers = _NUMBER_RE.findall(path_data)
    if len(numbers) < 2:
        return path_data

    seed = index * LAYER_SEED
    magnitude = jitter_magnitude(index, style)
    pair_count = len(numbers) // 2
    counter = iter(range(pair_count * 2))

    def displace(match):
        position = next(counter, None)
        if position is None:
            return match.group(0)
        offset = seeded_random(seed + position) * magnitude - magnitude / 2
        return f"{float(match.group(0)) + offset:.2f}"

    return _NUMBER_RE.sub(displace, path_data)


def vary_color(base_color, index, style):
    """
    Shift each colour channel by a small deterministic amount.

    Accepts any colour Pillow understands (named, hex, rgb()) and returns hex.
    """
    r, g, b = ImageColor.getrgb(base_color)[:3]
    spread = index * style.color_jitter_step

    def shift(channel, salt):
        value = channel + seeded_random(index * salt) * spread - spread / 2
        return int(round(max(0, min(255, value))))

    return "#{:02x}{:02x}{:02x}".format(shift(r, 7), shift(g, 11), shift(b, 13))
