"""
Configuration management for erd-hull.

Loads YAML configuration with sensible defaults for every pipeline stage.
"""

import os
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Optional, Tuple

import yaml

from erdhull.errors import ConfigParseError, NotFoundError


CURVE_TYPES = ("linear", "catmull-rom", "cardinal", "basis", "basis-closed")
OUTPUT_FORMATS = ("svg", "json", "text")


@dataclass
class ParserConfig:
    """Configuration for locating entity groups in the diagram."""
    group_attribute: str = "data-entity"


@dataclass
class HullConfig:
    """Configuration for concave hull construction and padding."""
    concavity: float = 2.0  # lower = more concave
    length_threshold: float = 0.0
    padding: float = 0.0


@dataclass
class SplineConfig:
    """Curve family and its shape parameters."""
    type: str = "catmull-rom"
    tension: float = 0.5  # cardinal only, 0.0-1.0
    alpha: float = 0.5  # catmull-rom only, 0.0-1.0


@dataclass(frozen=True)
class RenderStyle:
    """Styling for watercolor layers and text labels."""
    layer_count: int = 5
    base_opacity: float = 0.2
    layer_opacity: float = 0.15
    opacity_step: float = 0.02
    min_opacity: float = 0.05
    jitter_step: float = 2.0
    max_jitter: float = 8.0
    color_jitter_step: float = 5.0
    font_family: str = "Georgia, serif"
    font_size: float = 28.0
    font_weight: str = "bold"
    label_fill: str = "#333333"
    label_opacity: float = 0.35
    avoid_label_collisions: bool = False
    label_step: float = 20.0
    label_max_radius: float = 100.0
    palette: Tuple[str, ...] = (
        "#FFE5E5",  # light pink
        "#E5F3FF",  # light blue
        "#E5FFE5",  # light green
        "#FFF5E5",  # light peach
        "#F5E5FF",  # light purple
        "#FFFFE5",  # light yellow
    )

    def color_for_name(self, name):
        """Stable palette colour derived from a group name."""
        index = sum(ord(ch) for ch in name) % len(self.palette)
        return self.palette[index]


@dataclass
class OutputConfig:
    """Configuration for the emitted document."""
    format: str = "svg"
    fragments_only: bool = False


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: Optional[str] = None
    json_output: bool = False


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""
    parser: ParserConfig = field(default_factory=ParserConfig)
    hull: HullConfig = field(default_factory=HullConfig)
    spline: SplineConfig = field(default_factory=SplineConfig)
    style: RenderStyle = field(default_factory=RenderStyle)
    output: OutputConfig = field(default_factory=OutputConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


def load_config(config_path=None):
    """
    Load configuration from a YAML file.

    Falls back to defaults for any missing values. Unknown sections and
    keys are ignored.
    """
    config = PipelineConfig()

    if not config_path:
        return config

    if not os.path.exists(config_path):
        raise NotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            yaml_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Failed to parse config file \"{config_path}\": {e}") from e

    if not isinstance(yaml_data, dict):
        raise ConfigParseError(f"Config file \"{config_path}\" must contain a mapping of sections")

    return _merge_config(config, yaml_data)


def _merge_config(config, yaml_data):
    """Merge YAML data into the config dataclasses."""
    for section in fields(config):
        values = yaml_data.get(section.name)
        if not isinstance(values, dict):
            continue

        current = getattr(config, section.name)
        known = {f.name for f in fields(current)}
        updates = {k: v for k, v in values.items() if k in known}

        if "palette" in updates:
            updates["palette"] = tuple(updates["palette"])

        # RenderStyle is frozen, so every section is rebuilt rather than mutated
        setattr(config, section.name, replace(current, **updates))

    return config


def save_default_config(path):
    """Save default configuration to a YAML file for reference."""
    yaml_data = asdict(PipelineConfig())
    yaml_data["style"]["palette"] = list(yaml_data["style"]["palette"])
    del yaml_data["tracing"]["file_path"]

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
