"""
Focus area configuration for erd-hull.

A focus area names a set of entity groups and gives them a display label,
colour and optional link. The file is a YAML list of records:

    - name: treasury
      label: Treasury
      color: "#ffcc00"
      areas: [Treasury, TreasuryPolicy]
      url: https://example.org/treasury
"""

import os

import yaml
from pydantic import ValidationError

from erdhull.errors import ConfigParseError, NotFoundError
from erdhull.models import FocusArea
from erdhull.tracer import get_tracer, trace


@trace(label="load_focus_areas")
def load_focus_areas(path):
    """
    Load and validate focus areas from a YAML file.

    Raises NotFoundError if the file does not exist.
    Raises ConfigParseError if the file is not a list of valid records.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise NotFoundError(f"Focus areas file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Failed to parse focus areas file \"{path}\": {e}") from e

    focus_areas = parse_focus_areas(data, source=path)

    tracer.event(f"Loaded {len(focus_areas)} focus areas")

    return focus_areas


def parse_focus_areas(data, source="<data>"):
    """Validate already-loaded YAML data into FocusArea objects."""
    if not isinstance(data, list):
        raise ConfigParseError(
            f"Failed to parse focus areas file \"{source}\": "
            "file must contain a list of focus area records"
        )

    focus_areas = []
    names = set()
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise ConfigParseError(
                f"Failed to parse focus areas file \"{source}\": record at index {index} is not a mapping"
            )

        try:
            area = FocusArea.model_validate(record)
        except ValidationError as e:
            name = record.get("name", f"#{index}")
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigParseError(
                f"Failed to parse focus areas file \"{source}\": focus area \"{name}\" is invalid ({problems})"
            ) from e

        if area.name in names:
            raise ConfigParseError(
                f"Failed to parse focus areas file \"{source}\": duplicate focus area \"{area.name}\""
            )
        names.add(area.name)
        focus_areas.append(area)

    return focus_areas


def find_focus_area(focus_areas, name):
    """Look up a focus area by name, raising NotFoundError if absent."""
    for area in focus_areas:
        if area.name == name:
            return area
    raise NotFoundError(f"Focus area \"{name}\" not found")


def entities_for(focus_areas, name):
    return list(find_focus_area(focus_areas, name).areas)


def color_for(focus_areas, name):
    return find_focus_area(focus_areas, name).color


def url_for(focus_areas, name):
    return find_focus_area(focus_areas, name).url


def label_for(focus_areas, name):
    return find_focus_area(focus_areas, name).label


def list_names(focus_areas):
    """All focus area names, in file order."""
    return [area.name for area in focus_areas]
