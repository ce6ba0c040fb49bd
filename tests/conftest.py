"""Pytest fixtures for erd-hull tests."""

import os
import tempfile

import pytest


def entity_markup(name, dx, dy):
    """Markup for one entity group, shifted by (dx, dy)."""
    return f"""
  <g class="entity" data-entity="{name}" id="ent_{name}">
    <rect x="{20 + dx}" y="{20 + dy}" width="120" height="60" fill="#F1F1F1" stroke="#181818"/>
    <text x="{30 + dx}" y="{45 + dy}" font-size="14" textLength="50">{name}</text>
    <line x1="{20 + dx}" y1="{50 + dy}" x2="{140 + dx}" y2="{50 + dy}" stroke="#181818"/>
    <ellipse cx="{80 + dx}" cy="{110 + dy}" rx="20" ry="10"/>
    <path d="M {20 + dx} {140 + dy} L {140 + dx} {140 + dy} L {140 + dx} {160 + dy} Z"/>
    <circle cx="{130 + dx}" cy="{100 + dy}" r="5"/>
    <polygon points="{30 + dx},{90 + dy} {50 + dx},{90 + dy} {40 + dx},{100 + dy}"/>
  </g>"""


SAMPLE_SVG = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" '
    'width="600" height="420" viewBox="0 0 600 420">\n'
    "  <!-- entity-relationship diagram -->"
    + entity_markup("Carlos", 0, 0)
    + entity_markup("Carl", 260, 0)
    + entity_markup("Luca", 0, 200)
    + """
  <g class="link" id="link_1">
    <path d="M 140 50 L 280 50" fill="none" stroke="#181818"/>
  </g>
</svg>
"""
)


FOCUS_AREAS_YAML = """\
- name: Carlos
  label: Carlos
  color: "#ff8800"
  areas: [Carlos]
- name: Carl
  label: Carl
  color: steelblue
  areas: [Carl]
  url: https://example.org/carl
- name: Luca
  label: Luca
  color: "rgb(120, 200, 80)"
  areas: [Luca]
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def sample_svg_text():
    """Diagram with three entity groups: Carlos, Carl and Luca."""
    return SAMPLE_SVG


@pytest.fixture
def sample_svg_file(temp_dir):
    """The sample diagram written to disk."""
    path = os.path.join(temp_dir, "ERD.svg")
    with open(path, "w", encoding="utf-8") as f:
        f.write(SAMPLE_SVG)
    return path


@pytest.fixture
def focus_areas_file(temp_dir):
    """Focus areas for each sample entity, with distinct colours."""
    path = os.path.join(temp_dir, "focus-areas.yaml")
    with open(path, "w", encoding="utf-8") as f:
        f.write(FOCUS_AREAS_YAML)
    return path


@pytest.fixture
def write_file(temp_dir):
    """Write arbitrary content to a file in the temp directory."""
    def _write(name, content):
        path = os.path.join(temp_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path
    return _write


@pytest.fixture
def default_config():
    """Create default pipeline configuration."""
    from erdhull.config import PipelineConfig
    return PipelineConfig()


@pytest.fixture
def square_points():
    """Corners of a 10x10 square plus its centre."""
    from erdhull.models import Point
    return [
        Point(x=0, y=0), Point(x=10, y=0), Point(x=10, y=10), Point(x=0, y=10),
        Point(x=5, y=5),
    ]
