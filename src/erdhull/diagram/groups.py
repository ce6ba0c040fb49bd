"""
Entity group index for a parsed diagram.

Groups are the markup nodes carrying the identifying attribute (by
default data-entity, as emitted by the diagram renderer). Each group
keeps an ElementRecord for every shape it contains.
"""

from fnmatch import fnmatchcase

from erdhull.diagram.bbox import SHAPE_TAGS, element_bbox
from erdhull.errors import MalformedDocumentError, NotFoundError
from erdhull.io.load_svg import load_svg, local_name
from erdhull.models import ElementRecord, EntityGroup, union_bbox
from erdhull.tracer import get_tracer, trace


class DiagramDocument:
    """
    A parsed diagram with its entity groups indexed by name.

    Groups are created once while parsing and never change afterwards.
    """

    def __init__(self, root, group_attribute="data-entity"):
        self.root = root
        self.group_attribute = group_attribute
        self.groups = _index_groups(root, group_attribute)

    @classmethod
    def from_file(cls, path, group_attribute="data-entity"):
        """Load and index a diagram from disk."""
        root, _ = load_svg(path)
        return cls(root, group_attribute)

    def group_names(self):
        """Names of all indexed groups, in document order."""
        return list(self.groups.keys())

    def get_group(self, name):
        if name not in self.groups:
            raise NotFoundError(f"Entity group \"{name}\" not found")
        return self.groups[name]

    def match(self, pattern):
        """
        Names of the groups matching an exact name or a wildcard pattern.

        Patterns use shell-style wildcards, so "Carl*" matches every group
        whose name starts with "Carl".
        """
        if pattern in self.groups:
            return [pattern]
        return [name for name in self.groups if fnmatchcase(name, pattern)]

    def groups_by_names(self, names):
        """
        Representative points for the named groups.

        Each element contributes the centre of its bounding box. Names that
        match no group are skipped, so the result may be empty.
        """
        tracer = get_tracer()

        points = []
        seen = set()
        for pattern in names:
            matched = self.match(pattern)
            if not matched:
                tracer.event(f"No entity group matches \"{pattern}\"", level="WARN")
            for name in matched:
                if name in seen:
                    continue
                seen.add(name)
                points.extend(self.groups[name].representative_points())

        tracer.event(f"Collected {len(points)} points from {len(seen)} groups", level="DEBUG")

        return points

    def require_groups(self, names):
        """
        Check that every name or pattern matches at least one group.

        Raises NotFoundError listing the names that match nothing.
        """
        missing = [name for name in names if not self.match(name)]
        if missing:
            listed = ", ".join(f"\"{n}\"" for n in missing)
            raise NotFoundError(f"Entity groups not found in diagram: {listed}")


@trace(label="index_groups")
def _index_groups(root, group_attribute):
    tracer = get_tracer()

    groups = {}
    for node in root.iter():
        name = node.get(group_attribute)
        if name is None:
            continue
        if name in groups:
            raise MalformedDocumentError(f"Duplicate entity group \"{name}\" in diagram")

        elements = []
        for child in node.iter():
            if child is node or local_name(child.tag) not in SHAPE_TAGS:
                continue
            bbox = element_bbox(child)
            if bbox is None:
                continue
            elements.append(ElementRecord(
                tag=local_name(child.tag),
                attributes={k: str(v) for k, v in child.attrib.items()},
                bbox=bbox,
            ))

        groups[name] = EntityGroup(
            name=name,
            elements=elements,
            bbox=union_bbox(e.bbox for e in elements),
        )

    tracer.event(f"Indexed {len(groups)} entity groups by \"{group_attribute}\"")

    return groups
