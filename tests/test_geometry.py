"""Tests for hull construction and padding."""

import math

import pytest

from erdhull.models import Point


def regular_polygon(n, radius, cx=0.0, cy=0.0):
    return [
        Point(x=cx + radius * math.cos(2 * math.pi * i / n), y=cy + radius * math.sin(2 * math.pi * i / n))
        for i in range(n)
    ]


class TestComputeHull:
    """Tests for concave hull construction."""

    def test_square_hull(self, square_points):
        """Test that a square with an interior point yields the square."""
        from erdhull.geometry.hull import compute_hull

        result = compute_hull(square_points, concavity=10.0)

        corners = {(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)}
        assert {p.as_tuple() for p in result.points} == corners
        assert result.area == pytest.approx(100.0)
        assert result.perimeter == pytest.approx(40.0)

    def test_vertices_come_from_input(self):
        """Test that every hull vertex is one of the input points."""
        from erdhull.geometry.hull import compute_hull

        points = regular_polygon(12, 50) + [Point(x=5, y=3), Point(x=-10, y=8), Point(x=20, y=-15)]
        result = compute_hull(points, concavity=2.0)

        inputs = {p.as_tuple() for p in points}
        assert result.point_count >= 3
        assert all(p.as_tuple() in inputs for p in result.points)
        assert result.area > 0

    def test_area_bounded_by_convex_hull(self):
        """Test that no concavity setting produces more area than the convex hull."""
        from erdhull.geometry.hull import compute_hull, convex_hull_area

        points = regular_polygon(16, 40) + regular_polygon(7, 12, cx=3, cy=-2) + [Point(x=0, y=35)]
        convex = convex_hull_area(points)

        for concavity in (1.0, 1.5, 2.0, 5.0, 20.0):
            result = compute_hull(points, concavity=concavity)
            assert result.area > 0
            assert result.area <= convex + 1e-6

    def test_length_threshold_accepted(self):
        """Test that a length threshold still yields a valid polygon."""
        from erdhull.geometry.hull import compute_hull

        points = regular_polygon(20, 30) + [Point(x=1, y=1)]
        result = compute_hull(points, concavity=1.0, length_threshold=15.0)

        assert result.point_count >= 3
        assert result.area > 0

    def test_too_few_points(self):
        """Test that fewer than 3 points fail."""
        from erdhull.errors import InsufficientPointsError
        from erdhull.geometry.hull import compute_hull

        with pytest.raises(InsufficientPointsError):
            compute_hull([Point(x=0, y=0), Point(x=1, y=1)])

        with pytest.raises(InsufficientPointsError):
            compute_hull([])

    def test_duplicates_do_not_count(self):
        """Test that coincident points are collapsed before counting."""
        from erdhull.errors import InsufficientPointsError
        from erdhull.geometry.hull import compute_hull

        points = [Point(x=0, y=0), Point(x=0, y=0), Point(x=5, y=5), Point(x=5, y=5)]
        with pytest.raises(InsufficientPointsError):
            compute_hull(points)

    def test_collinear_points(self):
        """Test that collinear input is rejected."""
        from erdhull.errors import InsufficientPointsError
        from erdhull.geometry.hull import compute_hull

        points = [Point(x=i, y=2 * i) for i in range(6)]
        with pytest.raises(InsufficientPointsError):
            compute_hull(points)


class TestPadding:
    """Tests for radial hull padding."""

    def test_zero_padding_is_identity(self, square_points):
        """Test that zero padding returns the input unchanged."""
        from erdhull.geometry.padding import add_padding

        assert add_padding(square_points, 0) == square_points

    def test_negative_padding_is_identity(self, square_points):
        """Test that negative padding returns the input unchanged."""
        from erdhull.geometry.padding import add_padding

        assert add_padding(square_points, -3) == square_points

    def test_points_move_by_distance(self):
        """Test that every point moves exactly `distance` away from the centroid."""
        from erdhull.geometry.padding import add_padding

        points = [Point(x=0, y=0), Point(x=8, y=0), Point(x=8, y=4), Point(x=0, y=6)]
        padded = add_padding(points, 3)

        cx = sum(p.x for p in points) / 4
        cy = sum(p.y for p in points) / 4
        for before, after in zip(points, padded):
            d_before = math.hypot(before.x - cx, before.y - cy)
            d_after = math.hypot(after.x - cx, after.y - cy)
            assert d_after == pytest.approx(d_before + 3)

    def test_padding_is_additive_on_regular_polygon(self):
        """Test that padding by d1 then d2 equals padding by d1 + d2."""
        from erdhull.geometry.padding import add_padding

        points = regular_polygon(6, 10, cx=3, cy=-4)

        twice = add_padding(add_padding(points, 2.5), 4.0)
        once = add_padding(points, 6.5)

        for a, b in zip(twice, once):
            assert a.x == pytest.approx(b.x)
            assert a.y == pytest.approx(b.y)

    def test_centroid_point_unmoved(self):
        """Test that a point on the centroid stays where it is."""
        from erdhull.geometry.padding import add_padding

        points = [Point(x=0, y=0), Point(x=2, y=0), Point(x=-2, y=0), Point(x=0, y=2), Point(x=0, y=-2)]
        padded = add_padding(points, 5)

        assert padded[0] == Point(x=0, y=0)
        assert padded[1].x == pytest.approx(7)

    def test_square_with_midpoints(self):
        """Test that a side-10 square padded by 5 spans 20 units, symmetric about the origin."""
        from erdhull.geometry.padding import add_padding

        points = [
            Point(x=-5, y=-5), Point(x=0, y=-5), Point(x=5, y=-5), Point(x=5, y=0),
            Point(x=5, y=5), Point(x=0, y=5), Point(x=-5, y=5), Point(x=-5, y=0),
        ]
        padded = add_padding(points, 5)

        xs = [p.x for p in padded]
        ys = [p.y for p in padded]
        assert max(xs) - min(xs) == pytest.approx(20)
        assert max(ys) - min(ys) == pytest.approx(20)
        assert max(xs) == pytest.approx(-min(xs))
        assert max(ys) == pytest.approx(-min(ys))

        # Corners move radially, so they stay on the diagonals
        corner = padded[4]
        assert corner.x == pytest.approx(corner.y)
        assert math.hypot(corner.x, corner.y) == pytest.approx(5 * math.sqrt(2) + 5)
