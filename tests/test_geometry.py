"""Tests for geometry.py - value types, midpoints and subdivision."""

import random

import pytest

from canvas_demos.geometry import (
    Point, Triangle, Color,
    midpoint, edge_midpoints, subdivide, random_color,
)


class TestTriangle:

    def test_from_points_converts_to_float_points(self):
        t = Triangle.from_points([(0, 0), (4, 0), (0, 2)])
        assert t.p1 == Point(4.0, 0.0)
        assert all(isinstance(c, float) for p in t for c in p)

    def test_wrong_point_count_rejected(self):
        with pytest.raises(ValueError, match="exactly 3"):
            Triangle.from_points([(0, 0), (1, 1)])
        with pytest.raises(ValueError):
            Triangle.from_points([(0, 0), (1, 1), (2, 2), (3, 3)])

    def test_degenerate_triangle_allowed(self):
        t = Triangle.from_points([(0, 0), (1, 1), (2, 2)])
        assert t.p2 == Point(2.0, 2.0)

    def test_immutable(self):
        t = Triangle.from_points([(0, 0), (1, 0), (0, 1)])
        with pytest.raises(AttributeError):
            t.p0 = Point(5, 5)


class TestColor:

    def test_of_accepts_channel_bounds(self):
        assert Color.of(0, 128, 255) == Color(0, 128, 255)

    @pytest.mark.parametrize("channels", [(-1, 0, 0), (0, 256, 0), (0, 0, 300)])
    def test_of_rejects_out_of_range(self, channels):
        with pytest.raises(ValueError):
            Color.of(*channels)


class TestMidpoints:

    def test_midpoint(self):
        assert midpoint(Point(0, 0), Point(10, -4)) == Point(5.0, -2.0)

    @pytest.mark.parametrize("points", [
        [(300.0, 0.0), (0.0, 600.0), (600.0, 600.0)],
        [(0.1, 0.2), (0.3, 0.7), (-5.5, 1e6)],
        [(1e-9, -1e-9), (3.0, 3.0), (7.25, -2.5)],
    ])
    def test_edge_midpoints_are_vertex_averages(self, points):
        t = Triangle.from_points(points)
        mids = edge_midpoints(t)
        for i in range(3):
            a, b = t[i], t[(i + 1) % 3]
            assert mids[i].x == pytest.approx((a.x + b.x) / 2)
            assert mids[i].y == pytest.approx((a.y + b.y) / 2)

    def test_reference_triangle_midpoints(self, big_triangle):
        m0, m1, m2 = edge_midpoints(big_triangle)
        assert m0 == Point(150.0, 300.0)
        assert m1 == Point(300.0, 600.0)
        assert m2 == Point(450.0, 300.0)


class TestSubdivide:

    def test_inner_is_midpoint_triangle(self, big_triangle):
        inner, _ = subdivide(big_triangle)
        assert inner == Triangle(*edge_midpoints(big_triangle))

    def test_corner_order_and_vertices(self, big_triangle):
        p0, p1, p2 = big_triangle
        m0, m1, m2 = edge_midpoints(big_triangle)
        _, corners = subdivide(big_triangle)
        assert corners == (
            Triangle(p0, m0, m2),
            Triangle(m0, p1, m1),
            Triangle(m2, m1, p2),
        )


class TestRandomColor:

    def test_channels_in_byte_range(self):
        rng = random.Random(7)
        for _ in range(500):
            c = random_color(rng)
            assert all(0 <= ch <= 255 for ch in c)

    def test_full_range_reachable(self):
        rng = random.Random(3)
        seen = {ch for _ in range(5000) for ch in random_color(rng)}
        assert 0 in seen and 255 in seen

    def test_seeded_source_is_reproducible(self):
        a = [random_color(random.Random(99)) for _ in range(3)]
        b = [random_color(random.Random(99)) for _ in range(3)]
        assert a == b
