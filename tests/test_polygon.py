"""Tests for geom/polygon.py: bounding rects, face lines, capsules, polygons."""
import pytest

from houseeditor.errors import InvariantError
from houseeditor.geom.polygon import BoundingRect, Capsule, ParallelLines, Polygon

from conftest import P


def square(x, y, size=1.0):
    return Polygon.from_vertices([(x, y), (x + size, y), (x + size, y + size), (x, y + size)])


class TestBoundingRect:
    def test_overlap_and_touch(self):
        a = BoundingRect(0, 0, 2, 2)
        assert a.intersects(BoundingRect(1, 1, 3, 3))
        assert a.intersects(BoundingRect(2, 0, 3, 1))
        assert not a.intersects(BoundingRect(2.1, 0, 3, 1))
        assert not a.intersects(BoundingRect(0, 3, 1, 4))

    def test_from_vertices(self):
        assert BoundingRect.from_vertices([(1, 5), (-1, 2), (3, 0)]) == BoundingRect(-1, 0, 3, 5)

    def test_to_shapely(self):
        assert BoundingRect(0, 0, 2, 3).to_shapely().area == pytest.approx(6.0)


class TestParallelLines:
    def test_offsets(self):
        lines = ParallelLines(P(0, 0), P(4, 0), 0.4)
        assert lines.angle == 0
        assert lines.left_line.start == P(0, -0.2)
        assert lines.right_line.end == P(4, 0.2)

    def test_keeps_given_angle(self):
        lines = ParallelLines(P(0, 0), P(4, 0.05), 0.4, angle=0)
        assert lines.angle == 0

    def test_rejects_wrong_angle(self):
        with pytest.raises(InvariantError):
            ParallelLines(P(0, 0), P(4, 0), 0.4, angle=90)


class TestCapsule:
    def test_intersects_by_distance(self):
        a = Capsule(P(0, 0), P(4, 0), 0.2)
        assert a.intersects(Capsule(P(0, 0.3), P(4, 0.3), 0.2))
        assert not a.intersects(Capsule(P(0, 0.5), P(4, 0.5), 0.2))

    def test_polygon_is_closed(self):
        polygon = Capsule(P(0, 0), P(4, 0), 0.5).to_polygon(segments=4)
        assert polygon.vertices[0] == polygon.vertices[-1]
        assert len(polygon.vertices) == 2 * 5 + 1
        assert polygon.is_convex()

    def test_bounding_rect(self):
        assert Capsule(P(0, 0), P(4, 0), 0.5).bounding_rect() == BoundingRect(-0.5, -0.5, 4.5, 0.5)


class TestPolygon:
    def test_close_path_repeats_first_vertex(self):
        polygon = square(0, 0)
        assert polygon.closed
        assert polygon.vertices[0] == polygon.vertices[-1]
        assert len(polygon.edges()) == 4

    def test_closed_polygon_is_final(self):
        polygon = square(0, 0)
        with pytest.raises(InvariantError):
            polygon.line_to(5, 5)

    def test_area(self):
        assert square(0, 0, 2).area == pytest.approx(4.0)

    def test_crossing_edges(self):
        assert square(0, 0).intersects(square(0.5, 0.5))

    def test_separate(self):
        assert not square(0, 0).intersects(square(2, 2))

    def test_listener_collects_every_crossing(self):
        hits = []
        assert square(0, 0).intersects(square(0.5, 0.5), hits.append)
        points = sorted((round(h.point[0], 6), round(h.point[1], 6)) for h in hits)
        assert (0.5, 1.0) in points
        assert (1.0, 0.5) in points

    def test_symmetric(self):
        a, b = square(0, 0), square(0.5, 0.9)
        assert a.intersects(b) == b.intersects(a)

    def test_convex(self):
        assert square(0, 0).is_convex()
        notched = Polygon.from_vertices([(0, 0), (2, 0), (2, 2), (1, 1), (0, 2)])
        assert not notched.is_convex()

    def test_separating_axis(self):
        assert square(0, 0).intersects_convex(square(0.5, 0.5))
        assert not square(0, 0).intersects_convex(square(1.5, 0))
