"""
Tests for geometry parsing and point containment.
"""

import unittest

from region_coder.exceptions import GeometryError
from region_coder.geometry import (
    MultiPolygonGeometry, PointGeometry, PolygonGeometry,
    geometry_to_dict, parse_geometry, parse_position, parse_ring
)
from tests.fixtures import box, multipolygon, polygon


class TestPositionParsing(unittest.TestCase):
    """Test cases for positions and rings."""

    def test_position_needs_two_numbers(self):
        self.assertEqual(parse_position([1, 2]), (1.0, 2.0))
        self.assertEqual(parse_position([1, 2, 300]), (1.0, 2.0))
        self.assertIsNone(parse_position([1]))
        self.assertIsNone(parse_position(["a", 2]))
        self.assertIsNone(parse_position([True, 2]))
        self.assertIsNone(parse_position([float('nan'), 2]))
        self.assertIsNone(parse_position("1,2"))

    def test_ring_keeps_valid_positions(self):
        ring = parse_ring([[0, 0], ["bad"], [1, 0], None, [1, 1]])
        self.assertEqual(ring, ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0)))

    def test_ring_without_valid_positions_is_dropped(self):
        self.assertIsNone(parse_ring([["x", "y"], [1]]))
        self.assertIsNone(parse_ring("not a ring"))


class TestPolygonContainment(unittest.TestCase):
    """Test cases for polygon and multipolygon containment."""

    def setUp(self):
        outer = box(0.0, 0.0, 10.0, 10.0)
        hole = box(4.0, 4.0, 6.0, 6.0)
        self.polygon = parse_geometry(polygon(outer, hole))

    def test_parsed_rings(self):
        self.assertIsInstance(self.polygon, PolygonGeometry)
        self.assertEqual(len(self.polygon.exterior), 5)
        self.assertEqual(len(self.polygon.holes), 1)

    def test_inside_outer_ring(self):
        self.assertTrue(self.polygon.contains(2.0, 2.0))

    def test_outside(self):
        self.assertFalse(self.polygon.contains(11.0, 5.0))
        self.assertFalse(self.polygon.contains(-0.1, 5.0))

    def test_inside_hole_is_not_contained(self):
        self.assertFalse(self.polygon.contains(5.0, 5.0))

    def test_boundaries_are_contained(self):
        self.assertTrue(self.polygon.contains(0.0, 5.0))
        self.assertTrue(self.polygon.contains(10.0, 10.0))
        self.assertTrue(self.polygon.contains(4.0, 5.0))

    def test_multipolygon_contains_point_in_any_member(self):
        geometry = parse_geometry(multipolygon(
            [box(0.0, 0.0, 1.0, 1.0)],
            [box(5.0, 5.0, 6.0, 6.0)]
        ))
        self.assertIsInstance(geometry, MultiPolygonGeometry)
        self.assertTrue(geometry.contains(0.5, 0.5))
        self.assertTrue(geometry.contains(5.5, 5.5))
        self.assertFalse(geometry.contains(3.0, 3.0))

    def test_degenerate_outer_ring_contains_nothing(self):
        geometry = parse_geometry(polygon([[0, 0], [1, 1], [0, 0]]))
        self.assertIsInstance(geometry, PolygonGeometry)
        self.assertIsNone(geometry.shape)
        self.assertFalse(geometry.contains(0.5, 0.5))

    def test_degenerate_hole_is_ignored(self):
        geometry = parse_geometry(polygon(box(0.0, 0.0, 10.0, 10.0), [[5, 5], [5, 5]]))
        self.assertTrue(geometry.contains(5.0, 5.0))

    def test_point_geometry_never_contains(self):
        geometry = parse_geometry({'type': 'Point', 'coordinates': [3.0, 4.0]})
        self.assertIsInstance(geometry, PointGeometry)
        self.assertFalse(geometry.contains(3.0, 4.0))


class TestGeometryParsing(unittest.TestCase):
    """Test cases for geometry objects that cannot be used."""

    def test_absent_geometry(self):
        self.assertIsNone(parse_geometry(None))

    def test_unsupported_type_raises(self):
        with self.assertRaises(GeometryError) as ctx:
            parse_geometry({'type': 'LineString', 'coordinates': [[0, 0], [1, 1]]}, region_id="X")
        self.assertEqual(ctx.exception.context['geometry_type'], 'LineString')
        self.assertEqual(ctx.exception.context['region_id'], 'X')

    def test_missing_coordinates_raise(self):
        with self.assertRaises(GeometryError):
            parse_geometry({'type': 'Polygon'})

    def test_non_object_raises(self):
        with self.assertRaises(GeometryError):
            parse_geometry("Polygon")

    def test_polygon_without_valid_rings_is_no_geometry(self):
        self.assertIsNone(parse_geometry({'type': 'Polygon', 'coordinates': [[["a", "b"]]]}))
        self.assertIsNone(parse_geometry({'type': 'MultiPolygon', 'coordinates': []}))
        self.assertIsNone(parse_geometry({'type': 'Point', 'coordinates': [1]}))

    def test_serializes_back_to_geojson(self):
        data = polygon(box(0.0, 0.0, 1.0, 1.0))
        self.assertEqual(geometry_to_dict(parse_geometry(data)), data)


if __name__ == '__main__':
    unittest.main()
