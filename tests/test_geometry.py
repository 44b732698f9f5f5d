"""Unit tests for ray/geometry intersection and surface normals.

Tests cover:
- Sphere hits from outside, inside and at the center
- Tangent rays counting as misses
- Plane, polygon and triangle hits, edges and construction errors
- Tube and finite cylinder intersection and normals
- Composite geometries and maximum distance filtering
"""

import pytest

from core.color import Color
from core.geometry import (
    Cylinder,
    GeoPoint,
    Geometries,
    GeometryError,
    Plane,
    Polygon,
    Sphere,
    Triangle,
    Tube,
)
from core.material import Material
from core.math import Point3, Ray, Vec3

from conftest import assert_point


def points(geometry, ray, max_distance=float("inf")):
    return [tuple(gp.point) for gp in geometry.find_geo_intersections(ray, max_distance)]


class TestSphere:
    """Tests for ray-sphere intersection."""

    def test_ray_through_center_hits_twice_in_order(self):
        sphere = Sphere(Point3(0, 0, 0), 1)
        hits = points(sphere, Ray(Point3(0, 0, 5), Vec3(0, 0, -1)))
        assert len(hits) == 2
        assert_point(hits[0], (0, 0, 1))
        assert_point(hits[1], (0, 0, -1))

    def test_origin_at_center_gives_single_hit_at_radius(self):
        sphere = Sphere(Point3(1, 2, 3), 2)
        hits = sphere.find_intersections(Ray(Point3(1, 2, 3), Vec3(0, 0, 1)))
        assert len(hits) == 1
        assert_point(hits[0], (1, 2, 5))
        assert hits[0].distance(Point3(1, 2, 3)) == pytest.approx(2.0)

    def test_origin_inside_gives_single_hit(self):
        sphere = Sphere(Point3(0, 0, 0), 1)
        hits = points(sphere, Ray(Point3(0, 0, 0.5), Vec3(0, 0, 1)))
        assert len(hits) == 1
        assert_point(hits[0], (0, 0, 1))

    def test_ray_pointing_away_misses(self):
        sphere = Sphere(Point3(0, 0, 0), 1)
        assert sphere.find_geo_intersections(Ray(Point3(0, 0, 5), Vec3(0, 0, 1))) == []

    def test_ray_passing_beside_misses(self):
        sphere = Sphere(Point3(0, 0, 0), 1)
        assert sphere.find_geo_intersections(Ray(Point3(5, 0, 5), Vec3(0, 0, -1))) == []

    def test_tangent_ray_is_a_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1)
        assert sphere.find_geo_intersections(Ray(Point3(1, 0, 5), Vec3(0, 0, -1))) == []

    def test_max_distance_filters_far_hit(self):
        sphere = Sphere(Point3(0, 0, 0), 1)
        ray = Ray(Point3(0, 0, 5), Vec3(0, 0, -1))
        assert len(points(sphere, ray, 5.0)) == 1
        assert len(points(sphere, ray, 4.0)) == 1
        assert points(sphere, ray, 3.9) == []

    def test_records_reference_the_sphere(self):
        sphere = Sphere(Point3(0, 0, 0), 1)
        for gp in sphere.find_geo_intersections(Ray(Point3(0, 0, 5), Vec3(0, 0, -1))):
            assert isinstance(gp, GeoPoint)
            assert gp.geometry is sphere

    def test_normal_points_outward(self):
        sphere = Sphere(Point3(0, 0, 0), 2)
        assert_point(sphere.normal(Point3(0, 2, 0)), (0, 1, 0))

    @pytest.mark.parametrize("radius", [0, -1])
    def test_non_positive_radius_rejected(self, radius):
        with pytest.raises(GeometryError):
            Sphere(Point3(0, 0, 0), radius)

    def test_defaults(self):
        sphere = Sphere(Point3(0, 0, 0), 1)
        assert sphere.emission == Color.BLACK
        assert sphere.material.kt.is_zero()

    def test_chaining_setters(self):
        material = Material(kd=0.3)
        sphere = Sphere(Point3(0, 0, 0), 1).set_emission(Color(0, 0, 1)).set_material(material)
        assert sphere.emission == Color(0, 0, 1)
        assert sphere.material is material


class TestPlane:
    """Tests for ray-plane intersection."""

    def test_normal_is_normalized(self):
        plane = Plane(Point3(0, 0, 0), Vec3(0, 0, 2))
        assert plane.normal(Point3(5, 5, 0)) == Vec3(0, 0, 1)

    def test_hit(self):
        plane = Plane(Point3(0, 0, 0), Vec3(0, 0, 1))
        hits = points(plane, Ray(Point3(1, 1, 5), Vec3(0, 0, -1)))
        assert len(hits) == 1
        assert_point(hits[0], (1, 1, 0))

    def test_oblique_hit(self):
        plane = Plane(Point3(0, 0, 0), Vec3(0, 0, 1))
        hits = points(plane, Ray(Point3(0, 0, 1), Vec3(1, 0, -1)))
        assert_point(hits[0], (1, 0, 0))

    def test_parallel_ray_misses(self):
        plane = Plane(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert plane.find_geo_intersections(Ray(Point3(0, 0, 1), Vec3(1, 0, 0))) == []

    def test_ray_starting_on_plane_misses(self):
        plane = Plane(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert plane.find_geo_intersections(Ray(Point3(0, 0, 0), Vec3(0, 1, 1))) == []
        assert plane.find_geo_intersections(Ray(Point3(1, 0, 0), Vec3(0, 1, 1))) == []

    def test_plane_behind_ray_misses(self):
        plane = Plane(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert plane.find_geo_intersections(Ray(Point3(0, 0, 1), Vec3(0, 0, 1))) == []

    def test_from_points(self):
        plane = Plane.from_points(Point3(0, 0, 1), Point3(1, 0, 1), Point3(1, 1, 1))
        assert plane.normal() == Vec3(0, 0, 1)

    def test_collinear_points_rejected(self):
        with pytest.raises(GeometryError):
            Plane.from_points(Point3(0, 0, 0), Point3(1, 1, 1), Point3(2, 2, 2))

    def test_zero_normal_rejected(self):
        with pytest.raises(GeometryError):
            Plane(Point3(0, 0, 0), Vec3(0, 0, 0))


class TestPolygon:
    """Tests for convex polygons and triangles."""

    @pytest.fixture
    def square(self):
        return Polygon(Point3(0, 0, 0), Point3(1, 0, 0), Point3(1, 1, 0), Point3(0, 1, 0))

    def test_normal_follows_vertex_order(self, square):
        assert square.normal() == Vec3(0, 0, 1)
        reverse = Polygon(Point3(0, 1, 0), Point3(1, 1, 0), Point3(1, 0, 0), Point3(0, 0, 0))
        assert reverse.normal() == Vec3(0, 0, -1)

    def test_inside_hit(self, square):
        hits = points(square, Ray(Point3(0.5, 0.5, 1), Vec3(0, 0, -1)))
        assert len(hits) == 1
        assert_point(hits[0], (0.5, 0.5, 0))

    def test_outside_miss(self, square):
        assert square.find_geo_intersections(Ray(Point3(2, 0.5, 1), Vec3(0, 0, -1))) == []

    def test_edge_and_vertex_are_misses(self, square):
        assert square.find_geo_intersections(Ray(Point3(1, 0.5, 1), Vec3(0, 0, -1))) == []
        assert square.find_geo_intersections(Ray(Point3(1, 1, 1), Vec3(0, 0, -1))) == []

    def test_hit_from_behind(self, square):
        hits = points(square, Ray(Point3(0.25, 0.75, -2), Vec3(0, 0, 1)))
        assert_point(hits[0], (0.25, 0.75, 0))

    def test_too_few_vertices(self):
        with pytest.raises(GeometryError):
            Polygon(Point3(0, 0, 0), Point3(1, 0, 0))

    def test_non_coplanar_rejected(self):
        with pytest.raises(GeometryError):
            Polygon(Point3(0, 0, 0), Point3(1, 0, 0), Point3(1, 1, 0), Point3(0, 1, 1))

    def test_mixed_order_rejected(self):
        with pytest.raises(GeometryError):
            Polygon(Point3(0, 0, 0), Point3(1, 0, 0), Point3(0, 1, 0), Point3(1, 1, 0))

    def test_concave_rejected(self):
        with pytest.raises(GeometryError):
            Polygon(Point3(0, 0, 0), Point3(2, 0, 0), Point3(1, 0.5, 0), Point3(2, 2, 0), Point3(0, 2, 0))

    def test_triangle_hit_and_normal(self):
        triangle = Triangle(Point3(0, 0, 0), Point3(2, 0, 0), Point3(0, 2, 0))
        hits = points(triangle, Ray(Point3(0.5, 0.5, -1), Vec3(0, 0, 1)))
        assert_point(hits[0], (0.5, 0.5, 0))
        assert triangle.normal() == Vec3(0, 0, 1)

    def test_triangle_miss_past_hypotenuse(self):
        triangle = Triangle(Point3(0, 0, 0), Point3(2, 0, 0), Point3(0, 2, 0))
        assert triangle.find_geo_intersections(Ray(Point3(1.5, 1.5, -1), Vec3(0, 0, 1))) == []

    def test_triangle_max_distance(self):
        triangle = Triangle(Point3(0, 0, 0), Point3(2, 0, 0), Point3(0, 2, 0))
        assert points(triangle, Ray(Point3(0.5, 0.5, 5), Vec3(0, 0, -1)), 4.0) == []

    def test_collinear_triangle_rejected(self):
        with pytest.raises(GeometryError):
            Triangle(Point3(0, 0, 0), Point3(1, 1, 1), Point3(2, 2, 2))


class TestTube:
    """Tests for the infinite tube."""

    @pytest.fixture
    def tube(self):
        return Tube(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0)

    def test_normal(self, tube):
        assert_point(tube.normal(Point3(1, 0, 5)), (1, 0, 0))
        assert_point(tube.normal(Point3(0, -1, -3)), (0, -1, 0))

    def test_normal_level_with_axis_origin(self, tube):
        assert_point(tube.normal(Point3(0, 1, 0)), (0, 1, 0))

    def test_crossing_ray_hits_twice(self, tube):
        hits = points(tube, Ray(Point3(5, 0, 3), Vec3(-1, 0, 0)))
        assert len(hits) == 2
        assert_point(hits[0], (1, 0, 3))
        assert_point(hits[1], (-1, 0, 3))

    def test_ray_from_axis_hits_once(self, tube):
        hits = points(tube, Ray(Point3(0, 0, 0), Vec3(1, 0, 0)))
        assert len(hits) == 1
        assert_point(hits[0], (1, 0, 0))

    def test_parallel_ray_misses(self, tube):
        assert tube.find_geo_intersections(Ray(Point3(5, 0, 0), Vec3(0, 0, 1))) == []

    def test_tangent_ray_is_a_miss(self, tube):
        assert tube.find_geo_intersections(Ray(Point3(1, 5, 0), Vec3(0, -1, 0))) == []

    def test_unbounded(self, tube):
        assert tube.bounding_box() is None

    def test_radius_rejected(self):
        with pytest.raises(GeometryError):
            Tube(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 0)


class TestCylinder:
    """Tests for the finite capped cylinder."""

    @pytest.fixture
    def cylinder(self):
        return Cylinder(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0, 2.0)

    def test_side_hits(self, cylinder):
        hits = points(cylinder, Ray(Point3(5, 0, 1), Vec3(-1, 0, 0)))
        assert len(hits) == 2
        assert_point(hits[0], (1, 0, 1))
        assert_point(hits[1], (-1, 0, 1))

    def test_side_miss_above_height(self, cylinder):
        assert cylinder.find_geo_intersections(Ray(Point3(5, 0, 3), Vec3(-1, 0, 0))) == []

    def test_caps_hit_along_axis(self, cylinder):
        hits = points(cylinder, Ray(Point3(0, 0, 5), Vec3(0, 0, -1)))
        assert len(hits) == 2
        assert_point(hits[0], (0, 0, 2))
        assert_point(hits[1], (0, 0, 0))

    def test_cap_and_side(self, cylinder):
        hits = points(cylinder, Ray(Point3(0, 0, 3), Vec3(0.5, 0, -1)))
        assert len(hits) == 2
        assert_point(hits[0], (0.5, 0, 2))
        assert_point(hits[1], (1, 0, 1))

    def test_normals(self, cylinder):
        assert_point(cylinder.normal(Point3(0.5, 0, 0)), (0, 0, -1))
        assert_point(cylinder.normal(Point3(0.5, 0, 2)), (0, 0, 1))
        assert_point(cylinder.normal(Point3(0, 1, 1)), (0, 1, 0))

    def test_bounding_box(self, cylinder):
        box = cylinder.bounding_box()
        assert_point(box.min, (-1, -1, -1))
        assert_point(box.max, (1, 1, 3))

    def test_height_rejected(self):
        with pytest.raises(GeometryError):
            Cylinder(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0, 0)


class TestGeometries:
    """Tests for the composite geometry."""

    def test_empty_collection_has_no_hits(self):
        assert Geometries().find_geo_intersections(Ray(Point3(0, 0, 0), Vec3(1, 0, 0))) == []

    def test_union_keeps_every_hit(self):
        sphere = Sphere(Point3(0, 0, -5), 1)
        plane = Plane(Point3(0, 0, -10), Vec3(0, 0, 1))
        triangle = Triangle(Point3(10, 10, 0), Point3(11, 10, 0), Point3(10, 11, 0))
        group = Geometries(sphere).add(plane, triangle)
        hits = group.find_geo_intersections(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)))
        assert len(hits) == 3
        assert {id(gp.geometry) for gp in hits} == {id(sphere), id(plane)}
        assert len(group) == 3

    def test_nested_composites(self):
        inner = Geometries(Sphere(Point3(0, 0, -5), 1))
        outer = Geometries(inner, Sphere(Point3(0, 0, -10), 1))
        assert len(outer.find_geo_intersections(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)))) == 4

    def test_max_distance_applies_to_members(self):
        group = Geometries(Sphere(Point3(0, 0, -5), 1), Sphere(Point3(0, 0, -10), 1))
        hits = group.find_geo_intersections(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 7.0)
        assert len(hits) == 2

    def test_bounding_box_only_when_all_bounded(self):
        bounded = Geometries(Sphere(Point3(0, 0, 0), 1), Sphere(Point3(5, 0, 0), 1))
        box = bounded.bounding_box()
        assert_point(box.min, (-1, -1, -1))
        assert_point(box.max, (6, 1, 1))
        assert Geometries(Plane(Point3(0, 0, 0), Vec3(0, 0, 1))).bounding_box() is None
