"""Shared fixtures for the ray tracer tests."""

import pytest

from core.color import Color
from core.geometry import Plane, Sphere
from core.lighting import PointLight
from core.material import Material
from core.math import Point3, Vec3
from core.scene import SceneBuilder


def assert_color(actual: Color, expected, abs_tol: float = 1e-9):
    """Compare a Color against an (r, g, b) triple within tolerance."""
    assert tuple(actual) == pytest.approx(tuple(expected), abs=abs_tol)


def assert_point(actual, expected, abs_tol: float = 1e-9):
    assert tuple(actual) == pytest.approx(tuple(expected), abs=abs_tol)


@pytest.fixture
def unit_sphere():
    """Sphere of radius 1 at the origin with a plain diffuse/specular material."""
    return Sphere(Point3(0, 0, 0), 1.0, material=Material(kd=0.5, ks=0.3, shininess=20))


@pytest.fixture
def floor_plane():
    """Plane z = 0 facing +z."""
    return Plane(Point3(0, 0, 0), Vec3(0, 0, 1), material=Material(kd=0.5))


@pytest.fixture
def overhead_light():
    return PointLight(Color(1.0, 1.0, 1.0), Point3(0, 0, 10))


@pytest.fixture
def builder():
    return SceneBuilder("test")
