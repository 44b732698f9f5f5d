import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional

from core.color import Color
from core.material import Material
from core.math import AABB, Point3, Ray, Vec3, ZeroVectorError, align_zero, is_zero


class GeometryError(ValueError):
    """Raised at construction time for a shape that cannot be rendered."""


@dataclass(frozen=True)
class GeoPoint:
    """A point on a surface together with the surface it lies on."""
    geometry: "Geometry"
    point: Point3


def _in_range(t: float, max_distance: float) -> bool:
    return t > 0 and align_zero(t - max_distance) <= 0


class Intersectable(ABC):
    def find_intersections(self, ray: Ray) -> List[Point3]:
        return [gp.point for gp in self.find_geo_intersections(ray)]

    def find_geo_intersections(self, ray: Ray, max_distance: float = math.inf) -> List[GeoPoint]:
        """All hits with 0 < t <= max_distance, or an empty list."""
        return self._find_geo_intersections(ray, max_distance)

    @abstractmethod
    def _find_geo_intersections(self, ray: Ray, max_distance: float) -> List[GeoPoint]:
        pass

    def bounding_box(self) -> Optional[AABB]:
        """Finite box around the shape, or None for unbounded shapes."""
        return None


class Geometry(Intersectable):
    def __init__(self, emission: Color = None, material: Material = None):
        self.emission = emission if emission is not None else Color.BLACK
        self.material = material if material is not None else Material()

    def set_emission(self, emission: Color) -> "Geometry":
        self.emission = emission
        return self

    def set_material(self, material: Material) -> "Geometry":
        self.material = material
        return self

    @abstractmethod
    def normal(self, point: Point3) -> Vec3:
        pass


class Sphere(Geometry):
    def __init__(self, center: Point3, radius: float, emission: Color = None, material: Material = None):
        super().__init__(emission, material)
        if radius <= 0:
            raise GeometryError(f"sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = float(radius)
        self.radius_squared = self.radius * self.radius
        self.box = AABB(center - Vec3(radius, radius, radius), center + Vec3(radius, radius, radius))

    def normal(self, point: Point3) -> Vec3:
        return (point - self.center).normalize()

    def _find_geo_intersections(self, ray: Ray, max_distance: float) -> List[GeoPoint]:
        u = self.center - ray.origin
        if u.is_zero():
            # ray starts at the center: one hit at distance r
            tm, th = 0.0, self.radius
        else:
            tm = u.dot(ray.direction)
            d2 = u.length_squared() - tm * tm
            if align_zero(d2 - self.radius_squared) >= 0:
                return []
            th = math.sqrt(self.radius_squared - d2)

        ts = [t for t in (align_zero(tm - th), align_zero(tm + th)) if _in_range(t, max_distance)]
        return [GeoPoint(self, ray.point_at_parameter(t)) for t in ts]

    def bounding_box(self) -> AABB:
        return self.box


class Plane(Geometry):
    def __init__(self, point: Point3, normal: Vec3, emission: Color = None, material: Material = None):
        super().__init__(emission, material)
        try:
            self.plane_normal = normal.normalize()
        except ZeroVectorError as e:
            raise GeometryError("plane normal must not be the zero vector") from e
        self.point = point

    @classmethod
    def from_points(cls, p1: Point3, p2: Point3, p3: Point3, **kwargs) -> "Plane":
        n = (p2 - p1).cross(p3 - p2).try_normalize()
        if n is None:
            raise GeometryError("plane points must not be collinear")
        return cls(p1, n, **kwargs)

    def normal(self, point: Point3 = None) -> Vec3:
        return self.plane_normal

    def parameter(self, ray: Ray) -> Optional[float]:
        """Ray parameter of the plane hit, or None when the ray misses it."""
        nv = align_zero(self.plane_normal.dot(ray.direction))
        if nv == 0:
            return None  # parallel
        q0_p0 = self.point - ray.origin
        if q0_p0.is_zero():
            return None
        t = align_zero(self.plane_normal.dot(q0_p0) / nv)
        return t if t > 0 else None

    def _find_geo_intersections(self, ray: Ray, max_distance: float) -> List[GeoPoint]:
        t = self.parameter(ray)
        if t is None or not _in_range(t, max_distance):
            return []
        return [GeoPoint(self, ray.point_at_parameter(t))]


class Polygon(Geometry):
    """Convex planar polygon.

    Vertices must be given in order around the boundary and all lie in one
    plane. The normal follows the vertex order (right-hand rule).
    """

    def __init__(self, *vertices: Point3, emission: Color = None, material: Material = None):
        super().__init__(emission, material)
        if len(vertices) < 3:
            raise GeometryError("a polygon needs at least three vertices")
        self.vertices = list(vertices)
        self.plane = Plane.from_points(vertices[0], vertices[1], vertices[2])
        n = self.plane.normal()

        for v in self.vertices[3:]:
            if not is_zero(n.dot(v - self.vertices[0])):
                raise GeometryError("polygon vertices must be coplanar")

        # every turn must go the same way as the first one
        size = len(self.vertices)
        for i in range(size):
            edge1 = self.vertices[i] - self.vertices[i - 1]
            edge2 = self.vertices[(i + 1) % size] - self.vertices[i]
            if align_zero(edge1.cross(edge2).dot(n)) <= 0:
                raise GeometryError("polygon must be convex with vertices in a consistent order")

        self.box = AABB.from_points(self.vertices)

    def normal(self, point: Point3 = None) -> Vec3:
        return self.plane.normal()

    def _find_geo_intersections(self, ray: Ray, max_distance: float) -> List[GeoPoint]:
        t = self.plane.parameter(ray)
        if t is None or not _in_range(t, max_distance):
            return []

        q = ray.point_at_parameter(t)
        n = self.plane.normal()
        size = len(self.vertices)
        sign = 0.0
        for i in range(size):
            p = self.vertices[i]
            edge = self.vertices[(i + 1) % size] - p
            s = align_zero(edge.cross(q - p).dot(n))
            if s == 0 or s * sign < 0:
                return []  # on an edge or outside
            sign = s
        return [GeoPoint(self, q)]

    def bounding_box(self) -> AABB:
        return self.box


class Triangle(Polygon):
    def __init__(self, p1: Point3, p2: Point3, p3: Point3, emission: Color = None, material: Material = None):
        super().__init__(p1, p2, p3, emission=emission, material=material)


class Tube(Geometry):
    """Infinite cylinder around an axis ray."""

    def __init__(self, axis_ray: Ray, radius: float, emission: Color = None, material: Material = None):
        super().__init__(emission, material)
        if radius <= 0:
            raise GeometryError(f"tube radius must be positive, got {radius}")
        self.axis_ray = Ray(axis_ray.origin, axis_ray.direction)
        self.radius = float(radius)

    def normal(self, point: Point3) -> Vec3:
        p0 = self.axis_ray.origin
        v = self.axis_ray.direction
        t = align_zero((point - p0).dot(v))
        o = p0 if t == 0 else p0 + v * t
        return (point - o).normalize()

    def _side_parameters(self, ray: Ray) -> List[float]:
        v = self.axis_ray.direction
        # project ray direction and origin offset onto the plane orthogonal to the axis
        d = ray.direction - v * ray.direction.dot(v)
        a = align_zero(d.length_squared())
        if a == 0:
            return []  # parallel to the axis
        delta = ray.origin - self.axis_ray.origin
        dp = delta - v * delta.dot(v)
        b = 2 * d.dot(dp)
        c = dp.length_squared() - self.radius * self.radius
        disc = align_zero(b * b - 4 * a * c)
        if disc <= 0:
            return []
        root = math.sqrt(disc)
        ts = (align_zero((-b - root) / (2 * a)), align_zero((-b + root) / (2 * a)))
        return [t for t in ts if t > 0]

    def _find_geo_intersections(self, ray: Ray, max_distance: float) -> List[GeoPoint]:
        return [GeoPoint(self, ray.point_at_parameter(t))
                for t in self._side_parameters(ray) if _in_range(t, max_distance)]


class Cylinder(Tube):
    """Tube cut to a finite height and closed by two caps."""

    def __init__(self, axis_ray: Ray, radius: float, height: float,
                 emission: Color = None, material: Material = None):
        super().__init__(axis_ray, radius, emission, material)
        if height <= 0:
            raise GeometryError(f"cylinder height must be positive, got {height}")
        self.height = float(height)
        p0 = self.axis_ray.origin
        self.top_center = p0 + self.axis_ray.direction * self.height
        r = Vec3(radius, radius, radius)
        base = AABB.from_points([p0, self.top_center])
        self.box = AABB(base.min - r, base.max + r)

    def normal(self, point: Point3) -> Vec3:
        v = self.axis_ray.direction
        proj = align_zero((point - self.axis_ray.origin).dot(v))
        if proj == 0:
            return -v
        if align_zero(proj - self.height) == 0:
            return v
        return super().normal(point)

    def _cap_parameter(self, ray: Ray, center: Point3) -> Optional[float]:
        v = self.axis_ray.direction
        nv = align_zero(v.dot(ray.direction))
        if nv == 0:
            return None
        t = align_zero(v.dot(center - ray.origin) / nv)
        if t <= 0:
            return None
        q = ray.point_at_parameter(t)
        if align_zero(q.distance_squared(center) - self.radius * self.radius) >= 0:
            return None
        return t

    def _find_geo_intersections(self, ray: Ray, max_distance: float) -> List[GeoPoint]:
        p0 = self.axis_ray.origin
        v = self.axis_ray.direction
        ts = []
        for t in self._side_parameters(ray):
            proj = align_zero((ray.point_at_parameter(t) - p0).dot(v))
            if proj > 0 and align_zero(proj - self.height) < 0:
                ts.append(t)
        for center in (p0, self.top_center):
            t = self._cap_parameter(ray, center)
            if t is not None:
                ts.append(t)
        return [GeoPoint(self, ray.point_at_parameter(t))
                for t in sorted(ts) if _in_range(t, max_distance)]

    def bounding_box(self) -> AABB:
        return self.box


class Geometries(Intersectable):
    """Union of intersectables; hits of every member are kept."""

    def __init__(self, *geometries: Intersectable):
        self.geometries: List[Intersectable] = list(geometries)

    def add(self, *geometries: Intersectable) -> "Geometries":
        self.geometries.extend(geometries)
        return self

    def __iter__(self) -> Iterator[Intersectable]:
        return iter(self.geometries)

    def __len__(self):
        return len(self.geometries)

    def _find_geo_intersections(self, ray: Ray, max_distance: float) -> List[GeoPoint]:
        result: List[GeoPoint] = []
        for geometry in self.geometries:
            result.extend(geometry.find_geo_intersections(ray, max_distance))
        return result

    def bounding_box(self) -> Optional[AABB]:
        boxes = [g.bounding_box() for g in self.geometries]
        if not boxes or any(b is None for b in boxes):
            return None
        box = boxes[0]
        for other in boxes[1:]:
            box = AABB.surrounding_box(box, other)
        return box
