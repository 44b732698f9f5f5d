import math
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

EPSILON = 1e-10

# origin offset used against shadow acne
DELTA = 1e-3

# slack for flat boxes around planar shapes
BOX_TOLERANCE = 1e-9


def is_zero(number: float) -> bool:
    return abs(number) < EPSILON


def align_zero(number: float) -> float:
    """Snap values within EPSILON of zero to exactly 0.0."""
    return 0.0 if is_zero(number) else number


class ZeroVectorError(ValueError):
    """Raised when an operation needs a direction but got the zero vector."""


class Coeff3:
    """Three weights used for kd/ks/kr/kt and accumulated attenuation."""

    def __init__(self, d1=0.0, d2=None, d3=None):
        if d2 is None and d3 is None:
            d2 = d3 = d1
        self.d1 = float(d1)
        self.d2 = float(d2)
        self.d3 = float(d3)

    @staticmethod
    def of(value: Union["Coeff3", float]) -> "Coeff3":
        if isinstance(value, Coeff3):
            return value
        return Coeff3(value)

    def __add__(self, other):
        return Coeff3(self.d1 + other.d1, self.d2 + other.d2, self.d3 + other.d3)

    def __mul__(self, other):
        # scalar or component-wise product
        if isinstance(other, Coeff3):
            return Coeff3(self.d1 * other.d1, self.d2 * other.d2, self.d3 * other.d3)
        return Coeff3(self.d1 * other, self.d2 * other, self.d3 * other)

    __rmul__ = __mul__

    def lower_than(self, threshold: float) -> bool:
        return self.d1 < threshold and self.d2 < threshold and self.d3 < threshold

    def is_zero(self) -> bool:
        return self.d1 == 0.0 and self.d2 == 0.0 and self.d3 == 0.0

    def clamped(self) -> "Coeff3":
        return Coeff3(*(min(1.0, max(0.0, d)) for d in (self.d1, self.d2, self.d3)))

    def __iter__(self):
        return iter((self.d1, self.d2, self.d3))

    def __eq__(self, other):
        if not isinstance(other, Coeff3):
            return NotImplemented
        return (self.d1, self.d2, self.d3) == (other.d1, other.d2, other.d3)

    def __hash__(self):
        return hash((self.d1, self.d2, self.d3))

    def __repr__(self):
        return f"Coeff3({self.d1:.3f}, {self.d2:.3f}, {self.d3:.3f})"


Coeff3.ZERO = Coeff3(0.0)
Coeff3.ONE = Coeff3(1.0)


class Vec3:
    def __init__(self, x=0.0, y=0.0, z=0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def __add__(self, other):
        return Vec3(self.x + other.x,
                    self.y + other.y,
                    self.z + other.z)

    def __sub__(self, other):
        return Vec3(self.x - other.x,
                    self.y - other.y,
                    self.z - other.z)

    def __mul__(self, t):
        return Vec3(self.x * t, self.y * t, self.z * t)

    __rmul__ = __mul__

    def __truediv__(self, t):
        return Vec3(self.x / t, self.y / t, self.z / t)

    def __neg__(self):
        return Vec3(-self.x, -self.y, -self.z)

    def __eq__(self, other):
        if not isinstance(other, Vec3):
            return NotImplemented
        return (self.x, self.y, self.z) == (other.x, other.y, other.z)

    def __hash__(self):
        return hash((Vec3, self.x, self.y, self.z))

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def dot(self, other):
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other):
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def length_squared(self):
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self):
        return math.sqrt(self.length_squared())

    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0 and self.z == 0.0

    def try_normalize(self) -> Optional["Vec3"]:
        """Unit vector in the same direction, or None for the zero vector."""
        l = self.length()
        if l == 0:
            return None
        return self / l

    def normalize(self) -> "Vec3":
        unit = self.try_normalize()
        if unit is None:
            raise ZeroVectorError("cannot normalize the zero vector")
        return unit

    def reflect(self, normal: "Vec3") -> "Vec3":
        # r = v - 2 * dot(v, n) * n
        return self - normal * (2 * self.dot(normal))

    def to_np(self):
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __repr__(self):
        return f"Vec3({self.x:.3f}, {self.y:.3f}, {self.z:.3f})"


class Point3:
    def __init__(self, x=0.0, y=0.0, z=0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def __add__(self, v: Vec3) -> "Point3":
        return Point3(self.x + v.x, self.y + v.y, self.z + v.z)

    def __sub__(self, other):
        # point - point is a vector, point - vector is a point
        if isinstance(other, Point3):
            return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)
        return Point3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __eq__(self, other):
        if not isinstance(other, Point3):
            return NotImplemented
        return (self.x, self.y, self.z) == (other.x, other.y, other.z)

    def __hash__(self):
        return hash((Point3, self.x, self.y, self.z))

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def distance_squared(self, other: "Point3") -> float:
        return (self - other).length_squared()

    def distance(self, other: "Point3") -> float:
        return math.sqrt(self.distance_squared(other))

    def to_np(self):
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __repr__(self):
        return f"Point3({self.x:.3f}, {self.y:.3f}, {self.z:.3f})"


Point3.ZERO = Point3(0.0, 0.0, 0.0)


class Ray:
    def __init__(self, origin: Point3, direction: Vec3, normal: Vec3 = None):
        self.direction = direction.normalize()
        if normal is not None:
            nv = align_zero(normal.dot(self.direction))
            if nv != 0:
                origin = origin + normal * (DELTA if nv > 0 else -DELTA)
        self.origin = origin

    def point_at_parameter(self, t: float) -> Point3:
        if is_zero(t):
            return self.origin
        return self.origin + self.direction * t

    def find_closest_point(self, points: Sequence[Point3]) -> Optional[Point3]:
        if not points:
            return None
        return min(points, key=self.origin.distance_squared)

    def find_closest_geo_point(self, geo_points: Sequence) -> Optional[object]:
        if not geo_points:
            return None
        return min(geo_points, key=lambda gp: self.origin.distance_squared(gp.point))

    def __repr__(self):
        return f"Ray({self.origin!r}, {self.direction!r})"


class AABB:
    def __init__(self, min_pt: Point3, max_pt: Point3):
        self.min = min_pt
        self.max = max_pt

    @staticmethod
    def from_points(points: Iterable[Point3]) -> "AABB":
        pts: List[Point3] = list(points)
        return AABB(
            Point3(min(p.x for p in pts), min(p.y for p in pts), min(p.z for p in pts)),
            Point3(max(p.x for p in pts), max(p.y for p in pts), max(p.z for p in pts)),
        )

    @staticmethod
    def surrounding_box(box0, box1):
        small = Point3(
            min(box0.min.x, box1.min.x),
            min(box0.min.y, box1.min.y),
            min(box0.min.z, box1.min.z)
        )
        big = Point3(
            max(box0.max.x, box1.max.x),
            max(box0.max.y, box1.max.y),
            max(box0.max.z, box1.max.z)
        )
        return AABB(small, big)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> bool:
        for lo, hi, o, d in zip(self.min, self.max, ray.origin, ray.direction):
            if d == 0.0:
                # parallel to this slab: a miss unless the origin is inside it
                if o < lo or o > hi:
                    return False
                continue
            inv_d = 1.0 / d
            t0 = (lo - o) * inv_d
            t1 = (hi - o) * inv_d
            if inv_d < 0.0:
                t0, t1 = t1, t0
            t_min = t0 if t0 > t_min else t_min
            t_max = t1 if t1 < t_max else t_max
            if t_max < t_min - BOX_TOLERANCE:
                return False
        return True
