from typing import List, Sequence

from core.geometry import GeoPoint, Intersectable
from core.math import AABB, Ray


def _longest_axis(box: AABB) -> int:
    extents = [hi - lo for lo, hi in zip(box.min, box.max)]
    return extents.index(max(extents))


class BVHNode(Intersectable):
    """Bounding volume hierarchy over finite intersectables.

    Culls whole subtrees whose box the ray misses; every hit that a flat
    scan over the same objects would return is still returned.
    """

    def __init__(self, objects: Sequence[Intersectable]):
        if not objects:
            raise ValueError("a BVH node needs at least one object")
        boxes = [o.bounding_box() for o in objects]
        if any(b is None for b in boxes):
            raise ValueError("only bounded objects can be placed in a BVH")

        self.box = boxes[0]
        for b in boxes[1:]:
            self.box = AABB.surrounding_box(self.box, b)

        span = len(objects)
        if span == 1:
            self.left = objects[0]
            self.right = None
        elif span == 2:
            self.left = objects[0]
            self.right = objects[1]
        else:
            axis = _longest_axis(self.box)
            ordered = sorted(objects, key=lambda o: list(o.bounding_box().min)[axis])
            mid = span // 2
            self.left = BVHNode(ordered[:mid])
            self.right = BVHNode(ordered[mid:])

    def _find_geo_intersections(self, ray: Ray, max_distance: float) -> List[GeoPoint]:
        if not self.box.hit(ray, 0.0, max_distance):
            return []
        result = self.left.find_geo_intersections(ray, max_distance)
        if self.right is not None:
            result += self.right.find_geo_intersections(ray, max_distance)
        return result

    def bounding_box(self) -> AABB:
        return self.box

    def depth(self) -> int:
        children = [c for c in (self.left, self.right) if isinstance(c, BVHNode)]
        return 1 + max((c.depth() for c in children), default=0)


def build_intersector(objects: Sequence[Intersectable]) -> List[Intersectable]:
    """Split objects into unbounded ones and a single BVH over the rest."""
    bounded = [o for o in objects if o.bounding_box() is not None]
    unbounded = [o for o in objects if o.bounding_box() is None]
    if bounded:
        unbounded.append(BVHNode(bounded))
    return unbounded
