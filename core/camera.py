import math
from typing import List

from core.math import Point3, Ray, Vec3


class Camera:
    def __init__(self,
                 lookfrom: Point3,
                 lookat: Point3,
                 vup: Vec3,
                 vfov: float,        # vertical field of view, degrees
                 aspect: float):     # width / height
        if not 0 < vfov < 180:
            raise ValueError(f"vfov must be between 0 and 180 degrees, got {vfov}")
        if aspect <= 0:
            raise ValueError(f"aspect must be positive, got {aspect}")
        self.origin = lookfrom

        theta = math.radians(vfov)
        half_height = math.tan(theta / 2)
        half_width = aspect * half_height

        w = (lookfrom - lookat).normalize()
        u = vup.cross(w).normalize()
        v = w.cross(u)

        self.lower_left_corner = self.origin - u * half_width - v * half_height - w
        self.horizontal = u * (2 * half_width)
        self.vertical = v * (2 * half_height)

    def get_ray(self, s: float, t: float) -> Ray:
        """Ray through view-plane coordinates (s, t), (0, 0) being bottom-left."""
        target = self.lower_left_corner + self.horizontal * s + self.vertical * t
        return Ray(self.origin, target - self.origin)

    def construct_ray(self, nx: int, ny: int, x: int, y: int) -> Ray:
        """Ray through the center of pixel (x, y); (0, 0) is the top-left pixel."""
        return self.get_ray((x + 0.5) / nx, 1.0 - (y + 0.5) / ny)

    def construct_rays(self, nx: int, ny: int, x: int, y: int, grid_n: int = 1) -> List[Ray]:
        """Rays through the cell centers of a grid_n x grid_n grid over pixel (x, y)."""
        if grid_n == 1:
            return [self.construct_ray(nx, ny, x, y)]
        rays = []
        for a in range(grid_n):
            for b in range(grid_n):
                du = (a + 0.5) / grid_n
                dv = (b + 0.5) / grid_n
                rays.append(self.get_ray((x + du) / nx, 1.0 - (y + dv) / ny))
        return rays
