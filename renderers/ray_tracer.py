"""Recursive Whitted-style ray tracer.

Local light (emission, diffuse and specular under every unshaded light) is
computed at each hit; reflected and transmitted rays are followed
recursively until either the depth budget runs out or the accumulated
attenuation drops below MIN_CALC_COLOR_K.
"""
from typing import Optional

from core.color import Color
from core.geometry import GeoPoint
from core.lighting import LightSource
from core.material import Material
from core.math import Coeff3, Ray, Vec3, align_zero, is_zero
from core.scene import MAX_CALC_COLOR_LEVEL, Scene
from renderers.base_renderer import RayTracerBase

MIN_CALC_COLOR_K = 0.001

INITIAL_K = Coeff3.ONE


class RayTracerBasic(RayTracerBase):
    def __init__(self, scene: Scene,
                 max_level: int = MAX_CALC_COLOR_LEVEL,
                 min_k: float = MIN_CALC_COLOR_K):
        super().__init__(scene)
        if max_level < 1:
            raise ValueError(f"max_level must be at least 1, got {max_level}")
        self.max_level = max_level
        self.min_k = min_k

    def trace_ray(self, ray: Ray) -> Color:
        closest = self.find_closest_intersection(ray)
        if closest is None:
            return self.scene.background
        return self._calc_color(closest, ray, self.max_level, INITIAL_K) \
            + self.scene.ambient_light.get_intensity()

    def find_closest_intersection(self, ray: Ray) -> Optional[GeoPoint]:
        return ray.find_closest_geo_point(self.scene.find_geo_intersections(ray))

    def _calc_color(self, gp: GeoPoint, ray: Ray, level: int, k: Coeff3) -> Color:
        color = self.calc_local_effects(gp, ray)
        if level == 1:
            return color
        return color + self._calc_global_effects(gp, ray, level, k)

    # ---- global effects ----

    def _calc_global_effects(self, gp: GeoPoint, ray: Ray, level: int, k: Coeff3) -> Color:
        v = ray.direction
        n = gp.geometry.normal(gp.point)
        material = gp.geometry.material
        return self._calc_global_effect(self.construct_reflected_ray(gp, v, n), level, k, material.kr) \
            + self._calc_global_effect(self.construct_refracted_ray(gp, v, n), level, k, material.kt)

    def _calc_global_effect(self, ray: Ray, level: int, k: Coeff3, kx: Coeff3) -> Color:
        kkx = k * kx
        if kkx.lower_than(self.min_k):
            return Color.BLACK

        gp = self.find_closest_intersection(ray)
        if gp is None:
            return self.scene.background.scale(kx)

        # tangent hit
        if is_zero(gp.geometry.normal(gp.point).dot(ray.direction)):
            return Color.BLACK
        return self._calc_color(gp, ray, level - 1, kkx).scale(kx)

    @staticmethod
    def construct_reflected_ray(gp: GeoPoint, v: Vec3, n: Vec3) -> Ray:
        vn = align_zero(v.dot(n))
        return Ray(gp.point, v - n * (2 * vn), n)

    @staticmethod
    def construct_refracted_ray(gp: GeoPoint, v: Vec3, n: Vec3) -> Ray:
        return Ray(gp.point, v, n)

    # ---- local effects ----

    def calc_local_effects(self, gp: GeoPoint, ray: Ray) -> Color:
        color = gp.geometry.emission
        v = ray.direction
        n = gp.geometry.normal(gp.point)
        nv = align_zero(n.dot(v))
        if nv == 0:
            return color

        material = gp.geometry.material
        for light in self.scene.lights:
            l = light.direction_at(gp.point)
            nl = align_zero(n.dot(l))
            # light and viewer on the same side of the surface
            if nl * nv > 0 and self.unshaded(gp, light, l, n):
                i_l = light.intensity_at(gp.point)
                color = color + i_l.scale(self.calc_diffusive(material, nl)
                                          + self.calc_specular(material, n, l, nl, v))
        return color

    @staticmethod
    def calc_diffusive(material: Material, nl: float) -> Coeff3:
        return material.kd * abs(nl)

    @staticmethod
    def calc_specular(material: Material, n: Vec3, l: Vec3, nl: float, v: Vec3) -> Coeff3:
        r = l - n * (2 * nl)
        minus_vr = -align_zero(r.dot(v))
        if minus_vr <= 0:
            return Coeff3.ZERO
        return material.ks * (minus_vr ** material.shininess)

    def unshaded(self, gp: GeoPoint, light: LightSource, l: Vec3, n: Vec3) -> bool:
        """True when no fully opaque surface lies between the point and the light."""
        light_ray = Ray(gp.point, -l, n)
        distance = light.distance_to(light_ray.origin)
        for hit in self.scene.find_geo_intersections(light_ray, distance):
            if hit.geometry.material.is_opaque:
                return False
        return True
