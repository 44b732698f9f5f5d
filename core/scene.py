import logging
import math
from dataclasses import dataclass, field
from typing import List, Tuple

from core.acceleration import build_intersector
from core.color import Color
from core.geometry import GeoPoint, Geometries, Intersectable
from core.lighting import AmbientLight, LightSource
from core.math import Ray

logger = logging.getLogger(__name__)

MAX_CALC_COLOR_LEVEL = 10


@dataclass
class RenderSettings:
    width: int = 800
    height: int = 600
    samples_per_pixel: int = 1
    max_depth: int = MAX_CALC_COLOR_LEVEL
    workers: int = 1

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError(f"image size must be positive, got {self.width}x{self.height}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        grid_n = math.isqrt(self.samples_per_pixel) if self.samples_per_pixel > 0 else 0
        if grid_n < 1 or grid_n * grid_n != self.samples_per_pixel:
            raise ValueError(f"samples_per_pixel must be a positive perfect square, got {self.samples_per_pixel}")

    @property
    def grid_n(self) -> int:
        return math.isqrt(self.samples_per_pixel)


@dataclass(frozen=True)
class Scene:
    """Read-only scene snapshot shared by every pixel computation.

    The tuples are frozen but the shapes in them are not: geometries must not
    be changed through set_material or set_emission after the scene is built.
    """
    name: str
    geometries: Tuple[Intersectable, ...]
    lights: Tuple[LightSource, ...]
    ambient_light: AmbientLight
    background: Color
    intersector: Geometries = field(repr=False, compare=False, default=None)

    def __post_init__(self):
        if self.intersector is None:
            object.__setattr__(self, "intersector", Geometries(*self.geometries))

    def find_geo_intersections(self, ray: Ray, max_distance: float = math.inf) -> List[GeoPoint]:
        return self.intersector.find_geo_intersections(ray, max_distance)


class SceneBuilder:
    def __init__(self, name: str = "scene"):
        self.name = name
        self.geometries: List[Intersectable] = []
        self.lights: List[LightSource] = []
        self.ambient_light = AmbientLight.NONE
        self.background = Color.BLACK
        self.use_bvh = False

    def set_background(self, background: Color) -> "SceneBuilder":
        self.background = background
        return self

    def set_ambient_light(self, ambient_light: AmbientLight) -> "SceneBuilder":
        self.ambient_light = ambient_light
        return self

    def add_geometries(self, *geometries: Intersectable) -> "SceneBuilder":
        self.geometries.extend(geometries)
        return self

    def add_lights(self, *lights: LightSource) -> "SceneBuilder":
        self.lights.extend(lights)
        return self

    def enable_bvh(self, enabled: bool = True) -> "SceneBuilder":
        self.use_bvh = enabled
        return self

    def build(self) -> Scene:
        if self.use_bvh and self.geometries:
            intersector = Geometries(*build_intersector(self.geometries))
        else:
            intersector = Geometries(*self.geometries)
        logger.debug("Built scene %r: %d geometries, %d lights, bvh=%s",
                     self.name, len(self.geometries), len(self.lights), self.use_bvh)
        return Scene(
            name=self.name,
            geometries=tuple(self.geometries),
            lights=tuple(self.lights),
            ambient_light=self.ambient_light,
            background=self.background,
            intersector=intersector,
        )
