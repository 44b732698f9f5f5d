from abc import ABC, abstractmethod
from typing import List, Sequence

from core.color import Color
from core.math import Ray
from core.scene import RenderSettings, Scene


class RayTracerBase(ABC):
    """Computes the color seen along a ray in a fixed scene."""

    def __init__(self, scene: Scene):
        self.scene = scene

    @abstractmethod
    def trace_ray(self, ray: Ray) -> Color:
        pass

    def trace_rays(self, rays: Sequence[Ray]) -> Color:
        """Average color of several rays through the same pixel."""
        if not rays:
            raise ValueError("need at least one ray to trace")
        total = Color.BLACK
        for ray in rays:
            total = total + self.trace_ray(ray)
        return total.reduce(len(rays))


class BaseRenderer(ABC):
    """Base class every renderer implements."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def render(self, tracer: RayTracerBase, camera, settings: RenderSettings, writer=None):
        """Render every pixel into ``writer`` and return it."""
        pass

    @abstractmethod
    def get_capabilities(self) -> List[str]:
        pass

    def get_name(self) -> str:
        return self.name

    def supports(self, feature: str) -> bool:
        return feature in self.get_capabilities()


class RendererFactory:
    _renderers = {}

    @classmethod
    def register(cls, name: str, renderer_class):
        cls._renderers[name] = renderer_class

    @classmethod
    def create(cls, name: str, **kwargs) -> BaseRenderer:
        if name not in cls._renderers:
            raise ValueError(f"Unknown renderer: {name}")
        return cls._renderers[name](**kwargs)

    @classmethod
    def list_available(cls) -> List[str]:
        return list(cls._renderers.keys())
