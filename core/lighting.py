import math
from abc import ABC, abstractmethod
from typing import Union

from core.color import Color
from core.math import Coeff3, Point3, Vec3


class Light:
    def __init__(self, intensity: Color):
        self.intensity = intensity

    def get_intensity(self) -> Color:
        return self.intensity


class AmbientLight(Light):
    """Uniform light added once to every surface hit."""

    def __init__(self, ia: Color, ka: Union[Coeff3, float] = 1.0):
        super().__init__(ia.scale(Coeff3.of(ka).clamped()))


AmbientLight.NONE = AmbientLight(Color.BLACK, 0.0)


class LightSource(ABC):
    @abstractmethod
    def intensity_at(self, point: Point3) -> Color:
        pass

    @abstractmethod
    def direction_at(self, point: Point3) -> Vec3:
        """Unit vector from the light toward ``point``."""

    @abstractmethod
    def distance_to(self, point: Point3) -> float:
        pass


class DirectionalLight(Light, LightSource):
    """Light at infinity: same direction and intensity everywhere."""

    def __init__(self, intensity: Color, direction: Vec3):
        super().__init__(intensity)
        self.direction = direction.normalize()

    def intensity_at(self, point: Point3) -> Color:
        return self.intensity

    def direction_at(self, point: Point3) -> Vec3:
        return self.direction

    def distance_to(self, point: Point3) -> float:
        return math.inf


class PointLight(Light, LightSource):
    def __init__(self, intensity: Color, position: Point3,
                 kc: float = 1.0, kl: float = 0.0, kq: float = 0.0):
        """
        kc, kl, kq: constant, linear and quadratic distance attenuation
        """
        super().__init__(intensity)
        if kc < 0 or kl < 0 or kq < 0:
            raise ValueError("attenuation factors must be non-negative")
        if kc == 0 and kl == 0 and kq == 0:
            raise ValueError("at least one attenuation factor must be positive")
        self.position = position
        self.kc = float(kc)
        self.kl = float(kl)
        self.kq = float(kq)

    def attenuation(self, point: Point3) -> float:
        d2 = self.position.distance_squared(point)
        return self.kc + self.kl * math.sqrt(d2) + self.kq * d2

    def intensity_at(self, point: Point3) -> Color:
        return self.intensity.scale(1.0 / self.attenuation(point))

    def direction_at(self, point: Point3) -> Vec3:
        return (point - self.position).normalize()

    def distance_to(self, point: Point3) -> float:
        return self.position.distance(point)


class SpotLight(PointLight):
    """Point light whose intensity falls off away from its main direction."""

    def __init__(self, intensity: Color, position: Point3, direction: Vec3,
                 kc: float = 1.0, kl: float = 0.0, kq: float = 0.0, narrow_beam: float = 1.0):
        super().__init__(intensity, position, kc, kl, kq)
        if narrow_beam < 1:
            raise ValueError(f"narrow_beam must be at least 1, got {narrow_beam}")
        self.direction = direction.normalize()
        self.narrow_beam = float(narrow_beam)

    def intensity_at(self, point: Point3) -> Color:
        cos_angle = self.direction.dot(self.direction_at(point))
        if cos_angle <= 0:
            return Color.BLACK
        return super().intensity_at(point).scale(cos_angle ** self.narrow_beam)
