from typing import Union

from core.math import Coeff3

CoeffLike = Union[Coeff3, float]


class Material:
    def __init__(self,
                 kd: CoeffLike = 0.0,
                 ks: CoeffLike = 0.0,
                 shininess: float = 0.0,
                 kr: CoeffLike = 0.0,
                 kt: CoeffLike = 0.0):
        """
        kd: diffuse coefficient
        ks: specular coefficient
        shininess: Phong exponent for the specular lobe
        kr: reflectivity, weight of the mirrored ray (0~1)
        kt: transparency, weight of the transmitted ray (0~1)
        """
        if shininess < 0:
            raise ValueError(f"shininess must be non-negative, got {shininess}")
        self.kd = Coeff3.of(kd).clamped()
        self.ks = Coeff3.of(ks).clamped()
        self.shininess = float(shininess)
        self.kr = Coeff3.of(kr).clamped()
        self.kt = Coeff3.of(kt).clamped()

    @property
    def is_opaque(self) -> bool:
        return self.kt.is_zero()

    def __repr__(self):
        return (f"Material(kd={self.kd!r}, ks={self.ks!r}, shininess={self.shininess}, "
                f"kr={self.kr!r}, kt={self.kt!r})")
