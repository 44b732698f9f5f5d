from typing import Tuple, Union

from core.math import Coeff3


class Color:
    """Linear RGB color, nominally in [0, 1] per channel.

    Channels are not clamped while light is being accumulated; the pixel
    sink clamps when it encodes to 8 bits.
    """

    def __init__(self, r=0.0, g=0.0, b=0.0):
        if r < 0 or g < 0 or b < 0:
            raise ValueError(f"color channels must be non-negative: ({r}, {g}, {b})")
        self.r = float(r)
        self.g = float(g)
        self.b = float(b)

    def __add__(self, other: "Color") -> "Color":
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def add(self, *colors: "Color") -> "Color":
        result = self
        for c in colors:
            result = result + c
        return result

    def scale(self, k: Union[Coeff3, float]) -> "Color":
        if isinstance(k, Coeff3):
            return Color(self.r * k.d1, self.g * k.d2, self.b * k.d3)
        return Color(self.r * k, self.g * k, self.b * k)

    __mul__ = scale
    __rmul__ = scale

    def reduce(self, n: int) -> "Color":
        if n < 1:
            raise ValueError("can only reduce by a positive sample count")
        return Color(self.r / n, self.g / n, self.b / n)

    def to_rgb8(self) -> Tuple[int, int, int]:
        return tuple(int(max(0, min(255, c * 255))) for c in (self.r, self.g, self.b))

    def __iter__(self):
        return iter((self.r, self.g, self.b))

    def __eq__(self, other):
        if not isinstance(other, Color):
            return NotImplemented
        return (self.r, self.g, self.b) == (other.r, other.g, other.b)

    def __hash__(self):
        return hash((Color, self.r, self.g, self.b))

    def __repr__(self):
        return f"Color({self.r:.3f}, {self.g:.3f}, {self.b:.3f})"


Color.BLACK = Color(0.0, 0.0, 0.0)
Color.WHITE = Color(1.0, 1.0, 1.0)
