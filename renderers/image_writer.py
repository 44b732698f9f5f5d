import logging
import os
import threading
from typing import Tuple

import numpy as np
from PIL import Image

from core.color import Color

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = os.path.join(os.getcwd(), "images")


class ImageWriter:
    """Pixel sink: collects linear colors and encodes them to an 8-bit PNG.

    Colors are stored unclamped; clamping to [0, 255] happens only when the
    buffer is encoded (``to_image``) or read back (``read_pixel``).
    """

    def __init__(self, image_name: str, nx: int, ny: int):
        if nx < 1 or ny < 1:
            raise ValueError(f"image size must be positive, got {nx}x{ny}")
        self.image_name = image_name
        self.nx = nx
        self.ny = ny
        self.pixels = np.zeros((ny, nx, 3), dtype=np.float64)  # (height, width, 3)
        self._lock = threading.Lock()

    def _check_index(self, x: int, y: int):
        if not (0 <= x < self.nx and 0 <= y < self.ny):
            raise IndexError(f"pixel ({x}, {y}) outside {self.nx}x{self.ny} image")

    def write_pixel(self, x: int, y: int, color: Color):
        self._check_index(x, y)
        with self._lock:
            self.pixels[y, x] = (color.r, color.g, color.b)

    def read_pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        self._check_index(x, y)
        with self._lock:
            r, g, b = self.pixels[y, x]
        return Color(r, g, b).to_rgb8()

    def to_array(self) -> np.ndarray:
        with self._lock:
            scaled = self.pixels * 255
        return np.clip(scaled, 0, 255).astype(np.uint8)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.to_array())

    def write_to_image(self, folder: str = DEFAULT_FOLDER) -> str:
        """Encode the buffer as ``<folder>/<image_name>.png`` and return the path."""
        path = os.path.join(folder, f"{self.image_name}.png")
        try:
            os.makedirs(folder, exist_ok=True)
            self.to_image().save(path)
        except OSError:
            logger.exception("I/O error while writing %s", path)
            raise
        logger.info("Image saved: %s", path)
        return path
