import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List

from core.camera import Camera
from core.scene import RenderSettings
from renderers.base_renderer import BaseRenderer, RayTracerBase, RendererFactory
from renderers.image_writer import ImageWriter

logger = logging.getLogger(__name__)

PROGRESS_EVERY_ROWS = 50


class CPURenderer(BaseRenderer):
    """Drives camera, tracer and pixel sink over the whole image on the CPU."""

    def __init__(self):
        super().__init__("cpu_raytracer")

    def get_capabilities(self) -> List[str]:
        return [
            "ray_tracing",
            "shadows",
            "reflection",
            "refraction",
            "anti_aliasing",
            "bvh_acceleration",
            "multithreading",
        ]

    def render(self, tracer: RayTracerBase, camera: Camera, settings: RenderSettings,
               writer: ImageWriter = None) -> ImageWriter:
        if writer is None:
            writer = ImageWriter("render", settings.width, settings.height)
        elif (writer.nx, writer.ny) != (settings.width, settings.height):
            raise ValueError(
                f"writer is {writer.nx}x{writer.ny} but settings ask for {settings.width}x{settings.height}")

        logger.info("CPU render start: %dx%d, %d samples, %d workers",
                    settings.width, settings.height, settings.samples_per_pixel, settings.workers)
        start_time = time.time()

        def render_row(y: int) -> int:
            for x in range(settings.width):
                rays = camera.construct_rays(settings.width, settings.height, x, y, settings.grid_n)
                writer.write_pixel(x, y, tracer.trace_rays(rays))
            return y

        if settings.workers == 1:
            for y in range(settings.height):
                self._report(render_row(y), settings.height)
        else:
            with ThreadPoolExecutor(max_workers=settings.workers) as pool:
                # rows are disjoint, so completion order does not matter
                for y in pool.map(render_row, range(settings.height)):
                    self._report(y, settings.height)

        elapsed = time.time() - start_time
        logger.info("CPU render done in %dm %.2fs", int(elapsed // 60), elapsed % 60)
        return writer

    @staticmethod
    def _report(y: int, height: int):
        if y % PROGRESS_EVERY_ROWS == 0:
            logger.debug("Rows remaining: %d", height - y)


RendererFactory.register("cpu_raytracer", CPURenderer)
