import argparse
import logging
import os

from core.scene import MAX_CALC_COLOR_LEVEL, RenderSettings
from renderers.base_renderer import RendererFactory
from renderers.image_writer import ImageWriter
from renderers.ray_tracer import RayTracerBasic
from scene_builders.custom_scene_builder import CustomSceneBuilder

# imported for its RendererFactory registration
import renderers.cpu_renderer  # noqa: F401

logger = logging.getLogger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Recursive ray tracer')
    parser.add_argument('--renderer', '-r',
                        choices=RendererFactory.list_available(),
                        default='cpu_raytracer',
                        help='renderer to use')
    parser.add_argument('--width', '-w', type=int, default=400,
                        help='image width in pixels')
    parser.add_argument('--height', type=int, default=300,
                        help='image height in pixels')
    parser.add_argument('--samples', '-s', type=int, default=1,
                        help='rays per pixel, must be a perfect square')
    parser.add_argument('--depth', '-d', type=int, default=MAX_CALC_COLOR_LEVEL,
                        help='maximum recursion level')
    parser.add_argument('--workers', '-j', type=int, default=1,
                        help='number of rendering threads')
    parser.add_argument('--bvh', action='store_true',
                        help='build a bounding volume hierarchy over finite shapes')
    parser.add_argument('--output', '-o', default='output.png',
                        help='output PNG file name')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='log progress at debug level')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = RenderSettings(
        width=args.width,
        height=args.height,
        samples_per_pixel=args.samples,
        max_depth=args.depth,
        workers=args.workers,
    )

    scene_builder = CustomSceneBuilder(use_bvh=args.bvh)
    scene = scene_builder.build_scene()
    camera = scene_builder.create_camera(args.width / args.height)
    tracer = RayTracerBasic(scene, max_level=settings.max_depth)

    renderer = RendererFactory.create(args.renderer)
    logger.info("Renderer %s, capabilities: %s", renderer.get_name(), ', '.join(renderer.get_capabilities()))

    folder, file_name = os.path.split(os.path.abspath(args.output))
    image_name, _ = os.path.splitext(file_name)
    writer = ImageWriter(image_name, settings.width, settings.height)
    renderer.render(tracer, camera, settings, writer)
    writer.write_to_image(folder)


if __name__ == "__main__":
    main()
