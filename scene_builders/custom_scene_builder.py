from core.camera import Camera
from core.color import Color
from core.geometry import Cylinder, Plane, Polygon, Sphere, Triangle
from core.lighting import AmbientLight, DirectionalLight, PointLight, SpotLight
from core.material import Material
from core.math import Coeff3, Point3, Ray, Vec3
from core.scene import Scene, SceneBuilder


class CustomSceneBuilder:
    """Showcase scene: an open box with a mirror, a glass ball and a shadowing triangle"""

    def __init__(self, use_bvh: bool = False):
        self.box_size = 30.0
        self.use_bvh = use_bvh

    def build_scene(self) -> Scene:
        builder = SceneBuilder("custom") \
            .set_background(Color(0.02, 0.02, 0.05)) \
            .set_ambient_light(AmbientLight(Color.WHITE, 0.05)) \
            .enable_bvh(self.use_bvh)

        materials = self._create_materials()
        self._create_walls(builder, materials)
        self._create_objects(builder, materials)
        self._create_lighting(builder)

        return builder.build()

    def create_camera(self, aspect_ratio: float = 4.0 / 3.0) -> Camera:
        lookfrom = Point3(0, 0, 50.0)
        lookat = Point3(0, 0, 0)
        vup = Vec3(0, 1, 0)
        vfov = 49.5
        return Camera(lookfrom, lookat, vup, vfov, aspect_ratio)

    def _create_materials(self) -> dict:
        return {
            'wall': Material(kd=0.6, ks=0.1, shininess=10),
            'mirror': Material(kd=0.05, ks=0.3, shininess=200, kr=0.9),
            'glass': Material(kd=0.1, ks=0.9, shininess=300, kr=0.1, kt=0.8),
            'plastic': Material(kd=0.5, ks=0.5, shininess=30),
            'tinted': Material(kd=0.3, ks=0.2, shininess=20, kt=Coeff3(0.6, 0.2, 0.2)),
        }

    def _create_walls(self, builder: SceneBuilder, materials: dict):
        half = self.box_size / 2.0

        floor = Plane(Point3(0, -half, 0), Vec3(0, 1, 0),
                      emission=Color(0.15, 0.15, 0.15), material=materials['wall'])
        back = Polygon(Point3(-half, -half, -half), Point3(half, -half, -half),
                       Point3(half, half, -half), Point3(-half, half, -half),
                       emission=Color(0.12, 0.12, 0.12), material=materials['mirror'])
        left = Polygon(Point3(-half, -half, half), Point3(-half, -half, -half),
                       Point3(-half, half, -half), Point3(-half, half, half),
                       emission=Color(0.4, 0.1, 0.25), material=materials['wall'])
        right = Polygon(Point3(half, -half, -half), Point3(half, -half, half),
                        Point3(half, half, half), Point3(half, half, -half),
                        emission=Color(0.08, 0.25, 0.35), material=materials['wall'])
        builder.add_geometries(floor, back, left, right)

    def _create_objects(self, builder: SceneBuilder, materials: dict):
        half = self.box_size / 2.0
        builder.add_geometries(
            Sphere(Point3(-6, -half + 5, -4), 5,
                   emission=Color(0.05, 0.05, 0.1), material=materials['glass']),
            Sphere(Point3(7, -half + 4, 3), 4,
                   emission=Color(0.3, 0.05, 0.05), material=materials['plastic']),
            Triangle(Point3(-2, 8, 6), Point3(4, 8, 6), Point3(1, 8, 0),
                     emission=Color(0.1, 0.3, 0.1), material=materials['plastic']),
            Cylinder(Ray(Point3(9, -half, -9), Vec3(0, 1, 0)), 2.0, 12.0,
                     emission=Color(0.2, 0.15, 0.05), material=materials['tinted']),
        )

    def _create_lighting(self, builder: SceneBuilder):
        half = self.box_size / 2.0
        builder.add_lights(
            SpotLight(Color(0.9, 0.8, 0.6), Point3(0, half - 1, 10), Vec3(0, -1, -0.5),
                      kl=1e-3, kq=2e-4, narrow_beam=4),
            PointLight(Color(0.4, 0.4, 0.5), Point3(-10, 10, 20), kl=1e-3, kq=1e-4),
            DirectionalLight(Color(0.15, 0.15, 0.15), Vec3(1, -1, -1)),
        )
