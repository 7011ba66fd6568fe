"""
Scene builders.

The random scene is the final cover image: a gray ground, a grid of small
randomly-coloured spheres and three large feature spheres. The two small
scenes are handy for quick material and field-of-view checks.
"""

from __future__ import annotations
import math
from typing import Callable
import numpy as np

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Lambertian, Metal, Dielectric
from .renderer import RenderSettings

GRID_EXTENT = 11
SMALL_RADIUS = 0.2
# Small spheres closer than this to the reserved point are skipped
CLEARANCE = 0.9
RESERVED_POINT = Point3(4, 0.2, 0)


def random_scene(rng: np.random.Generator) -> HittableList:
    """Create the random sphere field.

    Material mix for the small spheres: 80% diffuse with the product of
    two random colors as albedo, 15% metal with albedo in [0.5, 1) and
    fuzz in [0, 0.5), 5% glass.
    """
    world = HittableList()

    ground_material = Lambertian(Color(0.5, 0.5, 0.5))
    world.add(Sphere(Point3(0, -1000, 0), 1000, ground_material))

    glass = Dielectric(1.5)

    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random())

            if (center - RESERVED_POINT).length() <= CLEARANCE:
                continue

            if choose_mat < 0.8:
                albedo = Color.random(rng) * Color.random(rng)
                material = Lambertian(albedo)
            elif choose_mat < 0.95:
                albedo = Color.random(rng, 0.5, 1)
                fuzz = rng.uniform(0, 0.5)
                material = Metal(albedo, fuzz)
            else:
                material = glass
            world.add(Sphere(center, SMALL_RADIUS, material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, glass))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


def three_spheres_scene(rng: np.random.Generator = None) -> HittableList:
    """Diffuse, glass and mirror spheres side by side on a yellow ground."""
    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    left = Dielectric(1.5)
    right = Metal(Color(0.8, 0.6, 0.2), 0.0)

    return HittableList([
        Sphere(Point3(0.0, -100.5, -1.0), 100.0, ground),
        Sphere(Point3(0.0, 0.0, -1.0), 0.5, center),
        Sphere(Point3(-1.0, 0.0, -1.0), 0.5, left),
        Sphere(Point3(1.0, 0.0, -1.0), 0.5, right),
    ])


def two_spheres_scene(rng: np.random.Generator = None) -> HittableList:
    """Two touching spheres that exactly fill a 90 degree field of view."""
    r = math.cos(math.pi / 4)
    return HittableList([
        Sphere(Point3(-r, 0, -1), r, Lambertian(Color(0, 0, 1))),
        Sphere(Point3(r, 0, -1), r, Lambertian(Color(1, 0, 0))),
    ])


SCENES: dict[str, Callable[[np.random.Generator], HittableList]] = {
    'random': random_scene,
    'three': three_spheres_scene,
    'two': two_spheres_scene,
}

# RenderSettings overrides that frame each scene
CAMERA_PRESETS: dict[str, dict] = {
    'random': {},
    'three': {
        'look_from': (3.0, 3.0, 2.0),
        'look_at': (0.0, 0.0, -1.0),
        'vfov': 20.0,
        'aperture': 2.0,
        'focus_dist': math.sqrt(27.0),
    },
    'two': {
        'look_from': (0.0, 0.0, 0.0),
        'look_at': (0.0, 0.0, -1.0),
        'vfov': 90.0,
        'aperture': 0.0,
        'focus_dist': 1.0,
    },
}


def create_camera(settings: RenderSettings) -> Camera:
    """Build the camera described by the render settings."""
    return Camera(
        look_from=Point3(*settings.look_from),
        look_at=Point3(*settings.look_at),
        vup=Vec3(*settings.vup),
        vfov=settings.vfov,
        aspect_ratio=settings.image_width / settings.image_height,
        aperture=settings.aperture,
        focus_dist=settings.focus_dist
    )
