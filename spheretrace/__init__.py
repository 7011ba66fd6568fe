"""
SphereTrace - A Python Monte Carlo Ray Tracer

Renders a static scene of spheres with support for:
- Diffuse, metal and glass materials
- Thin-lens depth of field
- Reproducible, seedable sampling
- Scanline-parallel rendering
- Plain-text PPM output
"""

__version__ = "0.1.0"
__author__ = "SphereTrace Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .shapes import Sphere, HittableList, HitRecord
from .materials import Material, Lambertian, Metal, Dielectric, ScatterResult, scatter, reflectance
from .camera import Camera
from .renderer import Renderer, RenderSettings, ray_color, sky_color, to_ldr, write_ppm, save_image
from .scenes import random_scene, three_spheres_scene, two_spheres_scene, create_camera, SCENES, CAMERA_PRESETS
