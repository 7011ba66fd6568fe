"""
Thin-lens camera.

The camera maps a normalised image coordinate (s, t), with (0, 0) at the
bottom-left, to a ray. With a nonzero aperture the ray leaves from a random
point on the lens and passes through the matching point on the focus plane,
so only objects at ``focus_dist`` are sharp.
"""

from __future__ import annotations
import math
import numpy as np
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """Look-at camera with a circular lens.

    The frame is fixed at construction. ``get_ray`` only reads it, so one
    camera is shared by every render worker.
    """

    def __init__(
        self,
        look_from: Point3,
        look_at: Point3,
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0,
        aperture: float = 0.0,
        focus_dist: float = 1.0
    ):
        """
        Args:
            look_from: Eye position
            look_at: Target the view axis passes through
            vup: Roughly-up hint; must not be parallel to the view axis
            vfov: Vertical opening angle in degrees
            aspect_ratio: Viewport width over height
            aperture: Lens diameter, 0 for a pinhole
            focus_dist: Distance from the eye to the sharp plane
        """
        half_height = math.tan(math.radians(vfov) / 2)
        plane_height = 2.0 * half_height * focus_dist
        plane_width = aspect_ratio * plane_height

        # Right-handed frame with w opposite the view direction
        self.w = (look_from - look_at).normalize()
        self.u = vup.cross(self.w).normalize()
        self.v = self.w.cross(self.u)

        self.origin = look_from
        self.horizontal = self.u * plane_width
        self.vertical = self.v * plane_height
        focus_center = self.origin - self.w * focus_dist
        self.lower_left_corner = focus_center - self.horizontal / 2 - self.vertical / 2

        self.lens_radius = aperture / 2

    def get_ray(self, s: float, t: float, rng: np.random.Generator) -> Ray:
        """Ray through image coordinate (s, t).

        A pinhole camera draws nothing from ``rng``. The direction is
        left unnormalised.
        """
        target = self.lower_left_corner + self.horizontal * s + self.vertical * t

        if self.lens_radius > 0:
            disk = Vec3.random_in_unit_disk(rng) * self.lens_radius
            eye = self.origin + self.u * disk.x + self.v * disk.y
        else:
            eye = self.origin

        return Ray(eye, target - eye)
