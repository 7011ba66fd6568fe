"""
Half-lines traced through the scene.

Every primary and scattered ray is a ``Ray``; intersection code only ever
reads it, so it is a frozen value.
"""

from __future__ import annotations
from dataclasses import dataclass

from .vec3 import Vec3, Point3


@dataclass(frozen=True)
class Ray:
    """Start point plus a direction of any nonzero length.

    ``at(t)`` scales the direction as given, so ``t`` is a distance only
    for unit directions. Sphere hits are reported in the same ``t``.
    """

    origin: Point3
    direction: Vec3

    def at(self, t: float) -> Point3:
        return self.origin + self.direction * t
