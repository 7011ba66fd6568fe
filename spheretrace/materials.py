"""
Materials system.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)

The set of materials is closed: each kind is a frozen dataclass and
``scatter`` dispatches on the concrete type.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional, Union
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray
from .shapes import HitRecord


@dataclass(frozen=True)
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


@dataclass(frozen=True, eq=False)
class Lambertian:
    """Diffuse material with Lambertian (ideal matte) scattering.

    Attributes:
        albedo: The base color (RGB, each component 0-1)
    """
    albedo: Color


@dataclass(frozen=True, eq=False)
class Metal:
    """Metallic material with specular reflection.

    Attributes:
        albedo: The reflection color
        fuzz: Reflection roughness (0 = mirror, 1 = very rough)
    """
    albedo: Color
    fuzz: float = 0.0

    def __post_init__(self):
        if not 0.0 <= self.fuzz <= 1.0:
            raise ValueError(f"Metal fuzz must lie in [0, 1], got {self.fuzz}")


@dataclass(frozen=True, eq=False)
class Dielectric:
    """Dielectric (glass-like) material with refraction.

    Attributes:
        ior: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
    """
    ior: float = 1.5

    def __post_init__(self):
        if not self.ior > 0:
            raise ValueError(f"Refractive index must be positive, got {self.ior}")


Material = Union[Lambertian, Metal, Dielectric]


def reflectance(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for reflectance."""
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)


def _scatter_lambertian(mat: Lambertian, ray_in: Ray, hit: HitRecord,
                        rng: np.random.Generator) -> Optional[ScatterResult]:
    scatter_direction = hit.normal + Vec3.random_unit_vector(rng)

    # Catch degenerate scatter direction
    if scatter_direction.near_zero():
        scatter_direction = hit.normal

    return ScatterResult(
        scattered_ray=Ray(hit.point, scatter_direction),
        attenuation=mat.albedo
    )


def _scatter_metal(mat: Metal, ray_in: Ray, hit: HitRecord,
                   rng: np.random.Generator) -> Optional[ScatterResult]:
    reflected = ray_in.direction.normalize().reflect(hit.normal)
    if mat.fuzz > 0:
        reflected = reflected + Vec3.random_in_unit_sphere(rng) * mat.fuzz

    # Fuzzed reflections pointing into the surface are absorbed
    if reflected.dot(hit.normal) <= 0:
        return None
    return ScatterResult(
        scattered_ray=Ray(hit.point, reflected),
        attenuation=mat.albedo
    )


def _scatter_dielectric(mat: Dielectric, ray_in: Ray, hit: HitRecord,
                        rng: np.random.Generator) -> Optional[ScatterResult]:
    # Determine refraction ratio based on whether we're entering or exiting
    refraction_ratio = 1.0 / mat.ior if hit.front_face else mat.ior

    unit_direction = ray_in.direction.normalize()
    cos_theta = min(-unit_direction.dot(hit.normal), 1.0)
    sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)

    cannot_refract = refraction_ratio * sin_theta > 1.0

    if cannot_refract or reflectance(cos_theta, refraction_ratio) > rng.random():
        direction = unit_direction.reflect(hit.normal)
    else:
        direction = unit_direction.refract(hit.normal, refraction_ratio)

    return ScatterResult(
        scattered_ray=Ray(hit.point, direction),
        attenuation=Color(1.0, 1.0, 1.0)
    )


_SCATTER: dict[type, Callable[..., Optional[ScatterResult]]] = {
    Lambertian: _scatter_lambertian,
    Metal: _scatter_metal,
    Dielectric: _scatter_dielectric,
}


def scatter(material: Material, ray_in: Ray, hit: HitRecord,
            rng: np.random.Generator) -> Optional[ScatterResult]:
    """Compute the scattered ray and attenuation for a surface hit.

    Args:
        material: The material of the surface that was hit
        ray_in: The incoming ray
        hit: The intersection record
        rng: Random generator owned by the calling worker

    Returns:
        ScatterResult if the ray scatters, None if it is absorbed
    """
    try:
        handler = _SCATTER[type(material)]
    except KeyError:
        raise TypeError(f"Unknown material type: {type(material).__name__}") from None
    return handler(material, ray_in, hit, rng)
