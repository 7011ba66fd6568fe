"""Tests for geometric shapes."""

import pytest
import math
import numpy as np

from spheretrace.vec3 import Vec3, Point3, Color
from spheretrace.ray import Ray
from spheretrace.shapes import Sphere, HittableList, HitRecord
from spheretrace.materials import Lambertian, Metal


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        center = Point3(0, 0, 0)
        sphere = Sphere(center, 1.0)
        assert sphere.center == center
        assert sphere.radius == 1.0

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius_rejected(self, radius):
        with pytest.raises(ValueError):
            Sphere(Point3(0, 0, 0), radius)

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-9
        assert hit.point == Point3(0, 0, -1)

    def test_hit_with_unnormalized_direction(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 2))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert abs(hit.t - 2.0) < 1e-9
        assert hit.point == Point3(0, 0, -1)

    def test_hit_front_face(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit.front_face is True
        assert hit.normal == Vec3(0, 0, -1)

    def test_hit_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert hit.front_face is False
        # Normal is flipped to face the ray
        assert hit.normal == Vec3(0, 0, -1)

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 5, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_tangent_ray_is_a_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 1, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_t_max_excludes_both_roots(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, 3.5) is None

    def test_far_root_used_when_near_root_out_of_range(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 4.5, float('inf'))
        assert abs(hit.t - 6.0) < 1e-9
        assert hit.front_face is False

    def test_material_is_shared_not_copied(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        sphere = Sphere(Point3(0, 0, 0), 1.0, mat)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, float('inf'))
        assert hit.material is mat

    def test_random_hits_satisfy_invariants(self):
        rng = np.random.default_rng(17)
        sphere = Sphere(Point3(0.5, -0.25, 1.0), 1.5)
        hits = 0
        for _ in range(300):
            origin = Vec3.random(rng, -4, 4)
            target = sphere.center + Vec3.random(rng, -1.5, 1.5)
            direction = (target - origin) * rng.uniform(0.2, 3.0)
            ray = Ray(origin, direction)
            hit = sphere.hit(ray, 0.001, float('inf'))
            if hit is None:
                continue
            hits += 1
            outward = (hit.point - sphere.center) / sphere.radius
            assert abs((hit.point - sphere.center).length() - sphere.radius) < 1e-8
            assert abs(hit.normal.length() - 1.0) < 1e-9
            assert hit.front_face == (ray.direction.dot(outward) < 0)
            assert hit.normal.dot(ray.direction) <= 0
        assert hits > 100


class TestHitRecord:
    """Test HitRecord construction."""

    def test_from_outward_normal_front(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = HitRecord.from_outward_normal(ray, 2.0, Vec3(0, 0, 1))
        assert hit.front_face is True
        assert hit.normal == Vec3(0, 0, 1)
        assert hit.point == Point3(0, 0, -2)

    def test_from_outward_normal_back(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = HitRecord.from_outward_normal(ray, 2.0, Vec3(0, 0, -1))
        assert hit.front_face is False
        assert hit.normal == Vec3(0, 0, 1)

    def test_is_immutable(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = HitRecord.from_outward_normal(ray, 2.0, Vec3(0, 0, 1))
        with pytest.raises(AttributeError):
            hit.t = 5.0


class TestHittableList:
    """Test HittableList class."""

    def test_empty_list(self):
        world = HittableList()
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert world.hit(ray, 0.001, float('inf')) is None
        assert len(world) == 0

    def test_add_and_iterate(self):
        world = HittableList()
        a = Sphere(Point3(0, 0, 0), 1.0)
        b = Sphere(Point3(3, 0, 0), 1.0)
        world.add(a)
        world.add(b)
        assert len(world) == 2
        assert list(world) == [a, b]

    def test_closest_hit_regardless_of_order(self):
        near_mat = Lambertian(Color(1, 0, 0))
        far_mat = Metal(Color(0, 0, 1), 0.0)
        near = Sphere(Point3(0, 0, -3), 1.0, near_mat)
        far = Sphere(Point3(0, 0, -10), 1.0, far_mat)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        for world in (HittableList([near, far]), HittableList([far, near])):
            hit = world.hit(ray, 0.001, float('inf'))
            assert abs(hit.t - 2.0) < 1e-9
            assert hit.material is near_mat

    def test_respects_t_max(self):
        world = HittableList([Sphere(Point3(0, 0, -10), 1.0)])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert world.hit(ray, 0.001, 5.0) is None

    def test_overlapping_spheres(self):
        big = Sphere(Point3(0, 0, -5), 2.0)
        small = Sphere(Point3(0, 0, -3.5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = HittableList([big, small]).hit(ray, 0.001, float('inf'))
        assert abs(hit.t - 2.5) < 1e-9
