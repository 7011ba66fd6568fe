"""
Renderer module - the heart of the ray tracer.

Implements:
- Path tracing with a hard depth cutoff
- Scanline rendering, optionally across a thread pool
- Per-scanline random streams for reproducible images
- Plain-text PPM (P3) and Pillow image output
"""

from __future__ import annotations
import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, TextIO, Tuple
import numpy as np

from .vec3 import Color
from .ray import Ray
from .camera import Camera
from .shapes import HittableList
from .materials import scatter

# Offset along the ray that keeps a scattered ray from re-hitting its own surface
T_MIN = 0.001

SKY_HORIZON = Color(1.0, 1.0, 1.0)
SKY_ZENITH = Color(0.5, 0.7, 1.0)

Triple = Tuple[float, float, float]


@dataclass
class RenderSettings:
    """Configuration for the renderer and its camera."""
    aspect_ratio: float = 3.0 / 2.0
    image_width: int = 1200
    image_height: int = 0  # 0 = derived from width and aspect ratio
    samples_per_pixel: int = 500
    max_depth: int = 50
    vfov: float = 20.0
    aperture: float = 0.1
    focus_dist: float = 10.0
    look_from: Triple = (13.0, 2.0, 3.0)
    look_at: Triple = (0.0, 0.0, 0.0)
    vup: Triple = (0.0, 1.0, 0.0)
    num_threads: int = 1  # 0 = auto-detect
    seed: Optional[int] = None

    def __post_init__(self):
        if self.image_height == 0 and self.aspect_ratio > 0:
            self.image_height = int(self.image_width / self.aspect_ratio)
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4
        self.validate()

    def validate(self) -> None:
        """Fail fast on settings that would produce a malformed image.

        Raises:
            ValueError: Describing the first invalid setting found
        """
        if self.aspect_ratio <= 0:
            raise ValueError(f"aspect ratio must be positive, got {self.aspect_ratio}")
        if self.image_width <= 0:
            raise ValueError(f"image width must be positive, got {self.image_width}")
        if self.image_height <= 0:
            raise ValueError(
                f"image height must be positive, got {self.image_height} "
                f"(width {self.image_width} at aspect ratio {self.aspect_ratio:g})"
            )
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples per pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max depth must not be negative, got {self.max_depth}")
        if not 0 < self.vfov < 180:
            raise ValueError(f"vertical field of view must lie in (0, 180) degrees, got {self.vfov}")
        if self.aperture < 0:
            raise ValueError(f"aperture must not be negative, got {self.aperture}")
        if self.focus_dist <= 0:
            raise ValueError(f"focus distance must be positive, got {self.focus_dist}")
        if self.num_threads < 0:
            raise ValueError(f"thread count must not be negative, got {self.num_threads}")


def sky_color(ray: Ray) -> Color:
    """Vertical gradient from white at the horizon to sky blue overhead."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return SKY_HORIZON * (1.0 - t) + SKY_ZENITH * t


def ray_color(ray: Ray, world: HittableList, depth: int, rng: np.random.Generator) -> Color:
    """Compute the radiance carried back along a ray.

    Follows the path bounce by bounce, multiplying the attenuation of
    every surface it scatters from, until it escapes to the sky, is
    absorbed, or runs out of depth.

    Args:
        ray: The ray to trace
        world: The scene to trace against
        depth: Maximum number of bounces
        rng: Random generator owned by the calling worker

    Returns:
        The computed color for this ray
    """
    throughput = Color(1.0, 1.0, 1.0)

    while depth > 0:
        hit_record = world.hit(ray, T_MIN, math.inf)
        if hit_record is None:
            return throughput * sky_color(ray)

        scatter_result = scatter(hit_record.material, ray, hit_record, rng)
        if scatter_result is None:
            return Color(0, 0, 0)

        throughput = throughput * scatter_result.attenuation
        ray = scatter_result.scattered_ray
        depth -= 1

    return Color(0, 0, 0)


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[int, int], None]] = None

    def set_progress_callback(self, callback: Callable[[int, int], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function taking (scanlines_done, total_scanlines),
                called once per scanline in output order
        """
        self._progress_callback = callback

    def render_rows(self, world: HittableList, camera: Camera) -> Iterator[np.ndarray]:
        """Render the image one scanline at a time, top row first.

        Each scanline draws from its own generator spawned from the
        settings seed, so the result does not depend on thread count or
        scheduling. Rows finishing out of order are held back until all
        rows above them have been yielded.

        Args:
            world: The scene to render
            camera: The camera to render from

        Yields:
            Arrays of shape (width, 3) holding per-pixel sums over all samples
        """
        height = self.settings.image_height
        seeds = np.random.SeedSequence(self.settings.seed).spawn(height)

        def render_row(row: int) -> np.ndarray:
            return self._render_row(row, world, camera, np.random.default_rng(seeds[row]))

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                yield from self._report(executor.map(render_row, range(height)), height)
        else:
            yield from self._report(map(render_row, range(height)), height)

    def render(self, world: HittableList, camera: Camera) -> np.ndarray:
        """Render the scene and return the accumulated image.

        Args:
            world: The scene to render
            camera: The camera to render from

        Returns:
            Array of shape (height, width, 3) holding per-pixel sums over
            all samples; pass it to ``to_ldr`` with the sample count.
        """
        image = np.zeros(
            (self.settings.image_height, self.settings.image_width, 3),
            dtype=np.float64
        )
        for row, pixels in enumerate(self.render_rows(world, camera)):
            image[row] = pixels
        return image

    def _report(self, rows: Iterable[np.ndarray], total: int) -> Iterator[np.ndarray]:
        for done, pixels in enumerate(rows, start=1):
            if self._progress_callback:
                self._progress_callback(done, total)
            yield pixels

    def _render_row(self, row: int, world: HittableList, camera: Camera,
                    rng: np.random.Generator) -> np.ndarray:
        """Render a single scanline; row 0 is the top of the image."""
        width = self.settings.image_width
        height = self.settings.image_height
        samples = self.settings.samples_per_pixel
        max_depth = self.settings.max_depth

        j = height - 1 - row
        u_scale = max(width - 1, 1)
        v_scale = max(height - 1, 1)
        pixels = np.zeros((width, 3), dtype=np.float64)

        for i in range(width):
            pixel_color = Color(0, 0, 0)
            for _ in range(samples):
                u = (i + rng.random()) / u_scale
                v = (j + rng.random()) / v_scale
                ray = camera.get_ray(u, v, rng)
                pixel_color = pixel_color + ray_color(ray, world, max_depth, rng)
            pixels[i] = pixel_color.to_array()

        return pixels


def to_ldr(image: np.ndarray, samples: int = 1) -> np.ndarray:
    """Convert accumulated sample sums to 8-bit color.

    Averages over ``samples``, applies gamma 2 (square root), clamps to
    [0, 0.999] and truncates 256 times the value, matching
    ``Vec3.color_string``.

    Args:
        image: Array of accumulated colors, last axis RGB
        samples: Number of samples summed into each pixel

    Returns:
        uint8 array of the same shape
    """
    corrected = np.sqrt(np.maximum(image / samples, 0.0))
    return (256.0 * np.clip(corrected, 0.0, 0.999)).astype(np.uint8)


def write_ppm(stream: TextIO, rows: Iterable[np.ndarray], width: int, height: int,
              samples: int = 1) -> None:
    """Write a plain-text PPM (P3) image.

    Args:
        stream: Text stream to write to
        rows: Scanlines top to bottom, each of shape (width, 3) with accumulated sums
        width: Image width in pixels
        height: Image height in pixels
        samples: Number of samples summed into each pixel
    """
    stream.write(f"P3\n{width} {height}\n255\n")
    for pixels in rows:
        stream.write(''.join(f"{r} {g} {b}\n" for r, g, b in to_ldr(pixels, samples)))
        stream.flush()


def save_image(image: np.ndarray, filename: str, samples: int = 1) -> None:
    """Save an accumulated image to file.

    Args:
        image: Array of shape (height, width, 3) with accumulated sums
        filename: Output filename (``.ppm`` writes P3 text, anything else goes through Pillow)
        samples: Number of samples summed into each pixel
    """
    height, width = image.shape[:2]

    if filename.lower().endswith('.ppm'):
        with open(filename, 'w') as f:
            write_ppm(f, image, width, height, samples)
        return

    from PIL import Image as PILImage

    pil_image = PILImage.fromarray(to_ldr(image, samples), 'RGB')
    pil_image.save(filename)
