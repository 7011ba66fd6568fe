#!/usr/bin/env python3
"""
SphereTrace - A Python Monte Carlo Ray Tracer

Main entry point for rendering scenes. The image goes to stdout (or a
file); progress and timing go to stderr.
"""

import argparse
import sys
import time
from pathlib import Path

import numpy as np
from PIL import Image

from spheretrace.renderer import Renderer, RenderSettings, write_ppm, save_image
from spheretrace.scenes import SCENES, CAMERA_PRESETS, create_camera


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='SphereTrace - A Python Monte Carlo Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py > image.ppm
  python main.py --width 400 --samples 50 --seed 7 --output cover.png
  python main.py --scene three --width 400 --samples 100 --threads 0 > three.ppm
        '''
    )

    parser.add_argument('--width', type=int, default=1200, help='Image width (default: 1200)')
    parser.add_argument('--aspect-ratio', type=float, default=3.0 / 2.0,
                        help='Width / height ratio (default: 1.5)')
    parser.add_argument('--samples', type=int, default=500, help='Samples per pixel (default: 500)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--vfov', type=float, help='Vertical field of view in degrees')
    parser.add_argument('--aperture', type=float, help='Lens aperture (0 = pinhole)')
    parser.add_argument('--focus-dist', type=float, help='Distance to the focus plane')
    parser.add_argument('--threads', type=int, default=1, help='Number of threads (0=auto, default: 1)')
    parser.add_argument('--seed', type=int, help='Random seed for a reproducible image')
    parser.add_argument('--scene', type=str, default='random', choices=sorted(SCENES),
                        help='Scene to render (default: random)')
    parser.add_argument('--output', type=str, default='-',
                        help='Output file; .ppm is written as text, other extensions via Pillow '
                             '(default: - for PPM on stdout)')
    parser.add_argument('--quiet', action='store_true', help='Suppress progress output')
    return parser


def settings_from_args(args: argparse.Namespace) -> RenderSettings:
    """Combine the scene's camera preset with command-line overrides."""
    options = dict(CAMERA_PRESETS[args.scene])
    for name, value in (('vfov', args.vfov), ('aperture', args.aperture), ('focus_dist', args.focus_dist)):
        if value is not None:
            options[name] = value

    return RenderSettings(
        aspect_ratio=args.aspect_ratio,
        image_width=args.width,
        samples_per_pixel=args.samples,
        max_depth=args.depth,
        num_threads=args.threads,
        seed=args.seed,
        **options
    )


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    def log(message: str = '', end: str = '\n'):
        if not args.quiet:
            print(message, end=end, file=sys.stderr, flush=True)

    try:
        settings = settings_from_args(args)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    # Bad output paths fail before any rendering work
    if args.output != '-':
        output_path = Path(args.output)
        suffix = output_path.suffix.lower()
        if suffix != '.ppm' and suffix not in Image.registered_extensions():
            print(f"error: unknown image format '{output_path.suffix}' for {args.output}", file=sys.stderr)
            return 2
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"error: cannot create output directory: {e}", file=sys.stderr)
            return 2

    log("=" * 60)
    log("SphereTrace Ray Tracer")
    log("=" * 60)
    log("Render Settings:")
    log(f"  Resolution: {settings.image_width}x{settings.image_height}")
    log(f"  Samples: {settings.samples_per_pixel}")
    log(f"  Max Depth: {settings.max_depth}")
    log(f"  Threads: {settings.num_threads}")
    log(f"  Seed: {settings.seed if settings.seed is not None else 'random'}")

    # Scanlines draw from streams spawned off the seed; the scene uses the root stream
    scene_rng = np.random.default_rng(settings.seed)
    world = SCENES[args.scene](scene_rng)
    camera = create_camera(settings)
    log(f"\nScene: {args.scene} ({len(world)} spheres)")

    renderer = Renderer(settings)

    def progress_callback(done: int, total: int):
        log(f"\rScanlines remaining: {total - done} ", end='')

    renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    rows = renderer.render_rows(world, camera)
    width, height = settings.image_width, settings.image_height

    if args.output == '-':
        write_ppm(sys.stdout, rows, width, height, settings.samples_per_pixel)
    else:
        image = np.array(list(rows))
        save_image(image, args.output, settings.samples_per_pixel)

    elapsed = time.time() - start_time
    log(f"\nRender completed in {elapsed:.2f} seconds")
    log("Done.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
