"""Command line: raycast <width> <height> <input-scene> <output-image>."""
import argparse
import sys
import time
from typing import List, Optional

from .config import COLOR_POLICIES, SHADING_MODELS, load_settings, make_settings
from .errors import OutputError, RaycastError, UsageError
from .ppm import save_image
from .preview import create_scene_preview, describe_scene
from .reader import load_scene
from .render import render_scene


class _ArgumentParser(argparse.ArgumentParser):
    """Report usage problems as UsageError so every failure exits with 1."""

    def error(self, message):
        raise UsageError(f"{message}\n{self.format_usage().strip()}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="raycast", description="Render a scene file to a PPM image")
    parser.add_argument('width', help='Image width in pixels')
    parser.add_argument('height', help='Image height in pixels')
    parser.add_argument('input', help='Scene file')
    parser.add_argument('output', help='Output image (.ppm, or any format Pillow can write)')
    parser.add_argument('--shading', choices=SHADING_MODELS, default=None,
                        help='flat (default) or diffuse with shadows')
    parser.add_argument('--color-policy', choices=COLOR_POLICIES, default=None,
                        help='strict rejects colours outside [0, 1], clamp accepts them')
    parser.add_argument('--workers', type=int, default=None, help='Render processes')
    parser.add_argument('--config', default=None, help='JSON file with a "render" settings object')
    parser.add_argument('--dump', action='store_true', help='Print the parsed scene')
    parser.add_argument('--preview', default=None, help='Write an interactive HTML preview')
    parser.add_argument('--verbose', action='store_true', default=None, help='Print progress')
    return parser


def parse_dimension(value: str, name: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise UsageError(f"{name} must be a positive integer, got \"{value}\"") from None
    if n <= 0:
        raise UsageError(f"{name} must be greater than 0")
    return n


def run(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    width = parse_dimension(args.width, "Width")
    height = parse_dimension(args.height, "Height")

    overrides = {
        "shading": args.shading,
        "color_policy": args.color_policy,
        "workers": args.workers,
        "verbose": args.verbose,
    }
    if args.config:
        settings = load_settings(args.config, overrides)
    else:
        settings = make_settings({}, overrides)

    scene = load_scene(args.input, settings)

    if args.dump:
        print(describe_scene(scene))
    if args.preview:
        try:
            create_scene_preview(scene).write_html(args.preview)
        except OSError as e:
            raise OutputError(f'Could not write preview file "{args.preview}"') from e

    time_start = time.time()
    image = render_scene(scene, width, height, settings)
    if settings.verbose:
        print(f"Rendering time: {time.time() - time_start:.2f} seconds")

    save_image(image, args.output)
    if settings.verbose:
        print(f"Saved {args.output}")


def main(argv: Optional[List[str]] = None) -> int:
    try:
        run(argv)
    except RaycastError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
