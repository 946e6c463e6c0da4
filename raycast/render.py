"""
Frame compositor: cast one ray per pixel and fill a Pillow RGB image.

Rays start at the origin and pass through the centre of each pixel on the
camera's view plane at z = 1. Scan row y is stored in image row
height - 1 - y, so +y on the view plane ends up at the top of the image.
"""
from multiprocessing import Pool
from typing import List, Tuple

from PIL import Image

from .config import RenderSettings
from .errors import UsageError
from .geometry import nearest_hit
from .scene import Camera, Scene, validate_scene
from .shading import FlatShading, get_shading, to_rgb
from .vector import ORIGIN, Vec3, norm

# Set by _init_worker in each render process
_worker_data = {}


def primary_ray(camera: Camera, x: int, y: int, width: int, height: int) -> Vec3:
    """Normalized direction of the camera ray through pixel (x, y)."""
    w = camera.width
    h = camera.height
    pixwidth = w / width
    pixheight = h / height
    return norm((
        -(w / 2) + pixwidth * (x + 0.5),
        -(h / 2) + pixheight * (y + 0.5),
        1.0
    ))


def shade_ray(scene: Scene, shading, ro: Vec3, rd: Vec3) -> Tuple[int, int, int]:
    t, surface = nearest_hit(ro, rd, scene.surfaces)
    if surface is None:
        return (0, 0, 0)
    return to_rgb(shading.shade(scene, surface, t, ro, rd))


def render_row(scene: Scene, shading, y: int, width: int, height: int) -> List[Tuple[int, int, int]]:
    """Colours of scan row ``y``, left to right."""
    return [shade_ray(scene, shading, ORIGIN, primary_ray(scene.camera, x, y, width, height))
            for x in range(width)]


def _init_worker(scene, shading, width, height):
    _worker_data['scene'] = scene
    _worker_data['shading'] = shading
    _worker_data['width'] = width
    _worker_data['height'] = height


def _render_row(y):
    d = _worker_data
    return y, render_row(d['scene'], d['shading'], y, d['width'], d['height'])


def render(scene: Scene, width: int, height: int, shading=None,
           workers: int = 1, verbose: bool = False) -> Image.Image:
    """
    Render ``scene`` into a ``width`` x ``height`` RGB image.

    Args:
        scene: Loaded scene, left untouched
        width, height: Output size in pixels
        shading: Shading strategy, FlatShading when omitted
        workers: Number of render processes; rows are split between them
        verbose: Print progress every 50 rows
    """
    if width <= 0 or height <= 0:
        raise UsageError("Width and height must be greater than 0")
    validate_scene(scene)
    shading = shading or FlatShading()

    img = Image.new("RGB", (width, height))
    pix = img.load()

    if verbose:
        print(f"Rendering {width}x{height} image with {len(scene.surfaces)} objects "
              f"and {len(scene.lights)} lights ({shading.name} shading, {workers} workers)...")

    def store(y, row, done):
        for x, rgb in enumerate(row):
            pix[x, height - 1 - y] = rgb
        if verbose and done % 50 == 0:
            print(f"Progress: {done}/{height} ({100 * done // height}%)")

    if workers > 1:
        with Pool(processes=workers, initializer=_init_worker,
                  initargs=(scene, shading, width, height)) as pool:
            done = 0
            for y, row in pool.imap_unordered(_render_row, range(height)):
                done += 1
                store(y, row, done)
            pool.close()
            pool.join()
    else:
        for y in range(height):
            store(y, render_row(scene, shading, y, width, height), y + 1)

    return img


def render_scene(scene: Scene, width: int, height: int, settings=None) -> Image.Image:
    """Render with shading and worker count taken from RenderSettings."""
    settings = settings or RenderSettings()
    return render(scene, width, height, shading=get_shading(settings.shading),
                  workers=settings.workers, verbose=settings.verbose)
