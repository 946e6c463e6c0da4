"""Writing the rendered pixel buffer to disk."""
import contextlib
import os

from PIL import Image

from .errors import OutputError
from .shading import MAX_COLOR_VALUE

DEFAULT_COMMENT = "Rendered by raycast"

PPM_EXTENSIONS = (".ppm", ".pnm")


def ppm_header(width: int, height: int, comment: str = DEFAULT_COMMENT) -> bytes:
    return f"P6\n# {comment}\n{width} {height}\n{MAX_COLOR_VALUE}\n".encode("ascii")


def write_ppm(image: Image.Image, output_path: str, comment: str = DEFAULT_COMMENT) -> None:
    """Write ``image`` as a binary P6 pixmap, rows in buffer order."""
    if image.mode != "RGB":
        image = image.convert("RGB")
    width, height = image.size
    try:
        fh = open(output_path, "wb")
    except OSError as e:
        raise OutputError(f'Could not write output file "{output_path}"') from e
    try:
        with fh:
            fh.write(ppm_header(width, height, comment))
            fh.write(image.tobytes())
    except OSError as e:
        # don't leave a truncated file behind
        with contextlib.suppress(OSError):
            os.remove(output_path)
        raise OutputError(f'Could not write output file "{output_path}"') from e


def save_image(image: Image.Image, output_path: str) -> None:
    """Save as PPM for .ppm/.pnm paths, otherwise in whatever format Pillow infers."""
    ext = os.path.splitext(output_path)[1].lower()
    if ext in PPM_EXTENSIONS or not ext:
        write_ppm(image, output_path)
        return
    try:
        image.save(output_path)
    except (OSError, ValueError) as e:
        raise OutputError(f'Could not write output file "{output_path}"') from e
