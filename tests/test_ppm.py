import pytest
from PIL import Image

from raycast.errors import OutputError
from raycast.ppm import DEFAULT_COMMENT, ppm_header, save_image, write_ppm


@pytest.fixture
def image():
    img = Image.new("RGB", (3, 2))
    img.putpixel((0, 0), (255, 0, 0))
    img.putpixel((2, 1), (1, 2, 3))
    return img


def test_header_layout():
    assert ppm_header(3, 2) == b"P6\n# " + DEFAULT_COMMENT.encode() + b"\n3 2\n255\n"
    assert ppm_header(640, 480, "hello") == b"P6\n# hello\n640 480\n255\n"


def test_write_ppm(tmp_path, image):
    path = tmp_path / "out.ppm"
    write_ppm(image, str(path))

    data = path.read_bytes()
    header = ppm_header(3, 2)
    assert data.startswith(header)
    pixels = data[len(header):]
    assert len(pixels) == 3 * 2 * 3
    # row-major, interleaved RGB, image row 0 first
    assert pixels[:3] == b"\xff\x00\x00"
    assert pixels[-3:] == b"\x01\x02\x03"
    assert pixels == image.tobytes()


def test_write_ppm_converts_mode(tmp_path):
    path = tmp_path / "grey.ppm"
    write_ppm(Image.new("L", (2, 2), 7), str(path))
    assert path.read_bytes().endswith(b"\x07" * 12)


def test_written_ppm_opens_in_pillow(tmp_path, image):
    path = tmp_path / "out.ppm"
    write_ppm(image, str(path))
    with Image.open(path) as loaded:
        assert loaded.size == (3, 2)
        assert loaded.convert("RGB").tobytes() == image.tobytes()


def test_save_image_png(tmp_path, image):
    path = tmp_path / "out.png"
    save_image(image, str(path))
    with Image.open(path) as loaded:
        assert loaded.format == "PNG"
        assert loaded.convert("RGB").tobytes() == image.tobytes()


@pytest.mark.parametrize("name", ["out.ppm", "out.PNM", "out"])
def test_save_image_defaults_to_ppm(tmp_path, image, name):
    path = tmp_path / name
    save_image(image, str(path))
    assert path.read_bytes().startswith(b"P6\n")


def test_unwritable_output(tmp_path, image):
    with pytest.raises(OutputError):
        write_ppm(image, str(tmp_path / "missing" / "out.ppm"))
    with pytest.raises(OutputError):
        save_image(image, str(tmp_path / "missing" / "out.png"))


def test_unknown_extension(tmp_path, image):
    with pytest.raises(OutputError):
        save_image(image, str(tmp_path / "out.notaformat"))


class FailingImage:
    """Quacks like an RGB image but fails once the header is on disk."""
    mode = "RGB"
    size = (3, 2)

    def tobytes(self):
        raise OSError("No space left on device")


def test_failed_write_leaves_no_partial_file(tmp_path):
    path = tmp_path / "out.ppm"
    with pytest.raises(OutputError):
        write_ppm(FailingImage(), str(path))
    assert not path.exists()


def test_unwritable_output_keeps_existing_file(tmp_path, image):
    # an existing directory at the output path is not removed
    path = tmp_path / "taken.ppm"
    path.mkdir()
    with pytest.raises(OutputError):
        write_ppm(image, str(path))
    assert path.is_dir()
