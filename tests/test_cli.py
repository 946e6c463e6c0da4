import pytest

from raycast.cli import main

SCENE = """[
  {"type": "camera", "width": 1, "height": 1},
  {"type": "sphere", "color": [1, 0, 0], "position": [0, 0, 5], "radius": 1},
  {"type": "light", "color": [1, 1, 1], "position": [0, 0, 0]}
]
"""


@pytest.fixture
def scene_file(tmp_path):
    path = tmp_path / "scene.json"
    path.write_text(SCENE)
    return str(path)


def test_render_to_ppm(tmp_path, scene_file):
    out = tmp_path / "out.ppm"
    assert main(["3", "3", scene_file, str(out)]) == 0

    data = out.read_bytes()
    assert data.startswith(b"P6\n#")
    assert b"\n3 3\n255\n" in data
    pixels = data[-27:]
    # middle pixel of the middle row
    assert pixels[12:15] == b"\xff\x00\x00"
    assert pixels.count(0) == 27 - 1


def test_render_with_options(tmp_path, scene_file):
    out = tmp_path / "out.png"
    assert main(["4", "4", scene_file, str(out), "--shading", "diffuse", "--workers", "1"]) == 0
    assert out.exists()


def test_missing_camera_fails_without_output(tmp_path, capsys):
    scene = tmp_path / "scene.json"
    scene.write_text('[{"type": "sphere", "radius": 1}]')
    out = tmp_path / "out.ppm"

    assert main(["3", "3", str(scene), str(out)]) == 1
    assert "Scene must contain a camera" in capsys.readouterr().err
    assert not out.exists()


def test_parse_error_reports_line(tmp_path, capsys):
    scene = tmp_path / "scene.json"
    scene.write_text('[\n{"type": "camera", "width": 1, "height": 1},\n{"type": "cone"}\n]')
    assert main(["3", "3", str(scene), str(tmp_path / "out.ppm")]) == 1
    assert 'Unknown type, "cone", on line 3.' in capsys.readouterr().err


@pytest.mark.parametrize("argv", [
    [],
    ["3", "3", "scene.json"],
    ["3", "3", "scene.json", "out.ppm", "extra"],
    ["abc", "3", "scene.json", "out.ppm"],
    ["3", "0", "scene.json", "out.ppm"],
    ["-4", "3", "scene.json", "out.ppm"],
    ["3", "3", "scene.json", "out.ppm", "--shading", "phong"],
])
def test_usage_errors(argv, capsys):
    assert main(argv) == 1
    assert capsys.readouterr().err.startswith("Error:")


def test_missing_input_file(tmp_path, capsys):
    assert main(["3", "3", str(tmp_path / "nope.json"), str(tmp_path / "out.ppm")]) == 1
    assert "Could not open file" in capsys.readouterr().err


def test_color_policy_flag(tmp_path, capsys):
    scene = tmp_path / "scene.json"
    scene.write_text('[{"type": "camera", "width": 1, "height": 1},'
                     ' {"type": "sphere", "radius": 1, "position": [0, 0, 5], "color": [2, 0, 0]}]')
    out = tmp_path / "out.ppm"

    assert main(["3", "3", str(scene), str(out)]) == 1
    assert "between 0 and 1" in capsys.readouterr().err

    assert main(["3", "3", str(scene), str(out), "--color-policy", "clamp"]) == 0
    assert out.read_bytes()[-15:-12] == b"\xff\x00\x00"


def test_config_file(tmp_path, scene_file):
    config = tmp_path / "render.json"
    config.write_text('{"render": {"max_objects": 0}}')
    assert main(["3", "3", scene_file, str(tmp_path / "out.ppm"), "--config", str(config)]) == 1

    config.write_text('{"render": {"shading": "diffuse", "verbose": true}}')
    assert main(["3", "3", scene_file, str(tmp_path / "out.ppm"), "--config", str(config)]) == 0


def test_config_file_with_bad_encoding(tmp_path, scene_file, capsys):
    config = tmp_path / "render.json"
    config.write_bytes(b'{"render": {"shading": "\xff"}}')
    out = tmp_path / "out.ppm"
    assert main(["3", "3", scene_file, str(out), "--config", str(config)]) == 1
    assert capsys.readouterr().err.startswith("Error: ")
    assert not out.exists()


def test_dump_and_preview(tmp_path, scene_file, capsys):
    html = tmp_path / "preview.html"
    assert main(["2", "2", scene_file, str(tmp_path / "out.ppm"), "--dump", "--preview", str(html)]) == 0

    out = capsys.readouterr().out
    assert "Camera:" in out
    assert "Sphere:" in out
    assert "Light:" in out
    assert "<html" in html.read_text().lower()


def test_verbose(tmp_path, scene_file, capsys):
    out = tmp_path / "out.ppm"
    assert main(["2", "2", scene_file, str(out), "--verbose"]) == 0
    printed = capsys.readouterr().out
    assert "Rendering 2x2 image" in printed
    assert f"Saved {out}" in printed
