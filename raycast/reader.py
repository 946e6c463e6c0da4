"""
Scene file reader.

A scene file is a JSON-flavoured array of flat objects:

    [
      {"type": "camera", "width": 2.0, "height": 2.0},
      {"type": "sphere", "color": [1, 0, 0], "position": [0, 1, 5], "radius": 2},
      {"type": "plane", "color": [0, 0, 1], "position": [0, 0, 0], "normal": [0, 1, 0]},
      {"type": "light", "color": [1, 1, 1], "position": [1, 3, 2], "radial-a0": 1}
    ]

It is not full JSON: strings are plain printable ASCII with no escapes, and a
value is either a number or a three-number vector. The reader walks the text
one character at a time, keeping a line counter for error messages, and
either returns a complete Scene or raises a RaycastError subclass.
"""
import re
from typing import Any, Dict, List, Optional

from .config import COLOR_POLICIES, RenderSettings
from .errors import (
    ConfigError, DuplicateCameraError, EmptySceneError, LexicalError,
    MissingCameraError, SchemaError, SceneIOError, SceneValueError,
    TooManyObjectsError, UnexpectedEOFError,
)
from .scene import Camera, Light, Plane, Scene, Sphere, Surface
from .vector import Vec3, length, norm

WHITESPACE = " \t\n\v\f\r"
MAX_STRING_LENGTH = 128
MAX_OBJECTS = 128

NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

OBJECT_TYPES = ("camera", "sphere", "plane", "light")

# key -> (value kind, object types that accept it)
FIELDS = {
    "width": ("number", ("camera",)),
    "height": ("number", ("camera",)),
    "radius": ("number", ("sphere",)),
    "color": ("vector", ("plane", "sphere", "light")),
    "position": ("vector", ("plane", "sphere", "light")),
    "normal": ("vector", ("plane",)),
    "direction": ("vector", ("light",)),
    "radial-a0": ("number", ("light",)),
    "radial-a1": ("number", ("light",)),
    "radial-a2": ("number", ("light",)),
    "angular-a0": ("number", ("light",)),
}

# older scene files say "location"
ALIASES = {"location": "position"}

REQUIRED = {
    "camera": ("width", "height"),
    "sphere": ("radius",),
    "plane": ("normal",),
    "light": ("position",),
}


class SceneReader:
    """Single-use reader over the text of one scene file."""

    def __init__(self, text: str, color_policy: str = "strict",
                 max_objects: int = MAX_OBJECTS, max_lights: int = MAX_OBJECTS):
        if color_policy not in COLOR_POLICIES:
            raise ConfigError(f'Unknown color policy "{color_policy}"')
        self.text = text
        self.pos = 0
        self.line = 1
        self.color_policy = color_policy
        self.max_objects = max_objects
        self.max_lights = max_lights

        self.camera: Optional[Camera] = None
        self.surfaces: List[Surface] = []
        self.lights: List[Light] = []

    # Lexical layer

    def next_char(self) -> str:
        if self.pos >= len(self.text):
            raise UnexpectedEOFError("Unexpected end of file", self.line)
        c = self.text[self.pos]
        self.pos += 1
        if c == "\n":
            self.line += 1
        return c

    def expect(self, d: str) -> None:
        c = self.next_char()
        if c != d:
            raise LexicalError(f"Expected '{d}'", self.line)

    def skip_whitespace(self) -> None:
        while True:
            if self.pos >= len(self.text):
                raise UnexpectedEOFError("Unexpected end of file", self.line)
            if self.text[self.pos] not in WHITESPACE:
                return
            self.next_char()

    def next_string(self) -> str:
        if self.next_char() != '"':
            raise LexicalError("Expected string", self.line)
        chars = []
        c = self.next_char()
        while c != '"':
            if len(chars) >= MAX_STRING_LENGTH:
                raise LexicalError(
                    f"Strings longer than {MAX_STRING_LENGTH} characters in length are not supported",
                    self.line)
            if c == "\\":
                raise LexicalError("Strings with escape codes are not supported", self.line)
            if ord(c) < 32 or ord(c) > 126:
                raise LexicalError("Strings may contain only ascii characters", self.line)
            chars.append(c)
            c = self.next_char()
        return "".join(chars)

    def next_number(self) -> float:
        m = NUMBER_RE.match(self.text, self.pos)
        if m is None:
            if self.pos >= len(self.text):
                raise UnexpectedEOFError("Unexpected end of file", self.line)
            raise LexicalError("Expected number", self.line)
        self.pos = m.end()
        return float(m.group())

    def next_vector(self) -> Vec3:
        self.expect("[")
        self.skip_whitespace()
        x = self.next_number()
        self.skip_whitespace()
        self.expect(",")
        self.skip_whitespace()
        y = self.next_number()
        self.skip_whitespace()
        self.expect(",")
        self.skip_whitespace()
        z = self.next_number()
        self.skip_whitespace()
        self.expect("]")
        return (x, y, z)

    # Grammar layer

    def read(self) -> Scene:
        self.skip_whitespace()
        self.expect("[")
        self.skip_whitespace()

        c = self.next_char()
        if c == "]":
            raise EmptySceneError("Scene file contains no objects", self.line)

        while True:
            if c != "{":
                raise LexicalError("Expecting '{'", self.line)
            self.parse_object()

            self.skip_whitespace()
            c = self.next_char()
            if c == ",":
                self.skip_whitespace()
                c = self.next_char()
            elif c == "]":
                break
            else:
                raise LexicalError("Expecting ',' or ']'", self.line)

        if self.camera is None:
            raise MissingCameraError("Scene must contain a camera", self.line)
        return Scene(self.camera, self.surfaces, self.lights)

    def parse_object(self) -> None:
        """Parse one ``{...}`` entry; the opening brace is already consumed."""
        start_line = self.line
        self.skip_whitespace()

        if self.text[self.pos] == "}":
            raise SchemaError('Expected "type" key', self.line)
        key = self.next_string()
        if key != "type":
            raise SchemaError('Expected "type" key', self.line)
        self.skip_whitespace()
        self.expect(":")
        self.skip_whitespace()

        obj_type = self.next_string()
        if obj_type not in OBJECT_TYPES:
            raise SchemaError(f'Unknown type, "{obj_type}",', self.line)
        self.check_capacity(obj_type)
        self.skip_whitespace()

        fields: Dict[str, Any] = {}
        while True:
            c = self.next_char()
            if c == "}":
                break
            if c != ",":
                raise LexicalError("Unexpected value", self.line)
            self.skip_whitespace()
            key = self.next_string()
            self.skip_whitespace()
            self.expect(":")
            self.skip_whitespace()
            key = ALIASES.get(key, key)
            fields[key] = self.parse_field(obj_type, key)
            self.skip_whitespace()

        for key in REQUIRED[obj_type]:
            if key not in fields:
                raise SchemaError(f'Missing "{key}" for {obj_type}', start_line)
        self.build(obj_type, fields)

    def check_capacity(self, obj_type: str) -> None:
        if obj_type == "camera":
            if self.camera is not None:
                raise DuplicateCameraError("There should only be one camera per scene", self.line)
        elif obj_type == "light":
            if len(self.lights) >= self.max_lights:
                raise TooManyObjectsError(
                    f"Too many lights, at most {self.max_lights} are supported", self.line)
        elif len(self.surfaces) >= self.max_objects:
            raise TooManyObjectsError(
                f"Too many objects, at most {self.max_objects} are supported", self.line)

    def parse_field(self, obj_type: str, key: str):
        if key not in FIELDS:
            raise SchemaError(f'Unknown property, "{key}",', self.line)
        kind, allowed = FIELDS[key]
        if obj_type not in allowed:
            raise SchemaError(f'Improper object field "{key}" for {obj_type}', self.line)

        value = self.next_number() if kind == "number" else self.next_vector()

        if key in ("width", "height") and value <= 0:
            raise SceneValueError(f"Camera {key} must be greater than 0", self.line)
        if key == "radius" and value < 0:
            raise SceneValueError("Radius cannot be less than 0", self.line)
        if key == "color" and self.color_policy == "strict":
            if any(v < 0 or v > 1 for v in value):
                raise SceneValueError("Color values must be between 0 and 1", self.line)
        if key in ("normal", "direction"):
            if length(value) == 0:
                raise SceneValueError(f"The {key} vector must not be zero", self.line)
            value = norm(value)
        return value

    def build(self, obj_type: str, fields: Dict[str, Any]) -> None:
        if obj_type == "camera":
            self.camera = Camera(fields["width"], fields["height"])
        elif obj_type == "sphere":
            self.surfaces.append(Sphere(fields["radius"],
                                        color=fields.get("color", (0.0, 0.0, 0.0)),
                                        position=fields.get("position", (0.0, 0.0, 0.0))))
        elif obj_type == "plane":
            self.surfaces.append(Plane(fields["normal"],
                                       color=fields.get("color", (0.0, 0.0, 0.0)),
                                       position=fields.get("position", (0.0, 0.0, 0.0))))
        else:
            self.lights.append(Light(fields["position"],
                                     color=fields.get("color", (1.0, 1.0, 1.0)),
                                     direction=fields.get("direction"),
                                     radial_a0=fields.get("radial-a0", 1.0),
                                     radial_a1=fields.get("radial-a1", 0.0),
                                     radial_a2=fields.get("radial-a2", 0.0),
                                     angular_a0=fields.get("angular-a0", 0.0)))


def parse_scene(text: str, color_policy: str = "strict",
                max_objects: int = MAX_OBJECTS, max_lights: int = MAX_OBJECTS) -> Scene:
    """Parse scene text into a Scene, raising a RaycastError on any problem."""
    return SceneReader(text, color_policy, max_objects, max_lights).read()


def read_scene(path: str, color_policy: str = "strict",
               max_objects: int = MAX_OBJECTS, max_lights: int = MAX_OBJECTS) -> Scene:
    """Read and parse a scene file."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise SceneIOError(f'Could not open file "{path}"') from e
    # latin-1 maps every byte to one character, so non-ASCII bytes reach the string checks
    return parse_scene(data.decode("latin-1"), color_policy, max_objects, max_lights)


def load_scene(path: str, settings: Optional[RenderSettings] = None) -> Scene:
    """Read a scene file using the limits and colour policy from ``settings``."""
    settings = settings or RenderSettings()
    return read_scene(path, settings.color_policy, settings.max_objects, settings.max_lights)
