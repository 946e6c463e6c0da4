"""Scene representation: camera, surfaces and lights."""
from typing import List, Optional

from .errors import MissingCameraError, SceneValueError
from .geometry import ray_plane, ray_sphere
from .vector import Vec3, length, norm, sub


class Camera:
    """View plane of ``width`` x ``height`` at distance 1 along +z."""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height

    def __repr__(self) -> str:
        return f"Camera(width={self.width!r}, height={self.height!r})"


class Surface:
    """Anything a ray can hit. Subclasses supply the intersection and normal."""

    kind = "surface"

    def __init__(self, color: Vec3 = (0.0, 0.0, 0.0), position: Vec3 = (0.0, 0.0, 0.0)):
        self.color = color
        self.position = position

    def intersect(self, ro: Vec3, rd: Vec3) -> float:
        raise NotImplementedError

    def normal_at(self, point: Vec3) -> Vec3:
        raise NotImplementedError


class Plane(Surface):
    kind = "plane"

    def __init__(self, normal: Vec3, color: Vec3 = (0.0, 0.0, 0.0),
                 position: Vec3 = (0.0, 0.0, 0.0)):
        super().__init__(color, position)
        self.normal = normal

    def intersect(self, ro: Vec3, rd: Vec3) -> float:
        return ray_plane(ro, rd, self.position, self.normal)

    def normal_at(self, point: Vec3) -> Vec3:
        return self.normal

    def __repr__(self) -> str:
        return f"Plane(normal={self.normal!r}, color={self.color!r}, position={self.position!r})"


class Sphere(Surface):
    kind = "sphere"

    def __init__(self, radius: float, color: Vec3 = (0.0, 0.0, 0.0),
                 position: Vec3 = (0.0, 0.0, 0.0)):
        super().__init__(color, position)
        self.radius = radius

    def intersect(self, ro: Vec3, rd: Vec3) -> float:
        return ray_sphere(ro, rd, self.position, self.radius)

    def normal_at(self, point: Vec3) -> Vec3:
        return norm(sub(point, self.position))

    def __repr__(self) -> str:
        return f"Sphere(radius={self.radius!r}, color={self.color!r}, position={self.position!r})"


class Light:
    """
    Point light, optionally aimed along ``direction`` (spot light).

    Radial falloff is ``1 / (radial_a2 d^2 + radial_a1 d + radial_a0)``;
    ``angular_a0`` is the exponent of the spot cone falloff.
    """

    def __init__(self, position: Vec3, color: Vec3 = (1.0, 1.0, 1.0),
                 direction: Optional[Vec3] = None,
                 radial_a0: float = 1.0, radial_a1: float = 0.0, radial_a2: float = 0.0,
                 angular_a0: float = 0.0):
        self.position = position
        self.color = color
        self.direction = direction
        self.radial_a0 = radial_a0
        self.radial_a1 = radial_a1
        self.radial_a2 = radial_a2
        self.angular_a0 = angular_a0

    def __repr__(self) -> str:
        return (f"Light(position={self.position!r}, color={self.color!r}, "
                f"direction={self.direction!r})")


class Scene:
    """A camera plus ordered surfaces and lights. Read-only once loaded."""

    def __init__(self, camera: Camera, surfaces: Optional[List[Surface]] = None,
                 lights: Optional[List[Light]] = None):
        self.camera = camera
        self.surfaces = list(surfaces or [])
        self.lights = list(lights or [])


def validate_scene(scene: Scene) -> None:
    """Check the invariants the renderer relies on."""
    if scene.camera is None:
        raise MissingCameraError("Scene must contain a camera")
    if scene.camera.width <= 0 or scene.camera.height <= 0:
        raise SceneValueError("Camera width and height must be greater than 0")

    for surface in scene.surfaces:
        if isinstance(surface, Sphere) and surface.radius < 0:
            raise SceneValueError("Radius cannot be less than 0")
        if isinstance(surface, Plane) and abs(length(surface.normal) - 1.0) > 1e-9:
            raise SceneValueError("Plane normal must be unit length")

    for light in scene.lights:
        if light.direction is not None and abs(length(light.direction) - 1.0) > 1e-9:
            raise SceneValueError("Light direction must be unit length")
