"""Shading strategies: turn a ray hit into a colour."""
from typing import Tuple

from .errors import ConfigError
from .geometry import nearest_hit
from .vector import Vec3, add, clamp01, dot, hadamard, length, mul, sub

MAX_COLOR_VALUE = 255

BLACK: Vec3 = (0.0, 0.0, 0.0)


def to_rgb(color: Vec3) -> Tuple[int, int, int]:
    """Clamp a colour to [0, 1] and scale it to 0-255 channels."""
    return (int(clamp01(color[0]) * MAX_COLOR_VALUE),
            int(clamp01(color[1]) * MAX_COLOR_VALUE),
            int(clamp01(color[2]) * MAX_COLOR_VALUE))


def radial_attenuation(light, d: float) -> float:
    """Distance falloff 1 / (a2 d^2 + a1 d + a0); 1 when that is undefined."""
    denom = light.radial_a2 * d * d + light.radial_a1 * d + light.radial_a0
    if denom <= 0:
        return 1.0
    return 1.0 / denom


def angular_attenuation(light, to_point: Vec3) -> float:
    """
    Spot cone falloff for a light aimed along ``light.direction``.

    ``to_point`` is the unit vector from the light to the lit point. Point
    lights and a zero exponent let everything through.
    """
    if light.direction is None or light.angular_a0 == 0:
        return 1.0
    cos_a = dot(light.direction, to_point)
    if cos_a <= 0:
        return 0.0
    return cos_a ** light.angular_a0


def is_shadowed(scene, surface, point: Vec3, ldir: Vec3, dist: float) -> bool:
    """True when another surface sits between ``point`` and a light ``dist`` away."""
    t, _ = nearest_hit(point, ldir, scene.surfaces, exclude=surface, t_max=dist)
    return t > 0


class FlatShading:
    """The surface's own colour, lights ignored."""

    name = "flat"

    def shade(self, scene, surface, t: float, ro: Vec3, rd: Vec3) -> Vec3:
        return surface.color


class DiffuseShading:
    """Lambertian light from every unoccluded scene light."""

    name = "diffuse"

    def shade(self, scene, surface, t: float, ro: Vec3, rd: Vec3) -> Vec3:
        point = add(ro, mul(rd, t))
        n = surface.normal_at(point)

        col = BLACK
        for light in scene.lights:
            to_light = sub(light.position, point)
            dist = length(to_light)
            if dist == 0:
                continue
            ldir = mul(to_light, 1.0 / dist)

            if is_shadowed(scene, surface, point, ldir, dist):
                continue

            ndotl = max(0.0, dot(n, ldir))
            if ndotl == 0:
                continue

            k = ndotl * radial_attenuation(light, dist) * angular_attenuation(light, mul(ldir, -1.0))
            col = add(col, mul(hadamard(surface.color, light.color), k))

        return col


SHADERS = {
    "flat": FlatShading,
    "diffuse": DiffuseShading,
}


def get_shading(name: str):
    try:
        return SHADERS[name]()
    except KeyError:
        raise ConfigError(f'Unknown shading model "{name}"') from None
