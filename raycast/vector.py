"""Vector math on plain 3-tuples."""
import math
from typing import Tuple

Vec3 = Tuple[float, float, float]

ORIGIN: Vec3 = (0.0, 0.0, 0.0)


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def mul(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def hadamard(a: Vec3, b: Vec3) -> Vec3:
    """Component-wise product, used to tint one colour by another."""
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def length(v: Vec3) -> float:
    return math.hypot(v[0], v[1], v[2])


def norm(v: Vec3) -> Vec3:
    l = length(v)
    if l == 0.0:
        return (0.0, 0.0, 0.0)
    return (v[0] / l, v[1] / l, v[2] / l)


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))
