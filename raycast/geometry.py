"""Ray/primitive intersection.

All functions take a ray origin ``ro`` and a normalized direction ``rd`` and
return the ray parameter of the first forward hit, or ``NO_HIT``.
"""
import math
from typing import Optional, Sequence, Tuple

from .vector import Vec3, dot, sub

NO_HIT = -1.0


def ray_plane(ro: Vec3, rd: Vec3, position: Vec3, normal: Vec3) -> float:
    """Ray-plane intersection."""
    d = -dot(normal, position)
    vd = dot(normal, rd)
    if vd == 0:
        # parallel
        return NO_HIT
    t = -(dot(normal, ro) + d) / vd
    if t < 0:
        return NO_HIT
    return t


def ray_sphere(ro: Vec3, rd: Vec3, center: Vec3, radius: float) -> float:
    """Ray-sphere intersection, nearer root first."""
    oc = sub(ro, center)
    a = dot(rd, rd)
    b = 2.0 * dot(rd, oc)
    c = dot(oc, oc) - radius * radius
    disc = b * b - 4 * a * c

    if disc < 0:
        return NO_HIT

    sdisc = math.sqrt(disc)
    t0 = (-b - sdisc) / (2 * a)
    if t0 > 0:
        return t0

    t1 = (-b + sdisc) / (2 * a)
    if t1 > 0:
        return t1

    return NO_HIT


def nearest_hit(ro: Vec3, rd: Vec3, surfaces: Sequence,
                exclude=None, t_max: float = math.inf) -> Tuple[float, Optional[object]]:
    """
    Find the surface hit at the smallest positive t.

    Args:
        ro: Ray origin
        rd: Ray direction (normalized)
        surfaces: Surfaces to scan, in authored order
        exclude: Surface skipped by identity (shadow rays start on it)
        t_max: Hits at or beyond this distance are ignored

    Returns:
        (t, surface), or (NO_HIT, None) when nothing is hit. On equal t the
        earlier surface wins.
    """
    best_t = t_max
    best = None
    for surface in surfaces:
        if surface is exclude:
            continue
        t = surface.intersect(ro, rd)
        if 0 < t < best_t:
            best_t = t
            best = surface

    if best is None:
        return NO_HIT, None
    return best_t, best
