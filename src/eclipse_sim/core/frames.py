from __future__ import annotations

import math
from typing import Tuple

Vector3 = Tuple[float, float, float]

ORIGIN: Vector3 = (0.0, 0.0, 0.0)


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]+b[0], a[1]+b[1], a[2]+b[2])


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]-b[0], a[1]-b[1], a[2]-b[2])


def scale(v: Vector3, s: float) -> Vector3:
    return (v[0]*s, v[1]*s, v[2]*s)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1]*b[2] - a[2]*b[1],
        a[2]*b[0] - a[0]*b[2],
        a[0]*b[1] - a[1]*b[0],
    )


def norm(a: Vector3) -> float:
    return math.sqrt(dot(a, a))


def distance(a: Vector3, b: Vector3) -> float:
    return norm(sub(a, b))


def normalize(v: Vector3) -> Vector3:
    """
    Unit vector along v. The zero vector is returned unchanged
    (its length is treated as 1).
    """
    length = norm(v) or 1.0
    return (v[0]/length, v[1]/length, v[2]/length)


def angle_between(a: Vector3, b: Vector3) -> float:
    """Angle between two vectors in radians, in [0, pi]."""
    c = dot(normalize(a), normalize(b))
    # clamp for numeric stability
    c = max(-1.0, min(1.0, c))
    return math.acos(c)


def rot3(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (c * x - s * y, s * x + c * y, z)


def rot1(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (x, c * y - s * z, s * y + c * z)


def rotate_zxz(v: Vector3, first_z_rad: float, x_rad: float, second_z_rad: float) -> Vector3:
    """
    Compose three rotations: Rz(first_z), then Rx(x), then Rz(second_z).

    For orbit placement call it as rotate_zxz(r_pqw, argp, inc, raan), which
    is the classical R3(raan) * R1(inc) * R3(argp) perifocal -> inertial map.
    """
    v1 = rot3(first_z_rad, v)
    v2 = rot1(x_rad, v1)
    return rot3(second_z_rad, v2)
