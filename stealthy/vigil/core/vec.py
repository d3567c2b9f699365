# vigil/core/vec.py
from __future__ import annotations
import math

Vec3 = tuple[float, float, float]

UP: Vec3 = (0.0, 1.0, 0.0)
ZERO: Vec3 = (0.0, 0.0, 0.0)

def add(a: Vec3, b: Vec3) -> Vec3:
    return a[0] + b[0], a[1] + b[1], a[2] + b[2]

def sub(a: Vec3, b: Vec3) -> Vec3:
    return a[0] - b[0], a[1] - b[1], a[2] - b[2]

def scale(a: Vec3, k: float) -> Vec3:
    return a[0] * k, a[1] * k, a[2] * k

def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]

def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )

def length_sq(a: Vec3) -> float:
    return dot(a, a)

def length(a: Vec3) -> float:
    return math.sqrt(dot(a, a))

def normalize(a: Vec3) -> Vec3:
    """Unit vector along a; the zero vector stays zero."""
    n = length(a)
    if n == 0.0:
        return ZERO
    return a[0] / n, a[1] / n, a[2] / n

def angle_between(a: Vec3, b: Vec3) -> float:
    """Undirected angle in degrees, [0, 180]. 0 if either vector is zero.

    atan2(|a x b|, a . b) stays exact on the axes where acos drifts by an ulp.
    """
    if length_sq(a) == 0.0 or length_sq(b) == 0.0:
        return 0.0
    return math.degrees(math.atan2(length(cross(a, b)), dot(a, b)))

def yaw_to_forward(yaw_deg: float) -> Vec3:
    """Yaw 0 faces +Z, 90 faces +X."""
    r = math.radians(yaw_deg)
    return math.sin(r), 0.0, math.cos(r)

def forward_to_yaw(forward: Vec3) -> float:
    return math.degrees(math.atan2(forward[0], forward[2]))
