# vigil/world/los.py
from __future__ import annotations
from dataclasses import dataclass
from vigil import settings
from vigil.core.vec import Vec3, add, angle_between, length, length_sq, normalize, scale, UP
from vigil.world.occlusion import Raycaster

@dataclass(frozen=True, slots=True)
class ViewCone:
    """Distance + full angle (degrees) around the forward axis."""
    distance: float
    angle: float

    def __post_init__(self) -> None:
        if self.distance < 0:
            raise ValueError("view distance must be >= 0")
        if not 0.0 <= self.angle <= 360.0:
            raise ValueError("view angle must be in [0, 360]")

    @property
    def half_angle(self) -> float:
        return self.angle * 0.5

def eye_point(position: Vec3, eye_height: float = settings.EYE_HEIGHT) -> Vec3:
    return add(position, scale(UP, eye_height))

def within_distance(offset: Vec3, distance: float) -> bool:
    return length_sq(offset) <= distance * distance

def within_angle(forward: Vec3, offset: Vec3, angle: float) -> bool:
    """Inclusive at exactly half the cone angle. True 3D test, not flattened."""
    return angle_between(forward, offset) <= angle * 0.5

def is_occluded(
    raycaster: Raycaster,
    eye: Vec3,
    offset: Vec3,
    max_distance: float,
    mask: int,
) -> bool:
    """True if something on `mask` sits strictly between eye and eye+offset.

    Hits at or beyond the offset's length (backstops, the target's own
    collider) don't count.
    """
    dist = length(offset)
    if dist == 0.0:
        return False
    hit = raycaster.raycast(eye, normalize(offset), max_distance, mask)
    if hit is None:
        return False
    return hit.distance < dist

def in_view(
    raycaster: Raycaster,
    position: Vec3,
    forward: Vec3,
    offset: Vec3,
    cone: ViewCone,
    mask: int,
    eye_height: float = settings.EYE_HEIGHT,
) -> bool:
    """Distance, then angle, then occlusion. Cheapest test first."""
    if not within_distance(offset, cone.distance):
        return False
    if not within_angle(forward, offset, cone.angle):
        return False
    return not is_occluded(raycaster, eye_point(position, eye_height), offset, cone.distance, mask)
