# vigil/world/occlusion.py
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Optional, Protocol
from vigil import settings
from vigil.core.vec import Vec3

@dataclass(frozen=True, slots=True)
class RayHit:
    distance: float
    normal: Vec3

class Raycaster(Protocol):
    def raycast(self, origin: Vec3, direction: Vec3, max_distance: float, mask: int) -> Optional[RayHit]: ...

@dataclass(frozen=True, slots=True)
class Box:
    """Axis-aligned solid on one physics layer."""
    min: Vec3
    max: Vec3
    layer: int = settings.OBSTACLE_LAYER

    def __post_init__(self) -> None:
        if any(lo > hi for lo, hi in zip(self.min, self.max)):
            raise ValueError("box min corner must not exceed max corner")

    @classmethod
    def around(cls, center: Vec3, half: Vec3, layer: int = settings.OBSTACLE_LAYER) -> "Box":
        cx, cy, cz = center
        hx, hy, hz = half
        return cls((cx - hx, cy - hy, cz - hz), (cx + hx, cy + hy, cz + hz), layer)

    def contains_xz(self, x: float, z: float) -> bool:
        return self.min[0] <= x <= self.max[0] and self.min[2] <= z <= self.max[2]

    def intersect(self, origin: Vec3, direction: Vec3) -> Optional[tuple[float, Vec3]]:
        """Slab test. Returns (entry distance, entry normal) or None.

        Rays starting inside the box do not report it.
        """
        t_near, t_far = -math.inf, math.inf
        normal: Vec3 = (0.0, 0.0, 0.0)
        for axis in range(3):
            o, d = origin[axis], direction[axis]
            lo, hi = self.min[axis], self.max[axis]
            if d == 0.0:
                if o < lo or o > hi:
                    return None
                continue
            t1, t2 = (lo - o) / d, (hi - o) / d
            sign = -1.0
            if t1 > t2:
                t1, t2 = t2, t1
                sign = 1.0
            if t1 > t_near:
                t_near = t1
                n = [0.0, 0.0, 0.0]
                n[axis] = sign
                normal = (n[0], n[1], n[2])
            t_far = min(t_far, t2)
            if t_near > t_far:
                return None
        if t_near < 0.0:
            return None
        return t_near, normal

@dataclass(slots=True)
class BoxWorld:
    """Raycast target made of boxes, filtered by layer mask."""
    boxes: list[Box] = field(default_factory=list)

    def add(self, box: Box) -> None:
        self.boxes.append(box)

    def remove(self, box: Box) -> None:
        self.boxes.remove(box)

    def box_at(self, x: float, z: float, mask: int = ~0) -> Optional[Box]:
        for b in self.boxes:
            if (mask >> b.layer) & 1 and b.contains_xz(x, z):
                return b
        return None

    def raycast(self, origin: Vec3, direction: Vec3, max_distance: float, mask: int) -> Optional[RayHit]:
        best: Optional[RayHit] = None
        for b in self.boxes:
            if not (mask >> b.layer) & 1:
                continue
            hit = b.intersect(origin, direction)
            if hit is None:
                continue
            t, normal = hit
            if t > max_distance:
                continue
            if best is None or t < best.distance:
                best = RayHit(t, normal)
        return best
